import json
import sys
from pathlib import Path

import pytest

from gatectl import cli

FIXTURES = Path(__file__).parent / "fixtures"


def _run(monkeypatch: pytest.MonkeyPatch, capsys, *argv: str) -> tuple[int, str]:
    monkeypatch.setattr(sys, "argv", ["gatectl", *argv])
    with pytest.raises(SystemExit) as info:
        cli.main()
    return info.value.code, capsys.readouterr().out


def test_validate_ok(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    code, out = _run(monkeypatch, capsys, "validate", "--config", str(FIXTURES / "config.json"))
    assert code == 0
    assert json.loads(out)["orientation"] == "PORTRAIT"


def test_validate_reports_load_error(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("[]", encoding="utf-8")
    code, out = _run(monkeypatch, capsys, "validate", "--config", str(path))
    assert code == 1
    assert json.loads(out)["status"] == "error"


def test_classify_subresource(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    code, out = _run(
        monkeypatch,
        capsys,
        "classify",
        "https://example.com/song.mp3",
        "--subresource",
        "--config",
        str(FIXTURES / "config.json"),
    )
    assert code == 0
    data = json.loads(out)
    assert data["disposition"] == "BLOCK_MEDIA_SUBRESOURCE"
    assert data["is_main_frame"] is False


def test_init_writes_document(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path) -> None:
    output = tmp_path / "config.json"
    code, _ = _run(
        monkeypatch,
        capsys,
        "init",
        "--domain",
        "example.com",
        "--additional-domain",
        "cdn.example.net",
        "--view-mode",
        "PORTRAIT",
        "--ads-blocker",
        "--output",
        str(output),
    )
    assert code == 0
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["startUrl"] == "https://example.com"
    assert document["allowedDomains"] == ["example.com", "cdn.example.net"]
    assert document["adBlocker"] is True
    assert document["orientation"] == "PORTRAIT"


def test_validate_undecodable_file_exits_1(
    monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path
) -> None:
    path = tmp_path / "config.json"
    path.write_bytes(b'{"domain": "\xff\xfe"}')
    code, out = _run(monkeypatch, capsys, "validate", "--config", str(path))
    assert code == 1
    assert json.loads(out)["status"] == "error"


def test_init_legacy_ssl_key(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path) -> None:
    output = tmp_path / "config.json"
    code, _ = _run(
        monkeypatch,
        capsys,
        "init",
        "--domain",
        "example.com",
        "--no-ssl-mode",
        "--legacy-ssl-key",
        "--output",
        str(output),
    )
    assert code == 0
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["ignoreSSLErrors"] is True
    assert "ignoreSslErrors" not in document
