import json
from pathlib import Path

from gatedview.classifier import Disposition, Verdict
from gatedview.journal import Journal, list_journals


def test_journal_lifecycle(tmp_path: Path) -> None:
    journal = Journal.open(tmp_path, label="session")
    assert journal.metadata()["status"] == "open"
    assert journal.metadata()["journal_id"] == journal.journal_id

    journal.record(
        "https://evil.test",
        True,
        Verdict(Disposition.BLOCK_DOMAIN_NOT_ALLOWED, "domain_not_allowed"),
    )
    entry = journal.record(
        "https://example.com/a.png",
        False,
        Verdict(Disposition.BLOCK_MEDIA_SUBRESOURCE, "media", ".png"),
    )
    assert entry["matched"] == ".png"
    journal.close()

    metadata = journal.metadata()
    assert metadata["status"] == "closed"
    assert metadata["finished_at"]

    summary = journal.summary()
    assert summary["total"] == 2
    assert summary["counts"] == {
        "BLOCK_DOMAIN_NOT_ALLOWED": 1,
        "BLOCK_MEDIA_SUBRESOURCE": 1,
    }
    assert summary["notices"] == ["https://evil.test"]


def test_decisions_skip_garbage(tmp_path: Path) -> None:
    journal = Journal.open(tmp_path)
    journal.decisions_path.write_text(
        json.dumps({"disposition": "ALLOW"}) + "\n\nnot json\n", encoding="utf-8"
    )
    assert list(journal.decisions()) == [{"disposition": "ALLOW"}]


def test_missing_journal_is_empty(tmp_path: Path) -> None:
    journal = Journal(tmp_path / "gone")
    assert journal.metadata() == {}
    assert journal.summary()["total"] == 0


def test_list_journals_newest_first(tmp_path: Path) -> None:
    for name, started in [
        ("a", "2024-01-01T00:00:00+00:00"),
        ("b", "2025-06-01T00:00:00+00:00"),
        ("c", None),
    ]:
        directory = tmp_path / name
        directory.mkdir()
        (directory / "metadata.json").write_text(
            json.dumps({"journal_id": name, "started_at": started}), encoding="utf-8"
        )
    (tmp_path / ".hidden").mkdir()
    (tmp_path / "empty").mkdir()
    assert [j["journal_id"] for j in list_journals(tmp_path)] == ["b", "a", "c"]
    assert list_journals(tmp_path / "missing") == []
