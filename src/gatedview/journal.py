from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional
from uuid import uuid4

from dateutil import parser as date_parser

from .classifier import Disposition, Verdict

METADATA_FILE = "metadata.json"
DECISIONS_FILE = "decisions.jsonl"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_journal_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{stamp}_{uuid4().hex[:8]}"


@dataclass(frozen=True)
class Journal:
    """Blocked-request log for one browsing session, kept in its own directory."""

    journal_dir: Path

    @classmethod
    def open(cls, root: Path, label: Optional[str] = None) -> "Journal":
        journal = cls(root / new_journal_id())
        journal.journal_dir.mkdir(parents=True, exist_ok=True)
        journal._store_metadata(
            {
                "journal_id": journal.journal_id,
                "label": label,
                "started_at": _utc_now(),
                "finished_at": None,
                "status": "open",
            }
        )
        return journal

    @property
    def journal_id(self) -> str:
        return self.journal_dir.name

    @property
    def decisions_path(self) -> Path:
        return self.journal_dir / DECISIONS_FILE

    def record(self, url: Optional[str], is_main_frame: bool, verdict: Verdict) -> dict:
        entry = {
            "timestamp": _utc_now(),
            "url": url,
            "is_main_frame": is_main_frame,
            "disposition": verdict.disposition.value,
            "rule": verdict.rule,
            "matched": verdict.matched,
        }
        with self.decisions_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, ensure_ascii=True) + "\n")
        return entry

    def metadata(self) -> dict:
        path = self.journal_dir / METADATA_FILE
        if not path.is_file():
            return {}
        return json.loads(path.read_text(encoding="utf-8"))

    def close(self, status: str = "closed") -> None:
        metadata = self.metadata()
        metadata.update(status=status, finished_at=_utc_now())
        self._store_metadata(metadata)

    def decisions(self) -> Iterator[dict]:
        # Lines that fail to parse (e.g. a torn final write) are skipped.
        if not self.decisions_path.is_file():
            return
        with self.decisions_path.open(encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError:
                    continue

    def summary(self) -> dict:
        counts: Counter = Counter()
        notices = []
        for entry in self.decisions():
            counts[entry.get("disposition")] += 1
            if (
                entry.get("disposition") == Disposition.BLOCK_DOMAIN_NOT_ALLOWED.value
                and entry.get("is_main_frame")
            ):
                notices.append(entry.get("url"))
        return {
            "metadata": self.metadata(),
            "total": sum(counts.values()),
            "counts": dict(counts),
            "notices": notices,
        }

    def _store_metadata(self, metadata: dict) -> None:
        (self.journal_dir / METADATA_FILE).write_text(
            json.dumps(metadata, ensure_ascii=True, indent=2)
        )


def _started_at(metadata: dict) -> float:
    try:
        return date_parser.parse(metadata["started_at"]).timestamp()
    except (KeyError, TypeError, ValueError, OverflowError):
        return 0.0


def list_journals(root: Path) -> list[dict]:
    if not root.is_dir():
        return []
    found = (
        Journal(child).metadata()
        for child in root.iterdir()
        if child.is_dir() and not child.name.startswith(".")
    )
    return sorted((m for m in found if m), key=_started_at, reverse=True)
