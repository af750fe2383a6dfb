from __future__ import annotations

from typing import Iterable


class GatedViewError(Exception):
    pass


class LoadError(GatedViewError):
    """A policy document could not be turned into a usable config."""

    def __init__(self, source: str, problems: Iterable[str]) -> None:
        self.source = source
        self.problems = list(problems)
        detail = "; ".join(self.problems) or "unknown error"
        super().__init__(f"failed to load policy config from {source}: {detail}")
