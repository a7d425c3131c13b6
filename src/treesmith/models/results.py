"""Operation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from treesmith.models.blocks import CollectedFile, DetectedFileBlock


class Outcome(str, Enum):
    """Top-level status of an engine operation.

    ``EMPTY`` means a precondition was not met (nothing selected, no file
    headers, missing base path, blank input) and nothing was touched.
    """

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(slots=True)
class CollectResult:
    """Result of combining selected files into one blob."""

    outcome: Outcome
    text: str = ""
    files: list[CollectedFile] = field(default_factory=list)
    message: str = ""

    @property
    def errors(self) -> list[str]:
        return [f"{f.path}: {f.error}" for f in self.files if f.error]


@dataclass(slots=True)
class DistributeResult:
    """Result of writing detected file blocks to disk."""

    outcome: Outcome
    blocks: list[DetectedFileBlock] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    planned: list[str] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)
    error: str = ""
    message: str = ""
    dry_run: bool = False


@dataclass(slots=True)
class CreateResult:
    """Result of materializing a structure diagram."""

    outcome: Outcome
    created: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    message: str = ""
