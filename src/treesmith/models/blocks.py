"""File content blocks produced by collection and consumed by distribution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CollectedFile:
    """A file read by the collector.

    ``error`` is set instead of ``content`` when the read failed.
    """

    path: str
    content: str
    error: str = ""


@dataclass(frozen=True, slots=True)
class DetectedFileBlock:
    """A file section found in a combined text blob."""

    path: str
    content: str
