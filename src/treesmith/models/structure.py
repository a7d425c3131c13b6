"""Parsed structure diagram entry."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True, slots=True)
class StructureEntry:
    """One line of a structure diagram, resolved to its full path.

    ``level`` is the nesting depth (the declared root is 0) and
    ``full_path`` is the slash-joined path starting at the root name.
    """

    name: str
    is_file: bool
    level: int
    full_path: str

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "name": data["name"],
            "isFile": data["is_file"],
            "level": data["level"],
            "fullPath": data["full_path"],
        }
