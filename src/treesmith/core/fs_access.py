"""Filesystem access capability consumed by the engines.

Every call either succeeds or returns a result with ``success=False`` and
the operating system's message in ``error``. ``OSError`` never crosses
this boundary.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from treesmith.models.tree_node import TreeNode

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirItem:
    """Immediate entry of a directory listing."""

    name: str
    path: str
    is_file: bool


@dataclass(slots=True)
class ListResult:
    success: bool
    items: list[DirItem] = field(default_factory=list)
    error: str = ""


@dataclass(slots=True)
class ReadResult:
    success: bool
    content: str = ""
    error: str = ""


@dataclass(slots=True)
class WriteResult:
    success: bool
    path: str = ""
    error: str = ""


@dataclass(slots=True)
class TreeResult:
    success: bool
    tree: list[TreeNode] = field(default_factory=list)
    error: str = ""


class FilesystemAccessor(Protocol):
    """What the engines need from a filesystem."""

    def list_directory(self, path: str) -> ListResult: ...

    def read_file(self, path: str) -> ReadResult: ...

    def write_file(self, path: str, content: str) -> WriteResult: ...

    def create_file(self, path: str) -> WriteResult: ...

    def create_directory(self, path: str) -> WriteResult: ...

    def path_kind(self, path: str) -> str | None: ...

    def deep_scan(self, root: str) -> TreeResult: ...


class LocalFilesystem:
    """FilesystemAccessor over the local disk."""

    def __init__(
        self,
        ignore: frozenset[str] | None = None,
        line_count_ceiling: int | None = None,
    ) -> None:
        self._ignore = ignore
        self._line_count_ceiling = line_count_ceiling

    def list_directory(self, path: str) -> ListResult:
        try:
            with os.scandir(path) as it:
                items = [
                    DirItem(name=entry.name, path=os.path.join(path, entry.name), is_file=entry.is_file())
                    for entry in it
                ]
        except OSError as e:
            log.debug("Cannot list %s: %s", path, e)
            return ListResult(success=False, error=str(e))
        return ListResult(success=True, items=items)

    def read_file(self, path: str) -> ReadResult:
        try:
            with open(path, encoding="utf-8", errors="replace", newline="") as f:
                content = f.read()
        except OSError as e:
            log.debug("Cannot read %s: %s", path, e)
            return ReadResult(success=False, error=str(e))
        return ReadResult(success=True, content=content)

    def write_file(self, path: str, content: str) -> WriteResult:
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            log.debug("Cannot write %s: %s", path, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True, path=path)

    def create_file(self, path: str) -> WriteResult:
        return self.write_file(path, "")

    def create_directory(self, path: str) -> WriteResult:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            log.debug("Cannot create directory %s: %s", path, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True, path=path)

    def path_kind(self, path: str) -> str | None:
        if os.path.isdir(path):
            return "dir"
        if os.path.lexists(path):
            return "file"
        return None

    def deep_scan(self, root: str) -> TreeResult:
        from treesmith.core.scanner import DeepScanner

        scanner = DeepScanner(ignore=self._ignore, line_count_ceiling=self._line_count_ceiling)
        return scanner.scan(root)
