"""Recursive directory scanning."""

from __future__ import annotations

import logging
import os
from typing import Collection

from treesmith.core.fs_access import FilesystemAccessor, TreeResult
from treesmith.models.tree_node import LoadState, TreeNode

log = logging.getLogger(__name__)

DEFAULT_IGNORE = frozenset({"node_modules", ".git", "dist", "build", ".next"})
LINE_COUNT_CEILING = 1024 * 1024  # bytes; larger files report lines=0


class DeepScanner:
    """Walks a directory tree and records file sizes and line counts.

    The walk is sequential, depth-first, in directory-listing order.
    Entries named in ``ignore`` are skipped at every level.
    """

    def __init__(
        self,
        ignore: Collection[str] | None = None,
        line_count_ceiling: int | None = None,
    ) -> None:
        self.ignore = frozenset(DEFAULT_IGNORE if ignore is None else ignore)
        self.line_count_ceiling = LINE_COUNT_CEILING if line_count_ceiling is None else line_count_ceiling

    def scan(self, root: str) -> TreeResult:
        """Scan *root* recursively.

        Per-file stat/read errors are recorded as ``size=0, lines=0``.
        A directory that cannot be listed fails the whole scan.
        """
        try:
            tree = self._scan_dir(root)
        except OSError as e:
            log.warning("Deep scan of %s failed: %s", root, e)
            return TreeResult(success=False, error=str(e))
        log.info("Deep scan of %s finished: %d top-level entries", root, len(tree))
        return TreeResult(success=True, tree=tree)

    def _scan_dir(self, directory: str) -> list[TreeNode]:
        with os.scandir(directory) as it:
            entries = list(it)

        nodes: list[TreeNode] = []
        for entry in entries:
            if entry.name in self.ignore:
                continue
            full_path = os.path.join(directory, entry.name)
            if entry.is_dir(follow_symlinks=False):
                nodes.append(
                    TreeNode(
                        name=entry.name,
                        path=full_path,
                        is_file=False,
                        children=tuple(self._scan_dir(full_path)),
                        load_state=LoadState.LOADED,
                    )
                )
            else:
                size, lines = self._file_stats(full_path)
                nodes.append(TreeNode(name=entry.name, path=full_path, is_file=True, size=size, lines=lines))
        return nodes

    def _file_stats(self, path: str) -> tuple[int, int]:
        try:
            size = os.stat(path).st_size
            lines = count_lines(path) if size < self.line_count_ceiling else 0
        except OSError:
            log.debug("Cannot stat or read: %s", path)
            return 0, 0
        return size, lines


def count_lines(path: str) -> int:
    """Number of newline-delimited segments, the trailing one included."""
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        return f.read().count("\n") + 1


def build_full_tree(
    fs: FilesystemAccessor,
    root: str,
    excluded: Collection[str] = (),
) -> list[TreeNode]:
    """List *root* recursively through the accessor.

    Nodes whose path is in *excluded* are marked excluded and, for
    directories, not descended into. A directory that cannot be listed
    contributes no children.
    """
    listing = fs.list_directory(root)
    if not listing.success:
        log.warning("Cannot list %s: %s", root, listing.error)
        return []

    nodes: list[TreeNode] = []
    for item in listing.items:
        is_excluded = item.path in excluded
        if item.is_file or is_excluded:
            children: tuple[TreeNode, ...] = ()
        else:
            children = tuple(build_full_tree(fs, item.path, excluded))
        nodes.append(
            TreeNode(
                name=item.name,
                path=item.path,
                is_file=item.is_file,
                children=children,
                load_state=LoadState.NOT_LOADED if is_excluded or item.is_file else LoadState.LOADED,
                excluded=is_excluded,
            )
        )
    return nodes
