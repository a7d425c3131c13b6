"""Combines the contents of selected files into one text blob."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from treesmith.core.fs_access import FilesystemAccessor
from treesmith.core.tree_ops import nodes_from_listing
from treesmith.models.blocks import CollectedFile
from treesmith.models.results import CollectResult, Outcome
from treesmith.models.tree_node import LoadState, TreeNode
from treesmith.utils import base_name, relative_label

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (file_path, status)

HEADER_TEMPLATE = "\n\n# ===== {label} =====\n{content}\n"
ERROR_TEMPLATE = "\n\n# [Error reading {path}]: {error}\n"


class Collector:
    """Resolves a selection to files and concatenates them.

    Selecting a directory includes every file below it, listing directories
    that were never loaded. Reads are best-effort: a file that cannot be
    read is replaced by an inline error line and the operation still
    succeeds.

    When *root* is given, headers carry the path relative to it instead of
    the bare file name, which keeps the blob redistributable.
    """

    def __init__(self, fs: FilesystemAccessor, root: str | None = None) -> None:
        self.fs = fs
        self.root = root

    def resolve_selection(self, nodes: Sequence[TreeNode]) -> list[str]:
        """Selected files in pre-order, depth-first, listing order."""
        files: list[str] = []
        for node in nodes:
            if node.selected:
                files.extend(self._all_files(node))
            elif node.children:
                files.extend(self.resolve_selection(node.children))
        return files

    def _all_files(self, node: TreeNode) -> list[str]:
        if node.is_file:
            return [node.path]

        if node.load_state is LoadState.LOADED:
            children: Sequence[TreeNode] = node.children
        else:
            listing = self.fs.list_directory(node.path)
            if not listing.success:
                log.warning("Cannot list %s: %s", node.path, listing.error)
                return []
            children = nodes_from_listing(listing.items)

        files: list[str] = []
        for child in children:
            files.extend(self._all_files(child))
        return files

    def collect(
        self,
        nodes: Sequence[TreeNode],
        on_progress: ProgressCallback | None = None,
    ) -> CollectResult:
        """Read every selected file and build the combined blob."""
        paths = self.resolve_selection(nodes)
        if not paths:
            return CollectResult(
                outcome=Outcome.EMPTY,
                message="Please select at least one file or folder!",
            )

        segments: list[str] = []
        files: list[CollectedFile] = []
        for path in paths:
            if on_progress:
                on_progress(path, "reading")
            res = self.fs.read_file(path)
            if res.success:
                segments.append(HEADER_TEMPLATE.format(label=self._label(path), content=res.content))
                files.append(CollectedFile(path=path, content=res.content))
                if on_progress:
                    on_progress(path, "done")
            else:
                error = res.error or "Unknown error"
                log.warning("Cannot read %s: %s", path, error)
                segments.append(ERROR_TEMPLATE.format(path=path, error=error))
                files.append(CollectedFile(path=path, content="", error=error))
                if on_progress:
                    on_progress(path, "error")

        failed = sum(1 for f in files if f.error)
        log.info("Collected %d files (%d unreadable)", len(files), failed)
        return CollectResult(
            outcome=Outcome.OK,
            text="".join(segments),
            files=files,
            message="Files combined successfully!",
        )

    def collect_paths(self, paths: Sequence[str]) -> CollectResult:
        """Collect explicit file or directory paths as a selection."""
        nodes = [
            TreeNode(
                name=base_name(path),
                path=path,
                is_file=self.fs.path_kind(path) != "dir",
                selected=True,
            )
            for path in paths
        ]
        return self.collect(nodes)

    def _label(self, path: str) -> str:
        if self.root:
            return relative_label(path, self.root)
        return base_name(path)
