"""Project statistics over a deep-scanned tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from treesmith.models.tree_node import TreeNode

IGNORED = frozenset({"node_modules", ".git", "dist", "build", ".next", ".vscode"})


@dataclass(frozen=True, slots=True)
class FileStat:
    name: str
    path: str
    size: int
    lines: int


@dataclass(slots=True)
class ExtensionStats:
    files: int = 0
    size: int = 0
    lines: int = 0
    items: list[FileStat] = field(default_factory=list)


@dataclass(slots=True)
class ProjectStats:
    """Totals for a project, broken down by file extension."""

    files: int = 0
    folders: int = 0
    size: int = 0
    lines: int = 0
    extensions: dict[str, ExtensionStats] = field(default_factory=dict)

    def largest(self, n: int = 10) -> list[FileStat]:
        """The *n* largest files by size."""
        items = [item for ext in self.extensions.values() for item in ext.items]
        return sorted(items, key=lambda f: f.size, reverse=True)[:n]

    def by_size(self) -> list[tuple[str, ExtensionStats]]:
        return sorted(self.extensions.items(), key=lambda kv: kv[1].size, reverse=True)

    def to_dict(self) -> dict:
        return {
            "files": self.files,
            "folders": self.folders,
            "size": self.size,
            "lines": self.lines,
            "extensions": {
                ext: {"files": s.files, "size": s.size, "lines": s.lines}
                for ext, s in self.extensions.items()
            },
        }


def extension_of(name: str) -> str:
    return name.rsplit(".", 1)[-1].lower() if "." in name else "other"


def analyze(tree: Sequence[TreeNode], ignored: frozenset[str] = IGNORED) -> ProjectStats:
    stats = ProjectStats()
    _walk(tree, stats, ignored)
    return stats


def _walk(nodes: Sequence[TreeNode], stats: ProjectStats, ignored: frozenset[str]) -> None:
    for node in nodes:
        if node.name in ignored:
            continue
        if not node.is_file:
            stats.folders += 1
            _walk(node.children, stats, ignored)
            continue

        size = node.size or 0
        lines = node.lines or 0
        stats.files += 1
        stats.size += size
        stats.lines += lines

        ext = stats.extensions.setdefault(extension_of(node.name), ExtensionStats())
        ext.files += 1
        ext.size += size
        ext.lines += lines
        ext.items.append(FileStat(name=node.name, path=node.path, size=size, lines=lines))
