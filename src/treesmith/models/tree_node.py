"""Tree node dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LoadState(Enum):
    """Whether a directory's children have been listed."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass(frozen=True, slots=True)
class TreeNode:
    """One filesystem entry.

    Nodes are immutable; use the helpers in ``treesmith.core.tree_ops`` to
    derive a new tree with a flag flipped or children attached.

    ``size`` and ``lines`` are only filled in by the deep scanner.
    ``expanded``, ``excluded`` and ``selected`` are view annotations and are
    never persisted.
    """

    name: str
    path: str
    is_file: bool
    children: tuple[TreeNode, ...] = ()
    size: int | None = None
    lines: int | None = None
    load_state: LoadState = LoadState.NOT_LOADED
    expanded: bool = False
    excluded: bool = False
    selected: bool = False

    @property
    def is_dir(self) -> bool:
        return not self.is_file

    @property
    def loaded(self) -> bool:
        return self.load_state is LoadState.LOADED

    def to_dict(self) -> dict:
        """Plain-dict form used for JSON output."""
        data: dict = {"name": self.name, "path": self.path, "isFile": self.is_file}
        if self.is_file:
            if self.size is not None:
                data["size"] = self.size
            if self.lines is not None:
                data["lines"] = self.lines
        else:
            data["children"] = [child.to_dict() for child in self.children]
        return data
