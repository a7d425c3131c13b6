"""Conversion between trees and ``tree``-style structure diagrams.

A diagram looks like::

    my-project/
    ├── src/
    │   └── App.jsx
    └── package.json

``serialize`` renders a list of ``TreeNode`` into that form and ``parse``
turns any such text back into a flat list of ``StructureEntry``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Sequence

from treesmith.models.structure import StructureEntry
from treesmith.models.tree_node import TreeNode
from treesmith.utils import base_name

log = logging.getLogger(__name__)

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "
EXCLUDED_MARKER = "[excluded]"

# One indent unit is four whitespace characters or a bar plus three.
_INDENT_RE = re.compile(r"^(?:\s{4}|│\s{3})*")
_LEADING_RE = re.compile(r"^[\s│]+")
_CONNECTOR_RE = re.compile(r"(?:├──|└──)\s*")


def root_name_for(path: str) -> str:
    """Root label for a diagram of the directory at *path*."""
    return base_name(path) or path


def serialize(nodes: Sequence[TreeNode], root_name: str) -> str:
    """Render *nodes* as a structure diagram headed by ``{root_name}/``.

    Children are rendered wherever a node carries them, so callers pass an
    already filtered tree (see ``tree_ops.current_view``). An excluded node
    gets a single ``[excluded]`` child line instead of its subtree.
    """
    return f"{root_name.rstrip('/')}/\n" + "".join(_render(nodes, ""))


def _render(nodes: Sequence[TreeNode], prefix: str) -> Iterator[str]:
    for index, node in enumerate(nodes):
        is_last = index == len(nodes) - 1
        yield f"{prefix}{LAST_BRANCH if is_last else BRANCH}{node.name}\n"

        child_prefix = prefix + (SPACE_INDENT if is_last else PIPE_INDENT)
        if node.excluded:
            yield f"{child_prefix}{LAST_BRANCH}{EXCLUDED_MARKER}\n"
        elif node.children:
            yield from _render(node.children, child_prefix)


def looks_like_file(name: str) -> bool:
    """Name-shape heuristic: has a dot, no trailing slash, no leading dot.

    Dotfiles such as ``.env`` and dotted directory names such as
    ``v1.2-release`` are misclassified; callers that care must not rely on it.
    """
    return "." in name and not name.endswith("/") and not name.startswith(".")


def indent_depth(line: str) -> int:
    """Number of leading indent units on *line*."""
    return len(_INDENT_RE.match(line).group(0)) // 4


def clean_name(line: str) -> str:
    """Strip indentation, bars and connectors from a diagram line."""
    return _CONNECTOR_RE.sub("", _LEADING_RE.sub("", line)).strip()


def parse(text: str) -> list[StructureEntry]:
    """Parse a structure diagram into entries in document order.

    The first line names the root (level 0). Every other line's depth is
    its indent unit count; the path stack is cut to ``depth + 1`` entries
    before the name is pushed, so inconsistent indentation still yields a
    path (possibly with empty segments) rather than an error.
    """
    entries: list[StructureEntry] = []
    stack: list[str] = []

    for line in text.split("\n"):
        if not line.strip():
            continue

        clean = clean_name(line)
        if not clean:
            continue

        if not entries:
            root = clean[:-1] if clean.endswith("/") else clean
            stack = [root]
            entries.append(StructureEntry(name=root, is_file=False, level=0, full_path=root))
            continue

        depth = indent_depth(line)
        is_file = looks_like_file(clean)
        name = clean[:-1] if clean.endswith("/") else clean

        del stack[depth + 1:]
        stack.extend([""] * (depth + 1 - len(stack)))
        stack.append(name)

        entries.append(StructureEntry(name=name, is_file=is_file, level=depth + 1, full_path="/".join(stack)))

    log.debug("Parsed %d structure entries", len(entries))
    return entries
