"""Immutable operations on lists of ``TreeNode``.

Every function returns a new top-level list; only the nodes on the path
from a root to the touched node are copied, the rest are shared.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Iterator, Sequence

from treesmith.core.fs_access import DirItem, FilesystemAccessor
from treesmith.models.tree_node import LoadState, TreeNode

log = logging.getLogger(__name__)

NodeUpdate = Callable[[TreeNode], TreeNode]

_FLAGS = ("expanded", "excluded", "selected")


def nodes_from_listing(items: Iterable[DirItem]) -> list[TreeNode]:
    """Fresh, unloaded nodes for a directory listing."""
    return [TreeNode(name=item.name, path=item.path, is_file=item.is_file) for item in items]


def walk(nodes: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Pre-order, depth-first iteration over loaded nodes."""
    for node in nodes:
        yield node
        yield from walk(node.children)


def find_node(nodes: Sequence[TreeNode], path: str) -> TreeNode | None:
    for node in walk(nodes):
        if node.path == path:
            return node
    return None


def update_node(nodes: Sequence[TreeNode], path: str, update: NodeUpdate) -> list[TreeNode]:
    """Apply *update* to the node at *path*.

    Returns the input unchanged (as a new list) when no node matches.
    """
    result, _ = _update(nodes, path, update)
    return result


def _update(nodes: Sequence[TreeNode], path: str, update: NodeUpdate) -> tuple[list[TreeNode], bool]:
    out = list(nodes)
    for index, node in enumerate(nodes):
        if node.path == path:
            out[index] = update(node)
            return out, True
        if node.children:
            children, hit = _update(node.children, path, update)
            if hit:
                out[index] = replace(node, children=tuple(children))
                return out, True
    return out, False


def _set_recursive(node: TreeNode, flag: str, value: bool) -> TreeNode:
    return replace(
        node,
        children=tuple(_set_recursive(child, flag, value) for child in node.children),
        **{flag: value},
    )


def _check_flag(flag: str) -> None:
    if flag not in _FLAGS:
        raise ValueError(f"Unknown tree flag: {flag!r}")


def toggle_expanded(nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    return update_node(nodes, path, lambda n: n if n.is_file else replace(n, expanded=not n.expanded))


def toggle_excluded(nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    return update_node(nodes, path, lambda n: replace(n, excluded=not n.excluded))


def toggle_selected(nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    """Flip selection of a node and give all its loaded descendants the same state."""
    return update_node(nodes, path, lambda n: _set_recursive(n, "selected", not n.selected))


def set_flag_all(nodes: Sequence[TreeNode], flag: str, value: bool) -> list[TreeNode]:
    """Set *flag* on every loaded node (select all, include all, ...)."""
    _check_flag(flag)
    return [_set_recursive(node, flag, value) for node in nodes]


def collapse_all(nodes: Sequence[TreeNode]) -> list[TreeNode]:
    return set_flag_all(nodes, "expanded", False)


def current_view(nodes: Sequence[TreeNode]) -> list[TreeNode]:
    """Drop children that are not visible: under collapsed or excluded directories."""
    return [
        replace(node, children=tuple(current_view(node.children)) if node.expanded and not node.excluded else ())
        for node in nodes
    ]


def excluded_paths(nodes: Sequence[TreeNode]) -> set[str]:
    """Paths of excluded nodes, not descending below an excluded node."""
    found: set[str] = set()
    for node in nodes:
        if node.excluded:
            found.add(node.path)
        elif node.children:
            found |= excluded_paths(node.children)
    return found


# ── Lazy loading ─────────────────────────────────────────────────────────

def begin_load(nodes: Sequence[TreeNode], path: str) -> tuple[list[TreeNode], bool]:
    """Mark a directory as loading.

    Returns ``(tree, started)``. ``started`` is False when the node is
    missing, a file, or already loading/loaded; the caller must then not
    list it again.
    """
    node = find_node(nodes, path)
    if node is None or node.is_file or node.load_state is not LoadState.NOT_LOADED:
        return list(nodes), False
    return update_node(nodes, path, lambda n: replace(n, load_state=LoadState.LOADING)), True


def finish_load(nodes: Sequence[TreeNode], path: str, children: Iterable[TreeNode]) -> list[TreeNode]:
    """Attach a listing to a directory that is loading.

    A selected parent passes its selection down, matching recursive
    selection of not-yet-loaded directories.
    """
    children = tuple(children)

    def attach(node: TreeNode) -> TreeNode:
        if node.load_state is not LoadState.LOADING:
            log.debug("Ignoring listing for %s: not loading", node.path)
            return node
        kids = tuple(replace(c, selected=True) for c in children) if node.selected else children
        return replace(node, children=kids, load_state=LoadState.LOADED)

    return update_node(nodes, path, attach)


def abort_load(nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    """Return a loading directory to NOT_LOADED after a failed listing."""
    return update_node(
        nodes,
        path,
        lambda n: replace(n, load_state=LoadState.NOT_LOADED) if n.load_state is LoadState.LOADING else n,
    )


def load_children(fs: FilesystemAccessor, nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    """Load a directory's children once through *fs*."""
    tree, started = begin_load(nodes, path)
    if not started:
        return tree
    listing = fs.list_directory(path)
    if not listing.success:
        log.warning("Cannot load %s: %s", path, listing.error)
        return abort_load(tree, path)
    return finish_load(tree, path, nodes_from_listing(listing.items))


def expand(fs: FilesystemAccessor, nodes: Sequence[TreeNode], path: str) -> list[TreeNode]:
    """Toggle a directory open or closed, loading it on first open.

    Excluded directories are not expanded.
    """
    node = find_node(nodes, path)
    if node is None or node.is_file or node.excluded:
        return list(nodes)
    tree = load_children(fs, nodes, path) if not node.expanded else list(nodes)
    return toggle_expanded(tree, path)


def load_root(fs: FilesystemAccessor, root: str) -> list[TreeNode]:
    """First-level nodes of *root*; empty when it cannot be listed."""
    listing = fs.list_directory(root)
    if not listing.success:
        log.warning("Cannot list %s: %s", root, listing.error)
        return []
    return nodes_from_listing(listing.items)
