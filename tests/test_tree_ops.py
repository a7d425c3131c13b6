"""Tests for immutable tree operations and lazy loading."""

from __future__ import annotations

import pytest

from treesmith.core import tree_ops
from treesmith.core.fs_access import ListResult, LocalFilesystem
from treesmith.models.tree_node import LoadState, TreeNode
from tests.test_fs_access import RecordingFilesystem


def _tree() -> list[TreeNode]:
    leaf = TreeNode(name="c.txt", path="/r/a/b/c.txt", is_file=True)
    b = TreeNode(name="b", path="/r/a/b", is_file=False, children=(leaf,), load_state=LoadState.LOADED)
    a = TreeNode(name="a", path="/r/a", is_file=False, children=(b,), load_state=LoadState.LOADED)
    other = TreeNode(name="z", path="/r/z", is_file=False)
    return [a, other]


class TestTransforms:
    def test_toggle_excluded_copies_path_only(self):
        tree = _tree()
        new = tree_ops.toggle_excluded(tree, "/r/a/b")

        assert tree_ops.find_node(new, "/r/a/b").excluded is True
        assert tree_ops.find_node(tree, "/r/a/b").excluded is False
        assert new[1] is tree[1]
        assert new[0] is not tree[0]

    def test_toggle_unknown_path_is_noop(self):
        tree = _tree()
        assert tree_ops.toggle_excluded(tree, "/nope") == tree

    def test_toggle_selected_is_recursive(self):
        new = tree_ops.toggle_selected(_tree(), "/r/a")
        assert all(n.selected for n in tree_ops.walk(new[:1]))
        assert new[1].selected is False

        back = tree_ops.toggle_selected(new, "/r/a")
        assert not any(n.selected for n in tree_ops.walk(back))

    def test_set_flag_all_and_collapse_all(self):
        tree = tree_ops.set_flag_all(_tree(), "expanded", True)
        assert all(n.expanded for n in tree_ops.walk(tree))
        tree = tree_ops.collapse_all(tree)
        assert not any(n.expanded for n in tree_ops.walk(tree))

    def test_set_flag_all_rejects_unknown_flag(self):
        with pytest.raises(ValueError):
            tree_ops.set_flag_all(_tree(), "name", True)

    def test_current_view_prunes_collapsed(self):
        tree = tree_ops.toggle_expanded(_tree(), "/r/a")
        view = tree_ops.current_view(tree)
        a = view[0]
        assert [c.name for c in a.children] == ["b"]
        assert a.children[0].children == ()

    def test_current_view_prunes_excluded(self):
        tree = tree_ops.set_flag_all(_tree(), "expanded", True)
        tree = tree_ops.toggle_excluded(tree, "/r/a")
        assert tree_ops.current_view(tree)[0].children == ()

    def test_excluded_paths_stop_at_excluded_node(self):
        tree = tree_ops.toggle_excluded(_tree(), "/r/a/b/c.txt")
        tree = tree_ops.toggle_excluded(tree, "/r/a")
        assert tree_ops.excluded_paths(tree) == {"/r/a"}


class TestLazyLoading:
    def test_begin_load_guards_second_load(self):
        tree = [TreeNode(name="d", path="/d", is_file=False)]
        tree, started = tree_ops.begin_load(tree, "/d")
        assert started
        assert tree[0].load_state is LoadState.LOADING

        tree, started_again = tree_ops.begin_load(tree, "/d")
        assert not started_again

    def test_begin_load_on_file_is_refused(self):
        _, started = tree_ops.begin_load([TreeNode(name="f", path="/f", is_file=True)], "/f")
        assert not started

    def test_finish_load_requires_loading_state(self):
        tree = [TreeNode(name="d", path="/d", is_file=False)]
        child = TreeNode(name="x", path="/d/x", is_file=True)
        assert tree_ops.finish_load(tree, "/d", [child])[0].children == ()

    def test_finish_load_inherits_selection(self):
        tree = [TreeNode(name="d", path="/d", is_file=False, selected=True)]
        tree, _ = tree_ops.begin_load(tree, "/d")
        tree = tree_ops.finish_load(tree, "/d", [TreeNode(name="x", path="/d/x", is_file=True)])
        assert tree[0].loaded
        assert tree[0].children[0].selected

    def test_expand_loads_once(self, project):
        fs = RecordingFilesystem()
        tree = tree_ops.load_root(fs, str(project))
        src = str(project / "src")

        tree = tree_ops.expand(fs, tree, src)
        node = tree_ops.find_node(tree, src)
        assert node.expanded and node.loaded
        assert {c.name for c in node.children} == {"App.jsx", "utils"}

        tree = tree_ops.expand(fs, tree, src)  # collapse
        tree = tree_ops.expand(fs, tree, src)  # open again, no new listing
        assert fs.calls.count(("list", src)) == 1
        assert tree_ops.find_node(tree, src).expanded

    def test_expand_skips_excluded(self, project):
        fs = RecordingFilesystem()
        src = str(project / "src")
        tree = tree_ops.toggle_excluded(tree_ops.load_root(fs, str(project)), src)
        tree = tree_ops.expand(fs, tree, src)
        assert not tree_ops.find_node(tree, src).expanded
        assert ("list", src) not in fs.calls

    def test_failed_listing_returns_to_not_loaded(self, monkeypatch):
        fs = LocalFilesystem()
        monkeypatch.setattr(fs, "list_directory", lambda path: ListResult(success=False, error="boom"))
        tree = [TreeNode(name="d", path="/d", is_file=False)]
        tree = tree_ops.load_children(fs, tree, "/d")
        assert tree[0].load_state is LoadState.NOT_LOADED

    def test_load_root_missing(self, tmp_path):
        assert tree_ops.load_root(LocalFilesystem(), str(tmp_path / "missing")) == []
