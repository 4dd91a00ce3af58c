"""Unit tests for stack graph queries and divergence detection."""

import pytest

from pygss.errors import CorruptGraphError
from pygss.stack import RelationshipStore, StackGraph, find_divergence
from pygss.tests.fake_git import FakeGit


@pytest.fixture
def graph(git: FakeGit) -> StackGraph:
    git.make_stack("a", "b", "c")
    store = RelationshipStore(git)
    store.set_parent("a", "main")
    store.set_parent("b", "a")
    store.set_parent("c", "b")
    return StackGraph(store, git, "main")


class TestStackGraph:
    """Traversals over the recorded forest."""

    def test_top_bottom_and_full_stack(self, graph: StackGraph) -> None:
        for branch in ("a", "b", "c"):
            assert graph.stack_top(branch) == "c"
            assert graph.stack_bottom(branch) == "a"
            assert graph.full_stack(branch) == ["a", "b", "c"]

    def test_descendants(self, graph: StackGraph) -> None:
        assert graph.descendants("a") == ["b", "c"]
        assert graph.descendants("c") == []

    def test_untracked_and_base_have_no_stack(self, graph: StackGraph, git: FakeGit) -> None:
        git.create_branch("loose", "main")
        assert graph.full_stack("loose") == []
        assert graph.full_stack("main") == []

    def test_deleted_child_is_not_followed(self, graph: StackGraph, git: FakeGit) -> None:
        """Edges to branches that no longer exist are ignored on the way up."""
        git.checkout("a")
        git.delete_branch("c")
        assert graph.stack_top("a") == "b"
        assert graph.full_stack("a") == ["a", "b"]

    def test_deleted_middle_is_left_out_of_full_stack(self, graph: StackGraph, git: FakeGit) -> None:
        git.checkout("c")
        git.delete_branch("b")
        assert graph.full_stack("c") == ["a", "c"]
        assert graph.full_stack("a") == ["a"]

    def test_all_stack_roots_skips_lone_branches(self, graph: StackGraph, git: FakeGit) -> None:
        git.create_branch("solo", "main")
        graph.store.set_parent("solo", "main")
        git.create_branch("x1", "main")
        git.create_branch("x2", "x1")
        graph.store.set_parent("x1", "main")
        graph.store.set_parent("x2", "x1")

        assert graph.all_stack_roots() == ["a", "x1"]
        assert graph.stack_size("a") == 3
        assert graph.stack_size("x1") == 2

    def test_hand_edited_cycle_is_reported(self, git: FakeGit) -> None:
        """A loop written straight into git config stops traversal with an error."""
        git.make_stack("p", "q")
        git.config["branch.p.parent"] = "q"
        git.config["branch.q.parent"] = "p"
        graph = StackGraph(RelationshipStore(git), git, "main")

        with pytest.raises(CorruptGraphError):
            graph.stack_top("p")
        with pytest.raises(CorruptGraphError):
            graph.stack_bottom("p")
        with pytest.raises(CorruptGraphError):
            graph.full_stack("q")


class TestFindDivergence:
    """The first broken ancestor link, scanning bottom to top."""

    def test_consistent_stack(self, graph: StackGraph, git: FakeGit) -> None:
        assert find_divergence(git, ["a", "b", "c"]) is None

    def test_amended_middle_branch(self, graph: StackGraph, git: FakeGit) -> None:
        git.checkout("b")
        git.modify("b fix")
        git.amend_all()
        assert find_divergence(git, ["a", "b", "c"]) == "b"

    def test_lowest_break_wins(self, graph: StackGraph, git: FakeGit) -> None:
        for branch in ("a", "b"):
            git.checkout(branch)
            git.modify(f"{branch} fix")
            git.amend_all()
        assert find_divergence(git, ["a", "b", "c"]) == "a"

    def test_short_stacks(self, git: FakeGit) -> None:
        assert find_divergence(git, []) is None
        assert find_divergence(git, ["main"]) is None
