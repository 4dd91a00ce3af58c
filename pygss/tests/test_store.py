"""Unit tests for the relationship store."""

import pytest

from pygss.errors import CorruptGraphError, UserInputError
from pygss.stack.store import RelationshipStore
from pygss.tests.fake_git import FakeGit


class TestRelationshipStore:
    """Parent edges and review links backed by git config."""

    def test_set_parent_writes_git_config(self, git: FakeGit) -> None:
        """Every edge lands in branch.<name>.parent immediately."""
        store = RelationshipStore(git)
        store.set_parent("f1", "main")
        store.set_parent("f2", "f1")

        assert git.config["branch.f1.parent"] == "main"
        assert git.config["branch.f2.parent"] == "f1"
        assert store.get_parent("f2") == "f1"
        assert store.get_child("f1") == "f2"

    def test_loads_existing_config(self, git: FakeGit) -> None:
        """A new store sees what an earlier process wrote, including dotted names."""
        git.config["branch.feature/v1.2.parent"] = "main"
        git.config["branch.feature/v1.2.pr-number"] = "17"
        git.config["branch.next.parent"] = "feature/v1.2"
        git.config["remote.origin.url"] = "git@github.com:acme/widgets.git"

        store = RelationshipStore(git)
        assert store.get_parent("feature/v1.2") == "main"
        assert store.get_review_id("feature/v1.2") == 17
        assert store.get_child("feature/v1.2") == "next"
        assert store.tracked_branches() == ["feature/v1.2", "next"]

    def test_reparent_moves_child_index(self, git: FakeGit) -> None:
        store = RelationshipStore(git)
        store.set_parent("a", "main")
        store.set_parent("b", "a")
        store.set_parent("c", "b")

        store.set_parent("c", "a")

        assert store.children("a") == ["b", "c"]
        assert store.children("b") == []
        # Siblings resolve deterministically by name
        assert store.get_child("a") == "b"

    def test_self_parent_rejected(self, git: FakeGit) -> None:
        store = RelationshipStore(git)
        with pytest.raises(UserInputError):
            store.set_parent("a", "a")
        assert "branch.a.parent" not in git.config

    def test_cycle_rejected(self, git: FakeGit) -> None:
        """An edge that would close a loop is refused and nothing is written."""
        store = RelationshipStore(git)
        store.set_parent("a", "main")
        store.set_parent("b", "a")
        store.set_parent("c", "b")

        with pytest.raises(CorruptGraphError):
            store.set_parent("a", "c")
        assert git.config["branch.a.parent"] == "main"
        assert store.get_parent("a") == "main"

    def test_forest_invariant_after_many_edits(self, git: FakeGit) -> None:
        """No sequence of accepted edits leaves a path from a branch back to itself."""
        store = RelationshipStore(git)
        edits = [("a", "main"), ("b", "a"), ("c", "b"), ("d", "c"), ("c", "a"), ("b", "d"),
                 ("a", "b"), ("d", "main"), ("a", "d"), ("e", "a")]
        for child, parent in edits:
            try:
                store.set_parent(child, parent)
            except CorruptGraphError:
                pass

        for start in store.tracked_branches():
            seen = set()
            cursor = start
            while cursor is not None:
                assert cursor not in seen
                seen.add(cursor)
                cursor = store.get_parent(cursor)

    def test_review_links(self, git: FakeGit) -> None:
        store = RelationshipStore(git)
        store.set_review_id("f1", 42)
        assert git.config["branch.f1.pr-number"] == "42"
        assert RelationshipStore(git).get_review_id("f1") == 42

        store.clear_review_id("f1")
        assert "branch.f1.pr-number" not in git.config
        assert store.get_review_id("f1") is None

    def test_non_numeric_review_link_ignored(self, git: FakeGit) -> None:
        git.config["branch.f1.parent"] = "main"
        git.config["branch.f1.pr-number"] = "oops"
        store = RelationshipStore(git)
        assert store.get_review_id("f1") is None
        assert store.get_parent("f1") == "main"

    def test_forget_and_clear_all(self, git: FakeGit) -> None:
        store = RelationshipStore(git)
        store.set_parent("f1", "main")
        store.set_parent("f2", "f1")
        store.set_review_id("f1", 1)

        store.forget("f1")
        assert "branch.f1.parent" not in git.config
        assert "branch.f1.pr-number" not in git.config
        assert store.children("main") == []
        # The child keeps pointing at the forgotten branch
        assert store.get_parent("f2") == "f1"

        assert store.clear_all() == 1
        assert not [k for k in git.config if k.startswith("branch.")]
