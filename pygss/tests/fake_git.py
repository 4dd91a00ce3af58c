"""In-memory git for unit tests.

Commits form a tree of FakeCommit objects. Each commit carries a set of
change tokens standing in for its diff, so patch equivalence is "every
token is already present in the base". Rebase honours explicit upstreams
and fork points (found through per-ref reflogs) and can be told to stop on
a conflict for a given branch.
"""

import re
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from pygss.errors import GitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FakeCommit:
    sha: str
    parent: Optional[str]
    changes: FrozenSet[str]
    subject: str


@dataclass
class PendingRebase:
    branch: str
    onto: str
    commits: List[FakeCommit]


class FakeGit:
    """GitInterface implementation over an in-memory commit graph."""

    def __init__(self, git_dir: Path, base_branch: str = "main", remote: str = "origin"):
        self._git_dir = Path(git_dir)
        self.remote = remote
        self.commits: Dict[str, FakeCommit] = {}
        self.branches: Dict[str, str] = {}
        self.server: Dict[str, str] = {}
        self.remote_refs: Dict[str, str] = {}
        self.reflogs: Dict[str, List[str]] = {}
        self.config: Dict[str, str] = {}
        self.head = base_branch
        self.dirty_changes: Set[str] = set()
        self.staged: Set[str] = set()
        self.conflicts: Set[str] = set()
        self.pending: Optional[PendingRebase] = None
        self.pushes: List[List[str]] = []
        self.rebases: List[str] = []
        self.fetches = 0
        self._counter = 0

        root = self._new_commit(None, frozenset({"init"}), "Initial commit")
        self._set_ref(base_branch, root)
        self.server[base_branch] = root
        self._set_remote_ref(f"{remote}/{base_branch}", root)

    # Internals

    def _new_commit(self, parent: Optional[str], changes: Iterable[str], subject: str) -> str:
        self._counter += 1
        sha = f"{self._counter:07x}" + "0" * 33
        self.commits[sha] = FakeCommit(sha, parent, frozenset(changes), subject)
        return sha

    def _set_ref(self, branch: str, sha: str) -> None:
        self.branches[branch] = sha
        self.reflogs.setdefault(branch, []).append(sha)

    def _set_remote_ref(self, ref: str, sha: str) -> None:
        self.remote_refs[ref] = sha
        self.reflogs.setdefault(ref, []).append(sha)

    def _resolve(self, ref: str) -> str:
        sha = self.rev_parse(ref)
        if sha is None:
            raise GitError(f"unknown revision '{ref}'")
        return sha

    def _ancestry(self, sha: Optional[str]) -> List[str]:
        """sha and all its ancestors, newest first."""
        chain = []
        while sha is not None:
            chain.append(sha)
            sha = self.commits[sha].parent
        return chain

    def accumulated(self, ref: str) -> Set[str]:
        """Every change token reachable from ref."""
        changes: Set[str] = set()
        for sha in self._ancestry(self._resolve(ref)):
            changes |= self.commits[sha].changes
        return changes

    def merge_base(self, a: str, b: str) -> Optional[str]:
        seen = set(self._ancestry(self._resolve(a)))
        for sha in self._ancestry(self._resolve(b)):
            if sha in seen:
                return sha
        return None

    def _fork_point(self, onto_ref: str, branch_tip: str) -> Optional[str]:
        tip_ancestry = set(self._ancestry(branch_tip))
        for sha in reversed(self.reflogs.get(onto_ref, [])):
            if sha in tip_ancestry:
                return sha
        return self.merge_base(onto_ref, branch_tip)

    def _replay(self, onto_sha: str, commits: List[FakeCommit]) -> str:
        base = onto_sha
        present = self.accumulated(onto_sha)
        for commit in commits:
            if commit.changes <= present:
                continue
            if commit.parent == base:
                base = commit.sha
            else:
                base = self._new_commit(base, commit.changes, commit.subject)
            present |= commit.changes
        return base

    # Raw commands

    def run_cmd(self, command: str) -> str:
        raise GitError(f"FakeGit does not run raw commands: {command}")

    # Branches

    def current_branch(self) -> str:
        return self.head

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def list_branches(self) -> List[str]:
        return sorted(self.branches)

    def rev_parse(self, ref: str) -> Optional[str]:
        if ref == "HEAD":
            ref = self.head
        if ref in self.branches:
            return self.branches[ref]
        if ref in self.remote_refs:
            return self.remote_refs[ref]
        if ref in self.commits:
            return ref
        return None

    def checkout(self, branch: str) -> None:
        if branch not in self.branches:
            raise GitError(f"pathspec '{branch}' did not match any branch")
        if self.pending is not None:
            raise GitError("cannot checkout during a rebase")
        self.head = branch

    def create_branch(self, name: str, from_branch: str) -> None:
        if name in self.branches:
            raise GitError(f"a branch named '{name}' already exists")
        self._set_ref(name, self._resolve(from_branch))
        self.head = name

    def delete_branch(self, name: str, force: bool = True) -> None:
        if name == self.head:
            raise GitError(f"cannot delete branch '{name}' checked out")
        if name not in self.branches:
            raise GitError(f"branch '{name}' not found")
        del self.branches[name]

    # History

    def rebase(self, onto: str, upstream: Optional[str] = None) -> bool:
        if self.pending is not None:
            raise GitError("a rebase is already in progress")
        branch = self.head
        tip = self.branches[branch]
        onto_sha = self._resolve(onto)
        if upstream is not None:
            stop_at = self._resolve(upstream)
        else:
            stop_at = self._fork_point(onto, tip)
        excluded = set(self._ancestry(stop_at)) | set(self._ancestry(onto_sha))
        commits = [self.commits[sha] for sha in reversed(self._ancestry(tip)) if sha not in excluded]
        self.rebases.append(branch)
        logger.debug(f"fake rebase {branch} onto {onto}: {[c.subject for c in commits]}")

        if branch in self.conflicts:
            self.conflicts.discard(branch)
            self.pending = PendingRebase(branch, onto_sha, commits)
            return False
        self._set_ref(branch, self._replay(onto_sha, commits))
        return True

    def complete_rebase(self) -> None:
        """Act as the operator finishing a conflicted rebase."""
        assert self.pending is not None
        pending, self.pending = self.pending, None
        self._set_ref(pending.branch, self._replay(pending.onto, pending.commits))

    def abort_rebase(self) -> None:
        self.pending = None

    def rebase_in_progress(self) -> bool:
        return self.pending is not None

    def commit_count(self, range_from: str, range_to: str) -> int:
        excluded = set(self._ancestry(self._resolve(range_from)))
        return sum(1 for sha in self._ancestry(self._resolve(range_to)) if sha not in excluded)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self._resolve(ancestor) in self._ancestry(self._resolve(descendant))

    def fetch(self, remote: str) -> None:
        self.fetches += 1
        for branch, sha in self.server.items():
            ref = f"{remote}/{branch}"
            if self.remote_refs.get(ref) != sha:
                self._set_remote_ref(ref, sha)

    def fast_forward(self, ref: str) -> bool:
        tip = self.branches[self.head]
        target = self._resolve(ref)
        if self.is_ancestor(target, tip):
            return True
        if not self.is_ancestor(tip, target):
            return False
        self._set_ref(self.head, target)
        return True

    def push_force_with_lease(self, remote: str, branches: List[str]) -> None:
        self.pushes.append(list(branches))
        for branch in branches:
            sha = self._resolve(branch)
            self.server[branch] = sha
            self._set_remote_ref(f"{remote}/{branch}", sha)

    # Config

    def get_config(self, key: str) -> Optional[str]:
        return self.config.get(key)

    def set_config(self, key: str, value: str) -> None:
        self.config[key] = value

    def unset_config(self, key: str) -> None:
        self.config.pop(key, None)

    def get_config_regexp(self, pattern: str) -> Dict[str, str]:
        return {k: v for k, v in self.config.items() if re.search(pattern, k)}

    # Working tree

    def working_tree_is_clean(self) -> bool:
        return not self.dirty_changes and not self.staged

    def git_dir(self) -> Path:
        return self._git_dir

    def remote_url(self, remote: str) -> Optional[str]:
        return self.config.get(f"remote.{remote}.url")

    def commit_subject(self, ref: str) -> str:
        return self.commits[self._resolve(ref)].subject

    def amend_all(self) -> None:
        tip = self.commits[self.branches[self.head]]
        new = self._new_commit(tip.parent, tip.changes | self.dirty_changes, tip.subject)
        self.dirty_changes = set()
        self._set_ref(self.head, new)

    def merge_squash(self, branch: str) -> None:
        self.staged = self.accumulated(branch) - self.accumulated(self.head)

    def commit(self, message: Optional[str] = None) -> bool:
        if not self.staged:
            return False
        new = self._new_commit(self.branches[self.head], self.staged, message or "Squashed commit")
        self.staged = set()
        self._set_ref(self.head, new)
        return True

    def reset_hard(self, ref: str) -> None:
        self.staged = set()
        self.dirty_changes = set()
        if ref != "HEAD":
            self._set_ref(self.head, self._resolve(ref))

    # Test helpers

    def add_commit(self, branch: str, subject: str, changes: Optional[Iterable[str]] = None) -> str:
        """Commit on branch (checked out or not)."""
        sha = self._new_commit(self.branches[branch], changes if changes is not None else {subject}, subject)
        self._set_ref(branch, sha)
        return sha

    def make_stack(self, *names: str, parent: str = "main") -> None:
        """Create a chain of branches, one commit each, without recording edges."""
        for name in names:
            self.create_branch(name, parent)
            self.add_commit(name, f"{name} work")
            parent = name

    def drop_commit(self, branch: str, subject: str) -> None:
        """Rewrite branch without the commit named subject, like an interactive rebase drop."""
        chain = list(reversed(self._ancestry(self.branches[branch])))
        index = next(i for i, sha in enumerate(chain) if self.commits[sha].subject == subject)
        base = self.commits[chain[index]].parent
        assert base is not None
        tip = base
        for sha in chain[index + 1:]:
            commit = self.commits[sha]
            tip = self._new_commit(tip, commit.changes, commit.subject)
        self._set_ref(branch, tip)

    def modify(self, *changes: str) -> None:
        """Leave uncommitted changes in the working tree."""
        self.dirty_changes |= set(changes)

    def advance_remote(self, branch: str, subject: str, changes: Optional[Iterable[str]] = None) -> str:
        """Commit directly on the server; visible locally after fetch."""
        sha = self._new_commit(self.server[branch], changes if changes is not None else {subject}, subject)
        self.server[branch] = sha
        return sha

    def squash_merge_on_remote(self, branch: str, into: str = "main") -> str:
        """Land branch's changes on the server as one new commit."""
        present = set()
        for sha in self._ancestry(self.server[into]):
            present |= self.commits[sha].changes
        return self.advance_remote(into, f"Squash-merge {branch}", self.accumulated(branch) - present)

    def merge_on_remote(self, branch: str, into: str = "main") -> None:
        """Fast-forward the server's branch to the local tip of branch."""
        self.server[into] = self.branches[branch]

    def log_subjects(self, ref: str) -> List[str]:
        """Commit subjects from ref back to the root, oldest first."""
        return [self.commits[sha].subject for sha in reversed(self._ancestry(self._resolve(ref)))]

    def tip_changes(self, ref: str) -> Tuple[str, ...]:
        return tuple(sorted(self.accumulated(ref)))
