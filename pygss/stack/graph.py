"""Read-side queries over the stack forest."""

import logging
from typing import List, Optional, Set

from ..errors import CorruptGraphError
from ..typing import GitInterface
from .store import RelationshipStore

logger = logging.getLogger(__name__)


class StackGraph:
    """Derives stacks from the relationship store plus live branch existence."""

    def __init__(self, store: RelationshipStore, git_cmd: GitInterface, base_branch: str):
        self.store = store
        self.git_cmd = git_cmd
        self.base_branch = base_branch

    def _cap(self) -> int:
        return len(self.store.nodes) + 1

    def _corrupt(self, start: str) -> CorruptGraphError:
        return CorruptGraphError(
            f"Stack traversal from '{start}' did not terminate; the recorded parents contain a cycle.",
            suggestion="Inspect 'git config --get-regexp branch\\..*\\.parent' or run 'gss clean --metadata'.",
        )

    def live_branches(self) -> Set[str]:
        return set(self.git_cmd.list_branches())

    def live_child(self, branch: str, live: Optional[Set[str]] = None) -> Optional[str]:
        """First child of branch (by name) that still exists."""
        if live is None:
            live = self.live_branches()
        for child in self.store.children(branch):
            if child in live:
                return child
        return None

    def stack_top(self, branch: str) -> str:
        live = self.live_branches()
        top = branch
        for _ in range(self._cap()):
            child = self.live_child(top, live)
            if child is None:
                return top
            top = child
        raise self._corrupt(branch)

    def stack_bottom(self, branch: str) -> str:
        bottom = branch
        for _ in range(self._cap()):
            parent = self.store.get_parent(bottom)
            if parent is None or parent == self.base_branch:
                return bottom
            bottom = parent
        raise self._corrupt(branch)

    def descendants(self, branch: str) -> List[str]:
        """The chain above branch, nearest first."""
        live = self.live_branches()
        chain: List[str] = []
        cursor = branch
        for _ in range(self._cap()):
            child = self.live_child(cursor, live)
            if child is None:
                return chain
            chain.append(child)
            cursor = child
        raise self._corrupt(branch)

    def full_stack(self, branch: str) -> List[str]:
        """Every live branch in branch's stack, bottom to top, without the base branch.

        Recorded parents whose branch was deleted outside gss are walked
        through but left out.
        """
        if branch == self.base_branch or self.store.get_parent(branch) is None:
            return []
        live = self.live_branches()
        top = self.stack_top(branch)
        stack: List[str] = []
        cursor: Optional[str] = top
        for _ in range(self._cap()):
            if cursor is None or cursor == self.base_branch:
                stack.reverse()
                logger.debug(f"Stack for {branch}: {stack}")
                return stack
            if cursor in live:
                stack.append(cursor)
            else:
                logger.info(f"{cursor} is recorded in the stack of {branch} but no longer exists")
            cursor = self.store.get_parent(cursor)
        raise self._corrupt(branch)

    def all_stack_roots(self) -> List[str]:
        """Live branches rooted on the base branch that have at least one live child."""
        live = self.live_branches()
        roots = []
        for name in self.store.tracked_branches():
            if name not in live or self.store.get_parent(name) != self.base_branch:
                continue
            if self.live_child(name, live) is not None:
                roots.append(name)
        return roots

    def stack_size(self, root: str) -> int:
        return 1 + len(self.descendants(root))
