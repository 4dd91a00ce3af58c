"""Replays a chain of branches one at a time onto a moving base."""

import logging
from typing import Optional

from ..errors import ConflictPause
from ..pretty import Output
from ..typing import GitInterface
from .journal import JournalEntry, OperationJournal
from .store import RelationshipStore

logger = logging.getLogger(__name__)


class RebaseExecutor:
    """Runs the rebase queue of a journal entry.

    Branch 0 goes onto entry.onto and every later branch onto the one
    before it. Progress is saved before each step, so a run that stopped on
    a conflict can be started again from the same entry.
    """

    def __init__(self, git_cmd: GitInterface, store: RelationshipStore, journal: OperationJournal, output: Output):
        self.git_cmd = git_cmd
        self.store = store
        self.journal = journal
        self.output = output

    def already_based(self, branch: str, base: str, upstream: Optional[str]) -> bool:
        """True when rebasing branch onto base would change nothing we care about."""
        if not self.git_cmd.is_ancestor(base, branch):
            return False
        if upstream is None:
            return True
        # The explicit upstream marks commits to drop; once they are gone or
        # already part of base there is nothing left to do
        return self.git_cmd.is_ancestor(upstream, base) or not self.git_cmd.is_ancestor(upstream, branch)

    def run(self, entry: JournalEntry) -> None:
        if entry.onto is None and entry.queue:
            raise ValueError("journal entry has a rebase queue but no base")
        for index in range(entry.next_index, len(entry.queue)):
            branch = entry.queue[index]
            base = entry.onto if index == 0 else entry.queue[index - 1]
            assert base is not None
            entry.next_index = index
            self.journal.save(entry)

            upstream = entry.upstreams.get(branch)
            if self.already_based(branch, base, upstream):
                logger.info(f"{branch} already contains {base}, skipping")
                self.output.info(f"'{branch}' is already up to date with '{base}'.")
                continue

            self.output.step(f"Rebasing '{branch}' onto '{base}'...")
            self.git_cmd.checkout(branch)
            if not self.git_cmd.rebase(base, upstream):
                raise ConflictPause(branch, base)
            self._warn_if_empty(branch, base)

        entry.next_index = len(entry.queue)
        self.journal.save(entry)

    def _warn_if_empty(self, branch: str, base: str) -> None:
        if self.git_cmd.commit_count(base, branch) != 0:
            return
        self.output.warning(f"After rebasing, branch '{branch}' has no new changes compared to '{base}'.")
        review_id = self.store.get_review_id(branch)
        if review_id is not None:
            self.output.info("This can happen if changes from this branch were also introduced into its parent.")
            self.output.info(f"Pushing this update may cause GitHub to automatically close PR #{review_id}.")
