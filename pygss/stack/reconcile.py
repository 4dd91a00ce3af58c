"""Detect merged branches in a stack and bridge the chain around them."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..errors import RemoteServiceError
from ..pretty import Output
from ..typing import GitInterface, PRState, ReviewClientProtocol
from .store import RelationshipStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    merged: List[str] = field(default_factory=list)
    unmerged: List[str] = field(default_factory=list)
    reparentings: List[Tuple[str, str]] = field(default_factory=list)
    pending_deletions: List[str] = field(default_factory=list)
    retained: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.merged or self.reparentings)


class MergeDetector:
    """Decides per branch whether its work already landed on the integration branch."""

    def __init__(self, git_cmd: GitInterface, store: RelationshipStore, review_client: Optional[ReviewClientProtocol],
                 remote_base: str, output: Optional[Output] = None):
        self.git_cmd = git_cmd
        self.store = store
        self.review_client = review_client
        self.remote_base = remote_base
        self.output = output or Output()

    def review_says_merged(self, branch: str) -> bool:
        review_id = self.store.get_review_id(branch)
        if review_id is None or self.review_client is None:
            return False
        try:
            state = self.review_client.get_request_status(review_id)
        except RemoteServiceError as e:
            self.output.warning(f"Could not fetch status of PR #{review_id} for '{branch}'; "
                                f"falling back to commit ancestry. ({e.message})")
            return False
        logger.info(f"PR #{review_id} for {branch} is {state.value}")
        return state == PRState.MERGED

    def ancestry_says_merged(self, branch: str) -> bool:
        if self.git_cmd.rev_parse(self.remote_base) is None:
            return False
        # A branch with no commits of its own is not evidence of a merge
        parent = self.store.get_parent(branch)
        if parent is not None and self.git_cmd.rev_parse(branch) == self.git_cmd.rev_parse(parent):
            return False
        return self.git_cmd.is_ancestor(branch, self.remote_base)

    def is_merged(self, branch: str) -> bool:
        return self.review_says_merged(branch) or self.ancestry_says_merged(branch)


def reconcile(ordered_stack: List[str], detector: MergeDetector, base_branch: str) -> ReconcileResult:
    """Classify ordered_stack (bottom to top) and plan the bridging.

    Nothing is mutated here; the caller applies result.reparentings.
    """
    result = ReconcileResult()
    merged: Set[str] = set()
    for branch in ordered_stack:
        if detector.is_merged(branch):
            merged.add(branch)
            result.merged.append(branch)
        else:
            result.unmerged.append(branch)

    # A parent outside ordered_stack was deleted locally; bridge over it like a merged one
    last_unmerged_ancestor = base_branch
    for branch in result.unmerged:
        parent = detector.store.get_parent(branch)
        if parent != last_unmerged_ancestor and (parent in merged or parent not in ordered_stack):
            result.reparentings.append((branch, last_unmerged_ancestor))
        last_unmerged_ancestor = branch

    # Merged branches stacked above the last unmerged one stay where they are
    if result.unmerged:
        top_unmerged = max(ordered_stack.index(b) for b in result.unmerged)
    else:
        top_unmerged = len(ordered_stack)
    for index, branch in enumerate(ordered_stack):
        if branch not in merged:
            continue
        if index > top_unmerged:
            result.retained.append(branch)
        else:
            result.pending_deletions.append(branch)

    logger.debug(f"Reconcile: {result}")
    return result
