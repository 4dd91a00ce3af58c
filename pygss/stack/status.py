"""Per-branch status of a stack relative to its parents, the remote, and GitHub."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..errors import RemoteServiceError
from ..typing import GitInterface, PRState, ReviewId
from .store import RelationshipStore

logger = logging.getLogger(__name__)


class BranchStatus(BaseModel):
    name: str
    parent: str
    current: bool = False
    behind_parent: int = 0
    on_remote: bool = False
    needs_push: bool = False
    review_id: Optional[int] = None
    pr_state: Optional[PRState] = None
    pr_url: Optional[str] = None


class StackStatus(BaseModel):
    base_branch: str
    base_behind: int = 0
    base_ahead: int = 0
    branches: List[BranchStatus] = []

    @property
    def needs_push(self) -> List[str]:
        return [b.name for b in self.branches if b.needs_push]

    def next_step(self) -> Dict[str, str]:
        """The single most useful thing to do next, as a warning plus a suggestion."""
        has_merged = any(b.pr_state == PRState.MERGED for b in self.branches)
        behind_base = any(b.behind_parent and b.parent == self.base_branch for b in self.branches)
        behind_parent = any(b.behind_parent and b.parent != self.base_branch for b in self.branches)
        if has_merged or self.base_behind > 0 or behind_base:
            return {"warning": "The stack contains merged branches or is behind the base branch.",
                    "suggestion": "Run 'gss sync' to update the base and rebase the stack."}
        if behind_parent:
            return {"warning": "A branch in the stack is behind its parent.",
                    "suggestion": "Run 'gss restack' from the out-of-date branch or 'gss sync' for the whole stack."}
        if self.needs_push:
            return {"warning": "One or more local branches have changed.",
                    "suggestion": "Run 'gss push' to update the remote."}
        if any(b.review_id is None for b in self.branches):
            return {"warning": "One or more branches are missing a pull request.",
                    "suggestion": "Run 'gss submit' to create them."}
        return {}

    def to_json(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        data["needs_push"] = self.needs_push
        return data


def branch_needs_push(git_cmd: GitInterface, remote: str, branch: str) -> bool:
    """True when the local tip differs from <remote>/<branch>, or the remote has no such branch."""
    remote_sha = git_cmd.rev_parse(f"{remote}/{branch}")
    return remote_sha is None or remote_sha != git_cmd.rev_parse(branch)


def collect_status(git_cmd: GitInterface, store: RelationshipStore, review_client: Any,
                   stack: List[str], base_branch: str, remote: str) -> StackStatus:
    """Build a StackStatus for stack (bottom to top) without mutating anything."""
    remote_base = f"{remote}/{base_branch}"
    status = StackStatus(base_branch=base_branch)
    if git_cmd.rev_parse(remote_base) is not None:
        status.base_behind = git_cmd.commit_count(base_branch, remote_base)
        status.base_ahead = git_cmd.commit_count(remote_base, base_branch)

    current = git_cmd.current_branch()
    for branch in stack:
        parent = store.get_parent(branch) or base_branch
        remote_sha = git_cmd.rev_parse(f"{remote}/{branch}")
        entry = BranchStatus(
            name=branch,
            parent=parent,
            current=branch == current,
            behind_parent=git_cmd.commit_count(branch, parent),
            on_remote=remote_sha is not None,
            needs_push=branch_needs_push(git_cmd, remote, branch),
        )
        review_id = store.get_review_id(branch)
        if review_id is not None:
            entry.review_id = int(review_id)
            if review_client is not None:
                try:
                    info = review_client.get_request_info(ReviewId(review_id))
                except RemoteServiceError as e:
                    logger.warning(f"Could not fetch PR #{review_id}: {e.message}")
                    info = None
                if info is None:
                    entry.pr_state = PRState.NOT_FOUND
                else:
                    entry.pr_state = info.state
                    entry.pr_url = info.url
        status.branches.append(entry)
    return status
