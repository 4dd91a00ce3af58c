"""Common types used across the codebase."""

from enum import Enum
from pathlib import Path
from typing import Dict, List, NewType, Optional, Protocol, runtime_checkable

# Pull request number on the review service
ReviewId = NewType('ReviewId', int)


class PRState(str, Enum):
    """Remote state of a review request."""
    OPEN = "OPEN"
    MERGED = "MERGED"
    CLOSED = "CLOSED"
    NOT_FOUND = "NOT_FOUND"


@runtime_checkable
class GitInterface(Protocol):
    """Protocol for the version-control primitives the stack engine consumes."""

    def run_cmd(self, command: str) -> str:
        """Run a raw git command."""
        ...

    def current_branch(self) -> str: ...

    def branch_exists(self, name: str) -> bool: ...

    def list_branches(self) -> List[str]: ...

    def rev_parse(self, ref: str) -> Optional[str]: ...

    def checkout(self, branch: str) -> None: ...

    def create_branch(self, name: str, from_branch: str) -> None:
        """Create `name` at `from_branch` and check it out."""
        ...

    def delete_branch(self, name: str, force: bool = True) -> None: ...

    def rebase(self, onto: str, upstream: Optional[str] = None) -> bool:
        """Rebase the current branch onto `onto`.

        Returns False when the rebase stopped on a conflict.
        """
        ...

    def rebase_in_progress(self) -> bool: ...

    def commit_count(self, range_from: str, range_to: str) -> int: ...

    def is_ancestor(self, ancestor: str, descendant: str) -> bool: ...

    def fetch(self, remote: str) -> None: ...

    def fast_forward(self, ref: str) -> bool: ...

    def push_force_with_lease(self, remote: str, branches: List[str]) -> None: ...

    def get_config(self, key: str) -> Optional[str]: ...

    def set_config(self, key: str, value: str) -> None: ...

    def unset_config(self, key: str) -> None: ...

    def get_config_regexp(self, pattern: str) -> Dict[str, str]: ...

    def working_tree_is_clean(self) -> bool: ...

    def git_dir(self) -> Path: ...

    def remote_url(self, remote: str) -> Optional[str]: ...

    def commit_subject(self, ref: str) -> str: ...

    def amend_all(self) -> None: ...

    def merge_squash(self, branch: str) -> None: ...

    def commit(self, message: Optional[str] = None) -> bool: ...

    def reset_hard(self, ref: str) -> None: ...


@runtime_checkable
class ReviewClientProtocol(Protocol):
    """Protocol for the review-service primitives the stack engine consumes."""

    def find_open_request(self, branch: str) -> Optional[ReviewId]: ...

    def get_request_status(self, review_id: ReviewId) -> PRState: ...

    def create_request(self, title: str, head_branch: str, base_branch: str) -> ReviewId: ...

    def update_request_base(self, review_id: ReviewId, new_base_branch: str) -> None: ...

    def close_request(self, review_id: ReviewId) -> None: ...

    def open_in_browser(self, review_id: ReviewId) -> None: ...
