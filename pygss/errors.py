"""Error taxonomy for pygss.

Every error carries an optional ``suggestion`` with the next step the operator
should take. The CLI reports both and exits non-zero.
"""

from typing import Optional


class GssError(Exception):
    """Base class for all pygss errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion


class UserInputError(GssError):
    """Missing or invalid argument, or an invalid parent ancestry."""


class PreconditionError(GssError):
    """The repository is not in a state where the command can run."""


class ConflictPause(GssError):
    """A rebase stopped on a content conflict that the operator must resolve.

    This is an expected, recoverable state: the operation journal stays in
    place and ``gss continue`` resumes from it.
    """

    def __init__(self, branch: str, onto: str):
        super().__init__(
            f"Rebase conflict detected while rebasing '{branch}' onto '{onto}'.",
            suggestion="Resolve the conflict, finish 'git rebase --continue', then run 'gss continue'.",
        )
        self.branch = branch
        self.onto = onto


class RemoteServiceError(GssError):
    """A call to the review service failed."""


class CorruptGraphError(GssError):
    """The recorded branch graph has a cycle or does not terminate."""


class GitError(GssError):
    """A git command failed."""
