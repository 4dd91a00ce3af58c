"""Type definitions for GitHub API responses."""

from typing import Optional
from pydantic import BaseModel

from ..typing import PRState

class PullRequestInfo(BaseModel):
    """Snapshot of a pull request as seen by pygss."""
    number: int
    title: str
    state: PRState
    base_ref: str
    head_ref: str
    url: Optional[str] = None

def state_from_github(state: str, merged: bool) -> PRState:
    """Map GitHub's REST (state, merged) pair onto PRState."""
    if merged:
        return PRState.MERGED
    if state.lower() == "open":
        return PRState.OPEN
    if state.lower() == "closed":
        return PRState.CLOSED
    return PRState.NOT_FOUND
