"""Find where a stack stopped being a chain of ancestors."""

import logging
from typing import List, Optional

from ..typing import GitInterface

logger = logging.getLogger(__name__)


def find_divergence(git_cmd: GitInterface, ordered_stack: List[str]) -> Optional[str]:
    """Return the lowest branch whose child no longer contains its tip.

    ordered_stack runs bottom to top. Returns None when every parent tip is
    an ancestor of its child's tip.
    """
    for parent, child in zip(ordered_stack, ordered_stack[1:]):
        if not git_cmd.is_ancestor(parent, child):
            logger.info(f"'{child}' has diverged from '{parent}'")
            return parent
    return None
