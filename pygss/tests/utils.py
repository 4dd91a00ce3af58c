"""Shared utilities for pygss tests."""
import logging
from typing import Dict

from pygss.gss import StackManager
from pygss.tests.fake_git import FakeGit

logger = logging.getLogger(__name__)

def track(manager: StackManager, *names: str, parent: str = "main") -> None:
    """Record a parent chain for branches that already exist."""
    for name in names:
        manager.store.set_parent(name, parent)
        parent = name

def build_stack(git: FakeGit, manager: StackManager, *names: str) -> Dict[str, str]:
    """Create and track main -> names[0] -> names[1] ... with one commit each.

    Returns the tip of every branch. Leaves the top branch checked out.
    """
    git.make_stack(*names)
    track(manager, *names)
    return {name: git.branches[name] for name in names}
