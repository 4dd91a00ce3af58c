"""Relationship store: branch parent edges and review links kept in git config."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from ..errors import CorruptGraphError, UserInputError
from ..typing import GitInterface, ReviewId

logger = logging.getLogger(__name__)

PARENT_KEY = "parent"
REVIEW_KEY = "pr-number"
CONFIG_PATTERN = r"^branch\..*\.(parent|pr-number)$"


@dataclass
class BranchNode:
    """One tracked branch: its parent edge and review link."""
    name: str
    parent: Optional[str] = None
    review_id: Optional[ReviewId] = None


def _config_key(branch: str, field: str) -> str:
    return f"branch.{branch}.{field}"


def _split_config_key(key: str) -> Optional[Tuple[str, str]]:
    """Split 'branch.<name>.<field>' into (name, field). Names may contain dots."""
    if not key.startswith("branch."):
        return None
    rest = key[len("branch."):]
    for field in (PARENT_KEY, REVIEW_KEY):
        suffix = f".{field}"
        if rest.endswith(suffix) and len(rest) > len(suffix):
            return rest[:-len(suffix)], field
    return None


class RelationshipStore:
    """In-memory view of the stack forest, written through to git config.

    The node map is loaded once on first use and is never shared across
    processes. Every mutation updates git config before the map.
    """

    def __init__(self, git_cmd: GitInterface):
        self.git_cmd = git_cmd
        self._nodes: Optional[Dict[str, BranchNode]] = None
        self._children: Dict[str, Set[str]] = {}

    @property
    def nodes(self) -> Dict[str, BranchNode]:
        if self._nodes is None:
            self._load()
        assert self._nodes is not None
        return self._nodes

    def _load(self) -> None:
        self._nodes = {}
        self._children = {}
        entries = self.git_cmd.get_config_regexp(CONFIG_PATTERN)
        for key, value in entries.items():
            split = _split_config_key(key)
            if split is None:
                continue
            name, field = split
            node = self._nodes.setdefault(name, BranchNode(name))
            if field == PARENT_KEY and value:
                node.parent = value
                self._children.setdefault(value, set()).add(name)
            elif field == REVIEW_KEY and value:
                try:
                    node.review_id = ReviewId(int(value))
                except ValueError:
                    logger.warning(f"Ignoring non-numeric review link for '{name}': {value}")
        logger.debug(f"Loaded {len(self._nodes)} tracked branches from git config")

    def _node(self, branch: str) -> BranchNode:
        return self.nodes.setdefault(branch, BranchNode(branch))

    # Parent edges

    def get_parent(self, branch: str) -> Optional[str]:
        node = self.nodes.get(branch)
        return node.parent if node else None

    def set_parent(self, child: str, parent: str) -> None:
        """Record child -> parent, refusing edges that would close a cycle."""
        if child == parent:
            raise UserInputError(f"Branch '{child}' cannot be its own parent.")
        # Walk up from the new parent; reaching the child means a cycle
        seen: Set[str] = set()
        cursor: Optional[str] = parent
        while cursor is not None:
            if cursor == child:
                raise CorruptGraphError(
                    f"Setting the parent of '{child}' to '{parent}' would create a cycle.",
                    suggestion="Choose a parent that is not stacked on top of this branch.",
                )
            if cursor in seen:
                raise CorruptGraphError(f"The recorded stack above '{parent}' already contains a cycle.",
                                        suggestion="Run 'gss clean --metadata' and re-track your branches.")
            seen.add(cursor)
            cursor = self.get_parent(cursor)

        old_parent = self.get_parent(child)
        self.git_cmd.set_config(_config_key(child, PARENT_KEY), parent)
        if old_parent is not None:
            self._children.get(old_parent, set()).discard(child)
        self._node(child).parent = parent
        self._children.setdefault(parent, set()).add(child)
        logger.info(f"Set parent of {child} to {parent}")

    def clear_parent(self, child: str) -> None:
        old_parent = self.get_parent(child)
        self.git_cmd.unset_config(_config_key(child, PARENT_KEY))
        if old_parent is not None:
            self._children.get(old_parent, set()).discard(child)
        if child in self.nodes:
            self.nodes[child].parent = None
        logger.info(f"Cleared parent of {child}")

    def children(self, branch: str) -> List[str]:
        if self._nodes is None:
            self._load()
        return sorted(self._children.get(branch, set()))

    def get_child(self, branch: str) -> Optional[str]:
        """The single child of branch; siblings resolve to the first by name."""
        kids = self.children(branch)
        if len(kids) > 1:
            logger.debug(f"Branch '{branch}' has several children {kids}; following '{kids[0]}'")
        return kids[0] if kids else None

    # Review links

    def get_review_id(self, branch: str) -> Optional[ReviewId]:
        node = self.nodes.get(branch)
        return node.review_id if node else None

    def set_review_id(self, branch: str, review_id: ReviewId) -> None:
        self.git_cmd.set_config(_config_key(branch, REVIEW_KEY), str(review_id))
        self._node(branch).review_id = review_id

    def clear_review_id(self, branch: str) -> None:
        self.git_cmd.unset_config(_config_key(branch, REVIEW_KEY))
        if branch in self.nodes:
            self.nodes[branch].review_id = None

    # Bulk

    def forget(self, branch: str) -> None:
        """Drop every record kept for branch. Its children keep their edge."""
        self.clear_parent(branch)
        self.clear_review_id(branch)
        self.nodes.pop(branch, None)

    def tracked_branches(self) -> List[str]:
        """Branches that have a recorded parent."""
        return sorted(name for name, node in self.nodes.items() if node.parent is not None)

    def clear_all(self) -> int:
        """Remove every stack edge and review link. Returns how many branches were touched."""
        names = list(self.nodes)
        for name in names:
            self.forget(name)
        self._children = {}
        return len(names)
