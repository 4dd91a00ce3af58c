"""Stack consistency engine."""

from .store import BranchNode, RelationshipStore
from .graph import StackGraph
from .divergence import find_divergence
from .journal import JournalEntry, OperationJournal
from .rebase import RebaseExecutor
from .reconcile import MergeDetector, ReconcileResult, reconcile

__all__ = [
    "BranchNode",
    "RelationshipStore",
    "StackGraph",
    "find_divergence",
    "JournalEntry",
    "OperationJournal",
    "RebaseExecutor",
    "MergeDetector",
    "ReconcileResult",
    "reconcile",
]
