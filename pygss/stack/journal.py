"""Durable record of an in-flight multi-branch operation."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..config.models import GssConfig
from ..errors import PreconditionError
from ..pretty import Output
from ..typing import GitInterface
from .store import RelationshipStore

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "GSS_OPERATION_STATE"


class JournalEntry(BaseModel):
    """What a later 'gss continue' needs to finish an operation."""
    command: str
    origin_branch: str
    pending_deletions: List[str] = Field(default_factory=list)
    onto: Optional[str] = None
    queue: List[str] = Field(default_factory=list)
    next_index: int = 0
    upstreams: Dict[str, str] = Field(default_factory=dict)


class OperationJournal:
    """Single-record journal stored under the repository's git directory."""

    def __init__(self, git_cmd: GitInterface, store: RelationshipStore, config: GssConfig,
                 confirm: Callable[[str], bool], output: Output):
        self.git_cmd = git_cmd
        self.store = store
        self.config = config
        self.confirm = confirm
        self.output = output

    @property
    def path(self) -> Path:
        return self.git_cmd.git_dir() / STATE_FILE_NAME

    def begin(self, command: str, origin_branch: str, pending_deletions: Optional[List[str]] = None,
              onto: Optional[str] = None, queue: Optional[List[str]] = None,
              upstreams: Optional[Dict[str, str]] = None) -> JournalEntry:
        """Write a fresh record, replacing any earlier one."""
        entry = JournalEntry(
            command=command,
            origin_branch=origin_branch,
            pending_deletions=list(pending_deletions or []),
            onto=onto,
            queue=list(queue or []),
            upstreams=dict(upstreams or {}),
        )
        if self.has_pending():
            logger.info(f"Replacing earlier journal record at {self.path}")
        self.save(entry)
        return entry

    def save(self, entry: JournalEntry) -> None:
        with open(self.path, "w") as f:
            yaml.safe_dump(entry.model_dump(), f, default_flow_style=False, sort_keys=False)
        logger.debug(f"Journal saved: {entry.command} next_index={entry.next_index}")

    def load(self) -> Optional[JournalEntry]:
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            return None
        except yaml.YAMLError as e:
            raise PreconditionError(f"The operation state file {self.path} is not valid YAML: {e}",
                                    suggestion="Run 'gss clean' to discard it.")
        try:
            return JournalEntry.model_validate(data)
        except ValidationError as e:
            raise PreconditionError(f"The operation state file {self.path} is unreadable: {e}",
                                    suggestion="Run 'gss clean' to discard it.")

    def has_pending(self) -> bool:
        return self.path.exists()

    def clear(self) -> bool:
        """Delete the record. Returns True if there was one."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True

    def finish(self) -> None:
        """Delete pending branches, go back where the operator started, drop the record."""
        entry = self.load()
        if entry is None:
            return
        base = self.config.repo.base_branch
        self.output.step("Finishing operation...")

        for branch in entry.pending_deletions:
            if not self.git_cmd.branch_exists(branch):
                self.store.forget(branch)
                continue
            if not self.confirm(f"Do you want to delete the local merged branch '{branch}'?"):
                self.output.info(f"Kept local branch '{branch}'.")
                continue
            if self.git_cmd.current_branch() == branch:
                self.git_cmd.checkout(base)
            self.git_cmd.delete_branch(branch, force=True)
            self.store.forget(branch)
            self.output.success(f"Deleted local branch '{branch}'.")

        if self.git_cmd.branch_exists(entry.origin_branch):
            if self.git_cmd.current_branch() != entry.origin_branch:
                self.output.info(f"Returning to original branch '{entry.origin_branch}'.")
                self.git_cmd.checkout(entry.origin_branch)
        else:
            self.output.warning(f"Original branch '{entry.origin_branch}' no longer exists. Returning to '{base}'.")
            self.git_cmd.checkout(base)

        self.clear()
        self.output.success("Operation complete.")
        self.output.suggestion("Run 'gss push' to update your remote branches.")
