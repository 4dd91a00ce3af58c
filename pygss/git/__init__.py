"""Git interfaces and implementation."""

import os
import re
import shlex
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..config.models import GssConfig
from ..errors import GitError, PreconditionError
from ..typing import GitInterface

# Get module logger
logger = logging.getLogger(__name__)

__all__ = ["RealGit", "GitInterface"]

class RealGit:
    """Real Git implementation backed by GitPython."""
    def __init__(self, config: GssConfig, directory: Optional[str] = None):
        """Initialize with config and an optional working directory."""
        self.config: GssConfig = config
        self.directory = directory or os.getcwd()
        self._repo: Optional[git.Repo] = None

    @property
    def repo(self) -> git.Repo:
        """Get the GitPython repository, opened on first use."""
        if self._repo is None:
            try:
                self._repo = git.Repo(self.directory, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError):
                raise PreconditionError(
                    "Not in a git repository",
                    suggestion="Run gss from inside a git working tree, or pass -C <dir>.",
                )
        return self._repo

    def _log(self, cmd_str: str) -> None:
        if self.config.user.log_git_commands:
            logger.info(f"> git {cmd_str}")
        else:
            logger.debug(f"> git {cmd_str}")

    def _git(self, *args: str) -> str:
        """Run a git subcommand with pre-split arguments."""
        self._log(" ".join(args))
        method = getattr(self.repo.git, args[0].replace('-', '_'))
        try:
            result: Any = method(*args[1:])
        except GitCommandError as e:
            raise GitError(f"Git command failed: {e}") from e
        return result if isinstance(result, str) else str(result)

    def _status_of(self, *args: str) -> int:
        """Run a git subcommand and return its exit status instead of raising."""
        self._log(" ".join(args))
        method = getattr(self.repo.git, args[0].replace('-', '_'))
        try:
            method(*args[1:])
        except GitCommandError as e:
            return e.status if isinstance(e.status, int) else 1
        return 0

    def run_cmd(self, command: str) -> str:
        """Run git command."""
        cmd_str = command.strip()
        cmd_parts = shlex.split(cmd_str)
        return self._git(*cmd_parts)

    # Branches

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD").strip()

    def branch_exists(self, name: str) -> bool:
        return self._status_of("rev-parse", "--verify", "--quiet", f"refs/heads/{name}") == 0

    def list_branches(self) -> List[str]:
        output = self._git("for-each-ref", "--format=%(refname:short)", "refs/heads/")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def rev_parse(self, ref: str) -> Optional[str]:
        try:
            return self._git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}").strip() or None
        except GitError:
            return None

    def checkout(self, branch: str) -> None:
        self._git("checkout", branch)

    def create_branch(self, name: str, from_branch: str) -> None:
        self._git("checkout", "-b", name, from_branch)

    def delete_branch(self, name: str, force: bool = True) -> None:
        self._git("branch", "-D" if force else "-d", name)

    # History

    def rebase(self, onto: str, upstream: Optional[str] = None) -> bool:
        """Rebase the current branch; returns False if stopped on a conflict."""
        if upstream:
            args = ["rebase", "--onto", onto, upstream]
        else:
            args = ["rebase", "--fork-point", onto]
        try:
            self._git(*args)
        except GitError:
            if self.rebase_in_progress():
                return False
            raise
        return True

    def rebase_in_progress(self) -> bool:
        git_dir = self.git_dir()
        return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()

    def commit_count(self, range_from: str, range_to: str) -> int:
        return int(self._git("rev-list", "--count", f"{range_from}..{range_to}").strip())

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        status = self._status_of("merge-base", "--is-ancestor", ancestor, descendant)
        if status == 0:
            return True
        if status == 1:
            return False
        raise GitError(f"Could not compare '{ancestor}' and '{descendant}' (exit {status})")

    def fetch(self, remote: str) -> None:
        self._git("fetch", remote, "--quiet")

    def fast_forward(self, ref: str) -> bool:
        return self._status_of("merge", "--ff-only", ref) == 0

    def push_force_with_lease(self, remote: str, branches: List[str]) -> None:
        if not branches:
            return
        if self.config.tool.pretend:
            logger.info(f"[PRETEND] Would push: {' '.join(branches)}")
            return
        self._git("push", "--force-with-lease", remote, *branches)

    # Config

    def get_config(self, key: str) -> Optional[str]:
        self._log(f"config --get {key}")
        try:
            value = self.repo.git.config("--get", key)
        except GitCommandError as e:
            if e.status == 1:
                return None
            raise GitError(f"Git command failed: {e}") from e
        return str(value)

    def set_config(self, key: str, value: str) -> None:
        self._git("config", key, value)

    def unset_config(self, key: str) -> None:
        # Exit status 5 means the key was not set
        status = self._status_of("config", "--unset", key)
        if status not in (0, 5):
            raise GitError(f"Could not unset config '{key}' (exit {status})")

    def get_config_regexp(self, pattern: str) -> Dict[str, str]:
        self._log(f"config --get-regexp {pattern}")
        try:
            output = self.repo.git.config("--get-regexp", pattern)
        except GitCommandError as e:
            if e.status == 1:
                return {}
            raise GitError(f"Git command failed: {e}") from e
        entries: Dict[str, str] = {}
        for line in str(output).splitlines():
            key, _, value = line.partition(" ")
            entries[key] = value
        return entries

    # Working tree

    def working_tree_is_clean(self) -> bool:
        return not self._git("status", "--porcelain").strip()

    def git_dir(self) -> Path:
        return Path(self._git("rev-parse", "--absolute-git-dir").strip())

    def remote_url(self, remote: str) -> Optional[str]:
        return self.get_config(f"remote.{remote}.url")

    def commit_subject(self, ref: str) -> str:
        return self._git("log", "-1", "--format=%s", ref).strip()

    def amend_all(self) -> None:
        self._git("add", "-A")
        self._git("commit", "--amend", "--no-edit")

    def merge_squash(self, branch: str) -> None:
        self._git("merge", "--squash", branch)

    def commit(self, message: Optional[str] = None) -> bool:
        """Commit the index; returns False if git refused (e.g. nothing to commit)."""
        args = ["commit", "-m", message] if message else ["commit", "--no-edit"]
        return self._status_of(*args) == 0

    def reset_hard(self, ref: str) -> None:
        self._git("reset", "--hard", ref)

def branch_name_is_valid(name: str) -> bool:
    """Cheap check for names git would reject outright."""
    if not name or name.startswith("-") or name.endswith(".lock") or name.endswith("/"):
        return False
    return re.search(r"(\.\.|[\s~^:?*\[\\]|@\{)", name) is None
