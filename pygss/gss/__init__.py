"""Stacked branch commands."""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..config.models import GssConfig
from ..errors import GitError, PreconditionError, UserInputError
from ..git import branch_name_is_valid
from ..github import GitHubClient
from ..pretty import Output, print_json
from ..stack import (
    MergeDetector,
    OperationJournal,
    RebaseExecutor,
    RelationshipStore,
    StackGraph,
    find_divergence,
    reconcile,
)
from ..stack.status import StackStatus, branch_needs_push, collect_status
from ..typing import GitInterface, PRState

logger = logging.getLogger(__name__)

PR_BADGES: Dict[PRState, str] = {
    PRState.OPEN: "🟢",
    PRState.MERGED: "🟣",
    PRState.CLOSED: "🔴",
}


class StackManager:
    """Implements every gss command on top of the stack engine."""

    def __init__(self, config: GssConfig, git_cmd: GitInterface, github: Optional[GitHubClient],
                 confirm: Callable[[str], bool], output: Optional[Output] = None):
        """Initialize with config, git and (optionally) GitHub clients."""
        self.config = config
        self.git_cmd = git_cmd
        self.github = github
        self.output = output or Output()
        self._ask = confirm
        self.base_branch = config.repo.base_branch
        self.remote = config.repo.remote
        self.store = RelationshipStore(git_cmd)
        self.graph = StackGraph(self.store, git_cmd, self.base_branch)
        self.journal = OperationJournal(git_cmd, self.store, config, self.confirm, self.output)
        self.executor = RebaseExecutor(git_cmd, self.store, self.journal, self.output)

    @property
    def remote_base(self) -> str:
        return self.config.repo.remote_base

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question unless auto-confirm is on."""
        if self.config.user.auto_confirm:
            return True
        return self._ask(self.output.prompt_line(question))

    # Guards

    def _guard_context(self, command: str) -> str:
        """Require a tracked, non-base current branch. Returns it."""
        current = self.git_cmd.current_branch()
        if current == self.base_branch:
            raise PreconditionError(
                f"The '{command}' command cannot be run from the base branch ('{self.base_branch}').",
                suggestion="Run 'gss list' to see your stacks, then check out one of their branches.",
            )
        if self.store.get_parent(current) is None:
            raise PreconditionError(
                f"The '{command}' command requires a tracked branch. Branch '{current}' is not tracked by gss.",
                suggestion="Run 'gss create <branch-name>' to start a new stack, "
                           "or 'gss track set <parent-branch>' to track this one.",
            )
        return current

    def _require_clean(self, command: str) -> None:
        if not self.git_cmd.working_tree_is_clean():
            raise PreconditionError(
                f"Cannot {command} with uncommitted changes in the working directory.",
                suggestion="Commit or stash your changes first.",
            )

    def _require_idle(self) -> None:
        if self.git_cmd.rebase_in_progress():
            raise PreconditionError("A git rebase is in progress.",
                                    suggestion="Finish it with 'git rebase --continue' or 'git rebase --abort'.")
        if self.journal.has_pending():
            raise PreconditionError("Another gss operation is still in progress.",
                                    suggestion="Finish it with 'gss continue', or discard it with 'gss clean'.")

    def _require_github(self) -> GitHubClient:
        if self.github is None:
            raise PreconditionError("This command needs GitHub access, but no GitHub token was found.",
                                    suggestion="Set GITHUB_TOKEN or log in with 'gh auth login'.")
        return self.github

    def _require_new_branch_name(self, name: str, usage: str) -> None:
        if not name:
            raise UserInputError("Branch name is required.", suggestion=f"Usage: {usage}")
        if not branch_name_is_valid(name):
            raise UserInputError(f"'{name}' is not a valid branch name.")
        if self.git_cmd.branch_exists(name):
            raise UserInputError(f"Branch '{name}' already exists.")

    # Shared steps

    def _retarget_review(self, branch: str, new_base: str) -> None:
        """Point branch's PR at new_base, pushing new_base first if the remote lacks it."""
        review_id = self.store.get_review_id(branch)
        if review_id is None:
            return
        if self.github is None:
            self.output.warning(f"GitHub is not configured; change the base of PR #{review_id} "
                                f"to '{new_base}' by hand.")
            return
        self.output.step(f"Updating GitHub PR for '{branch}'...")
        if new_base != self.base_branch and self.git_cmd.rev_parse(f"{self.remote}/{new_base}") is None:
            self.output.info(f"Pushing new branch '{new_base}' to remote...")
            self.git_cmd.push_force_with_lease(self.remote, [new_base])
        self.output.info(f"Setting base of PR #{review_id} to '{new_base}'...")
        self.github.update_request_base(review_id, new_base)
        self.output.success(f"GitHub PR #{review_id} updated.")

    def _rebase_and_finish(self, command: str, origin: str, onto: str, queue: List[str],
                           upstreams: Optional[Dict[str, str]] = None,
                           pending_deletions: Optional[List[str]] = None) -> None:
        entry = self.journal.begin(command, origin, pending_deletions=pending_deletions, onto=onto,
                                   queue=queue, upstreams=upstreams)
        self.executor.run(entry)
        self.journal.finish()

    def _maybe_close_review(self, branch: str) -> None:
        review_id = self.store.get_review_id(branch)
        if review_id is None or self.github is None:
            return
        if self.confirm(f"Do you want to close the associated GitHub PR #{review_id} for '{branch}'?"):
            self.output.step(f"Closing PR #{review_id} on GitHub...")
            self.github.close_request(review_id)
            self.output.success(f"PR #{review_id} closed.")

    # Stack and branch management

    def create(self, name: str) -> None:
        """Create a branch on top of the current one and record the edge."""
        self._require_new_branch_name(name, "gss create <branch-name>")
        parent = self.git_cmd.current_branch()
        if parent == "HEAD":
            raise PreconditionError("Cannot create a stacked branch from a detached HEAD.",
                                    suggestion="Check out a branch first.")
        self.git_cmd.create_branch(name, parent)
        self.store.set_parent(name, parent)
        self.output.success(f"Created and checked out new branch '{name}' (parent: '{parent}').")
        self.output.suggestion("Add commits or run 'gss create <next-branch>' to extend the stack.")

    def insert(self, name: str, before: bool = False) -> None:
        """Insert a new branch after (or before) the current one."""
        current = self._guard_context("insert")
        self._require_clean("insert")
        self._require_idle()
        self._require_new_branch_name(name, "gss insert [--before] <branch-name>")

        if before:
            insertion_point = self.store.get_parent(current)
            assert insertion_point is not None
            displaced: Optional[str] = current
            self.output.step(f"Preparing to insert '{name}' before '{current}'...")
        else:
            insertion_point = current
            displaced = self.graph.live_child(current)
            self.output.step(f"Preparing to insert '{name}' after '{current}'...")

        self.git_cmd.create_branch(name, insertion_point)
        self.store.set_parent(name, insertion_point)
        self.output.success(f"Created branch '{name}' on top of '{insertion_point}'.")

        if displaced is not None:
            self.store.set_parent(displaced, name)
            self.output.success(f"Updated parent of '{displaced}' to be '{name}'.")
            self._retarget_review(displaced, name)
            self.output.step(f"Rebasing descendant branches onto '{name}'...")
            queue = [displaced] + self.graph.descendants(displaced)
            self._rebase_and_finish("insert", name, name, queue)
        self.output.success(f"Successfully inserted '{name}' into the stack.")
        self.output.suggestion("Add commits, then run 'gss submit' to create a PR.")

    def squash(self, into: str = "parent", message: Optional[str] = None) -> None:
        """Squash the current branch into its parent, or its child into it."""
        current = self._guard_context("squash")
        self._require_clean("squash")
        self._require_idle()

        parent = self.store.get_parent(current)
        child = self.graph.live_child(current)
        if into == "parent":
            if parent == self.base_branch:
                raise UserInputError(f"Cannot squash the first branch of a stack into '{self.base_branch}'.")
            assert parent is not None
            target, victim, grand_child = parent, current, child
        elif into == "child":
            if child is None:
                raise UserInputError("No child branch found to squash into.")
            target, victim, grand_child = current, child, self.graph.live_child(child)
        else:
            raise UserInputError(f"Invalid direction for squash: '{into}'. Must be 'parent' or 'child'.")

        stack = self.graph.full_stack(current)
        self.output.line()
        self.output.step(f"Squashing '{victim}' into '{target}'...")
        self.output.line("   Stack Before:")
        for branch in stack:
            note = "  <-- to be squashed and deleted" if branch == victim else ""
            self.output.line(f"     - {branch}{note}")
        self.output.line("   Stack After:")
        for branch in stack:
            if branch == victim:
                continue
            note = f" <-- will contain commits from '{victim}'" if branch == target else ""
            self.output.line(f"     - {branch}{note}")
        self.output.line()
        if not self.confirm("Are you sure you want to continue?"):
            self.output.warning("Squash cancelled.")
            return

        victim_tip = self.git_cmd.rev_parse(victim)
        self.git_cmd.checkout(target)
        self.git_cmd.merge_squash(victim)
        if not self.git_cmd.commit(message):
            self.git_cmd.reset_hard("HEAD")
            self.git_cmd.checkout(current)
            raise GitError("Commit failed or was aborted. The squash was undone.",
                           suggestion="Pass a message with -m, or check that the branch has changes to squash.")

        self._maybe_close_review(victim)
        self.git_cmd.delete_branch(victim, force=True)
        if grand_child is not None:
            self.store.set_parent(grand_child, target)
        self.store.forget(victim)
        self.output.success(f"Successfully squashed '{victim}' into '{target}'.")

        if grand_child is None:
            self.output.suggestion("Run 'gss push' to update the remote with your changes.")
            return
        self._retarget_review(grand_child, target)
        queue = [grand_child] + self.graph.descendants(grand_child)
        upstreams = {grand_child: victim_tip} if victim_tip else {}
        self._rebase_and_finish("squash", target, target, queue, upstreams=upstreams)

    def delete(self, branch: Optional[str] = None) -> None:
        """Delete a tracked branch and bridge the stack over it."""
        current = self.git_cmd.current_branch()
        if branch is None:
            branch = self._guard_context("delete")
        elif branch == self.base_branch:
            raise UserInputError(f"Refusing to delete the base branch '{self.base_branch}'.")
        elif self.store.get_parent(branch) is None:
            raise UserInputError(f"Branch '{branch}' is not tracked by gss.",
                                 suggestion="Use 'git branch -D' for branches outside a stack.")
        if not self.git_cmd.branch_exists(branch):
            raise UserInputError(f"Branch '{branch}' does not exist.")
        self._require_clean("delete")
        self._require_idle()

        parent = self.store.get_parent(branch)
        assert parent is not None
        child = self.graph.live_child(branch)
        if not self.confirm(f"Delete branch '{branch}' and drop its commits from the stack?"):
            self.output.warning("Delete cancelled.")
            return

        old_tip = self.git_cmd.rev_parse(branch)
        self._maybe_close_review(branch)
        if child is not None:
            self.store.set_parent(child, parent)
            self.output.info(f"Repairing stack: setting parent of '{child}' to '{parent}'.")
            self._retarget_review(child, parent)

        origin = parent if current == branch else current
        if current == branch:
            self.git_cmd.checkout(parent)
        self.git_cmd.delete_branch(branch, force=True)
        self.store.forget(branch)
        self.output.success(f"Deleted branch '{branch}'.")

        if child is not None:
            queue = [child] + self.graph.descendants(child)
            upstreams = {child: old_tip} if old_tip else {}
            self._rebase_and_finish("delete", origin, parent, queue, upstreams=upstreams)

    def track_set(self, parent: Optional[str] = None) -> None:
        """Record the parent of the current branch."""
        current = self.git_cmd.current_branch()
        if current == self.base_branch:
            raise UserInputError(f"Cannot track the base branch ('{self.base_branch}').")
        parent = parent or self.base_branch
        if not self.git_cmd.branch_exists(parent):
            raise UserInputError(f"Parent branch '{parent}' does not exist.")
        if not self.git_cmd.is_ancestor(parent, current):
            raise UserInputError(f"Invalid parent: '{parent}' is not an ancestor of '{current}'.",
                                 suggestion="A branch's parent must be a commit in its history.")
        self.store.set_parent(current, parent)
        self.output.success(f"Set parent of '{current}' to '{parent}'.")

        if self.github is None:
            self.output.info("GitHub is not configured; skipping pull request lookup.")
            return
        self.output.info(f"Checking for existing pull request for '{current}'...")
        review_id = self.github.find_open_request(current)
        if review_id is not None:
            self.store.set_review_id(current, review_id)
            self.output.success(f"Found and tracked existing PR #{review_id}.")
        else:
            self.output.info(f" -> No open PR found for '{current}'.")

    def track_remove(self) -> None:
        """Stop tracking the current branch if it holds no commits of its own."""
        current = self._guard_context("track remove")
        parent = self.store.get_parent(current)
        assert parent is not None
        if self.git_cmd.commit_count(parent, current) > 0:
            raise PreconditionError(f"Cannot untrack '{current}' because it contains unique commits.",
                                    suggestion="To integrate these changes, consider running 'gss squash'.")
        child = self.graph.live_child(current)
        self.store.clear_parent(current)
        self.output.success(f"Stopped tracking '{current}'. It is no longer part of a stack.")
        if child is not None:
            self.output.info(f"Repairing stack: setting parent of '{child}' to '{parent}'.")
            self.store.set_parent(child, parent)

    # History and synchronization

    def amend(self) -> None:
        """Fold all working tree changes into the last commit, then restack."""
        current = self._guard_context("amend")
        self._require_idle()
        if self.git_cmd.working_tree_is_clean():
            self.output.warning("No changes (staged or unstaged) to amend.")
            return
        self.output.step(f"Amending changes to the last commit on '{current}'...")
        self.git_cmd.amend_all()
        self.output.success("Commit amended successfully.")
        if self.graph.live_child(current) is not None:
            self.restack()
        else:
            self.output.suggestion("Run 'gss push' to update the remote.")

    def restack(self) -> None:
        """Rebase every branch above the first broken link in the current stack."""
        current = self._guard_context("restack")
        self._require_clean("restack")
        self._require_idle()
        self.output.step(f"Restacking branches on top of '{current}'...")

        chain = [current] + self.graph.descendants(current)
        if len(chain) == 1:
            self.output.warning("You are at the top of the stack. Nothing to restack.")
            return
        point = find_divergence(self.git_cmd, chain)
        if point is None:
            self.output.success("Stack is already consistent. Nothing to restack.")
            return
        queue = chain[chain.index(point) + 1:]
        self.output.info(f"Detected subsequent stack: {' '.join(queue)}")
        self._rebase_and_finish("restack", current, point, queue)

    def continue_operation(self) -> None:
        """Resume the journaled operation after a conflict was resolved."""
        if self.git_cmd.rebase_in_progress():
            raise PreconditionError("A git rebase is still in progress.",
                                    suggestion="Run 'git rebase --continue' until it is complete, "
                                               "then run 'gss continue'.")
        entry = self.journal.load()
        if entry is None:
            self.output.warning("No gss operation to continue. Nothing to do.")
            return
        self.output.step(f"Resuming '{entry.command}'...")
        self.executor.run(entry)
        self.journal.finish()

    def _update_base_branch(self, origin: str) -> None:
        self.output.info(f"Updating local base branch '{self.base_branch}'...")
        self.git_cmd.checkout(self.base_branch)
        if not self.git_cmd.fast_forward(self.remote_base):
            self.git_cmd.checkout(origin)
            raise PreconditionError(
                f"Your local base branch ('{self.base_branch}') has diverged from the remote.",
                suggestion=f"Consider running 'git checkout {self.base_branch} && "
                           f"git reset --hard {self.remote_base}'.",
            )
        self.output.success("Local base branch is up to date.")
        self.git_cmd.checkout(origin)

    def _forget_deleted(self, branch: Optional[str]) -> None:
        """Drop the records of branch, and of the parents below it, that were deleted outside gss."""
        while branch and branch != self.base_branch and not self.git_cmd.branch_exists(branch):
            self.output.warning(f"Branch '{branch}' no longer exists locally; removing it from the stack.")
            below = self.store.get_parent(branch)
            self.store.forget(branch)
            branch = below

    def sync(self) -> None:
        """Pull the base branch, drop merged branches, and rebase what is left."""
        origin = self._guard_context("sync")
        self._require_clean("sync")
        self._require_idle()
        self.output.step(f"Syncing stack with '{self.base_branch}' and checking for merged branches...")
        self.git_cmd.fetch(self.remote)
        self._update_base_branch(origin)

        stack = self.graph.full_stack(origin)
        if not stack:
            self.output.warning("Could not determine stack. Nothing to sync.")
            return

        detector = MergeDetector(self.git_cmd, self.store, self.github, self.remote_base, self.output)
        result = reconcile(stack, detector, self.base_branch)
        for branch in result.merged:
            self.output.success(f"Branch '{branch}' has been merged.")
        for branch in result.retained:
            self.output.info(f"Keeping merged branch '{branch}': it sits above unmerged work.")
        if not result.changed:
            self.output.info("No merged branches found.")

        upstreams: Dict[str, str] = {}
        for branch, new_parent in result.reparentings:
            old_parent = self.store.get_parent(branch)
            old_tip = self.git_cmd.rev_parse(old_parent) if old_parent else None
            if old_tip:
                upstreams[branch] = old_tip
            self.output.info(f"Updating parent of '{branch}' to '{new_parent}'.")
            self.store.set_parent(branch, new_parent)
            self._forget_deleted(old_parent)
            self._retarget_review(branch, new_parent)
        for branch in result.pending_deletions:
            self.store.clear_parent(branch)

        if result.unmerged:
            self.output.step(f"Rebasing remaining stack onto '{self.base_branch}'...")
            self._rebase_and_finish("sync", origin, self.remote_base, result.unmerged,
                                    upstreams=upstreams, pending_deletions=result.pending_deletions)
        else:
            self.output.warning("All branches in the stack were merged. Nothing left to rebase.")
            self.journal.begin("sync", origin, pending_deletions=result.pending_deletions)
            self.journal.finish()

    def push(self) -> List[str]:
        """Force-push (with lease) every stack branch whose remote copy is stale."""
        current = self._guard_context("push")
        self.output.step("Collecting all branches in the stack...")
        stack = self.graph.full_stack(current)
        if not stack:
            raise PreconditionError("No stack branches found to push.")
        to_push = [b for b in stack if branch_needs_push(self.git_cmd, self.remote, b)]
        if not to_push:
            self.output.success("All stack branches already match the remote.")
            return []

        self.output.line("Will force-push the following branches:")
        for branch in to_push:
            self.output.info(branch)
        if not self.confirm("Are you sure?"):
            self.output.warning("Push cancelled.")
            return []
        self.output.step("Pushing with --force-with-lease...")
        self.git_cmd.push_force_with_lease(self.remote, to_push)
        self.output.success("All branches pushed.")
        return to_push

    # GitHub integration

    def submit(self) -> None:
        """Create PRs bottom to top for stack branches that lack one."""
        current = self._guard_context("submit")
        github = self._require_github()
        self.output.step("Syncing stack with GitHub...")

        for branch in self.graph.full_stack(current):
            review_id = self.store.get_review_id(branch)
            if review_id is not None:
                self.output.info(f"PR #{review_id} already exists for branch '{branch}'.")
                continue
            parent = self.store.get_parent(branch) or self.base_branch
            if self.git_cmd.commit_count(parent, branch) == 0:
                self.output.warning(f"Skipping PR for '{branch}': No new commits compared to '{parent}'.")
                continue
            existing = github.find_open_request(branch)
            if existing is not None:
                self.store.set_review_id(branch, existing)
                self.output.success(f"Linked existing PR #{existing} for '{branch}'.")
                continue

            self.output.step(f"Creating PR for '{branch}'...")
            self.git_cmd.push_force_with_lease(self.remote, [branch])
            title = self.git_cmd.commit_subject(branch)
            review_id = github.create_request(title, branch, parent)
            self.store.set_review_id(branch, review_id)
            self.output.success(f"Created PR #{review_id} for '{branch}'.")
        self.output.success("Stack submission complete.")

    def open_pr(self) -> None:
        """Open the current branch's PR in a browser."""
        current = self._guard_context("pr")
        github = self._require_github()
        review_id = self.store.get_review_id(current)
        if review_id is None:
            raise PreconditionError(f"No pull request found for branch '{current}'.",
                                    suggestion="Run 'gss submit' to create one.")
        self.output.step(f"Opening PR #{review_id} for branch '{current}' in browser...")
        github.open_in_browser(review_id)

    # Inspection and navigation

    def status(self, as_json: bool = False) -> Optional[StackStatus]:
        """Report where each stack branch stands and what to do next."""
        current = self._guard_context("status")
        if not as_json:
            self.output.step("Gathering stack status...")
        self.git_cmd.fetch(self.remote)
        stack = self.graph.full_stack(current)
        if not stack:
            self.output.warning("Not currently in a stack. Nothing to show.")
            self.output.suggestion("Run 'gss create <branch-name>' to start a new stack.")
            return None

        status = collect_status(self.git_cmd, self.store, self.github, stack, self.base_branch, self.remote)
        if as_json:
            print_json(status.to_json(), file=self.output.file)
            return status

        self.output.header(f"Stack: {stack[0]} ({len(stack)} branches)")
        if status.base_behind > 0:
            base_state = f"🟡 Behind by {status.base_behind}"
        elif status.base_ahead > 0:
            base_state = f"🟡 Ahead by {status.base_ahead}"
        else:
            base_state = f"🟢 Up to date with {self.remote}"
        self.output.step(f"{self.base_branch} ({base_state})")
        self.output.line()

        for entry in status.branches:
            marker = " *" if entry.current else ""
            self.output.step(f"{entry.name}{marker} (parent: {entry.parent})")
            if entry.behind_parent:
                state = f"🟡 Behind '{entry.parent}' ({entry.behind_parent} commits)"
            elif not entry.on_remote:
                state = "⚪ Not on remote"
            elif entry.needs_push:
                state = "🟡 Needs push (local history has changed)"
            else:
                state = "🟢 Synced"
            self.output.line(f"   ├─ Status: {state}")
            self.output.line(f"   └─ PR:     {self._pr_line(entry.review_id, entry.pr_state, entry.pr_url)}")
            self.output.line()

        advice = status.next_step()
        if advice:
            self.output.warning(advice["warning"])
            self.output.suggestion(advice["suggestion"])
        else:
            self.output.success(f"Stack is up to date with '{self.base_branch}' and remote.")
        return status

    def _pr_line(self, review_id: Optional[int], state: Optional[PRState], url: Optional[str]) -> str:
        if review_id is None:
            return "⚪ No PR submitted"
        if state is None or state == PRState.NOT_FOUND:
            return f"🟡 Could not fetch status for PR #{review_id}"
        line = f"{PR_BADGES[state]} #{review_id}: {state.value}"
        if state == PRState.OPEN and url:
            line += f" - {url}"
        return line

    def list_stacks(self) -> List[Tuple[str, int]]:
        """List every stack root with its branch count."""
        self.output.step("Finding all available stacks...")
        stacks = [(root, self.graph.stack_size(root)) for root in self.graph.all_stack_roots()]
        if not stacks:
            self.output.warning("No gss stacks found.")
            self.output.suggestion(f"Run 'gss create <branch-name>' from '{self.base_branch}' to start a new stack.")
            return []
        self.output.success("Found stack(s):")
        for root, size in stacks:
            self.output.info(f"- {root} ({size} branches)")
        self.output.suggestion("Run 'git checkout <branch>' to switch to a stack and see its status.")
        return stacks

    def up(self) -> None:
        current = self._guard_context("up")
        child = self.graph.live_child(current)
        if child is None:
            self.output.warning("No child branch found. You are at the top of the stack.")
            return
        self.git_cmd.checkout(child)
        self.output.success(f"Checked out child branch: {child}")

    def down(self) -> None:
        current = self._guard_context("down")
        parent = self.store.get_parent(current)
        assert parent is not None
        self.git_cmd.checkout(parent)
        self.output.success(f"Checked out parent branch: {parent}")

    # Housekeeping

    def clean(self, metadata: bool = False) -> None:
        """Remove saved operation state, and optionally every stack edge and review link."""
        if metadata:
            self.output.warning("You are about to permanently delete all gss metadata for this repository.")
            self.output.info("This includes every parent link and PR link, and any saved state "
                             "for interrupted commands.")
        else:
            self.output.warning("You are about to delete the saved state for interrupted gss commands.")
        self.output.info("This will NOT delete your branches or commits.")
        if not self.confirm("Are you sure you want to continue?"):
            self.output.warning("Clean cancelled.")
            return

        self.output.step("Cleaning gss metadata...")
        if self.journal.clear():
            self.output.info("Removed operation state file.")
        if metadata:
            count = self.store.clear_all()
            self.output.info(f"Removed stack metadata for {count} branches.")
        self.output.success("Clean complete.")
