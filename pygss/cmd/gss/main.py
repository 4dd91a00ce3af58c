"""Command line interface: `gss <command>`."""

import os
import logging
from typing import Any, Optional, Tuple

import click
from click import Context

from ... import setup_logging
from ...config import Config, default_config
from ...config.config_parser import parse_config
from ...errors import ConflictPause, GssError
from ...git import RealGit
from ...github import GitHubClient, create_github_client
from ...gss import StackManager
from ...pretty import Output

logger = logging.getLogger(__name__)

ALIASES = {
    'ls': 'list',
    'st': 'status',
}

CONFLICT_STEPS = [
    "Open the conflicting files and resolve the issues.",
    "Run 'git add <resolved-files>'.",
    "Run 'git rebase --continue'.",
    "Once the git rebase process is fully complete, run 'gss continue'.",
]

class GssGroup(click.Group):
    """Resolves short aliases and turns GssError into a report plus exit status 1."""

    def get_command(self, ctx: Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def invoke(self, ctx: Context) -> Any:
        try:
            return super().invoke(ctx)
        except GssError as e:
            logger.debug("Command failed", exc_info=True)
            obj = ctx.find_object(dict) or {}
            report_error(e, obj.get('output') or Output())
            ctx.exit(1)

def report_error(err: GssError, output: Output) -> None:
    output.line()
    output.error(err.message)
    if isinstance(err, ConflictPause):
        output.info("Please follow these steps to resolve:")
        output.numbered(CONFLICT_STEPS)
    elif err.suggestion:
        output.suggestion(err.suggestion)

def load_environment(directory: Optional[str] = None,
                     auto_confirm: bool = False) -> Tuple[Config, RealGit, Optional[GitHubClient]]:
    """Locate the repository, read its config and connect to GitHub if a token exists."""
    if directory:
        os.chdir(directory)

    # Default config is enough to find the git dir that holds .gss.yaml
    probe = RealGit(default_config())
    probe.git_dir()
    config = Config(parse_config(probe))
    config.user.auto_confirm = config.user.auto_confirm or auto_confirm
    return config, RealGit(config), create_github_client(config)

def confirm_prompt(question: str) -> bool:
    return click.confirm(question, default=False)

def get_manager(ctx: Context) -> StackManager:
    """The StackManager for this invocation; built on first use."""
    obj = ctx.obj
    if 'manager' not in obj:
        config, git_cmd, github = load_environment(obj.get('directory'), obj.get('yes', False))
        config.tool.pretend = config.tool.pretend or bool(obj.get('pretend'))
        obj['manager'] = StackManager(config, git_cmd, github, confirm_prompt, obj['output'])
    manager: StackManager = obj['manager']
    return manager

@click.group(cls=GssGroup)
@click.option('-y', '--yes', is_flag=True, help="Automatically answer 'yes' to all prompts")
@click.option('-C', '--directory', type=click.Path(exists=True, file_okay=False, dir_okay=True),
              help='Run as if gss was started in DIRECTORY instead of the current working directory')
@click.option('-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")
@click.option('--pretend', is_flag=True, help="Don't actually push, just show what would happen")
@click.pass_context
def cli(ctx: Context, yes: bool, directory: Optional[str], verbose: int, pretend: bool) -> None:
    """gss - manage stacked Git branches with GitHub integration."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj.update({'yes': yes, 'directory': directory, 'pretend': pretend})
    ctx.obj.setdefault('output', Output())

# Stack & branch management

@cli.command(name="create", help="Create a new branch on top of the current one")
@click.argument('branch_name')
@click.pass_context
def create(ctx: Context, branch_name: str) -> None:
    get_manager(ctx).create(branch_name)

@cli.group(name="track", help="Manage stack metadata for the current branch")
def track() -> None:
    pass

@track.command(name="set", help="Set the parent of the current branch (defaults to the base branch)")
@click.argument('parent', required=False)
@click.pass_context
def track_set(ctx: Context, parent: Optional[str]) -> None:
    get_manager(ctx).track_set(parent)

@track.command(name="remove", help="Stop tracking the current branch")
@click.pass_context
def track_remove(ctx: Context) -> None:
    get_manager(ctx).track_remove()

@cli.command(name="insert", help="Insert a new branch after (or before) the current one")
@click.option('--before', is_flag=True, help="Insert before the current branch instead of after it")
@click.argument('branch_name')
@click.pass_context
def insert(ctx: Context, before: bool, branch_name: str) -> None:
    get_manager(ctx).insert(branch_name, before=before)

@cli.command(name="squash", help="Squash stacked branches together")
@click.option('--into', type=click.Choice(['parent', 'child']), default='parent', show_default=True,
              help="Squash the current branch into its parent, or its child into it")
@click.option('-m', '--message', help="Commit message for the squashed commit")
@click.pass_context
def squash(ctx: Context, into: str, message: Optional[str]) -> None:
    get_manager(ctx).squash(into=into, message=message)

@cli.command(name="delete", help="Delete a tracked branch and restack the branches above it")
@click.argument('branch_name', required=False)
@click.pass_context
def delete(ctx: Context, branch_name: Optional[str]) -> None:
    get_manager(ctx).delete(branch_name)

# History & synchronization

@cli.command(name="amend", help="Amend all changes into the last commit and restack")
@click.pass_context
def amend(ctx: Context) -> None:
    get_manager(ctx).amend()

@cli.command(name="restack", help="Rebase branches above the current one after making changes")
@click.pass_context
def restack(ctx: Context) -> None:
    get_manager(ctx).restack()

@cli.command(name="sync", help="Rebase the stack onto the latest base branch and clean up merged branches")
@click.pass_context
def sync(ctx: Context) -> None:
    get_manager(ctx).sync()

@cli.command(name="continue", help="Resume a gss operation after resolving a rebase conflict")
@click.pass_context
def continue_cmd(ctx: Context) -> None:
    get_manager(ctx).continue_operation()

@cli.command(name="push", help="Force-push the stack's branches to the remote")
@click.pass_context
def push(ctx: Context) -> None:
    get_manager(ctx).push()

# GitHub integration

@cli.command(name="submit", help="Create GitHub PRs for all branches in the stack")
@click.pass_context
def submit(ctx: Context) -> None:
    get_manager(ctx).submit()

@cli.command(name="pr", help="Open the GitHub PR for the current branch in your browser")
@click.pass_context
def pr(ctx: Context) -> None:
    get_manager(ctx).open_pr()

# Inspection & navigation

@cli.command(name="status", help="Display the status of the current stack")
@click.option('--json', 'as_json', is_flag=True, help="Print machine-readable JSON")
@click.pass_context
def status(ctx: Context, as_json: bool) -> None:
    get_manager(ctx).status(as_json=as_json)

@cli.command(name="list", help="List all stacks")
@click.pass_context
def list_cmd(ctx: Context) -> None:
    get_manager(ctx).list_stacks()

@cli.command(name="up", help="Check out the child branch")
@click.pass_context
def up(ctx: Context) -> None:
    get_manager(ctx).up()

@cli.command(name="down", help="Check out the parent branch")
@click.pass_context
def down(ctx: Context) -> None:
    get_manager(ctx).down()

@cli.command(name="clean", help="Remove saved operation state (and, with --metadata, all stack links)")
@click.option('--metadata', is_flag=True, help="Also remove every parent and PR link")
@click.pass_context
def clean(ctx: Context, metadata: bool) -> None:
    get_manager(ctx).clean(metadata=metadata)


def main() -> None:
    """Main entry point."""
    cli(obj={})

if __name__ == "__main__":
    main()
