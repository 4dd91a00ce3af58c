"""Config parser logic."""

import copy
from pathlib import Path
from typing import Dict, Optional, Tuple, Any
import logging
import yaml

from .. import DEFAULTS
from ...errors import GitError
from ...typing import GitInterface

# Get module logger
logger = logging.getLogger(__name__)

RepoConfig = Dict[str, Any]  # Use Any since yaml can return various types
Config = Dict[str, RepoConfig]

REPO_CONFIG_FILE = ".gss.yaml"

def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from path, returning {} if it does not exist."""
    try:
        with open(path, 'r') as f:
            logger.info(f"Found {path}, loading...")
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a mapping at top level")
        return {}
    return data

def parse_remote_url(remote_url: str) -> Optional[Tuple[str, str]]:
    """Extract (owner, name) from an SSH or HTTPS remote URL."""
    remote_url = remote_url.strip()
    if "://" in remote_url:
        # HTTPS format: https://github.com/owner/repo.git
        repo_part = remote_url.split("://", 1)[1].split("/", 1)[-1]
    elif "@" in remote_url and ":" in remote_url:
        # SSH format: git@github.com:owner/repo.git
        repo_part = remote_url.split(":")[-1]
    else:
        return None

    if repo_part.endswith(".git"):
        repo_part = repo_part[:-len(".git")]
    parts = [p for p in repo_part.split("/") if p]
    if len(parts) < 2:
        return None
    return parts[-2], parts[-1]

def parse_config(git_cmd: GitInterface, repo_root: Optional[Path] = None) -> Config:
    """Parse config from defaults, the user config file and the repository config file."""
    config: Config = copy.deepcopy(DEFAULTS)
    config['repo']['github_host'] = 'github.com'

    user_file = _load_yaml(Path(internal_config_file_path()))
    if isinstance(user_file.get('user'), dict):
        config['user'].update(user_file['user'])

    if repo_root is None:
        repo_root = git_cmd.git_dir().parent
    repo_file = _load_yaml(repo_root / REPO_CONFIG_FILE)
    if isinstance(repo_file.get('repo'), dict):
        config['repo'].update(repo_file['repo'])
    if isinstance(repo_file.get('user'), dict):
        logger.info(f"Adding user config: {repo_file['user']}")
        config['user'].update(repo_file['user'])
    logger.debug(f"Config after files: {config}")

    remote = config['repo']['remote']

    # Fall back to the remote's default branch when the repo file is silent
    if 'base_branch' not in repo_file.get('repo', {}):
        try:
            head = git_cmd.run_cmd(f"symbolic-ref --short refs/remotes/{remote}/HEAD").strip()
            if head.startswith(f"{remote}/"):
                config['repo']['base_branch'] = head[len(remote) + 1:]
        except GitError as e:
            logger.debug(f"No remote HEAD for {remote}: {e}")

    # Try to extract repo owner/name from git remote if not in config
    if not config['repo'].get('github_repo_owner') or not config['repo'].get('github_repo_name'):
        remote_url = git_cmd.remote_url(remote)
        parsed = parse_remote_url(remote_url) if remote_url else None
        if parsed:
            owner, name = parsed
            if not config['repo'].get('github_repo_owner'):
                config['repo']['github_repo_owner'] = owner
            if not config['repo'].get('github_repo_name'):
                config['repo']['github_repo_name'] = name
        else:
            logger.info(f"Could not determine GitHub repository from remote '{remote}'")

    return config

def internal_config_file_path() -> str:
    """Get path to the per-user config file."""
    return str(Path.home() / ".gss.yml")
