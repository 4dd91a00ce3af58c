"""Shared fixtures for unit tests."""

import io
import logging
from pathlib import Path
from typing import List

import pytest

from pygss.config import Config
from pygss.github import GitHubClient
from pygss.gss import StackManager
from pygss.pretty import Output
from pygss.tests.fake_git import FakeGit
from pygss.tests.fake_pygithub import FakeGithub, FakeRepository

logger = logging.getLogger(__name__)


@pytest.fixture
def config() -> Config:
    return Config({
        'repo': {
            'remote': 'origin',
            'base_branch': 'main',
            'github_repo_owner': 'acme',
            'github_repo_name': 'widgets',
        },
        'user': {
            'auto_confirm': True,
        },
    })


@pytest.fixture
def git(tmp_path: Path) -> FakeGit:
    git_dir = tmp_path / ".git"
    git_dir.mkdir()
    return FakeGit(git_dir)


@pytest.fixture
def fake_github() -> FakeGithub:
    github = FakeGithub()
    github.add_repo("acme", "widgets")
    return github


@pytest.fixture
def fake_repo(fake_github: FakeGithub) -> FakeRepository:
    return fake_github.repos["acme/widgets"]


@pytest.fixture
def github(config: Config, fake_github: FakeGithub) -> GitHubClient:
    return GitHubClient(config, fake_github)


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def prompts() -> List[str]:
    """Questions asked through the confirm callback (only when auto-confirm is off)."""
    return []


@pytest.fixture
def manager(config: Config, git: FakeGit, github: GitHubClient, out: io.StringIO, prompts: List[str]) -> StackManager:
    def confirm(question: str) -> bool:
        prompts.append(question)
        return False
    return StackManager(config, git, github, confirm, Output(out))
