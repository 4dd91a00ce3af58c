"""Wrap PyGithub objects so they satisfy the protocols in pygss.github."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from github import Github, GithubException, UnknownObjectException
from github.GithubObject import NotSet
from github.PullRequest import PullRequest
from github.Repository import Repository

from . import NotFoundError, GitHubRefProtocol, GitHubPullRequestProtocol, GitHubRepoProtocol, PyGithubProtocol

logger = logging.getLogger(__name__)


def _or_not_set(value: Optional[str]) -> Any:
    """PyGithub wants NotSet, not None or "", for arguments left out."""
    return value if value else NotSet


@contextmanager
def _not_found_as(what: str) -> Iterator[None]:
    try:
        yield
    except UnknownObjectException as e:
        raise NotFoundError(f"{what} not found") from e
    except GithubException as e:
        logger.debug(f"GitHub call for {what} failed with status {e.status}: {e.data}")
        raise


class PyGithubPullRequestAdapter(GitHubPullRequestProtocol):
    """A PyGithub PullRequest seen through GitHubPullRequestProtocol."""

    def __init__(self, pr: PullRequest) -> None:
        self._pr = pr

    number = property(lambda self: self._pr.number)
    title = property(lambda self: self._pr.title)
    state = property(lambda self: self._pr.state)
    merged = property(lambda self: self._pr.merged)
    html_url = property(lambda self: self._pr.html_url)

    @property
    def base(self) -> GitHubRefProtocol:
        return self._pr.base

    @property
    def head(self) -> GitHubRefProtocol:
        return self._pr.head

    def edit(self, title: Optional[str] = None, body: Optional[str] = None,
             state: Optional[str] = None, base: Optional[str] = None) -> None:
        with _not_found_as(f"PR #{self.number}"):
            self._pr.edit(title=_or_not_set(title), body=_or_not_set(body),
                          state=_or_not_set(state), base=_or_not_set(base))


class PyGithubRepoAdapter(GitHubRepoProtocol):
    """A PyGithub Repository seen through GitHubRepoProtocol."""

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def get_pull(self, number: int) -> GitHubPullRequestProtocol:
        with _not_found_as(f"PR #{number}"):
            return PyGithubPullRequestAdapter(self._repo.get_pull(number))

    def get_pulls(self, state: str = "open", head: str = "", base: str = "") -> List[GitHubPullRequestProtocol]:
        with _not_found_as(f"pull requests of {self._repo.full_name}"):
            pulls = self._repo.get_pulls(state=state, head=_or_not_set(head), base=_or_not_set(base))
            return [PyGithubPullRequestAdapter(pr) for pr in pulls]

    def create_pull(self, title: str, body: str, base: str, head: str) -> GitHubPullRequestProtocol:
        with _not_found_as(f"branch '{head}' or '{base}'"):
            return PyGithubPullRequestAdapter(self._repo.create_pull(title=title, body=body, base=base, head=head))


class PyGithubAdapter(PyGithubProtocol):
    """The Github client seen through PyGithubProtocol."""

    def __init__(self, github: Github) -> None:
        self._github = github

    def get_repo(self, full_name_or_id: str) -> GitHubRepoProtocol:
        with _not_found_as(f"repository {full_name_or_id}"):
            return PyGithubRepoAdapter(self._github.get_repo(full_name_or_id))
