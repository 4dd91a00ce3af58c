"""GitHub pull requests as the review service behind a stack."""

import os
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, runtime_checkable

import click
import yaml

from ..config.models import GssConfig
from ..errors import PreconditionError, RemoteServiceError
from ..typing import PRState, ReviewId
from .types import PullRequestInfo, state_from_github

logger = logging.getLogger(__name__)

GH_HOSTS_FILE = Path(".config") / "gh" / "hosts.yml"


# The client only talks to these shapes, so PyGithub (via .adapters) and the
# in-memory fake in the tests are interchangeable.
@runtime_checkable
class GitHubRefProtocol(Protocol):
    """One side of a pull request: the branch name and its commit."""
    @property
    def ref(self) -> str: ...

    @property
    def sha(self) -> str: ...


@runtime_checkable
class GitHubPullRequestProtocol(Protocol):
    @property
    def number(self) -> int: ...

    @property
    def title(self) -> str: ...

    @property
    def state(self) -> str:
        """'open' or 'closed'; a merged PR is closed with merged set."""
        ...

    @property
    def merged(self) -> bool: ...

    @property
    def html_url(self) -> str: ...

    @property
    def base(self) -> GitHubRefProtocol: ...

    @property
    def head(self) -> GitHubRefProtocol: ...

    def edit(self, title: Optional[str] = None, body: Optional[str] = None, state: Optional[str] = None,
             base: Optional[str] = None) -> None:
        """Change any of the given fields; None leaves a field alone."""
        ...


@runtime_checkable
class GitHubRepoProtocol(Protocol):
    def get_pull(self, number: int) -> GitHubPullRequestProtocol: ...

    def get_pulls(self, state: str = "open", head: str = "", base: str = "") -> List[GitHubPullRequestProtocol]:
        """List PRs; head is 'owner:branch' as in the REST API."""
        ...

    def create_pull(self, title: str, body: str, base: str, head: str) -> GitHubPullRequestProtocol: ...


@runtime_checkable
class PyGithubProtocol(Protocol):
    def get_repo(self, full_name_or_id: str) -> GitHubRepoProtocol: ...


class NotFoundError(Exception):
    """A pull request or repository that GitHub does not know."""


def _token_from_gh_cli() -> Optional[str]:
    path = Path.home() / GH_HOSTS_FILE
    if not path.exists():
        return None
    try:
        with open(path) as f:
            hosts = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error reading gh CLI config {path}: {e}")
        return None
    token = (hosts.get("github.com") or {}).get("oauth_token")
    return token if isinstance(token, str) and token else None


def find_github_token() -> Optional[str]:
    """GITHUB_TOKEN wins; otherwise fall back to the token the gh CLI stored."""
    return os.environ.get("GITHUB_TOKEN") or _token_from_gh_cli()

@contextmanager
def _remote_call(failure: str) -> Iterator[None]:
    """Turn anything the GitHub layer raises, other than NotFoundError, into RemoteServiceError."""
    try:
        yield
    except (NotFoundError, RemoteServiceError):
        raise
    except Exception as e:
        if getattr(e, "status", None) == 404:
            raise NotFoundError(str(e)) from e
        raise RemoteServiceError(f"{failure}: {e}") from e


class GitHubClient:
    """Pull requests of one GitHub repository, keyed by ReviewId.

    The repository is looked up lazily so commands that never touch GitHub
    work without a configured owner/name.
    """

    def __init__(self, config: GssConfig, github_client: PyGithubProtocol):
        self.config = config
        self.client = github_client
        self._repo: Optional[GitHubRepoProtocol] = None

    @property
    def full_name(self) -> str:
        owner = self.config.repo.github_repo_owner
        name = self.config.repo.github_repo_name
        if not owner or not name:
            raise PreconditionError(
                "Could not determine the GitHub repository for this checkout.",
                suggestion="Set repo.github_repo_owner and repo.github_repo_name in .gss.yaml.",
            )
        return f"{owner}/{name}"

    @property
    def repo(self) -> GitHubRepoProtocol:
        if self._repo is None:
            full_name = self.full_name
            try:
                self._repo = self.client.get_repo(full_name)
            except Exception as e:
                raise RemoteServiceError(f"Could not open GitHub repository {full_name}: {e}") from e
        return self._repo

    def _pull(self, review_id: ReviewId) -> GitHubPullRequestProtocol:
        """Fetch a PR; NotFoundError if GitHub has no such number."""
        repo = self.repo
        with _remote_call(f"Failed to fetch PR #{review_id}"):
            return repo.get_pull(int(review_id))

    def _existing_pull(self, review_id: ReviewId) -> GitHubPullRequestProtocol:
        try:
            return self._pull(review_id)
        except NotFoundError as e:
            raise RemoteServiceError(f"PR #{review_id} not found") from e

    def find_open_request(self, branch: str) -> Optional[ReviewId]:
        head = f"{self.config.repo.github_repo_owner}:{branch}"
        logger.info(f"> github list open PRs with head {head}")
        repo = self.repo
        with _remote_call(f"Failed to list pull requests for '{branch}'"):
            pulls = list(repo.get_pulls(state='open', head=head))
        match = next((pr for pr in pulls if pr.head.ref == branch), None)
        if match is None:
            return None
        logger.debug(f"Found PR #{match.number} for branch {branch}")
        return ReviewId(match.number)

    def get_request_status(self, review_id: ReviewId) -> PRState:
        logger.info(f"> github get state of #{review_id}")
        try:
            pr = self._pull(review_id)
        except NotFoundError:
            return PRState.NOT_FOUND
        return state_from_github(pr.state, pr.merged)

    def get_request_info(self, review_id: ReviewId) -> Optional[PullRequestInfo]:
        """Snapshot of a PR for display, None if it does not exist."""
        try:
            pr = self._pull(review_id)
        except NotFoundError:
            return None
        return PullRequestInfo(
            number=pr.number,
            title=pr.title,
            state=state_from_github(pr.state, pr.merged),
            base_ref=pr.base.ref,
            head_ref=pr.head.ref,
            url=pr.html_url,
        )

    def create_request(self, title: str, head_branch: str, base_branch: str) -> ReviewId:
        logger.info(f"> github create PR {head_branch} -> {base_branch} : {title}")
        repo = self.repo
        with _remote_call(f"Failed to create PR for '{head_branch}'"):
            pr = repo.create_pull(title=title, body="", base=base_branch, head=head_branch)
        return ReviewId(pr.number)

    def update_request_base(self, review_id: ReviewId, new_base_branch: str) -> None:
        logger.info(f"> github update #{review_id} base -> {new_base_branch}")
        pr = self._existing_pull(review_id)
        with _remote_call(f"Failed to update base of PR #{review_id}"):
            pr.edit(base=new_base_branch)

    def close_request(self, review_id: ReviewId) -> None:
        logger.info(f"> github close #{review_id}")
        pr = self._existing_pull(review_id)
        with _remote_call(f"Failed to close PR #{review_id}"):
            pr.edit(state="closed")

    def open_in_browser(self, review_id: ReviewId) -> None:
        click.launch(self._existing_pull(review_id).html_url)


def create_github_client(config: GssConfig) -> Optional[GitHubClient]:
    """A client backed by PyGithub, or None when no token can be found."""
    token = find_github_token()
    if not token:
        logger.info("No GitHub token found; GitHub features are disabled")
        return None

    from github import Auth, Github
    from .adapters import PyGithubAdapter

    host = config.repo.github_host
    kwargs = {} if host == "github.com" else {"base_url": f"https://{host}/api/v3"}
    return GitHubClient(config, PyGithubAdapter(Github(auth=Auth.Token(token), **kwargs)))
