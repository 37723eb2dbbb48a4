"""GitHub API client for maintaining the checklist comment and commit status."""

from functools import partial
from typing import Any
from urllib.parse import urljoin

import requests

from ..config import get_github_headers, get_settings
from ..models import TrackedComment
from ..utils import LoggerMixin
from .retry import DEFAULT_PER_PAGE, paginate, safe_api_call


class GitHubAPIClient(LoggerMixin):
    """GitHub API client with retry and rate limit handling."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        retries: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
        sleep: Any = None,  # noqa: ANN401
    ) -> None:
        """Initialize GitHub API client.

        Args:
        ----
            access_token: GitHub token used for authentication
            base_url: API root, defaults to the configured ``GITHUB_API_URL``
            retries: Additional attempts for network failures
            retry_delay: Base backoff delay in seconds
            timeout: Per-request timeout in seconds
            sleep: Function used to wait between retries

        """
        settings = get_settings()
        self.access_token = access_token if access_token is not None else settings.github_token
        self.base_url = (base_url or settings.github_api_url).rstrip("/") + "/"
        self.retries = settings.max_github_retries if retries is None else retries
        self.retry_delay = settings.github_retry_delay if retry_delay is None else retry_delay
        self.timeout = settings.github_request_timeout if timeout is None else timeout
        self.sleep = sleep
        self.session = requests.Session()

        # Set up authentication
        self.session.headers.update(get_github_headers(self.access_token))
        if not self.access_token:
            self.logger.warning("No GitHub token provided, using unauthenticated requests")

    def _call(self, fn: Any) -> Any:  # noqa: ANN401
        """Run one remote call inside the retry envelope."""
        kwargs = {"retries": self.retries, "base_delay": self.retry_delay}
        if self.sleep is not None:
            kwargs["sleep"] = self.sleep
        return safe_api_call(fn, **kwargs)

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
        """Make a single HTTP request and raise on error status.

        Args:
        ----
            method: HTTP method (GET, POST, etc.)
            url: Request URL, absolute or relative to the API root
            **kwargs: Additional request parameters

        Returns:
        -------
            requests.Response: Response object

        Raises:
        ------
            requests.RequestException: If request fails

        """
        if not url.startswith(("http://", "https://")):
            url = urljoin(self.base_url, url.lstrip("/"))

        self.logger.debug("Making %s request to %s", method, url)

        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:  # noqa: ANN401
        return self._call(lambda: self._make_request(method, url, **kwargs).json())

    def list_changed_files(self, owner: str, repo: str, pr_number: int, page: int, per_page: int) -> list[str]:
        """Get one page of file names changed in a pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            page: 1-based page index
            per_page: Page size

        Returns:
        -------
            List of repository-relative file names

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"
        files = self._request_json("GET", url, params={"page": page, "per_page": per_page})
        return [f["filename"] for f in files]

    def get_changed_files(
        self, owner: str, repo: str, pr_number: int, per_page: int = DEFAULT_PER_PAGE,
    ) -> list[str]:
        """Get every file name changed in a pull request."""
        return paginate(partial(self.list_changed_files, owner, repo, pr_number), per_page)

    def list_comments(
        self, owner: str, repo: str, pr_number: int, per_page: int = DEFAULT_PER_PAGE,
    ) -> list[TrackedComment]:
        """Get the issue comments of a pull request.

        Only the first page is requested; the tracked comment is expected among
        the first ``per_page`` comments.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            per_page: Number of comments to fetch

        Returns:
        -------
            List of comments with their id and body

        """
        url = f"/repos/{owner}/{repo}/issues/{pr_number}/comments"
        comments = self._request_json("GET", url, params={"per_page": per_page})
        return [TrackedComment.from_github_data(c) for c in comments]

    def find_tracked_comment(self, owner: str, repo: str, pr_number: int, marker: str) -> TrackedComment | None:
        """Find the first comment whose body contains ``marker``."""
        for comment in self.list_comments(owner, repo, pr_number):
            if comment.body and marker in comment.body:
                return comment
        return None

    def create_comment(self, owner: str, repo: str, pr_number: int, body: str) -> TrackedComment:
        """Create a new comment on a pull request."""
        url = f"/repos/{owner}/{repo}/issues/{pr_number}/comments"
        data = self._request_json("POST", url, json={"body": body})
        return TrackedComment.from_github_data(data)

    def update_comment(self, owner: str, repo: str, comment_id: int, body: str) -> TrackedComment:
        """Replace the body of an existing comment."""
        url = f"/repos/{owner}/{repo}/issues/comments/{comment_id}"
        data = self._request_json("PATCH", url, json={"body": body})
        return TrackedComment.from_github_data(data)

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict:
        """Get pull request information.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            Pull request dictionary

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}"
        return self._request_json("GET", url)

    def get_head_sha(self, owner: str, repo: str, pr_number: int) -> str:
        """Get the SHA of the pull request's head commit."""
        return self.get_pull_request(owner, repo, pr_number)["head"]["sha"]

    def create_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        state: str,
        description: str,
        context: str,
    ) -> dict:
        """Publish a commit status.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            sha: Commit SHA
            state: One of ``success``, ``failure``, ``pending``, ``error``
            description: Short human readable description
            context: Label distinguishing this status from others on the commit

        Returns:
        -------
            Created status dictionary

        """
        url = f"/repos/{owner}/{repo}/statuses/{sha}"
        payload = {"state": state, "description": description, "context": context}
        return self._request_json("POST", url, json=payload)

    def set_commit_status(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        state: str,
        description: str,
        context: str,
    ) -> dict:
        """Publish a commit status on the head commit of a pull request."""
        sha = self.get_head_sha(owner, repo, pr_number)
        self.logger.debug("Publishing %s status on %s", state, sha)
        return self.create_commit_status(owner, repo, sha, state, description, context)
