"""GitHub REST API client.

A thin, synchronous wrapper over ``httpx.Client`` covering the endpoints
the bot needs: tags, pull request commits, git refs, releases and issue
comments. Listing endpoints are paginated through the ``Link`` header.

Connection failures are retried by the transport; HTTP error statuses are
raised as GitHubAPIError without retrying.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

import httpx

from release_tag_bot import __version__
from release_tag_bot.config.models import DEFAULT_API_URL
from release_tag_bot.exceptions import GitHubAPIError, GitHubNotFoundError, TagAlreadyExistsError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
PER_PAGE = 100
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3


class GitHubClient:
    """Client bound to a single repository.

    Example:
        with GitHubClient(token, "octo", "widgets") as client:
            tags = client.list_tags()
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create a client.

        Args:
            token: Token sent as a bearer credential
            owner: Repository owner
            repo: Repository name
            api_url: REST API base URL (GitHub Enterprise uses its own)
            timeout: Per-request timeout in seconds
            retries: Connection retries performed by the transport
            transport: Custom transport, mainly for tests
        """
        self.owner = owner
        self.repo = repo
        self._http = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"release-tag-bot/{__version__}",
            },
            timeout=timeout,
            transport=transport or httpx.HTTPTransport(retries=retries),
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    # -------------------------------------------------------------------------
    # Transport helpers
    # -------------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        response = self._http.request(method, url, **kwargs)
        if response.is_error:
            raise _error_from_response(response)
        return response

    def _paginate(self, url: str, params: dict[str, Any] | None = None) -> Iterator[Any]:
        """Yield items from every page of a list endpoint."""
        next_url: str | None = url
        next_params: dict[str, Any] | None = {"per_page": PER_PAGE, **(params or {})}

        while next_url:
            response = self._request("GET", next_url, params=next_params)
            yield from response.json()
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            next_params = None

    # -------------------------------------------------------------------------
    # Tags and commits
    # -------------------------------------------------------------------------

    def list_tags(self) -> list[str]:
        """Names of every tag in the repository."""
        return [tag["name"] for tag in self._paginate(f"{self._repo_path}/tags") if tag.get("name")]

    def list_pull_commit_messages(self, number: int) -> list[str]:
        """Messages of every commit in a pull request, oldest first."""
        return [
            (item.get("commit") or {}).get("message") or ""
            for item in self._paginate(f"{self._repo_path}/pulls/{number}/commits")
        ]

    def get_commit_message(self, ref: str) -> str:
        """Message of a single commit."""
        data = self._request("GET", f"{self._repo_path}/commits/{ref}").json()
        return (data.get("commit") or {}).get("message") or ""

    # -------------------------------------------------------------------------
    # Refs
    # -------------------------------------------------------------------------

    def tag_exists(self, tag: str) -> bool:
        """Check whether ``refs/tags/<tag>`` exists.

        Raises:
            GitHubAPIError: For errors other than 404
        """
        try:
            self._request("GET", f"{self._repo_path}/git/ref/tags/{tag}")
        except GitHubNotFoundError:
            return False
        return True

    def create_tag(self, tag: str, sha: str) -> dict[str, Any]:
        """Create a lightweight tag ref pointing at ``sha``.

        Raises:
            TagAlreadyExistsError: If the ref appeared since it was checked
            GitHubAPIError: For any other failure
        """
        try:
            response = self._request(
                "POST",
                f"{self._repo_path}/git/refs",
                json={"ref": f"refs/tags/{tag}", "sha": sha},
            )
        except GitHubAPIError as e:
            if e.status_code == 422 and "already exists" in str(e).lower():
                raise TagAlreadyExistsError(tag) from e
            raise
        return response.json()

    # -------------------------------------------------------------------------
    # Releases
    # -------------------------------------------------------------------------

    def get_release_by_tag(self, tag: str) -> dict[str, Any] | None:
        """Release attached to ``tag``, or None if there is none."""
        try:
            return self._request("GET", f"{self._repo_path}/releases/tags/{tag}").json()
        except GitHubNotFoundError:
            return None

    def create_release(
        self,
        tag: str,
        target_commitish: str,
        *,
        generate_release_notes: bool = False,
        make_latest: bool = False,
    ) -> dict[str, Any]:
        """Publish a release named after its tag."""
        payload = {
            "tag_name": tag,
            "target_commitish": target_commitish,
            "name": tag,
            "generate_release_notes": generate_release_notes,
            "draft": False,
            "prerelease": False,
            "make_latest": "true" if make_latest else "false",
        }
        return self._request("POST", f"{self._repo_path}/releases", json=payload).json()

    # -------------------------------------------------------------------------
    # Issue comments
    # -------------------------------------------------------------------------

    def list_issue_comments(self, number: int) -> list[dict[str, Any]]:
        return list(self._paginate(f"{self._repo_path}/issues/{number}/comments"))

    def create_issue_comment(self, number: int, body: str) -> dict[str, Any]:
        return self._request(
            "POST", f"{self._repo_path}/issues/{number}/comments", json={"body": body}
        ).json()

    def update_issue_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        return self._request(
            "PATCH", f"{self._repo_path}/issues/comments/{comment_id}", json={"body": body}
        ).json()


def _error_from_response(response: httpx.Response) -> GitHubAPIError:
    try:
        detail = response.json().get("message")
    except (ValueError, AttributeError):
        detail = None
    detail = detail or response.reason_phrase or "request failed"

    message = (
        f"GitHub API {response.request.method} {response.request.url.path} "
        f"failed with status {response.status_code}: {detail}"
    )
    error_cls = GitHubNotFoundError if response.status_code == 404 else GitHubAPIError
    return error_cls(message, status_code=response.status_code)
