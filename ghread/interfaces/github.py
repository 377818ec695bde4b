"""Response shapes and the fetch capability protocol.

The record types describe the documented subset of the GitHub REST payloads
that callers rely on. Responses are returned verbatim, so extra fields are
present at runtime and documented fields may be missing.
"""

from typing import Any, NotRequired, Protocol, TypedDict, runtime_checkable


class GitHubLabel(TypedDict):
    """A label attached to an issue."""

    name: str


class GitHubUserSummary(TypedDict):
    """Author block embedded in an issue payload."""

    login: str
    html_url: str


class GitHubPullRequestRef(TypedDict):
    """Present on issues that are actually pull requests."""

    html_url: str


class GitHubIssueResponse(TypedDict):
    """Payload of GET repos/{repo}/issues/{number}.

    Attributes:
        number: Issue number
        title: Issue title
        pull_request: Only present when the issue is a pull request
        labels: Labels on the issue
        user: Issue author
    """

    number: int
    title: str
    pull_request: NotRequired[GitHubPullRequestRef]
    labels: list[GitHubLabel]
    user: GitHubUserSummary


class GitHubUserResponse(TypedDict):
    """Payload of GET users/{login}."""

    login: str
    name: str | None
    html_url: str


@runtime_checkable
class FetchResponse(Protocol):
    """Result of a single fetch.

    Attributes:
        ok: True for a success (2xx) status
        status: Numeric HTTP status
        status_text: Reason phrase (e.g., "Not Found")
    """

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    def json(self) -> Any:
        """Decode the body as JSON."""
        ...


@runtime_checkable
class Fetcher(Protocol):
    """Capability that performs an HTTP GET.

    Implementations own any caching semantics. The cache directory is an
    opaque hint; None disables caching.
    """

    def __call__(
        self,
        url: str,
        headers: dict[str, str],
        cache_dir: str | None = None,
    ) -> FetchResponse: ...
