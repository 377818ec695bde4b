"""Read client for the GitHub REST API.

Works against github.com or a GitHub Enterprise Server. Each public
operation is one independent GET; the client's state is fixed at
construction, so one instance can be shared between threads.
"""

import json
import time
from typing import Any
from urllib.parse import urlsplit

from ghread.clients.base import (
    GITHUB_VARIANT,
    ConfigurationError,
    host_variant,
    missing_credential_message,
    resolve_cache_dir,
    resolve_host,
)
from ghread.interfaces import Fetcher, GitHubIssueResponse, GitHubUserResponse
from ghread.logger import get_logger
from ghread.telemetry import get_tracer, record_request

logger = get_logger(__name__)


class GitHubAPI:
    """Authenticated, cached reads of issues and users.

    The credential is passed in already resolved; use
    ghread.clients.create_github_api() to pick it from a Config.
    """

    def __init__(
        self,
        credential: str | None,
        *,
        root_path: str = ".",
        cache_dir: str | None = None,
        github_enterprise_url: str | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credential: Token for the selected host variant (GITHUB_AUTH for
                        github.com, GITHUB_ENTERPRISE_AUTH for GHES)
            root_path: Project root the cache directory is relative to
            cache_dir: Cache directory name, or None to disable caching
            github_enterprise_url: GHES base URL, or None for github.com
            fetcher: Fetch capability; defaults to a requests-based fetcher

        Raises:
            ConfigurationError: If credential is empty
        """
        if not credential:
            raise ConfigurationError(missing_credential_message(github_enterprise_url))

        self._auth = credential
        self.host_variant = host_variant(github_enterprise_url)
        self.cache_dir = resolve_cache_dir(root_path, cache_dir, github_enterprise_url)

        resolved = resolve_host(github_enterprise_url)
        self.host = resolved.host
        self.api_host = resolved.api_host

        if fetcher is None:
            from ghread.transport import RequestsFetcher

            fetcher = RequestsFetcher()
        self._fetcher = fetcher

        logger.debug(
            f"{self.__class__.__name__} initialized for {self.host_variant} "
            f"(api_host={self.api_host}, cache_dir={self.cache_dir})"
        )

    def get_base_issue_url(self, repo: str) -> str:
        """Permalink prefix for issues in repo, e.g. https://github.com/org/repo/issues/."""
        return f"{self.host}{repo}/issues/"

    def get_issue_data(self, repo: str, issue: str | int) -> GitHubIssueResponse:
        """Fetch one issue (or pull request) of repo ("owner/name")."""
        return self._fetch(f"{self.api_host}repos/{repo}/issues/{issue}")

    def get_user_data(self, login: str) -> GitHubUserResponse:
        """Fetch a user's public profile."""
        return self._fetch(f"{self.api_host}users/{login}")

    def _fetch(self, url: str) -> Any:
        """GET url with the credential and return the decoded JSON body.

        The body is decoded whatever the status, since the API returns JSON
        error documents too. Transport exceptions from the fetcher are not
        caught here.

        Raises:
            ConfigurationError: If the response status is not a success
        """
        headers = {"Authorization": f"token {self._auth}"}
        logger.debug(f"Fetching {url}")

        with get_tracer().start_as_current_span("github.fetch") as span:
            # Spans skip the log masking filter; keep the GHES host out of them
            span.set_attribute("url.path", urlsplit(url).path)
            if self.host_variant == GITHUB_VARIANT:
                span.set_attribute("http.url", url)
            span.set_attribute("github.host_variant", self.host_variant)

            started = time.monotonic()
            res = self._fetcher(url, headers, self.cache_dir)
            parsed_response = res.json()
            duration_ms = (time.monotonic() - started) * 1000

            span.set_attribute("http.status_code", res.status)
            record_request(res.status, self.host_variant, duration_ms)

        if res.ok:
            return parsed_response

        logger.debug(f"GET {url} failed: {res.status} {res.status_text}")
        raise ConfigurationError(
            f"Fetch error: {res.status_text}.\n{json.dumps(parsed_response)}"
        )
