"""GitHub read client.

This package provides the client for github.com and GitHub Enterprise Server:
- GitHubAPI: Cached, authenticated reads of issues and users
- ConfigurationError: The single error kind raised by the client

Use create_github_api() to build a client from a loaded Config; it picks the
credential that matches the configured host variant.
"""

from typing import TYPE_CHECKING

from ghread.clients.base import (
    ConfigurationError,
    ResolvedHost,
    credential_env_var,
    host_variant,
    resolve_cache_dir,
    resolve_host,
)
from ghread.clients.github import GitHubAPI
from ghread.interfaces import Fetcher

if TYPE_CHECKING:
    from ghread.config import Config


def select_credential(config: "Config") -> str | None:
    """Return the enterprise token when an enterprise URL is set, else the public one."""
    if config.github_enterprise_url:
        return config.github_enterprise_auth
    return config.github_auth


def create_github_api(config: "Config", fetcher: Fetcher | None = None) -> GitHubAPI:
    """Factory function to build a GitHubAPI from configuration.

    Args:
        config: Loaded application configuration
        fetcher: Optional fetch capability (defaults to RequestsFetcher)

    Returns:
        GitHubAPI instance

    Raises:
        ConfigurationError: If the credential for the configured host is missing
    """
    return GitHubAPI(
        select_credential(config),
        root_path=config.root_path,
        cache_dir=config.cache_dir,
        github_enterprise_url=config.github_enterprise_url,
        fetcher=fetcher,
    )


__all__ = [
    "ConfigurationError",
    "GitHubAPI",
    "ResolvedHost",
    "create_github_api",
    "credential_env_var",
    "host_variant",
    "resolve_cache_dir",
    "resolve_host",
    "select_credential",
]
