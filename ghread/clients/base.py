"""Host and credential resolution shared by the GitHub read clients.

A client targets exactly one host variant: the public service, or a GitHub
Enterprise Server reachable at a caller-supplied base URL. Everything that
differs between the two (permalink host, REST API host, which credential
applies, where cached responses live) is derived here from that one choice.
"""

import os
from dataclasses import dataclass

PUBLIC_HOST = "https://github.com/"
PUBLIC_API_HOST = "https://api.github.com/"
ENTERPRISE_API_PATH = "api/v3/"

GITHUB_AUTH_ENV = "GITHUB_AUTH"
GITHUB_ENTERPRISE_AUTH_ENV = "GITHUB_ENTERPRISE_AUTH"

GITHUB_VARIANT = "github"
GITHUB_ENTERPRISE_VARIANT = "github-enterprise"


class ConfigurationError(Exception):
    """Raised for unusable configuration and for failed API requests.

    Covers two conditions, told apart only by message:
    - No credential available when the client is constructed
    - A non-success HTTP response, with status text and response body
    """

    pass


@dataclass(frozen=True)
class ResolvedHost:
    """Host pair for one client.

    Attributes:
        host: Human-facing base URL, used for issue permalinks
        api_host: REST API base URL
    Both always end with "/".
    """

    host: str
    api_host: str


def _normalize_enterprise_url(enterprise_url: str | None) -> str | None:
    if not enterprise_url:
        return None
    return enterprise_url if enterprise_url.endswith("/") else f"{enterprise_url}/"


def resolve_host(enterprise_url: str | None) -> ResolvedHost:
    """Derive the host pair for the public service or an enterprise deployment.

    Args:
        enterprise_url: GHES base URL (e.g., "https://ghe.example.com/"), or None

    Returns:
        ResolvedHost with the permalink host and the API host
    """
    base = _normalize_enterprise_url(enterprise_url)
    if base is None:
        return ResolvedHost(host=PUBLIC_HOST, api_host=PUBLIC_API_HOST)
    return ResolvedHost(host=base, api_host=f"{base}{ENTERPRISE_API_PATH}")


def host_variant(enterprise_url: str | None) -> str:
    """Return "github-enterprise" when an enterprise URL is set, else "github"."""
    return GITHUB_ENTERPRISE_VARIANT if enterprise_url else GITHUB_VARIANT


def credential_env_var(enterprise_url: str | None) -> str:
    """Name of the one environment variable that holds the credential.

    The public token never stands in for the enterprise one, or vice versa.
    """
    return GITHUB_ENTERPRISE_AUTH_ENV if enterprise_url else GITHUB_AUTH_ENV


def missing_credential_message(enterprise_url: str | None) -> str:
    """Explain which variable to set, depending on the host variant."""
    if enterprise_url:
        return (
            f"Must provide {GITHUB_ENTERPRISE_AUTH_ENV} for GitHub Enterprise at "
            f"{enterprise_url} ({GITHUB_AUTH_ENV} is not used when githubEnterpriseUrl "
            "is configured)"
        )
    return (
        f"Must provide {GITHUB_AUTH_ENV} (if you use GitHub Enterprise, must provide "
        f"{GITHUB_ENTERPRISE_AUTH_ENV} to env and githubEnterpriseUrl to config)"
    )


def resolve_cache_dir(
    root_path: str,
    cache_dir: str | None,
    enterprise_url: str | None,
) -> str | None:
    """Build the response cache directory, namespaced by host variant.

    Args:
        root_path: Project root the cache directory is relative to
        cache_dir: Cache directory name, or None to disable caching
        enterprise_url: GHES base URL, or None

    Returns:
        "<root_path>/<cache_dir>/<variant>", or None when caching is disabled
    """
    if not cache_dir:
        return None
    return os.path.join(root_path, cache_dir, host_variant(enterprise_url))
