"""Abstract interfaces for the GitHub read client."""

from ghread.interfaces.github import (
    Fetcher,
    FetchResponse,
    GitHubIssueResponse,
    GitHubLabel,
    GitHubUserResponse,
    GitHubUserSummary,
)

__all__ = [
    "Fetcher",
    "FetchResponse",
    "GitHubIssueResponse",
    "GitHubLabel",
    "GitHubUserResponse",
    "GitHubUserSummary",
]
