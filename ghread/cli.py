"""CLI entry point for ghread.

Subcommands:
    ghread issue OWNER/REPO#NUMBER  - Print an issue as JSON
    ghread user LOGIN               - Print a user as JSON
    ghread issue-url OWNER/REPO     - Print the issue permalink prefix
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import requests

from ghread import __version__

if TYPE_CHECKING:
    from ghread.clients import GitHubAPI
    from ghread.config import Config


def parse_issue_arg(issue_arg: str) -> tuple[str, str]:
    """Parse issue argument into repo and issue number.

    Args:
        issue_arg: Issue identifier string in owner/repo#42 format

    Returns:
        Tuple of (repo, issue_number), e.g. ("owner/repo", "42")

    Raises:
        ValueError: If the argument format is invalid
    """
    match = re.match(r"^([^/#\s]+)/([^/#\s]+)#(\d+)$", issue_arg)
    if not match:
        raise ValueError(
            f"Invalid issue format: {issue_arg}\nExpected format: owner/repo#42"
        )

    owner, repo_name, issue_num = match.groups()
    return f"{owner}/{repo_name}", issue_num


def _configure(config: Config, debug: bool) -> None:
    """Set up logging and telemetry for one CLI invocation."""
    from ghread.logger import setup_logging
    from ghread.telemetry import init_telemetry

    os.environ["LOG_LEVEL"] = "DEBUG" if debug else config.log_level

    ghes_host = None
    if config.github_enterprise_url:
        ghes_host = urlparse(config.github_enterprise_url).netloc or None

    setup_logging(
        log_file=config.log_file,
        log_size=config.log_size,
        log_backups=config.log_backups,
        ghes_host=ghes_host,
        secrets=(config.github_auth, config.github_enterprise_auth),
        mask=config.ghes_logs_mask,
    )
    init_telemetry(config.otel_endpoint, config.otel_service_name, __version__)


def _build_client(args: argparse.Namespace) -> GitHubAPI:
    from ghread.clients import create_github_api
    from ghread.config import load_config

    config = load_config()
    _configure(config, args.debug)
    return create_github_api(config)


def cmd_issue(args: argparse.Namespace) -> None:
    """Handle the 'issue' subcommand."""
    repo, issue_number = parse_issue_arg(args.issue)
    client = _build_client(args)
    print(json.dumps(client.get_issue_data(repo, issue_number), indent=2))


def cmd_user(args: argparse.Namespace) -> None:
    """Handle the 'user' subcommand."""
    client = _build_client(args)
    print(json.dumps(client.get_user_data(args.login), indent=2))


def cmd_issue_url(args: argparse.Namespace) -> None:
    """Handle the 'issue-url' subcommand."""
    client = _build_client(args)
    print(client.get_base_issue_url(args.repo))


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the ghread CLI."""
    from ghread.clients import ConfigurationError

    parser = argparse.ArgumentParser(
        prog="ghread",
        description="Read issues and users from GitHub or GitHub Enterprise",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"ghread {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level regardless of LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    issue_parser = subparsers.add_parser("issue", help="Print an issue as JSON")
    issue_parser.add_argument("issue", help="Issue identifier (e.g., owner/repo#42)")
    issue_parser.set_defaults(handler=cmd_issue)

    user_parser = subparsers.add_parser("user", help="Print a user as JSON")
    user_parser.add_argument("login", help="GitHub login (e.g., octocat)")
    user_parser.set_defaults(handler=cmd_user)

    url_parser = subparsers.add_parser(
        "issue-url",
        help="Print the issue permalink prefix for a repository",
    )
    url_parser.add_argument("repo", help="Repository (e.g., owner/repo)")
    url_parser.set_defaults(handler=cmd_issue_url)

    args = parser.parse_args(argv)

    try:
        args.handler(args)
    except (ConfigurationError, ValueError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except requests.RequestException as e:
        print(f"Request failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
