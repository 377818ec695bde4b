"""Authenticated read client for the GitHub and GitHub Enterprise REST APIs."""

__version__ = "0.1.0"
