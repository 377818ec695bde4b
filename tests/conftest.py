"""Pytest configuration and shared fixtures."""

import json
import os
from dataclasses import dataclass, field
from typing import Any

import pytest
from hypothesis import settings

from ghread.clients import GitHubAPI
from ghread.telemetry import reset_telemetry

# Configure Hypothesis profiles for different environments
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "hypothesis: marks property-based tests using Hypothesis",
    )


@dataclass
class FakeResponse:
    """In-memory FetchResponse."""

    status: int = 200
    status_text: str = "OK"
    body: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        # Round-trip so callers never share the fixture's object
        return json.loads(json.dumps(self.body))


class RecordingFetcher:
    """Fetcher that records every call and replays a canned response."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[tuple[str, dict[str, str], str | None]] = []

    def __call__(self, url, headers, cache_dir=None):
        self.calls.append((url, dict(headers), cache_dir))
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_headers(self) -> dict[str, str]:
        return self.calls[-1][1]

    @property
    def last_cache_dir(self) -> str | None:
        return self.calls[-1][2]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ghread settings and tokens from the developer environment out of tests."""
    for key in (
        "GITHUB_AUTH",
        "GITHUB_ENTERPRISE_AUTH",
        "GITHUB_ENTERPRISE_URL",
        "CACHE_DIR",
        "ROOT_PATH",
        "LOG_FILE",
        "LOG_SIZE",
        "LOG_BACKUPS",
        "LOG_LEVEL",
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "OTEL_SERVICE_NAME",
        "GHES_LOGS_MASK",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_telemetry_state():
    """Reset telemetry module state before and after each test."""
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def fetcher():
    """Fixture providing a RecordingFetcher that answers 200 with an empty object."""
    return RecordingFetcher()


@pytest.fixture
def github_api(fetcher):
    """Fixture providing a github.com client backed by the recording fetcher."""
    return GitHubAPI("tok", fetcher=fetcher)


@pytest.fixture
def enterprise_api(fetcher):
    """Fixture providing a GHES client backed by the recording fetcher."""
    return GitHubAPI(
        "ghe-tok",
        github_enterprise_url="https://ghe.example.com/",
        fetcher=fetcher,
    )


@pytest.fixture
def make_fetcher():
    """Fixture providing a factory for RecordingFetcher with a canned response."""

    def _make(status=200, status_text="OK", body=None, error=None):
        if body is None:
            body = {}
        response = FakeResponse(status=status, status_text=status_text, body=body)
        return RecordingFetcher(response=response, error=error)

    return _make
