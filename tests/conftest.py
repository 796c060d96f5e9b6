"""Pytest configuration for ghissues tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).

Scenario tests take the ``api_client`` fixture, which runs each test twice:
once against the in-memory fake mounted on the client's session and once
against the real API. The live variant is skipped unless ``GHISSUES_TOKEN``
(or ``GITHUB_TOKEN``) plus ``GHISSUES_USER`` / ``GHISSUES_REPO`` are set.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest
import requests

_TEST_START_TIMES: dict[str, float] = {}
_TEST_DURATIONS: list[tuple[str, float]] = []

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
TESTS = Path(__file__).resolve().parent
if str(TESTS) not in sys.path:
    sys.path.insert(0, str(TESTS))

from fake_github import FakeGitHub  # noqa: E402

from ghissues import logging as ghissues_logging  # noqa: E402
from ghissues.client import IssuesApiClient  # noqa: E402
from ghissues.config import load_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_global_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    # The global logger binds its stream on creation; capture streams die per test
    monkeypatch.setattr(ghissues_logging, "_GLOBAL", None)


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def fake_client(fake_github: FakeGitHub) -> IssuesApiClient:
    session = requests.Session()
    session.mount("https://api.github.com", fake_github)
    return IssuesApiClient(
        user=fake_github.user,
        repo=fake_github.repo,
        token=fake_github.token,
        session=session,
    )


@pytest.fixture(params=["fake", pytest.param("live", marks=pytest.mark.live)])
def api_client(request: pytest.FixtureRequest) -> IssuesApiClient:
    if request.param == "fake":
        return request.getfixturevalue("fake_client")
    settings = load_settings()
    if not settings.has_credentials:
        pytest.skip("set GHISSUES_USER, GHISSUES_REPO and GHISSUES_TOKEN to run live tests")
    return IssuesApiClient.from_settings(settings)


# --- Timing utilities to help identify slow tests (live runs especially) ---


def pytest_runtest_setup(item):  # type: ignore
    _TEST_START_TIMES[item.nodeid] = time.perf_counter()


def pytest_runtest_teardown(item):  # type: ignore
    start = _TEST_START_TIMES.pop(item.nodeid, None)
    if start is not None:
        duration = time.perf_counter() - start
        _TEST_DURATIONS.append((item.nodeid, duration))


def pytest_sessionfinish(session, exitstatus):  # type: ignore
    if not _TEST_DURATIONS:
        return
    slow = sorted(_TEST_DURATIONS, key=lambda x: x[1], reverse=True)[:10]
    print("\n=== Slowest Tests (top 10) ===")
    for nodeid, secs in slow:
        print(f"{secs:0.3f}s  {nodeid}")
    total_time = sum(d for _, d in _TEST_DURATIONS)
    print(
        f"Total recorded test time: {total_time:0.3f}s over {len(_TEST_DURATIONS)} tests"
    )
