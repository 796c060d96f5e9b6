from __future__ import annotations

import nox

nox.options.default_venv_backend = "virtualenv"
nox.options.error_on_missing_interpreters = False


def _install_tools(session: nox.Session) -> None:
    session.install("-e", ".[dev]")


@nox.session
def tests(session: nox.Session) -> None:
    _install_tools(session)
    session.run(
        "pytest", "-m", "not live", "--cov=ghissues", "--cov-report=term", *session.posargs
    )


@nox.session
def live(session: nox.Session) -> None:
    """Run the contract scenarios against the real API (needs credentials)."""
    _install_tools(session)
    session.run("pytest", "-m", "live", "tests/test_issue_scenarios.py", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    _install_tools(session)
    session.run("ruff", "check")


@nox.session
def typecheck(session: nox.Session) -> None:
    _install_tools(session)
    session.run("mypy", "src")
