"""Nox configuration for testing and linting."""

import nox

nox.options.sessions = ["tests", "lint"]
python_versions = ["3.11", "3.12"]


@nox.session(python=python_versions[0])
def tests(session):
    """Run the test suite with coverage."""
    session.install("-e", ".[dev]")
    session.run(
        "pytest",
        "--cov=nuan_site",
        "--cov-report=term-missing",
        "--cov-fail-under=80",
        "-v",
        *session.posargs,
    )


@nox.session(python=python_versions[0])
def lint(session):
    """Run ruff for linting."""
    session.install("ruff>=0.1.0")
    session.run("ruff", "check", "nuan_site", "tests")


@nox.session(python=python_versions[0])
def dev(session):
    """Serve the site locally with auto-reload."""
    session.install("-e", ".")
    session.run("uvicorn", "nuan_site.main:app", "--reload", *session.posargs)
