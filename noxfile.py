import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extras into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no adapters or HTTP involved)."""
    _install(session)
    session.run(
        "pytest",
        "tests/intake/domain/",
        "tests/audience/domain/",
        "tests/bundles/domain/",
        "tests/narrative/domain/",
        "tests/notifications/domain/",
        "tests/fulfillment/domain/",
    )
