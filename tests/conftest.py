"""Global test configuration for prosaic tests."""

from pathlib import Path

import pytest
import structlog

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def prose_text():
    """Long-form article with smart quotes, em dashes, ellipses and abbreviations."""
    return (FIXTURES / "prose.txt").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def prose_bytes():
    return (FIXTURES / "prose.txt").read_bytes()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any structlog configuration bound to a captured stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no PROSAIC_* / LOG_* variables set."""
    import os

    for key in list(os.environ):
        if key.startswith("PROSAIC_") or key.startswith("LOG_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
