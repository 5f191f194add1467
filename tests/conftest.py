"""Test configuration and fixtures for dirflatten."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def sample_tree(tmp_path):
    """Create the reference tree used throughout the selection tests.

    Layout:
        a.txt
        .hidden.txt
        sub/b.txt
        sub/.gitignore   (ignores b.txt)
    """
    (tmp_path / "a.txt").write_text("alpha\n")
    (tmp_path / ".hidden.txt").write_text("hidden\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.txt").write_text("bravo\n")
    (tmp_path / "sub" / ".gitignore").write_text("b.txt\n")
    return tmp_path
