"""Shared test configuration and fixtures for agentsh tests."""

import pytest


@pytest.fixture
def tmp_project(tmp_path):
    """Create a temporary project directory for testing."""
    return tmp_path


@pytest.fixture
def mock_env(monkeypatch):
    """Clear agentsh environment variables for isolated tests."""
    env_vars_to_clear = [
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "AGENTSH_CONTEXTS_DIR",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_dir(tmp_path, mock_env):
    """An empty ~/.agentsh stand-in."""
    directory = tmp_path / ".agentsh"
    directory.mkdir()
    return directory
