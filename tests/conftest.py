import os
import tempfile
from pathlib import Path

# Keep test logs out of the working tree
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "nti-agent-test-logs"))

import pytest

from fakes import FakeSearchClient
from orchestrator.completion_gateway import CompletionGateway
from orchestrator.core import SearchOrchestrator
from orchestrator.model_registry import ModelRegistry


@pytest.fixture
def registry():
    return ModelRegistry.from_yaml()


@pytest.fixture
def make_orchestrator(registry):
    """Build an orchestrator around a FakeSearchClient with short timeouts."""

    def _make(responses=None, **gateway_kwargs):
        client = FakeSearchClient(responses)
        gateway_kwargs.setdefault("discovery_timeout_s", 2.0)
        gateway_kwargs.setdefault("search_timeout_s", 2.0)
        gateway_kwargs.setdefault("fallback_timeout_s", 2.0)
        gateway = CompletionGateway(client, **gateway_kwargs)
        return SearchOrchestrator(client, registry, gateway=gateway), client

    return _make


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "OPENAI_API_KEY": "sk-test",
        "DEFAULT_MODEL": "gpt-4o-mini",
        "DISCOVERY_TIMEOUT_S": "10",
        "SEARCH_TIMEOUT_S": "30",
        "FALLBACK_TIMEOUT_S": "10",
        "REQUEST_CEILING_S": "60",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
