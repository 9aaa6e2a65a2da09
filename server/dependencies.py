"""FastAPI dependencies for configuration and orchestrator access."""

from fastapi import Request

from config.config import Config
from models.errors import ConfigurationError
from orchestrator.core import SearchOrchestrator
from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)


def get_config() -> Config:
    """Dependency to get the process configuration (singleton pattern)."""
    if not hasattr(get_config, "_instance"):
        get_config._instance = Config()
    return get_config._instance


def get_orchestrator(request: Request) -> SearchOrchestrator:
    """
    Dependency to get the orchestrator instance (singleton pattern).

    The provider client is built once per process. A missing credential is
    not cached, so setting OPENAI_API_KEY later takes effect on the next call.
    """
    if not hasattr(get_orchestrator, "_instance"):
        try:
            get_orchestrator._instance = SearchOrchestrator.from_config(get_config())
        except ConfigurationError as exc:
            logger.error(
                "Search orchestrator not configured",
                extra={
                    "extra_fields": {
                        "request_id": getattr(request.state, "request_id", "unknown"),
                        "error": exc.message,
                        "headers": redact_sensitive_headers(dict(request.headers)),
                    }
                },
            )
            raise
    return get_orchestrator._instance
