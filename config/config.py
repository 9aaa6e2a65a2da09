import os
from dotenv import load_dotenv
from pathlib import Path

from models.errors import ConfigurationError


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Provider credentials
        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.OPENAI_PROJECT_ID = os.getenv('OPENAI_PROJECT_ID')
        self.OPENAI_ORG_ID = os.getenv('OPENAI_ORG_ID')

        # Model selection; DEFAULT_MODEL overrides the registry default when set
        self.DEFAULT_MODEL = os.getenv('DEFAULT_MODEL')
        self.MODEL_REGISTRY_PATH = os.getenv('MODEL_REGISTRY_PATH')

        # Bounded waits, seconds. The host ceiling must fit discovery + search.
        self.DISCOVERY_TIMEOUT_S = _env_float('DISCOVERY_TIMEOUT_S', 20.0)
        self.SEARCH_TIMEOUT_S = _env_float('SEARCH_TIMEOUT_S', 45.0)
        self.FALLBACK_TIMEOUT_S = _env_float('FALLBACK_TIMEOUT_S', 20.0)
        self.REQUEST_CEILING_S = _env_float('REQUEST_CEILING_S', 90.0)

        self.MAX_AUTO_DOMAINS = _env_int('MAX_AUTO_DOMAINS', 7)

        cors = os.getenv('CORS_ORIGINS', '*')
        self.CORS_ORIGINS = [o.strip() for o in cors.split(',') if o.strip()]

    def validate(self) -> bool:
        """
        Validate that all required configuration is present.

        Returns:
            bool: True if configuration is valid

        Raises:
            ConfigurationError: If the credential is missing or the timeout budgets do not fit
        """
        if not self.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        for name in ('DISCOVERY_TIMEOUT_S', 'SEARCH_TIMEOUT_S', 'FALLBACK_TIMEOUT_S'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")

        if self.MAX_AUTO_DOMAINS < 1:
            raise ConfigurationError("MAX_AUTO_DOMAINS must be at least 1")

        worst_case = self.DISCOVERY_TIMEOUT_S + self.SEARCH_TIMEOUT_S + self.FALLBACK_TIMEOUT_S
        if worst_case >= self.REQUEST_CEILING_S:
            raise ConfigurationError(
                f"Timeout budgets ({worst_case}s) must stay under REQUEST_CEILING_S "
                f"({self.REQUEST_CEILING_S}s)"
            )

        return True
