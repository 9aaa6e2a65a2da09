"""Exception taxonomy for the NTI search pipeline."""


class NTIAgentError(Exception):
    """Base exception for the NTI agent."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(NTIAgentError):
    """Required configuration (usually the provider credential) is missing."""

    status_code = 500


class ProviderError(NTIAgentError):
    """The remote model call failed for a reason other than a timeout."""

    status_code = 502

    def __init__(self, message: str, provider: str = "openai"):
        self.provider = provider
        super().__init__(message)


class ProviderTimeout(ProviderError):
    """A bounded wait around a remote call was exceeded."""

    def __init__(self, timeout_s: float, phase: str = "search", provider: str = "openai"):
        self.timeout_s = timeout_s
        self.phase = phase
        super().__init__(f"{phase} call timed out after {timeout_s}s", provider=provider)


class ProviderEmptyResponse(ProviderError):
    """The remote call returned, but no answer text could be extracted."""


class MalformedTable(NTIAgentError):
    """No markdown table header line was found in the model output."""


class UnknownModelSelection(NTIAgentError):
    """The requested model is not in the allow-list."""

    def __init__(self, requested: str, substitute: str):
        self.requested = requested
        self.substitute = substitute
        super().__init__(f"Model '{requested}' is not available, using '{substitute}'")
