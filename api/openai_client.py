import openai
from typing import Any, Optional

from models.errors import ConfigurationError, ProviderError, ProviderTimeout
from utils.logger import get_logger

from .base_client import BaseSearchClient

logger = get_logger(__name__)

# Provider-side limit on the web_search allowed_domains filter
MAX_ALLOWED_DOMAINS = 20


class OpenAIClient(BaseSearchClient):
    """
    A client for the OpenAI Responses API with the hosted web_search tool.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-4o",
        project: Optional[str] = None,
        organization: Optional[str] = None,
        timeout_s: Optional[float] = None,
        **kwargs,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: The OpenAI API key
            model_name: Default model for calls that do not name one
            project: Optional OpenAI project id
            organization: Optional OpenAI organization id
            timeout_s: SDK-level HTTP timeout; the pipeline applies its own shorter waits
            **kwargs: Additional keyword arguments
        """
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        super().__init__(api_key, model_name=model_name, **kwargs)

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if project:
            client_kwargs["project"] = project
        if organization:
            client_kwargs["organization"] = organization
        if timeout_s:
            client_kwargs["timeout"] = timeout_s
        self.client = openai.OpenAI(**client_kwargs)
        self.model_name = model_name

    @staticmethod
    def build_tools(web_search: bool, allowed_domains: Optional[list[str]]) -> list[dict[str, Any]]:
        if not web_search:
            return []
        tool: dict[str, Any] = {"type": "web_search"}
        if allowed_domains:
            tool["filters"] = {"allowed_domains": list(allowed_domains)[:MAX_ALLOWED_DOMAINS]}
        return [tool]

    def create_response(
        self,
        messages: list[dict[str, str]],
        *,
        model: Optional[str] = None,
        web_search: bool = True,
        allowed_domains: Optional[list[str]] = None,
    ) -> Any:
        model = model or self.model_name
        request: dict[str, Any] = {"model": model, "input": messages}

        tools = self.build_tools(web_search, allowed_domains)
        if tools:
            request["tools"] = tools
            # Ask for the full source list of each search call, not only the cited ones
            request["include"] = ["web_search_call.action.sources"]

        try:
            return self.client.responses.create(**request)
        except openai.APITimeoutError as e:
            logger.warning(
                "OpenAI request timed out",
                extra={"extra_fields": {"model": model, "web_search": web_search}},
            )
            raise ProviderTimeout(timeout_s=self.client.timeout, phase="provider") from e
        except openai.AuthenticationError as e:
            raise ConfigurationError(f"OpenAI rejected the API key: {e.message}") from e
        except openai.APIError as e:
            logger.error(
                f"OpenAI request failed: {e}",
                extra={
                    "extra_fields": {
                        "model": model,
                        "web_search": web_search,
                        "error_type": type(e).__name__,
                    }
                },
            )
            raise ProviderError(str(e.message or e), provider=self.provider_name) from e
