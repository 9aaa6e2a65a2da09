from abc import ABC, abstractmethod
from typing import Any, Optional

from orchestrator.answer_extractor import extract_text


class BaseSearchClient(ABC):
    """
    Abstract base class for the remote model collaborator.

    A client creates one response per call, optionally with the provider's
    hosted web-search tool enabled and restricted to a domain allow-list.
    Responses are returned as-is; answer_extractor knows how to read them.
    """

    provider_name = "unknown"

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize the client.

        Args:
            api_key: API key for the provider
            **kwargs: Additional provider-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get('model_name')

    @abstractmethod
    def create_response(
        self,
        messages: list[dict[str, str]],
        *,
        model: Optional[str] = None,
        web_search: bool = True,
        allowed_domains: Optional[list[str]] = None,
    ) -> Any:
        """
        Create a completion.

        Args:
            messages: Role/content messages, system prompt first
            model: Model identifier (defaults to the client's model)
            web_search: Enable the hosted web-search tool
            allowed_domains: Restrict web search to these domains (ignored when empty)

        Returns:
            The provider's raw response object

        Raises:
            ProviderError: The call failed
            ProviderTimeout: The provider-side timeout was hit
        """

    def ping(self, model: Optional[str] = None) -> str:
        """
        Minimal round trip used by the provider health check.

        Returns:
            The model's reply text (may be empty)
        """
        response = self.create_response(
            [{"role": "user", "content": "Скажи 'ok'."}],
            model=model,
            web_search=False,
        )
        return extract_text(response)
