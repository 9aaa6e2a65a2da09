from unittest.mock import MagicMock

import httpx
import openai
import pytest

from api.openai_client import MAX_ALLOWED_DOMAINS, OpenAIClient
from models.errors import ConfigurationError, ProviderError, ProviderTimeout

pytestmark = pytest.mark.unit

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/responses")


@pytest.fixture
def client():
    client = OpenAIClient(api_key="sk-test", model_name="gpt-4o")
    client.client = MagicMock()
    client.client.responses.create.return_value = {"output_text": "ok"}
    return client


def test_missing_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        OpenAIClient(api_key="")


def test_search_call_uses_web_search_tool_with_domain_filter(client):
    messages = [{"role": "user", "content": "q"}]

    result = client.create_response(messages, model="gpt-4.1", allowed_domains=["arxiv.org"])

    assert result == {"output_text": "ok"}
    client.client.responses.create.assert_called_once_with(
        model="gpt-4.1",
        input=messages,
        tools=[{"type": "web_search", "filters": {"allowed_domains": ["arxiv.org"]}}],
        include=["web_search_call.action.sources"],
    )


def test_unrestricted_search_has_no_filters(client):
    client.create_response([{"role": "user", "content": "q"}])
    kwargs = client.client.responses.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["tools"] == [{"type": "web_search"}]


def test_plain_completion_sends_no_tools(client):
    client.create_response([{"role": "user", "content": "q"}], web_search=False, allowed_domains=["arxiv.org"])
    kwargs = client.client.responses.create.call_args.kwargs
    assert "tools" not in kwargs
    assert "include" not in kwargs


def test_domain_filter_is_capped():
    domains = [f"site{i}.org" for i in range(MAX_ALLOWED_DOMAINS + 5)]
    tools = OpenAIClient.build_tools(True, domains)
    assert len(tools[0]["filters"]["allowed_domains"]) == MAX_ALLOWED_DOMAINS


def test_sdk_timeout_maps_to_provider_timeout(client):
    client.client.responses.create.side_effect = openai.APITimeoutError(request=_REQUEST)
    with pytest.raises(ProviderTimeout) as exc_info:
        client.create_response([{"role": "user", "content": "q"}])
    assert exc_info.value.phase == "provider"


def test_connection_error_maps_to_provider_error(client):
    client.client.responses.create.side_effect = openai.APIConnectionError(request=_REQUEST)
    with pytest.raises(ProviderError) as exc_info:
        client.create_response([{"role": "user", "content": "q"}])
    assert not isinstance(exc_info.value, ProviderTimeout)
    assert exc_info.value.provider == "openai"


def test_rejected_key_maps_to_configuration_error(client):
    response = httpx.Response(401, request=_REQUEST)
    client.client.responses.create.side_effect = openai.AuthenticationError(
        "Incorrect API key provided", response=response, body=None
    )
    with pytest.raises(ConfigurationError, match="Incorrect API key"):
        client.create_response([{"role": "user", "content": "q"}])


def test_ping_returns_reply_text(client):
    assert client.ping("gpt-4o-mini") == "ok"
    kwargs = client.client.responses.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert "tools" not in kwargs
