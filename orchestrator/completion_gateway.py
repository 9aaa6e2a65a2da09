"""
CompletionGateway - the only place that talks to the remote model.

Three calls, all bounded:
- discovery: web search on, no restriction, asks for candidate domains
- search: web search on, restricted to the resolved domains, asks for the table
- fallback: web search off, same messages, used when search produced no text
"""

from dataclasses import dataclass
from typing import Any

from api.base_client import BaseSearchClient
from config.config import Config
from models.errors import ConfigurationError
from models.search_request import SearchRequest
from orchestrator.answer_extractor import extract_text
from orchestrator.domain_resolver import DEFAULT_DOMAINS, DomainResolver
from orchestrator.fallback_manager import TimeoutPolicy, bounded_call
from orchestrator.prompt_composer import PromptComposer
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiscoveryResult:
    domains: list[str]
    used_fallback: bool
    reason: str = "ok"


class CompletionGateway:
    def __init__(
        self,
        client: BaseSearchClient,
        *,
        composer: PromptComposer | None = None,
        resolver: DomainResolver | None = None,
        discovery_timeout_s: float = 20.0,
        search_timeout_s: float = 45.0,
        fallback_timeout_s: float = 20.0,
        max_auto_domains: int = 7,
        default_domains: tuple[str, ...] = DEFAULT_DOMAINS,
    ):
        self.client = client
        self.composer = composer or PromptComposer()
        self.resolver = resolver or DomainResolver()
        self.discovery_policy = TimeoutPolicy(timeout_s=discovery_timeout_s, phase="discovery")
        self.search_policy = TimeoutPolicy(timeout_s=search_timeout_s, phase="search")
        self.fallback_policy = TimeoutPolicy(timeout_s=fallback_timeout_s, phase="fallback", fallback=None)
        self.max_auto_domains = max_auto_domains
        self.default_domains = tuple(default_domains)

    @classmethod
    def from_config(
        cls, client: BaseSearchClient, config: Config, resolver: DomainResolver | None = None
    ) -> "CompletionGateway":
        return cls(
            client,
            resolver=resolver,
            discovery_timeout_s=config.DISCOVERY_TIMEOUT_S,
            search_timeout_s=config.SEARCH_TIMEOUT_S,
            fallback_timeout_s=config.FALLBACK_TIMEOUT_S,
            max_auto_domains=config.MAX_AUTO_DOMAINS,
        )

    def _default_result(self, reason: str) -> DiscoveryResult:
        return DiscoveryResult(domains=list(self.default_domains), used_fallback=True, reason=reason)

    async def discover_domains(self, request: SearchRequest, model: str) -> DiscoveryResult:
        """
        Ask the model which domains to search, falling back to the default set.

        Timeout, provider failure and an unusable answer all end in the defaults.
        """
        messages = self.composer.build_discovery_messages(request)
        policy = self.discovery_policy.with_fallback(None)

        try:
            result = await bounded_call(
                lambda: self.client.create_response(messages, model=model, web_search=True),
                policy,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning(
                "Domain discovery failed, using default domains",
                extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
            )
            return self._default_result("provider_error")

        if result.timed_out:
            return self._default_result("timeout")

        domains = self.resolver.sanitize_text(extract_text(result.value), limit=self.max_auto_domains)
        if not domains:
            logger.info("Domain discovery returned no usable domains, using default domains")
            return self._default_result("empty")

        logger.info(
            "Domains discovered",
            extra={"extra_fields": {"domains": domains, "elapsed_ms": result.elapsed_ms}},
        )
        return DiscoveryResult(domains=domains, used_fallback=False)

    async def search(self, request: SearchRequest, domains: list[str], model: str) -> Any:
        """
        The constrained document search.

        Raises:
            ProviderTimeout: The bounded wait was exceeded
            ProviderError: The provider call failed
        """
        messages = self.composer.build_search_messages(request, domains)
        result = await bounded_call(
            lambda: self.client.create_response(
                messages,
                model=model,
                web_search=True,
                allowed_domains=domains or None,
            ),
            self.search_policy,
        )
        logger.info(
            "Search call completed",
            extra={
                "extra_fields": {
                    "model": model,
                    "domain_count": len(domains),
                    "elapsed_ms": result.elapsed_ms,
                }
            },
        )
        return result.value

    async def fallback_completion(self, request: SearchRequest, domains: list[str], model: str) -> Any | None:
        """
        One non-search attempt with the same messages; None when it fails or times out.
        """
        messages = self.composer.build_search_messages(request, domains)
        try:
            result = await bounded_call(
                lambda: self.client.create_response(messages, model=model, web_search=False),
                self.fallback_policy,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning(
                "Fallback completion failed",
                extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
            )
            return None
        return result.value
