"""
SearchOrchestrator - one form submission from request to normalized answer.

COMPOSING -> (AUTO_SOURCES: DISCOVERING ->) SEARCHING -> SUCCESS
                                                      -> FALLBACK_EMPTY
                                                      -> TIMEOUT_NOTICE
Provider failures other than timeouts are re-raised (ERROR) for the HTTP layer.
"""

import time
import uuid
from typing import Any

from api.base_client import BaseSearchClient
from config.config import Config
from models.errors import (
    ConfigurationError,
    ProviderEmptyResponse,
    ProviderError,
    ProviderTimeout,
)
from models.search_outcome import PipelineState, SearchOutcome
from models.search_request import Scenario, SearchRequest
from orchestrator.answer_extractor import extract_structured_hits, extract_text
from orchestrator.completion_gateway import CompletionGateway
from orchestrator.domain_resolver import DomainResolver
from orchestrator.model_registry import ModelRegistry
from orchestrator.table_reconciler import TableReconciler
from utils.logger import get_logger

logger = get_logger(__name__)

TIMEOUT_NOTICE = (
    "Поиск не уложился в отведённое время. Попробуйте ещё раз или сузьте запрос."
)
EMPTY_NOTICE = "Модель не вернула ответ. Попробуйте изменить запрос."
NO_WEB_SEARCH_NOTICE = (
    "Ответ получен без веб-поиска: ссылки не проверены."
)
DEFAULT_DOMAINS_NOTICE = (
    "Не удалось подобрать источники автоматически, использован стандартный набор доменов."
)


class SearchOrchestrator:
    """
    Runs the discovery/search/normalization pipeline for a SearchRequest.

    The provider client is injected; build one per process and share it.
    """

    def __init__(
        self,
        client: BaseSearchClient,
        registry: ModelRegistry,
        *,
        gateway: CompletionGateway | None = None,
        resolver: DomainResolver | None = None,
        reconciler: TableReconciler | None = None,
    ):
        self.client = client
        self.registry = registry
        self.resolver = resolver or DomainResolver()
        self.gateway = gateway or CompletionGateway(client, resolver=self.resolver)
        self.reconciler = reconciler or TableReconciler()

    @classmethod
    def from_config(cls, config: Config, client: BaseSearchClient | None = None) -> "SearchOrchestrator":
        """
        Build an orchestrator from environment configuration.

        Raises:
            ConfigurationError: Credential missing or configuration inconsistent
        """
        config.validate()
        registry = ModelRegistry.from_yaml(config.MODEL_REGISTRY_PATH, default_override=config.DEFAULT_MODEL)

        if client is None:
            from api.openai_client import OpenAIClient

            client = OpenAIClient(
                api_key=config.OPENAI_API_KEY,
                model_name=registry.default_model,
                project=config.OPENAI_PROJECT_ID,
                organization=config.OPENAI_ORG_ID,
                timeout_s=config.REQUEST_CEILING_S,
            )

        resolver = DomainResolver()
        gateway = CompletionGateway.from_config(client, config, resolver=resolver)
        return cls(client, registry, gateway=gateway, resolver=resolver)

    def _log_state(self, request_id: str, state: PipelineState, **fields: Any) -> None:
        logger.info(
            f"Pipeline state: {state.value}",
            extra={"extra_fields": {"request_id": request_id, "state": state.value, **fields}},
        )

    def _finish(self, outcome: SearchOutcome, **fields: Any) -> SearchOutcome:
        """Log a terminal outcome and hand it back."""
        logger.info(
            f"Pipeline state: {outcome.state.value}",
            extra={"extra_fields": {**outcome.to_dict(), **fields}},
        )
        return outcome

    async def _resolve_domains(
        self, request: SearchRequest, model: str, request_id: str, notices: list[str]
    ) -> list[str]:
        if request.uses_explicit_sources:
            unknown = self.resolver.unknown_labels(request.source_labels)
            if unknown:
                notices.append(f"Неизвестные источники пропущены: {', '.join(unknown)}.")
            return self.resolver.resolve(request.source_labels)

        if request.scenario == Scenario.AUTO_SOURCES:
            self._log_state(request_id, PipelineState.DISCOVERING)
            discovery = await self.gateway.discover_domains(request, model)
            if discovery.used_fallback:
                notices.append(DEFAULT_DOMAINS_NOTICE)
            return discovery.domains

        # Explicit scenario with nothing selected: unrestricted search
        return []

    async def _answer_text(
        self, request: SearchRequest, response: Any, domains: list[str], model: str
    ) -> tuple[str, bool]:
        """
        Text of the search response, or of one non-search retry when it was empty.

        Returns:
            (text, used_fallback_call)

        Raises:
            ProviderEmptyResponse: Neither call produced any text
        """
        text = extract_text(response)
        if text.strip():
            return text, False

        logger.warning("Search call returned no text, trying completion without web search")
        fallback = await self.gateway.fallback_completion(request, domains, model)
        text = extract_text(fallback) if fallback is not None else ""
        if not text.strip():
            raise ProviderEmptyResponse("No answer text from search or fallback call")
        return text, True

    async def run(self, request: SearchRequest, request_id: str | None = None) -> SearchOutcome:
        """
        Execute one submission.

        Raises:
            ConfigurationError: Provider rejected the credential
            ProviderError: The search call failed for a reason other than a timeout
        """
        request_id = request_id or str(uuid.uuid4())
        start = time.perf_counter()
        notices: list[str] = []

        self._log_state(
            request_id,
            PipelineState.COMPOSING,
            scenario=request.scenario.value,
            source_labels=list(request.source_labels),
            history_turns=len(request.history),
            load_more=request.is_load_more,
        )

        model, substitution = self.registry.resolve(request.model)
        if substitution is not None:
            notices.append(
                f"Модель «{substitution.requested}» недоступна, использована «{substitution.substitute}»."
            )

        domains = await self._resolve_domains(request, model, request_id, notices)

        self._log_state(request_id, PipelineState.SEARCHING, model=model, domains=domains)

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start) * 1000)

        try:
            response = await self.gateway.search(request, domains, model)
        except ProviderTimeout:
            notices.append(TIMEOUT_NOTICE)
            return self._finish(
                SearchOutcome(
                    request_id=request_id,
                    answer=self.reconciler.notice_answer(TIMEOUT_NOTICE, previous=request.previous_answer),
                    state=PipelineState.TIMEOUT_NOTICE,
                    model=model,
                    domains=domains,
                    notices=notices,
                    latency_ms=elapsed_ms(),
                )
            )
        except (ConfigurationError, ProviderError) as exc:
            self._log_state(request_id, PipelineState.ERROR, error=exc.message)
            raise
        except Exception as exc:
            self._log_state(request_id, PipelineState.ERROR, error=str(exc), error_type=type(exc).__name__)
            raise ProviderError(f"Search call failed: {exc}") from exc

        hits = extract_structured_hits(response)

        try:
            text, used_fallback_call = await self._answer_text(request, response, domains, model)
        except ProviderEmptyResponse:
            notices.append(EMPTY_NOTICE)
            # On "load more" the page already shown stays as it is
            return self._finish(
                SearchOutcome(
                    request_id=request_id,
                    answer=request.previous_answer if request.is_load_more else "",
                    state=PipelineState.FALLBACK_EMPTY,
                    model=model,
                    domains=domains,
                    notices=notices,
                    hit_count=len(hits),
                    latency_ms=elapsed_ms(),
                    used_fallback_call=True,
                )
            )

        if used_fallback_call:
            notices.append(NO_WEB_SEARCH_NOTICE)

        normalized = self.reconciler.normalize_answer(text, hits, previous=request.previous_answer)

        return self._finish(
            SearchOutcome(
                request_id=request_id,
                answer=normalized.markdown,
                state=PipelineState.SUCCESS,
                model=model,
                domains=domains,
                notices=notices,
                hit_count=len(hits),
                latency_ms=elapsed_ms(),
                used_fallback_call=used_fallback_call,
            ),
            reconciled=normalized.reconciled,
            row_count=len(normalized.table.rows) if normalized.table else 0,
        )
