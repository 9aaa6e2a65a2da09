"""Search endpoint: one form submission (or "load more") per call."""

from fastapi import APIRouter, Depends, Request

from orchestrator.core import SearchOrchestrator
from orchestrator.domain_resolver import MAX_SOURCE_LABELS, SOURCE_LABELS
from server.dependencies import get_orchestrator
from server.schemas.requests import SearchRequestDTO
from server.schemas.responses import (
    ErrorResponseDTO,
    ModelOptionDTO,
    SearchOptionsDTO,
    SearchResponseDTO,
)
from utils.logger import get_logger
from utils.view import answer_to_cards

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Search"])

DOC_TYPE_OPTIONS = ["Статьи", "Материалы конференций", "Патенты", "Препринты", "Обзоры"]
LANGUAGE_OPTIONS = ["Английский", "Русский"]


@router.post(
    "/search",
    response_model=SearchResponseDTO,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponseDTO}, 502: {"model": ErrorResponseDTO}},
)
async def search(
    request: SearchRequestDTO,
    http_request: Request,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Run a document search and return the normalized markdown table."""
    request_id = getattr(http_request.state, "request_id", None)
    outcome = await orchestrator.run(request.to_search_request(), request_id=request_id)

    cards = answer_to_cards(outcome.answer) if request.view == "cards" else None
    return SearchResponseDTO.from_outcome(outcome, cards=cards)


@router.get("/options", response_model=SearchOptionsDTO)
async def search_options(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """Choices the search form offers."""
    registry = orchestrator.registry
    return SearchOptionsDTO(
        sources=list(SOURCE_LABELS),
        max_sources=MAX_SOURCE_LABELS,
        doc_types=DOC_TYPE_OPTIONS,
        languages=LANGUAGE_OPTIONS,
        models=[ModelOptionDTO(name=m.name, label=m.label) for m in registry.list_enabled_models()],
        default_model=registry.default_model,
    )
