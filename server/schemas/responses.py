"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, Field


class ErrorResponseDTO(BaseModel):
    error: str


class SearchResponseDTO(BaseModel):
    request_id: str
    answer: str
    notice: str | None = None
    state: str
    model: str
    domains: list[str] = Field(default_factory=list)
    cards: list[dict[str, str]] | None = None
    hit_count: int = 0
    latency_ms: int = 0
    timestamp: str

    @classmethod
    def from_outcome(cls, outcome, cards: list[dict[str, str]] | None = None):
        """Convert SearchOutcome to DTO."""
        return cls(
            request_id=outcome.request_id,
            answer=outcome.answer,
            notice=outcome.notice,
            state=outcome.state.value,
            model=outcome.model,
            domains=list(outcome.domains),
            cards=cards,
            hit_count=outcome.hit_count,
            latency_ms=outcome.latency_ms,
            timestamp=outcome.timestamp,
        )


class ModelOptionDTO(BaseModel):
    name: str
    label: str


class SearchOptionsDTO(BaseModel):
    sources: list[str]
    max_sources: int
    doc_types: list[str]
    languages: list[str]
    models: list[ModelOptionDTO]
    default_model: str


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"


class ProviderCheckDTO(BaseModel):
    ok: bool
    output: str | None = None
    error: str | None = None
