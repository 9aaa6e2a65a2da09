"""Pydantic request models for FastAPI endpoints."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.search_request import ConversationTurn, Scenario, SearchRequest
from server.utils import trim_history


class ConversationHistoryItem(BaseModel):
    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str


class SearchRequestDTO(BaseModel):
    """Body of POST /v1/search. Field names follow the form's camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    topic: str = ""
    keywords: str = ""
    period_from: str = Field("", alias="periodFrom")
    period_to: str = Field("", alias="periodTo")
    sources: list[str] = Field(default_factory=list, max_length=5)
    scenario: Literal["by_sources", "auto_sources"] = "by_sources"
    history: list[ConversationHistoryItem] = Field(default_factory=list)
    doc_types: list[str] = Field(default_factory=list, alias="docTypes")
    languages: list[str] = Field(default_factory=list)
    need_ru: bool = Field(True, alias="needRu")
    need_metrics: bool = Field(True, alias="needMetrics")
    model: Optional[str] = None
    previous_answer: Optional[str] = Field(None, alias="previousAnswer")
    view: Literal["table", "cards"] = "table"

    @field_validator("period_from", "period_to")
    @classmethod
    def validate_iso_date(cls, value: str) -> str:
        value = (value or "").strip()
        if value:
            try:
                date.fromisoformat(value)
            except ValueError:
                raise ValueError("dates must be in YYYY-MM-DD format")
        return value

    @model_validator(mode="after")
    def validate_period_order(self):
        if self.period_from and self.period_to and self.period_from > self.period_to:
            raise ValueError("periodFrom must not be later than periodTo")
        return self

    def to_search_request(self) -> SearchRequest:
        history = trim_history(
            [ConversationTurn(role=item.role, content=item.content) for item in self.history]
        )
        return SearchRequest(
            topic=self.topic.strip(),
            keywords=self.keywords.strip(),
            period_from=self.period_from,
            period_to=self.period_to,
            source_labels=tuple(self.sources),
            scenario=Scenario(self.scenario),
            doc_types=tuple(self.doc_types),
            languages=tuple(self.languages),
            need_translation=self.need_ru,
            need_metrics=self.need_metrics,
            model=self.model,
            history=tuple(history),
            previous_answer=self.previous_answer,
        )
