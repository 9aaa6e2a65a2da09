"""
SearchRequest - one form submission, consumed by the orchestrator.

The request is immutable; "load more" is expressed by the client sending the
same request again with a longer history and the table it already shows.
"""

from dataclasses import dataclass, field
from enum import Enum


class Scenario(str, Enum):
    """How the domain allow-list is obtained."""

    EXPLICIT_SOURCES = "by_sources"
    AUTO_SOURCES = "auto_sources"


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    content: str

    def __post_init__(self):
        if self.role not in {"user", "assistant", "system"}:
            raise ValueError(f"Invalid conversation role: {self.role}")

    def to_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class SearchRequest:
    """
    Research query collected by the form.

    Attributes:
        topic: Free-text research topic
        keywords: Free-text keyword list
        period_from: ISO date string or "" when open
        period_to: ISO date string or "" when open
        source_labels: Known source labels (e.g. "IEEE"), at most five
        scenario: Explicit sources or model-proposed sources
        doc_types: Requested document types
        languages: Requested source languages
        need_translation: Ask for Russian titles and abstracts
        need_metrics: Ask for citation metrics and relevance
        model: Requested model identifier, validated against the registry
        history: Prior conversation turns, oldest first
        previous_answer: Table already shown to the user ("load more")
    """

    topic: str = ""
    keywords: str = ""
    period_from: str = ""
    period_to: str = ""
    source_labels: tuple[str, ...] = ()
    scenario: Scenario = Scenario.EXPLICIT_SOURCES
    doc_types: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    need_translation: bool = True
    need_metrics: bool = True
    model: str | None = None
    history: tuple[ConversationTurn, ...] = field(default_factory=tuple)
    previous_answer: str | None = None

    @property
    def uses_explicit_sources(self) -> bool:
        """Source labels are only consulted for the explicit scenario with labels present."""
        return self.scenario == Scenario.EXPLICIT_SOURCES and len(self.source_labels) > 0

    @property
    def is_load_more(self) -> bool:
        return bool(self.previous_answer and self.previous_answer.strip())

    def history_messages(self) -> list[dict[str, str]]:
        return [turn.to_message() for turn in self.history]
