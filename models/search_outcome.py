from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PipelineState(str, Enum):
    COMPOSING = "composing"
    DISCOVERING = "discovering"
    SEARCHING = "searching"
    SUCCESS = "success"
    FALLBACK_EMPTY = "fallback_empty"
    TIMEOUT_NOTICE = "timeout_notice"
    ERROR = "error"


TERMINAL_STATES = {
    PipelineState.SUCCESS,
    PipelineState.FALLBACK_EMPTY,
    PipelineState.TIMEOUT_NOTICE,
    PipelineState.ERROR,
}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class SearchOutcome:
    request_id: str
    answer: str
    state: PipelineState
    model: str
    domains: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    hit_count: int = 0
    latency_ms: int = 0
    used_fallback_call: bool = False
    timestamp: str = field(default_factory=_utc_timestamp)

    def __post_init__(self):
        if self.state not in TERMINAL_STATES:
            raise ValueError(f"SearchOutcome requires a terminal state, got {self.state}")

    @property
    def notice(self) -> str | None:
        """All soft warnings joined into one user-facing sentence block."""
        if not self.notices:
            return None
        return " ".join(self.notices)

    def to_dict(self) -> dict[str, Any]:
        """Log-friendly view; the answer is cut to a short preview."""
        return {
            "request_id": self.request_id,
            "answer": self.answer if len(self.answer) <= 200 else self.answer[:200] + "...",
            "state": self.state.value,
            "model": self.model,
            "domains": list(self.domains),
            "notice": self.notice,
            "hit_count": self.hit_count,
            "latency_ms": self.latency_ms,
            "used_fallback_call": self.used_fallback_call,
            "timestamp": self.timestamp,
        }
