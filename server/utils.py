"""Shared utilities for FastAPI routes."""

from collections.abc import Mapping

from models.search_request import ConversationTurn

MAX_HISTORY_MESSAGES = 20
MAX_HISTORY_CHARS = 60000
SENSITIVE_HEADERS = {"x-api-key", "authorization", "cookie"}


def trim_history(history: list[ConversationTurn]) -> list[ConversationTurn]:
    """
    Keep the most recent turns that fit the message and character budgets.

    History grows by a whole table on every "load more", so the oldest turns
    are dropped instead of rejecting the request.
    """
    if not history:
        return []

    trimmed = list(history[-MAX_HISTORY_MESSAGES:])
    total_chars = sum(len(turn.content) for turn in trimmed)
    while trimmed and total_chars > MAX_HISTORY_CHARS:
        total_chars -= len(trimmed.pop(0).content)
    return trimmed


def redact_sensitive_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redact auth-bearing headers before logging.
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and value:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted
