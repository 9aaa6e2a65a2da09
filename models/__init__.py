"""
Models package for search requests, document tables and pipeline outcomes.
"""

from .document_table import DOCUMENT_COLUMNS, DocumentTable, WebHit
from .search_outcome import PipelineState, SearchOutcome
from .search_request import ConversationTurn, Scenario, SearchRequest

__all__ = [
    "DOCUMENT_COLUMNS",
    "ConversationTurn",
    "DocumentTable",
    "PipelineState",
    "Scenario",
    "SearchOutcome",
    "SearchRequest",
    "WebHit",
]
