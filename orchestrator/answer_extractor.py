"""
Text and web-search hit extraction from provider responses.

The Responses API has changed shape more than once, and callers may hand us an
SDK object, a plain dict (from model_dump() or a test), a bare string or a list
of output items. Everything degrades to "" / [] instead of raising.
"""

from typing import Any

from models.document_table import WebHit
from utils.logger import get_logger

logger = get_logger(__name__)

WEB_SEARCH_ITEM_TYPES = {"web_search_call", "web_search_preview_call", "web_search"}


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a dict key or an attribute."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _as_list(value: Any) -> list:
    if value is None or isinstance(value, (str, bytes, dict)):
        return []
    try:
        return list(value)
    except TypeError:
        return []


def _text_of(part: Any) -> str:
    """Text of a content part: a string, {"text": "..."} or {"text": {"value": "..."}}."""
    if isinstance(part, str):
        return part
    text = _field(part, "text")
    if isinstance(text, str):
        return text
    value = _field(text, "value")
    if isinstance(value, str):
        return value
    return ""


def _output_items(response: Any) -> list:
    if isinstance(response, (list, tuple)):
        return list(response)
    return _as_list(_field(response, "output"))


def _item_texts(item: Any) -> list[str]:
    content = _field(item, "content")
    if isinstance(content, str):
        return [content] if content.strip() else []
    texts = []
    for part in _as_list(content):
        text = _text_of(part)
        if text.strip():
            texts.append(text)
    return texts


def extract_text(response: Any) -> str:
    """
    Plain answer text of a provider response.

    Prefers the flat `output_text` field; otherwise joins the text parts of the
    output items with newlines; otherwise "".
    """
    try:
        if isinstance(response, str):
            return response

        flat = _field(response, "output_text")
        if isinstance(flat, str) and flat.strip():
            return flat

        texts: list[str] = []
        for item in _output_items(response):
            texts.extend(_item_texts(item))
        return "\n".join(texts)
    except Exception as exc:
        logger.warning(
            "Could not extract text from provider response",
            extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
        )
        return ""


def _hit_from(entry: Any) -> WebHit | None:
    url = _field(entry, "url")
    if not isinstance(url, str) or not url.strip():
        return None
    title = _field(entry, "title") or ""
    return WebHit(url=url.strip(), title=str(title).strip())


def _search_call_hits(item: Any) -> list[WebHit]:
    entries = []
    action = _field(item, "action")
    entries.extend(_as_list(_field(action, "sources")))
    entries.extend(_as_list(_field(item, "results")))
    entries.extend(_as_list(_field(item, "sources")))
    hits = []
    for entry in entries:
        hit = _hit_from(entry)
        if hit is not None:
            hits.append(hit)
    return hits


def _citation_hits(item: Any) -> list[WebHit]:
    hits = []
    for part in _as_list(_field(item, "content")):
        for annotation in _as_list(_field(part, "annotations")):
            if _field(annotation, "type") != "url_citation":
                continue
            hit = _hit_from(annotation)
            if hit is not None:
                hits.append(hit)
    return hits


def extract_structured_hits(response: Any) -> list[WebHit]:
    """
    Flatten the web-search tool's reported results into (url, title) hits.

    Tool-call results come first, then url_citation annotations on the
    message text. Order is preserved and nothing is deduplicated.
    """
    try:
        items = _output_items(response)
        tool_hits: list[WebHit] = []
        citation_hits: list[WebHit] = []
        for item in items:
            if _field(item, "type") in WEB_SEARCH_ITEM_TYPES:
                tool_hits.extend(_search_call_hits(item))
            else:
                citation_hits.extend(_citation_hits(item))
        return tool_hits + citation_hits
    except Exception as exc:
        logger.warning(
            "Could not extract web search hits from provider response",
            extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
        )
        return []
