from types import SimpleNamespace

import pytest

from fakes import make_response
from models.document_table import WebHit
from orchestrator.answer_extractor import extract_structured_hits, extract_text

pytestmark = pytest.mark.unit


def test_prefers_flat_output_text():
    response = {"output_text": "flat", "output": [{"type": "message", "content": [{"text": "nested"}]}]}
    assert extract_text(response) == "flat"


def test_joins_output_item_texts_skipping_items_without_text():
    response = {
        "output_text": "",
        "output": [
            {"type": "web_search_call", "action": {"type": "search"}},
            {"type": "message", "content": [{"type": "output_text", "text": "first"}]},
            {"type": "reasoning", "content": []},
            {"type": "message", "content": [{"type": "output_text", "text": "second"}]},
        ],
    }
    assert extract_text(response) == "first\nsecond"


def test_reads_legacy_value_wrapped_text():
    response = {"output": [{"content": [{"text": {"value": "legacy"}}]}]}
    assert extract_text(response) == "legacy"


def test_reads_sdk_like_objects():
    part = SimpleNamespace(type="output_text", text="from object", annotations=[])
    response = SimpleNamespace(output_text=None, output=[SimpleNamespace(type="message", content=[part])])
    assert extract_text(response) == "from object"


@pytest.mark.parametrize("response", [None, 42, {}, {"output": "oops"}, {"output": [None, 3, "x"]}])
def test_malformed_shapes_degrade_to_empty(response):
    assert extract_text(response) == ""
    assert extract_structured_hits(response) == []


def test_hits_from_search_calls_then_citations():
    response = make_response("text", urls=["https://a.org/1", ""])
    response["output"].insert(
        1, {"type": "web_search_call", "results": [{"url": "https://b.org/2", "title": "B"}]}
    )
    response["output"][-1]["content"][0]["annotations"] = [
        {"type": "url_citation", "url": "https://c.org/3", "title": "C"},
        {"type": "file_citation", "file_id": "f1"},
    ]

    hits = extract_structured_hits(response)

    assert hits == [
        WebHit(url="https://a.org/1", title="title 0"),
        WebHit(url="https://b.org/2", title="B"),
        WebHit(url="https://c.org/3", title="C"),
    ]


def test_hits_from_sdk_like_objects():
    source = SimpleNamespace(type="url", url="https://arxiv.org/abs/1", title=None)
    call = SimpleNamespace(type="web_search_call", action=SimpleNamespace(type="search", sources=[source]))
    response = SimpleNamespace(output=[call])
    assert extract_structured_hits(response) == [WebHit(url="https://arxiv.org/abs/1", title="")]
