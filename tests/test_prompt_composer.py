import pytest

from models.document_table import DOCUMENT_COLUMNS
from models.search_request import ConversationTurn, Scenario, SearchRequest
from orchestrator.prompt_composer import (
    DEFAULT_DOC_TYPES,
    DEFAULT_LANGUAGES,
    PromptComposer,
    format_period,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "period_from, period_to, expected",
    [
        ("2020-01-01", "2021-01-01", "2020-01-01 — 2021-01-01"),
        ("2020-01-01", "", "с 2020-01-01"),
        ("", "2021-01-01", "до 2021-01-01"),
        ("", "", "не указан"),
        (None, None, "не указан"),
    ],
)
def test_format_period(period_from, period_to, expected):
    assert format_period(period_from, period_to) == expected


def test_context_block_fixed_order_and_defaults():
    block = PromptComposer().build_context_block(SearchRequest(need_translation=False))
    lines = block.splitlines()
    assert lines == [
        "Тема запроса: не указана",
        "Ключевые слова: не указаны",
        "Период: не указан",
        f"Типы документов: {DEFAULT_DOC_TYPES}",
        f"Языки: {DEFAULT_LANGUAGES}",
        "Нужен перевод на русский: нет",
        "Нужны метрики и релевантность: да",
    ]


def test_context_block_uses_request_values():
    request = SearchRequest(
        topic="radar LPI",
        keywords="LPI, FMCW",
        period_from="2020-01-01",
        doc_types=("Статьи", "Патенты"),
        languages=("Английский",),
    )
    block = PromptComposer().build_context_block(request)
    assert "Тема запроса: radar LPI" in block
    assert "Ключевые слова: LPI, FMCW" in block
    assert "Период: с 2020-01-01" in block
    assert "Типы документов: Статьи, Патенты" in block
    assert "Языки: Английский" in block


def test_system_prompt_carries_full_table_schema():
    prompt = PromptComposer().build_system_prompt()
    for column in DOCUMENT_COLUMNS:
        assert column in prompt
    assert "не выдумывай" in prompt


def test_discovery_prompt_asks_for_domains():
    request = SearchRequest(topic="corrosion", keywords="offshore")
    composer = PromptComposer()
    assert "5-7 доменов" in composer.build_discovery_prompt(request)

    messages = composer.build_discovery_messages(request)
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == "Тема: corrosion. Ключевые слова: offshore. Период: не указан."


def test_search_messages_restrict_to_domains_and_append_history():
    request = SearchRequest(
        topic="radar LPI",
        source_labels=("IEEE",),
        history=(
            ConversationTurn("user", "Тема: radar LPI"),
            ConversationTurn("assistant", "| № |"),
        ),
    )
    messages = PromptComposer().build_search_messages(request, ["ieeexplore.ieee.org"])

    assert messages[0]["role"] == "system"
    assert messages[1]["role"] == "user"
    assert "Ограничь поисковые источники доменами: ieeexplore.ieee.org" in messages[1]["content"]
    assert messages[2:] == [
        {"role": "user", "content": "Тема: radar LPI"},
        {"role": "assistant", "content": "| № |"},
    ]


def test_search_instruction_for_auto_domains_and_no_domains():
    composer = PromptComposer()
    auto = SearchRequest(scenario=Scenario.AUTO_SOURCES)
    assert "преимущественно эти домены: arxiv.org" in composer.build_search_messages(auto, ["arxiv.org"])[1]["content"]

    unrestricted = composer.build_search_messages(SearchRequest(), [])[1]["content"]
    assert unrestricted.endswith("Выведи таблицу.")
    assert "домен" not in unrestricted
