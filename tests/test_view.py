import pytest

from fakes import TABLE_MD
from models.document_table import DocumentTable
from utils.view import answer_to_cards, table_to_cards

pytestmark = pytest.mark.unit


def test_cards_follow_column_order_and_skip_blanks():
    table = DocumentTable(
        headers=["№", "Название", "Ссылка (URL)", "Примечания"],
        rows=[["1", "A", "—", ""], ["2", "B"]],
    )
    cards = table_to_cards(table)
    assert cards == [{"№": "1", "Название": "A"}, {"№": "2", "Название": "B"}]
    assert list(cards[0]) == ["№", "Название"]


def test_cards_can_keep_blank_cells():
    table = DocumentTable(headers=["№", "Название"], rows=[["1"]])
    assert table_to_cards(table, skip_empty=False) == [{"№": "1", "Название": ""}]


def test_answer_to_cards_parses_markdown():
    cards = answer_to_cards(TABLE_MD)
    assert [card["№"] for card in cards] == ["1", "2"]
    assert "Ссылка (URL)" not in cards[0]


def test_answer_without_table_has_no_cards():
    assert answer_to_cards("Документы не найдены.") == []
