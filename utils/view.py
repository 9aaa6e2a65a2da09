"""Card projection of a document table, for clients that render cards instead of a grid."""

from models.document_table import EMPTY_CELL, DocumentTable
from orchestrator.table_reconciler import TableReconciler


def table_to_cards(table: DocumentTable, skip_empty: bool = True) -> list[dict[str, str]]:
    """
    One dict per row, header -> cell, in column order.

    Cells that are blank or a bare dash are left out when `skip_empty` is set.
    """
    cards: list[dict[str, str]] = []
    for i in range(len(table.rows)):
        row = table.padded_row(i)
        card: dict[str, str] = {}
        for header, cell in zip(table.headers, row):
            value = cell.strip()
            if skip_empty and (not value or value == EMPTY_CELL):
                continue
            card[header] = value
        cards.append(card)
    return cards


def answer_to_cards(markdown: str) -> list[dict[str, str]]:
    """Cards for a normalized answer; an answer without a table gives no cards."""
    table = TableReconciler().parse(markdown)
    if table.is_empty:
        return []
    return table_to_cards(table)
