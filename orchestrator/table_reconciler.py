"""
Markdown table normalization for model answers.

The model is asked for exactly one pipe table. This module parses it, fills
the link column from the web-search tool's structured results, writes it back
out and merges "load more" pages. Nothing here raises to the caller: when no
table can be found the raw text is shown as-is.
"""

import re
from dataclasses import dataclass

from models.document_table import DOCUMENT_COLUMNS, EMPTY_CELL, DocumentTable, WebHit
from models.errors import MalformedTable
from utils.logger import get_logger

logger = get_logger(__name__)

LINK_HEADER_NEEDLES = ("ссылка", "url")
NOTES_HEADER_NEEDLES = ("примечания", "notes")

_SEPARATOR_RUN_RE = re.compile(r"\|(?:[ \t]*:?-{3,}:?[ \t]*\|)+")


@dataclass(frozen=True)
class NormalizedAnswer:
    markdown: str
    table: DocumentTable | None
    reconciled: bool


def _split_pipe_line(line: str) -> list[str]:
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def serialize_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


class TableReconciler:
    """Parse, reconcile, serialize and merge document tables."""

    def repair_collapsed(self, markdown: str) -> str:
        """
        Re-insert line breaks when the model put the whole table on one line.

        The separator run fixes the column count. Cells after it are cut into
        rows of exactly that width, each row followed by the empty token that
        the "| |" row boundary leaves. An empty cell next to a numeric one is
        therefore never mistaken for the start of a row. Text that already has
        a line starting with a pipe, or has no separator run, is returned
        unchanged.
        """
        if not markdown or "\n|" in markdown or markdown.lstrip().count("|") < 2:
            return markdown

        separator = _SEPARATOR_RUN_RE.search(markdown)
        if separator is None:
            return markdown
        head = markdown[:separator.start()]
        table_start = head.find("|")
        if table_start < 0:
            return markdown

        width = len(_split_pipe_line(separator.group(0)))
        lines = [
            head[:table_start].strip(),
            serialize_row(_split_pipe_line(head[table_start:])),
            separator.group(0).strip(),
        ]

        tokens = markdown[separator.end():].split("|")
        pos = 0
        while pos + width < len(tokens) - 1 and not tokens[pos].strip():
            lines.append(serialize_row([cell.strip() for cell in tokens[pos + 1:pos + 1 + width]]))
            pos += width + 1

        remainder = tokens[pos:]
        if len(remainder) > 1 and not remainder[0].strip():
            # Short last row; parse pads it
            lines.append("|" + "|".join(remainder[1:]).rstrip())
        else:
            lines.append("|".join(remainder).strip())

        return "\n".join(line for line in lines if line)

    def parse(self, markdown: str) -> DocumentTable:
        """
        Parse the first pipe table in `markdown`.

        The first line starting with "|" is the header, the line right after it
        is taken as the separator, and every later "|" line is a row. Other
        lines are ignored. No header gives an empty table.
        """
        lines = (markdown or "").splitlines()
        header_index = None
        for idx, line in enumerate(lines):
            if line.strip().startswith("|"):
                header_index = idx
                break

        if header_index is None:
            return DocumentTable()

        headers = _split_pipe_line(lines[header_index])
        rows: list[list[str]] = []
        for line in lines[header_index + 2:]:
            if not line.strip().startswith("|"):
                continue
            rows.append(_split_pipe_line(line))

        return DocumentTable(headers=headers, rows=rows)

    def reconcile_links(self, table: DocumentTable, hits: list[WebHit]) -> DocumentTable:
        """
        Fill the link column from structured web-search hits.

        Row i is paired with hit i. The provider gives no ordering guarantee, so
        this is a best-effort heuristic: a hit URL wins, otherwise an existing
        cell is kept, otherwise the cell becomes a dash.
        """
        link_idx = table.column_index(*LINK_HEADER_NEEDLES)
        if link_idx is None:
            return DocumentTable(headers=list(table.headers), rows=[list(r) for r in table.rows])

        rows: list[list[str]] = []
        for i in range(len(table.rows)):
            row = table.padded_row(i)
            hit_url = hits[i].url.strip() if i < len(hits) and hits[i].url else ""
            if hit_url:
                row[link_idx] = hit_url
            elif not row[link_idx].strip():
                row[link_idx] = EMPTY_CELL
            rows.append(row)

        return DocumentTable(headers=list(table.headers), rows=rows)

    def serialize(self, table: DocumentTable) -> str:
        if table.is_empty:
            return ""
        lines = [
            serialize_row(table.headers),
            serialize_row(["---"] * len(table.headers)),
        ]
        lines.extend(serialize_row(row) for row in table.rows)
        return "\n".join(lines)

    def merge_append(self, old: DocumentTable, new: DocumentTable) -> DocumentTable:
        """
        Append `new` rows below `old` rows, dropping exact duplicates.

        A new row is dropped when its trimmed serialized form equals that of a
        row already in the result. Near-duplicates (same document, different
        wording) are kept.
        """
        if old.is_empty:
            return DocumentTable(headers=list(new.headers), rows=[list(r) for r in new.rows])

        seen = {serialize_row(row).strip() for row in old.rows}
        rows = [list(r) for r in old.rows]
        for row in new.rows:
            key = serialize_row(row).strip()
            if key in seen:
                continue
            seen.add(key)
            rows.append(list(row))

        return DocumentTable(headers=list(old.headers), rows=rows)

    def placeholder_table(
        self, notice: str, headers: list[str] | None = None, number: int = 1
    ) -> DocumentTable:
        headers = list(headers or DOCUMENT_COLUMNS)
        row = [EMPTY_CELL] * len(headers)
        row[0] = str(number)
        notes_idx = DocumentTable(headers=headers).column_index(*NOTES_HEADER_NEEDLES)
        row[notes_idx if notes_idx is not None else len(row) - 1] = notice
        return DocumentTable(headers=headers, rows=[row])

    def notice_answer(self, notice: str, previous: str | None = None) -> str:
        """
        Serialized placeholder table carrying `notice`.

        On "load more" the placeholder row is appended below the page the user
        already has, numbered after its last row, so no shown row is lost.
        """
        previous_table = self.parse(self.repair_collapsed(previous or ""))
        if previous_table.is_empty:
            return self.serialize(self.placeholder_table(notice))

        placeholder = self.placeholder_table(
            notice, headers=previous_table.headers, number=len(previous_table.rows) + 1
        )
        return self.serialize(self.merge_append(previous_table, placeholder))

    def _parse_strict(self, markdown: str) -> DocumentTable:
        table = self.parse(self.repair_collapsed(markdown))
        if table.is_empty:
            raise MalformedTable("No markdown table header found in model output")
        return table

    def normalize_answer(
        self, text: str, hits: list[WebHit], previous: str | None = None
    ) -> NormalizedAnswer:
        """
        repair -> parse -> reconcile links -> (merge with previous page) -> serialize.

        Any failure returns the raw text unreconciled.
        """
        try:
            table = self.reconcile_links(self._parse_strict(text), hits)

            if previous and previous.strip():
                previous_table = self.parse(self.repair_collapsed(previous))
                table = self.merge_append(previous_table, table)

            return NormalizedAnswer(markdown=self.serialize(table), table=table, reconciled=True)
        except MalformedTable as exc:
            logger.info(
                "Answer has no table, returning raw text",
                extra={"extra_fields": {"reason": exc.message, "text_length": len(text or "")}},
            )
        except Exception as exc:
            logger.warning(
                "Table normalization failed, returning raw text",
                extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
            )
        return NormalizedAnswer(markdown=text or "", table=None, reconciled=False)
