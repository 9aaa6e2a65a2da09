from dataclasses import dataclass, field

# Column contract the model is asked to produce, in order.
DOCUMENT_COLUMNS: tuple[str, ...] = (
    "№",
    "Тип документа",
    "Источник",
    "Дата публикации (ДД.ММ.ГГГГ)",
    "Название (оригинал)",
    "Название (русский перевод)",
    "Аннотация (оригинал)",
    "Аннотация (русский перевод)",
    "Страна",
    "Язык",
    "Индекс цитируемости / метрики",
    "Совпавшие ключевые слова",
    "Релевантность",
    "Ссылка (URL)",
    "DOI / Номер патента",
    "Примечания",
)

EMPTY_CELL = "—"


@dataclass(frozen=True)
class WebHit:
    """A single structured result reported by the web-search tool."""

    url: str
    title: str = ""


@dataclass
class DocumentTable:
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    def padded_row(self, index: int) -> list[str]:
        """Return row `index` padded with empty cells up to the header length."""
        row = list(self.rows[index])
        if len(row) < len(self.headers):
            row.extend([""] * (len(self.headers) - len(row)))
        return row

    def column_index(self, *needles: str) -> int | None:
        """Index of the first header whose lowercase text contains any needle."""
        for idx, header in enumerate(self.headers):
            lowered = header.lower()
            if any(needle in lowered for needle in needles):
                return idx
        return None
