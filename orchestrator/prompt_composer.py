"""Prompt assembly for the discovery and search calls."""

from models.document_table import DOCUMENT_COLUMNS
from models.search_request import SearchRequest

DEFAULT_DOC_TYPES = "статьи, обзоры, патенты, конференции"
DEFAULT_LANGUAGES = "английский, при наличии — русский"
LOAD_MORE_PROMPT = "Дай следующую подборку документов."


def _table_schema() -> str:
    header = "| " + " | ".join(DOCUMENT_COLUMNS) + " |"
    separator = "|" + "|".join("---" for _ in DOCUMENT_COLUMNS) + "|"
    return f"{header}\n{separator}"


SYSTEM_PROMPT = f"""
Ты — агент по поиску научно-технической информации через веб-поиск.
Главный приоритет — релевантность, затем свежесть.
Если все наиболее релевантные документы из одного источника — верни их так, не разбавляя.
Формат ответа — одна таблица Markdown:

{_table_schema()}

Ссылку бери из результатов веб-поиска, не выдумывай /document/1234567.
Если ссылка в поиске отсутствует — такой документ не включай.
Не повторяй документы, которые уже были в предыдущих ответах.
""".strip()

DISCOVERY_SYSTEM_PROMPT = (
    "Ты помогаешь выбрать лучшие источники (домены) для поиска НТИ. "
    "Верни 5-7 доменов, по одному в строку. Без комментариев."
)


def format_period(period_from: str | None, period_to: str | None) -> str:
    period_from = (period_from or "").strip()
    period_to = (period_to or "").strip()
    if period_from and period_to:
        return f"{period_from} — {period_to}"
    if period_from:
        return f"с {period_from}"
    if period_to:
        return f"до {period_to}"
    return "не указан"


def _yes_no(flag: bool) -> str:
    return "да" if flag else "нет"


class PromptComposer:
    """Builds every prompt the gateway sends. Stateless."""

    def build_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_context_block(self, request: SearchRequest) -> str:
        period = format_period(request.period_from, request.period_to)
        doc_types = ", ".join(request.doc_types) if request.doc_types else DEFAULT_DOC_TYPES
        languages = ", ".join(request.languages) if request.languages else DEFAULT_LANGUAGES
        lines = [
            f"Тема запроса: {request.topic or 'не указана'}",
            f"Ключевые слова: {request.keywords or 'не указаны'}",
            f"Период: {period}",
            f"Типы документов: {doc_types}",
            f"Языки: {languages}",
            f"Нужен перевод на русский: {_yes_no(request.need_translation)}",
            f"Нужны метрики и релевантность: {_yes_no(request.need_metrics)}",
        ]
        return "\n".join(lines)

    def _discovery_query(self, request: SearchRequest) -> str:
        period = format_period(request.period_from, request.period_to)
        return f"Тема: {request.topic}. Ключевые слова: {request.keywords}. Период: {period}."

    def build_discovery_prompt(self, request: SearchRequest) -> str:
        """Single-text form of the discovery request: 5-7 domains, one per line."""
        return f"{DISCOVERY_SYSTEM_PROMPT}\n{self._discovery_query(request)}"

    def build_discovery_messages(self, request: SearchRequest) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": DISCOVERY_SYSTEM_PROMPT},
            {"role": "user", "content": self._discovery_query(request)},
        ]

    def build_search_instruction(self, domains: list[str], explicit: bool) -> str:
        if not domains:
            return "Выведи таблицу."
        if explicit:
            return (
                f"Ограничь поисковые источники доменами: {', '.join(domains)}. "
                "Выведи ровно одну таблицу."
            )
        return (
            f"Используй для поиска преимущественно эти домены: {', '.join(domains)}. "
            "Выведи ровно одну таблицу."
        )

    def build_search_messages(self, request: SearchRequest, domains: list[str]) -> list[dict[str, str]]:
        user_content = (
            self.build_context_block(request)
            + "\n"
            + self.build_search_instruction(domains, explicit=request.uses_explicit_sources)
        )
        return [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": user_content},
            *request.history_messages(),
        ]
