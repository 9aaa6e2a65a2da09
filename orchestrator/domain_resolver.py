"""Source label lookup and sanitation of model-proposed domains."""

import re

from utils.logger import get_logger

logger = get_logger(__name__)

# Form label -> domains the web-search tool is restricted to
SOURCE_DOMAIN_MAP: dict[str, tuple[str, ...]] = {
    "IEEE": ("ieeexplore.ieee.org",),
    "SpringerLink": ("link.springer.com",),
    "ScienceDirect": ("www.sciencedirect.com", "sciencedirect.com"),
    "Wiley": ("onlinelibrary.wiley.com",),
    "PubMed": ("pubmed.ncbi.nlm.nih.gov", "www.ncbi.nlm.nih.gov"),
    "arXiv": ("arxiv.org",),
    "Scopus": ("www.scopus.com",),
}

SOURCE_LABELS: tuple[str, ...] = tuple(SOURCE_DOMAIN_MAP)
MAX_SOURCE_LABELS = 5

# Used when auto discovery fails, times out or yields nothing usable
DEFAULT_DOMAINS: tuple[str, ...] = (
    "ieeexplore.ieee.org",
    "link.springer.com",
    "www.sciencedirect.com",
    "arxiv.org",
    "pubmed.ncbi.nlm.nih.gov",
)

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)
_ENUMERATION_RE = re.compile(r"^[\d.\-()*\s]+")


class DomainResolver:
    """Turns source labels or raw model lines into a domain allow-list."""

    def __init__(self, domain_map: dict[str, tuple[str, ...]] | None = None):
        self.domain_map = domain_map if domain_map is not None else SOURCE_DOMAIN_MAP

    def resolve(self, labels) -> list[str]:
        """
        Map known labels to their domains.

        Order follows the input labels, then each label's own domain order.
        Unknown labels contribute nothing.
        """
        domains: list[str] = []
        for label in labels or []:
            mapped = self.domain_map.get(label)
            if not mapped:
                logger.warning(
                    "Unknown source label dropped",
                    extra={"extra_fields": {"label": label}},
                )
                continue
            domains.extend(mapped)
        return domains

    def unknown_labels(self, labels) -> list[str]:
        return [label for label in labels or [] if label not in self.domain_map]

    @staticmethod
    def sanitize_one(raw: str) -> str | None:
        """Clean a single domain-like string, or None when it does not look like a domain."""
        if raw is None:
            return None
        text = str(raw).strip()
        if not text or text.startswith("#"):
            return None

        text = _PROTOCOL_RE.sub("", text)
        text = _ENUMERATION_RE.sub("", text)
        # "1. https://..." - enumeration in front of the protocol
        text = _PROTOCOL_RE.sub("", text)

        tokens = text.split()
        if not tokens:
            return None
        candidate = tokens[0].rstrip("/").rstrip("*,;")
        candidate = candidate.rstrip("/")

        if "." not in candidate:
            return None
        return candidate

    def sanitize(self, raw_strings) -> list[str]:
        """
        Clean model-proposed domains, dropping anything without a dot.

        Case and duplicates are left alone.
        """
        domains: list[str] = []
        for raw in raw_strings or []:
            cleaned = self.sanitize_one(raw)
            if cleaned is not None:
                domains.append(cleaned)
        return domains

    def sanitize_text(self, text: str, limit: int | None = None) -> list[str]:
        """Sanitize a newline-separated block, keeping at most `limit` domains."""
        domains = self.sanitize((text or "").splitlines())
        if limit is not None:
            domains = domains[:limit]
        return domains
