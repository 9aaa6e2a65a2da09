import pytest

from orchestrator.domain_resolver import DomainResolver

pytestmark = pytest.mark.unit


@pytest.fixture
def resolver():
    return DomainResolver()


def test_resolve_preserves_label_then_domain_order(resolver):
    assert resolver.resolve(["IEEE", "arXiv"]) == ["ieeexplore.ieee.org", "arxiv.org"]
    assert resolver.resolve(["PubMed", "IEEE"]) == [
        "pubmed.ncbi.nlm.nih.gov",
        "www.ncbi.nlm.nih.gov",
        "ieeexplore.ieee.org",
    ]


def test_resolve_drops_unknown_labels(resolver):
    assert resolver.resolve(["IEEE", "ieee", "Nature"]) == ["ieeexplore.ieee.org"]
    assert resolver.unknown_labels(["IEEE", "ieee", "Nature"]) == ["ieee", "Nature"]
    assert resolver.resolve([]) == []
    assert resolver.resolve(None) == []


def test_sanitize_strips_protocol_any_case(resolver):
    assert resolver.sanitize(["HTTPS://Example.com/"]) == ["Example.com"]
    assert resolver.sanitize(["http://arxiv.org"]) == ["arxiv.org"]


def test_sanitize_strips_enumeration(resolver):
    assert resolver.sanitize(["1. ieeexplore.ieee.org"]) == ["ieeexplore.ieee.org"]
    assert resolver.sanitize(["2) link.springer.com", "- arxiv.org", "* www.scopus.com"]) == [
        "link.springer.com",
        "arxiv.org",
        "www.scopus.com",
    ]


def test_sanitize_enumeration_before_protocol(resolver):
    assert resolver.sanitize(["3. https://www.sciencedirect.com/"]) == ["www.sciencedirect.com"]


def test_sanitize_keeps_first_token_only(resolver):
    assert resolver.sanitize(["arxiv.org — препринты по физике"]) == ["arxiv.org"]


def test_sanitize_drops_non_domains(resolver):
    assert resolver.sanitize(["Вот список доменов:", "", "   ", "# Домены", "localhost"]) == []


def test_sanitize_does_not_dedupe_or_lowercase(resolver):
    assert resolver.sanitize(["ArXiv.org", "arxiv.org", "arxiv.org"]) == [
        "ArXiv.org",
        "arxiv.org",
        "arxiv.org",
    ]


def test_sanitize_text_applies_limit(resolver):
    text = "\n".join(f"{i}. site{i}.org" for i in range(1, 11))
    assert resolver.sanitize_text(text, limit=7) == [f"site{i}.org" for i in range(1, 8)]
