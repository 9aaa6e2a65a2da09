import asyncio
import time

import pytest

from models.errors import ProviderError, ProviderTimeout
from orchestrator.fallback_manager import TimeoutPolicy, bounded_call

pytestmark = pytest.mark.unit


def _slow(value, delay_s):
    def _fn():
        time.sleep(delay_s)
        return value

    return _fn


def test_returns_value_within_ceiling():
    result = asyncio.run(bounded_call(lambda: "ok", TimeoutPolicy(timeout_s=1.0)))
    assert result.value == "ok"
    assert not result.timed_out
    assert result.elapsed_ms >= 0


def test_timeout_without_fallback_raises_provider_timeout():
    policy = TimeoutPolicy(timeout_s=0.05, phase="search")
    with pytest.raises(ProviderTimeout) as exc_info:
        asyncio.run(bounded_call(_slow("late", 0.3), policy))
    assert exc_info.value.phase == "search"
    assert exc_info.value.timeout_s == 0.05


def test_timeout_with_fallback_returns_fallback():
    policy = TimeoutPolicy(timeout_s=0.05, phase="discovery").with_fallback(["arxiv.org"])
    result = asyncio.run(bounded_call(_slow(["late.org"], 0.3), policy))
    assert result.value == ["arxiv.org"]
    assert result.timed_out


def test_none_is_a_valid_fallback():
    policy = TimeoutPolicy(timeout_s=0.05).with_fallback(None)
    assert policy.has_fallback
    assert not TimeoutPolicy(timeout_s=0.05).has_fallback
    result = asyncio.run(bounded_call(_slow("late", 0.3), policy))
    assert result.value is None
    assert result.timed_out


def test_errors_from_call_propagate_even_with_fallback():
    def _boom():
        raise ProviderError("rate limited")

    policy = TimeoutPolicy(timeout_s=1.0).with_fallback("unused")
    with pytest.raises(ProviderError, match="rate limited"):
        asyncio.run(bounded_call(_boom, policy))
