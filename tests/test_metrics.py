"""Unit tests for voicenav Prometheus metrics."""

from prometheus_client import REGISTRY

from src.voicenav.metrics import (
    record_command,
    record_fallback,
    record_proxy_request,
    record_remote_result,
)


def _sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetrics:
    def test_record_command(self):
        labels = {"source": "local", "action": "go_home", "status": "resolved"}
        before = _sample("voicenav_commands_total", labels)
        record_command("local", "go_home", "resolved")
        assert _sample("voicenav_commands_total", labels) == before + 1

    def test_record_fallback(self):
        before = _sample("voicenav_fallbacks_total", {"reason": "timeout"})
        record_fallback("timeout")
        assert _sample("voicenav_fallbacks_total", {"reason": "timeout"}) == before + 1

    def test_record_remote_result(self):
        before = _sample("voicenav_remote_latency_seconds_count")
        record_remote_result(0.3, "navigate_project", 0.9)
        assert _sample("voicenav_remote_latency_seconds_count") == before + 1
        assert _sample(
            "voicenav_intent_confidence_count", {"action": "navigate_project"}
        ) >= 1

    def test_record_proxy_request(self):
        before = _sample("voicenav_proxy_requests_total", {"status": "405"})
        record_proxy_request(405)
        assert _sample("voicenav_proxy_requests_total", {"status": "405"}) == before + 1
