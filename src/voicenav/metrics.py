"""Prometheus metrics for voice navigation.

Uses the ``voicenav_*`` prefix for all metrics. The proxy service exposes
them on /metrics.
"""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("voicenav.metrics")

__all__ = [
    "commands_total",
    "fallbacks_total",
    "intent_confidence",
    "proxy_requests_total",
    "record_command",
    "record_fallback",
    "record_proxy_request",
    "record_remote_result",
    "remote_latency_seconds",
]

commands_total = Counter(
    "voicenav_commands_total",
    "Voice commands resolved",
    ["source", "action", "status"],  # status: resolved/fallback/superseded
)

fallbacks_total = Counter(
    "voicenav_fallbacks_total",
    "Fallbacks taken while handling a command",
    ["reason"],
)

remote_latency_seconds = Histogram(
    "voicenav_remote_latency_seconds",
    "Remote interpreter round-trip latency",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

intent_confidence = Histogram(
    "voicenav_intent_confidence",
    "Confidence reported by the remote interpreter",
    ["action"],
    buckets=[0.2, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 0.95, 1.0],
)

proxy_requests_total = Counter(
    "voicenav_proxy_requests_total",
    "Requests handled by the /api/voice proxy",
    ["status"],
)


def record_command(source: str, action: str, status: str) -> None:
    """Record one handled command.

    Example:
        >>> record_command("remote", "navigate_project", "resolved")
    """
    commands_total.labels(source=source, action=action, status=status).inc()
    logger.debug(
        "command_recorded",
        extra={"source": source, "action": action, "status": status},
    )


def record_fallback(reason: str) -> None:
    """Record a fallback (remote failure, circuit open, target not found...)."""
    fallbacks_total.labels(reason=reason).inc()


def record_remote_result(latency_seconds: float, action: str, confidence: float) -> None:
    remote_latency_seconds.observe(latency_seconds)
    intent_confidence.labels(action=action).observe(confidence)


def record_proxy_request(status: int) -> None:
    proxy_requests_total.labels(status=str(status)).inc()
