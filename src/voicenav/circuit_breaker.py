"""Circuit breaker for the remote intent source.

After repeated consecutive failures of the hosted model path, commands skip
it and go straight to the local fallback until a cool-down has passed. A
half-open state then lets a few trial commands through; one success closes
the circuit again.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("voicenav.circuit_breaker")

__all__ = ["CircuitBreaker", "CircuitState"]


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Remote source in use
    OPEN = "open"  # Skipping remote source
    HALF_OPEN = "half_open"  # Trial commands allowed


@dataclass
class SourceState:
    """Failure bookkeeping for one intent source."""

    consecutive_failures: int = 0
    last_failure_time: float = 0.0
    last_success_time: float = 0.0
    state: CircuitState = CircuitState.CLOSED
    half_open_attempts: int = 0


class CircuitBreaker:
    """Per-source circuit breaker.

    Example:
        >>> breaker = CircuitBreaker(failure_threshold=3, reset_timeout=60)
        >>> if breaker.is_available("remote"):
        ...     intent = await interpreter.interpret(utterance, context)
        ...     breaker.record_success("remote")
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_timeout: float = 60,
        half_open_max_attempts: int = 1,
        clock=time.monotonic,
    ):
        """Initialize circuit breaker.

        Args:
            failure_threshold: Consecutive failures before opening the circuit
            reset_timeout: Seconds before an open circuit goes half-open
            half_open_max_attempts: Trial commands allowed while half-open
            clock: Time source, injectable for tests
        """
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.half_open_max_attempts = half_open_max_attempts
        self._clock = clock
        self._states: dict[str, SourceState] = {}
        self._lock = threading.Lock()

    def _get_state(self, source: str) -> SourceState:
        with self._lock:
            if source not in self._states:
                self._states[source] = SourceState()
            return self._states[source]

    def state_of(self, source: str) -> CircuitState:
        """Current state without side effects."""
        return self._get_state(source).state

    def is_available(self, source: str) -> bool:
        """Whether the next command may use ``source``.

        An open circuit whose cool-down has elapsed moves to half-open.
        """
        state = self._get_state(source)

        if state.state == CircuitState.CLOSED:
            return True

        if state.state == CircuitState.OPEN:
            elapsed = self._clock() - state.last_failure_time
            if elapsed < self.reset_timeout:
                logger.debug(
                    "circuit_open_source_skipped",
                    extra={
                        "source": source,
                        "seconds_until_retry": self.reset_timeout - elapsed,
                    },
                )
                return False
            state.state = CircuitState.HALF_OPEN
            state.half_open_attempts = 0
            logger.info("circuit_half_open", extra={"source": source})

        if state.half_open_attempts < self.half_open_max_attempts:
            state.half_open_attempts += 1
            return True
        return False

    def record_success(self, source: str) -> None:
        state = self._get_state(source)
        previous = state.state
        state.consecutive_failures = 0
        state.half_open_attempts = 0
        state.last_success_time = self._clock()
        state.state = CircuitState.CLOSED
        if previous != CircuitState.CLOSED:
            logger.info(
                "circuit_closed",
                extra={"source": source, "previous_state": previous.value},
            )

    def record_failure(self, source: str, reason: str = "unknown") -> None:
        """Record a failed attempt, opening the circuit at the threshold.

        A failure while half-open reopens the circuit immediately.
        """
        state = self._get_state(source)
        state.consecutive_failures += 1
        state.last_failure_time = self._clock()

        logger.debug(
            "circuit_failure_recorded",
            extra={
                "source": source,
                "consecutive_failures": state.consecutive_failures,
                "reason": reason,
            },
        )

        if state.state == CircuitState.HALF_OPEN or (
            state.state == CircuitState.CLOSED
            and state.consecutive_failures >= self.failure_threshold
        ):
            state.state = CircuitState.OPEN
            logger.warning(
                "circuit_opened",
                extra={
                    "source": source,
                    "failures": state.consecutive_failures,
                    "threshold": self.failure_threshold,
                    "reset_timeout_seconds": self.reset_timeout,
                },
            )

    def get_status(self, source: str) -> dict:
        state = self._get_state(source)
        return {
            "source": source,
            "state": state.state.value,
            "consecutive_failures": state.consecutive_failures,
            "last_failure": state.last_failure_time,
            "last_success": state.last_success_time,
        }
