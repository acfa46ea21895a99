"""Voice command pipeline.

utterance -> intent source -> Intent -> NavigationResolver -> NavigationOutcome

One resolver, one pluggable intent source chosen by configuration
(``intent_source``: local keyword scorer or remote hosted-model
interpreter). When the remote source fails, or its circuit is open, the
command is re-scored locally (``remote_fallback=local``) or sent to the
generic projects section (``remote_fallback=default``).

Overlapping commands are last-writer-wins: every call takes a generation
number, and a call that finishes after a newer one started comes back
flagged ``superseded`` so its effects are never executed.
"""

import logging
import time
from typing import Protocol

from .catalog import Catalog, default_catalog
from .circuit_breaker import CircuitBreaker
from .config import VoiceNavConfig, get_config
from .effects import DomAdapter, EffectExecutor
from .graceful import graceful_navigation
from .interpreter import InterpretError, RemoteInterpreter
from .metrics import record_command, record_fallback, record_remote_result
from .models import Intent, NavigationOutcome, PageContext
from .resolver import NavigationResolver
from .scorer import LocalScorer

logger = logging.getLogger("voicenav.navigator")

__all__ = ["IntentSource", "VoiceNavigator", "build_intent_source"]


class IntentSource(Protocol):
    """Anything that turns an utterance into an Intent."""

    name: str

    async def interpret(self, utterance: str, context: PageContext) -> Intent: ...


def build_intent_source(
    config: VoiceNavConfig, catalog: Catalog | None = None
) -> IntentSource:
    """Intent source selected by ``config.intent_source``."""
    if config.intent_source == "remote":
        return RemoteInterpreter(catalog=catalog, config=config)
    return LocalScorer(catalog)


class VoiceNavigator:
    """Handle voice commands end to end.

    Example:
        >>> navigator = VoiceNavigator.from_config()
        >>> outcome = await navigator.handle("show me your work", PageContext())
        >>> outcome.primary.payload
        '#projects'
    """

    def __init__(
        self,
        source: IntentSource | None = None,
        catalog: Catalog | None = None,
        config: VoiceNavConfig | None = None,
        resolver: NavigationResolver | None = None,
        breaker: CircuitBreaker | None = None,
    ):
        self.config = config or get_config()
        self.catalog = catalog or default_catalog()
        self.scorer = LocalScorer(self.catalog)
        self.source = source or self.scorer
        self.resolver = resolver or NavigationResolver(
            self.catalog,
            confidence_threshold=self.config.confidence_threshold,
            low_confidence_policy=self.config.low_confidence_policy,
        )
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=self.config.circuit_failure_threshold,
            reset_timeout=self.config.circuit_reset_timeout,
        )
        self.executor = EffectExecutor(
            retry_interval_ms=self.config.filter_retry_interval_ms,
            retry_timeout_ms=self.config.filter_retry_timeout_ms,
        )
        self._generation = 0

    @classmethod
    def from_config(
        cls, config: VoiceNavConfig | None = None, catalog: Catalog | None = None
    ) -> "VoiceNavigator":
        config = config or get_config()
        catalog = catalog or default_catalog()
        return cls(
            source=build_intent_source(config, catalog),
            catalog=catalog,
            config=config,
        )

    def context_for(self, path: str | None) -> PageContext:
        """PageContext for a location path, computed fresh."""
        return PageContext.from_path(path, self.catalog.project_pages)

    def fallback_outcome(self, context: PageContext, reason: str) -> NavigationOutcome:
        return self.resolver.fallback_outcome(context, reason)

    async def aclose(self) -> None:
        """Close the intent source's HTTP client, if it has one."""
        if hasattr(self.source, "aclose"):
            await self.source.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    @graceful_navigation
    async def handle(self, utterance: str, context: PageContext) -> NavigationOutcome:
        """Resolve one utterance into a NavigationOutcome. Never raises."""
        self._generation += 1
        generation = self._generation

        intent, failure = await self._infer(utterance or "", context)
        if intent is None:
            outcome = self.resolver.fallback_outcome(context, failure or "no_intent")
        else:
            outcome = self.resolver.resolve(intent, context)
        if failure:
            outcome.metadata["remote_failure"] = failure

        if generation != self._generation:
            outcome.superseded = True
            logger.info(
                "command_superseded",
                extra={"generation": generation, "latest": self._generation},
            )

        action = intent.action.value if intent else "none"
        source = intent.source if intent else self.source.name
        if outcome.superseded:
            status = "superseded"
        elif outcome.fallback_reason:
            status = "fallback"
        else:
            status = "resolved"
        record_command(source, action, status)
        return outcome

    async def dispatch(
        self, utterance: str, context: PageContext, dom: DomAdapter
    ) -> NavigationOutcome:
        """Handle ``utterance`` and execute the outcome on ``dom``."""
        outcome = await self.handle(utterance, context)
        await self.executor.execute(outcome, dom)
        return outcome

    async def _infer(
        self, utterance: str, context: PageContext
    ) -> tuple[Intent | None, str | None]:
        if isinstance(self.source, LocalScorer):
            return self.source.score(utterance), None

        name = self.source.name
        if not self.breaker.is_available(name):
            record_fallback("circuit_open")
            return self._fallback_intent(utterance, "circuit_open")

        start_time = time.time()
        try:
            intent = await self.source.interpret(utterance, context)
        except InterpretError as e:
            self.breaker.record_failure(name, e.reason)
            record_fallback(e.reason)
            logger.warning(
                "remote_interpret_failed",
                extra={
                    "source": name,
                    "reason": e.reason,
                    "error": str(e),
                    "fallback": self.config.remote_fallback,
                },
            )
            return self._fallback_intent(utterance, e.reason)
        except Exception as e:
            # Any other failure still ends a half-open trial
            self.breaker.record_failure(name, "internal_error")
            record_fallback("internal_error")
            logger.error(
                "remote_interpret_crashed",
                extra={"source": name, "error": str(e), "error_type": type(e).__name__},
            )
            raise

        self.breaker.record_success(name)
        record_remote_result(time.time() - start_time, intent.action.value, intent.confidence)
        return intent, None

    def _fallback_intent(self, utterance: str, reason: str) -> tuple[Intent | None, str]:
        if self.config.remote_fallback == "local":
            return self.scorer.score(utterance), reason
        return None, reason
