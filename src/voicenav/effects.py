"""Execution of navigation effects against the page layer.

The page layer (scrolling, location changes, filter chips) is an external
collaborator described by the DomAdapter protocol. EffectExecutor applies a
NavigationOutcome's effects in order; a filter that follows a redirect is
retried on a short interval until the destination page has its chips.
"""

import logging
from typing import Protocol, runtime_checkable

from tenacity import AsyncRetrying, retry_if_result, stop_after_delay, wait_fixed

from .models import EffectKind, NavigationEffect, NavigationOutcome

logger = logging.getLogger("voicenav.effects")

__all__ = ["DomAdapter", "EffectExecutor", "RecordingDom"]


@runtime_checkable
class DomAdapter(Protocol):
    """Operations the page layer exposes to the navigation core."""

    def scroll_to_element(self, selector: str) -> None: ...

    def redirect_to(self, url: str) -> None: ...

    def open_external(self, url: str) -> None: ...

    def apply_filter(self, tag: str) -> bool:
        """Click the filter chip for ``tag``; False if the chip is not on the page yet."""
        ...


class RecordingDom:
    """DomAdapter that records calls instead of touching a page.

    ``filter_ready_after`` makes apply_filter report the chip as missing for
    that many attempts, which mimics a page that is still loading.
    """

    def __init__(self, filter_ready_after: int = 0):
        self.calls: list[tuple[str, str]] = []
        self.filter_ready_after = filter_ready_after
        self.filter_attempts = 0

    def scroll_to_element(self, selector: str) -> None:
        self.calls.append(("scroll_to_element", selector))

    def redirect_to(self, url: str) -> None:
        self.calls.append(("redirect_to", url))

    def open_external(self, url: str) -> None:
        self.calls.append(("open_external", url))

    def apply_filter(self, tag: str) -> bool:
        self.filter_attempts += 1
        if self.filter_attempts <= self.filter_ready_after:
            return False
        self.calls.append(("apply_filter", tag))
        return True


class EffectExecutor:
    """Apply outcomes to a DomAdapter.

    Args:
        retry_interval_ms: Delay between deferred filter attempts
        retry_timeout_ms: Stop retrying a deferred filter after this long
    """

    def __init__(self, retry_interval_ms: int = 100, retry_timeout_ms: int = 2000):
        self.retry_interval = retry_interval_ms / 1000
        self.retry_timeout = retry_timeout_ms / 1000

    async def execute(self, outcome: NavigationOutcome, dom: DomAdapter) -> bool:
        """Run every effect of ``outcome`` in order.

        Superseded outcomes are dropped without touching the page.

        Returns:
            True if all effects were applied, False if dropped or a deferred
            filter never found its chip.
        """
        if outcome.superseded:
            logger.info("superseded_outcome_dropped")
            return False

        redirected = False
        applied = True
        for effect in outcome.effects:
            if effect.kind == EffectKind.APPLY_FILTER:
                applied = await self._apply_filter(effect, dom, deferred=redirected) and applied
                continue
            self._apply(effect, dom)
            if effect.kind in (
                EffectKind.REDIRECT_TO_PAGE,
                EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR,
            ):
                redirected = True
        return applied

    @staticmethod
    def _apply(effect: NavigationEffect, dom: DomAdapter) -> None:
        logger.debug("effect_applied", extra={"kind": effect.kind.value, "payload": effect.payload})
        if effect.kind == EffectKind.SCROLL_WITHIN_PAGE:
            dom.scroll_to_element(effect.payload)
        elif effect.kind in (
            EffectKind.REDIRECT_TO_PAGE,
            EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR,
        ):
            dom.redirect_to(effect.payload)
        elif effect.kind == EffectKind.OPEN_EXTERNAL:
            dom.open_external(effect.payload)

    async def _apply_filter(
        self, effect: NavigationEffect, dom: DomAdapter, deferred: bool
    ) -> bool:
        async def attempt() -> bool:
            return dom.apply_filter(effect.payload)

        # Chips may not be rendered yet, on the new page or this one
        retrying = AsyncRetrying(
            retry=retry_if_result(lambda applied: not applied),
            wait=wait_fixed(self.retry_interval),
            stop=stop_after_delay(self.retry_timeout),
            retry_error_callback=lambda retry_state: False,
        )
        applied = await retrying(attempt)
        attempts = retrying.statistics.get("attempt_number", 1)

        if not applied:
            logger.warning(
                "filter_chip_not_found",
                extra={"tag": effect.payload, "after_redirect": deferred, "attempts": attempts},
            )
        elif attempts > 1:
            logger.debug(
                "deferred_filter_applied",
                extra={"tag": effect.payload, "after_redirect": deferred, "attempts": attempts},
            )
        return applied
