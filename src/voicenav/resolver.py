"""Navigation resolver.

Maps an Intent plus the current PageContext onto concrete navigation
effects (scroll, redirect, open external, apply filter). Resolution never
fails: a target that cannot be matched under any step of the catalog
cascade falls back to the generic "projects" section.

Per-action rules:
    go_home                  scroll to #landing on index, else redirect to index
    navigate_section         about sections first when on the about page,
                             index sections first elsewhere
    navigate_page            standalone pages, then any section
    navigate_project         project pages only, always a redirect
    navigate_project_section project from "<project>::", the target text,
                             the current project page or the page name
    filter_projects          apply now on index, else redirect then apply
    unknown                  projects fallback
"""

import logging

from .catalog import (
    LANDING_SECTION_ID,
    PROJECTS_SECTION_ID,
    Catalog,
    default_catalog,
)
from .graceful import graceful_navigation
from .models import (
    INDEX_PAGE,
    DestinationEntry,
    DestinationKind,
    EffectKind,
    Intent,
    IntentAction,
    NavigationEffect,
    NavigationOutcome,
    PageContext,
)

logger = logging.getLogger("voicenav.resolver")

__all__ = [
    "FALLBACK_ADVISORY",
    "LOW_CONFIDENCE_ADVISORY",
    "NavigationResolver",
]

FALLBACK_ADVISORY = "Navigating to projects instead"
LOW_CONFIDENCE_ADVISORY = "Command unclear, taking you to the closest match"

# Selector meaning "top of the current page"
PAGE_TOP = "body"

_SECTION_KINDS = (DestinationKind.SECTION, DestinationKind.ABOUT_SECTION, DestinationKind.PAGE)
_ABOUT_FIRST_KINDS = (DestinationKind.ABOUT_SECTION, DestinationKind.SECTION, DestinationKind.PAGE)
_PAGE_KINDS = (
    DestinationKind.PAGE,
    DestinationKind.SECTION,
    DestinationKind.ABOUT_SECTION,
    DestinationKind.PROJECT_PAGE,
)


def _is_external(entry: DestinationEntry) -> bool:
    locator = entry.locator.lower().split("?", 1)[0]
    return entry.is_external or locator.endswith(".pdf")


class NavigationResolver:
    """Resolve intents into navigation outcomes.

    Stateless: every call is a pure function of (intent, context).

    Example:
        >>> resolver = NavigationResolver()
        >>> outcome = resolver.resolve(
        ...     Intent(IntentAction.GO_HOME, "landing"), PageContext()
        ... )
        >>> outcome.primary
        NavigationEffect(kind=<EffectKind.SCROLL_WITHIN_PAGE: ...>, payload='#landing')
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        confidence_threshold: float = 0.4,
        low_confidence_policy: str = "proceed",
    ):
        self.catalog = catalog or default_catalog()
        self.confidence_threshold = confidence_threshold
        self.low_confidence_policy = low_confidence_policy

    @graceful_navigation
    def resolve(self, intent: Intent, context: PageContext) -> NavigationOutcome:
        """Resolve ``intent`` in ``context``. Never raises."""
        handlers = {
            IntentAction.GO_HOME: self._go_home,
            IntentAction.NAVIGATE_SECTION: self._navigate_section,
            IntentAction.NAVIGATE_PAGE: self._navigate_page,
            IntentAction.NAVIGATE_PROJECT: self._navigate_project,
            IntentAction.NAVIGATE_PROJECT_SECTION: self._navigate_project_section,
            IntentAction.FILTER_PROJECTS: self._filter_projects,
        }
        handler = handlers.get(IntentAction.parse(intent.action))
        if handler is None:
            outcome = self.fallback_outcome(context, "unknown_action")
        else:
            outcome = handler(intent.target or "", context)

        outcome.intent = intent
        self._gate_confidence(outcome, intent)

        logger.info(
            "intent_resolved",
            extra={
                "action": IntentAction.parse(intent.action).value,
                "target": intent.target,
                "effects": [effect.kind.value for effect in outcome.effects],
                "fallback_reason": outcome.fallback_reason,
                "page": context.current_page_id,
            },
        )
        return outcome

    def _gate_confidence(self, outcome: NavigationOutcome, intent: Intent) -> None:
        if intent.source != "remote" or intent.confidence >= self.confidence_threshold:
            return
        outcome.metadata["low_confidence"] = True
        logger.info(
            "low_confidence_intent",
            extra={
                "confidence": intent.confidence,
                "threshold": self.confidence_threshold,
                "policy": self.low_confidence_policy,
            },
        )
        if self.low_confidence_policy == "advise" and outcome.advisory is None:
            outcome.advisory = LOW_CONFIDENCE_ADVISORY

    # =========================================================================
    # Fallback
    # =========================================================================

    def fallback_outcome(self, context: PageContext, reason: str) -> NavigationOutcome:
        """Generic projects section: the always-valid destination."""
        entry = self.catalog.get(PROJECTS_SECTION_ID)
        anchor = entry.anchor if entry else "#projects"
        if context.is_on_index_page:
            effect = NavigationEffect(EffectKind.SCROLL_WITHIN_PAGE, anchor)
        else:
            effect = NavigationEffect(
                EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, f"{INDEX_PAGE}{anchor}"
            )
        logger.info("navigation_fallback", extra={"reason": reason})
        return NavigationOutcome(
            effects=[effect],
            message="Going to projects",
            advisory=FALLBACK_ADVISORY,
            fallback_reason=reason,
        )

    # =========================================================================
    # Effects
    # =========================================================================

    def _effects_for(self, entry: DestinationEntry, context: PageContext) -> list[NavigationEffect]:
        if entry.kind == DestinationKind.FILTER_TAG:
            return self._filter_effects(entry, context)
        if _is_external(entry):
            return [NavigationEffect(EffectKind.OPEN_EXTERNAL, entry.locator)]
        if context.current_page_id == entry.locator:
            return [NavigationEffect(EffectKind.SCROLL_WITHIN_PAGE, entry.anchor or PAGE_TOP)]
        if entry.anchor:
            return [NavigationEffect(EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, entry.url)]
        return [NavigationEffect(EffectKind.REDIRECT_TO_PAGE, entry.locator)]

    @staticmethod
    def _filter_effects(entry: DestinationEntry, context: PageContext) -> list[NavigationEffect]:
        apply = NavigationEffect(EffectKind.APPLY_FILTER, entry.locator)
        if context.is_on_index_page:
            return [apply]
        return [NavigationEffect(EffectKind.REDIRECT_TO_PAGE, INDEX_PAGE), apply]

    def _outcome(self, entry: DestinationEntry, context: PageContext) -> NavigationOutcome:
        effects = self._effects_for(entry, context)
        if entry.kind == DestinationKind.FILTER_TAG:
            message = f"Showing {entry.id} projects"
        elif entry.kind == DestinationKind.PROJECT_PAGE:
            message = f"Opening {entry.id} project"
        elif effects[0].kind == EffectKind.OPEN_EXTERNAL:
            message = f"Opening {entry.id}"
        else:
            message = f"Going to {entry.short_name.replace('-', ' ')}"
        return NavigationOutcome(effects=effects, message=message)

    # =========================================================================
    # Per-action handlers
    # =========================================================================

    def _go_home(self, target: str, context: PageContext) -> NavigationOutcome:
        landing = self.catalog.get(LANDING_SECTION_ID)
        anchor = landing.anchor if landing else "#landing"
        if context.is_on_index_page:
            return NavigationOutcome(
                effects=[NavigationEffect(EffectKind.SCROLL_WITHIN_PAGE, anchor)],
                message="Going to landing page",
            )
        return NavigationOutcome(
            effects=[NavigationEffect(EffectKind.REDIRECT_TO_PAGE, INDEX_PAGE)],
            message="Going home",
        )

    def _lookup(self, target: str, kinds) -> DestinationEntry | None:
        entry = self.catalog.get(target)
        if entry is not None:
            return entry
        return self.catalog.resolve_key(target, kinds)

    def _navigate_section(self, target: str, context: PageContext) -> NavigationOutcome:
        kinds = _ABOUT_FIRST_KINDS if context.is_on_about_page else _SECTION_KINDS
        entry = self._lookup(target, kinds)
        if entry is None and context.is_on_project_page:
            project = self.catalog.project_for_page(context.current_page_id)
            if project is not None:
                entry = self.catalog.project_section(project.id, target)
        if entry is None:
            return self.fallback_outcome(context, "target_not_found")
        if entry.id == LANDING_SECTION_ID:
            return self._go_home(target, context)
        return self._outcome(entry, context)

    def _navigate_page(self, target: str, context: PageContext) -> NavigationOutcome:
        entry = self._lookup(target, _PAGE_KINDS)
        if entry is None:
            return self.fallback_outcome(context, "target_not_found")
        return self._outcome(entry, context)

    def _navigate_project(self, target: str, context: PageContext) -> NavigationOutcome:
        entry = self.catalog.get(target)
        if entry is not None and entry.kind != DestinationKind.PROJECT_PAGE:
            # A full id of another kind ("oracle::research", "projects") still routes
            return self._outcome(entry, context)
        entry = self.catalog.resolve_key(target, [DestinationKind.PROJECT_PAGE])
        if entry is None:
            return self.fallback_outcome(context, "target_not_found")
        return NavigationOutcome(
            effects=[NavigationEffect(EffectKind.REDIRECT_TO_PAGE, entry.locator)],
            message=f"Opening {entry.id} project",
        )

    def _project_for_section(self, target: str, context: PageContext) -> DestinationEntry | None:
        if "::" in target:
            prefix = target.split("::", 1)[0]
            project = self.catalog.resolve_key(prefix, [DestinationKind.PROJECT_PAGE])
            if project is not None:
                return project
        project = self.catalog.infer_project(target.replace(" ", "-"))
        if project is not None:
            return project
        if context.is_on_project_page:
            project = self.catalog.project_for_page(context.current_page_id)
            if project is not None:
                return project
        return self.catalog.infer_project(context.current_page_id)

    def _navigate_project_section(self, target: str, context: PageContext) -> NavigationOutcome:
        entry = self.catalog.get(target)
        if entry is not None and entry.kind in (
            DestinationKind.PROJECT_SECTION,
            DestinationKind.ABOUT_SECTION,
        ):
            return self._outcome(entry, context)

        project = self._project_for_section(target, context)
        if project is None:
            return self.fallback_outcome(context, "no_project_context")

        entry = self.catalog.project_section(project.id, target)
        if entry is None:
            return self.fallback_outcome(context, "target_not_found")
        return self._outcome(entry, context)

    def _filter_projects(self, target: str, context: PageContext) -> NavigationOutcome:
        entry = self.catalog.resolve_key(target, [DestinationKind.FILTER_TAG])
        if entry is None:
            return self.fallback_outcome(context, "filter_not_found")
        return self._outcome(entry, context)
