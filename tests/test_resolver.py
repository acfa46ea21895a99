"""Unit tests for the navigation resolver.

Each action is resolved on the index page, the about page and a project
page; unresolvable targets must land on the projects fallback.
"""

from unittest.mock import patch

import pytest

from src.voicenav.models import EffectKind, Intent, IntentAction, PageContext
from src.voicenav.resolver import (
    FALLBACK_ADVISORY,
    LOW_CONFIDENCE_ADVISORY,
    NavigationResolver,
)


def _effects(outcome):
    return [(effect.kind, effect.payload) for effect in outcome.effects]


class TestGoHome:
    def test_scrolls_on_index(self, resolver, index_context):
        outcome = resolver.resolve(Intent(IntentAction.GO_HOME, "landing"), index_context)
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#landing")]

    def test_redirects_elsewhere(self, resolver, about_context):
        outcome = resolver.resolve(Intent(IntentAction.GO_HOME, "landing"), about_context)
        assert _effects(outcome) == [(EffectKind.REDIRECT_TO_PAGE, "index.html")]


class TestNavigateSection:
    def test_projects_on_index(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "projects"), index_context
        )
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#projects")]
        assert outcome.fallback_reason is None

    def test_projects_from_project_page(self, resolver, project_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "projects"), project_context
        )
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, "index.html#projects")
        ]

    def test_about_section_on_about_page(self, resolver, about_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "hobbies"), about_context
        )
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#interests-hobbies")]

    def test_about_section_from_index(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "about::my-art"), index_context
        )
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, "about.html#my-art")
        ]

    def test_landing_target_goes_home(self, resolver, about_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "landing"), about_context
        )
        assert _effects(outcome) == [(EffectKind.REDIRECT_TO_PAGE, "index.html")]

    def test_resume_opens_external(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "resume"), index_context
        )
        assert _effects(outcome) == [(EffectKind.OPEN_EXTERNAL, "./assets/Resume.pdf")]

    def test_project_section_name_on_project_page(self, resolver, project_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "research"), project_context
        )
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#research")]

    def test_unknown_section_falls_back(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_SECTION, "contact-form"), index_context
        )
        assert outcome.fallback_reason == "target_not_found"
        assert outcome.advisory == FALLBACK_ADVISORY
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#projects")]


class TestNavigatePage:
    def test_about_page(self, resolver, index_context):
        outcome = resolver.resolve(Intent(IntentAction.NAVIGATE_PAGE, "about"), index_context)
        assert _effects(outcome) == [(EffectKind.REDIRECT_TO_PAGE, "about.html")]

    def test_same_page_scrolls_to_top(self, resolver, about_context):
        outcome = resolver.resolve(Intent(IntentAction.NAVIGATE_PAGE, "about"), about_context)
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "body")]

    def test_page_falls_through_to_project(self, resolver, index_context):
        outcome = resolver.resolve(Intent(IntentAction.NAVIGATE_PAGE, "tidbit"), index_context)
        assert _effects(outcome) == [(EffectKind.REDIRECT_TO_PAGE, "tidbit.html")]


class TestNavigateProject:
    @pytest.mark.parametrize("target", ["oracle ai", "Oracle-AI", "ORACLE AI", "oracle-ai"])
    def test_spellings_resolve_to_same_project(self, resolver, index_context, target):
        outcome = resolver.resolve(Intent(IntentAction.NAVIGATE_PROJECT, target), index_context)
        assert _effects(outcome) == [(EffectKind.REDIRECT_TO_PAGE, "oracle-ai.html")]

    def test_always_redirects(self, resolver, make_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT, "tidbit"), make_context("/tidbit.html")
        )
        assert outcome.primary.kind == EffectKind.REDIRECT_TO_PAGE

    def test_full_section_id(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT, "oracle-ai::final-designs"), index_context
        )
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, "oracle-ai.html#final-designs")
        ]

    def test_unknown_project_falls_back(self, resolver, about_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT, "zz"), about_context
        )
        assert outcome.fallback_reason == "target_not_found"
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, "index.html#projects")
        ]


class TestNavigateProjectSection:
    def test_combo_target_from_index(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "oracle-ai::final-designs"),
            index_context,
        )
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE_WITH_ANCHOR, "oracle-ai.html#final-designs")
        ]

    def test_spoken_prefix(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "Oracle AI::final designs"),
            index_context,
        )
        assert outcome.primary.payload == "oracle-ai.html#final-designs"

    def test_section_on_current_project_page(self, resolver, project_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "final designs"), project_context
        )
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#final-designs")]

    def test_project_inferred_from_page_name(self, resolver):
        context = PageContext.from_path("/tunein-case-study.html")
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "takeaways"), context
        )
        assert outcome.primary.payload == "tunein.html#takeaways"

    def test_no_project_context_falls_back(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "final-designs"), index_context
        )
        assert outcome.fallback_reason == "no_project_context"
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#projects")]

    def test_unknown_section_falls_back(self, resolver, project_context):
        outcome = resolver.resolve(
            Intent(IntentAction.NAVIGATE_PROJECT_SECTION, "credits"), project_context
        )
        assert outcome.fallback_reason == "target_not_found"


class TestFilterProjects:
    def test_applies_on_index(self, resolver, index_context):
        outcome = resolver.resolve(Intent(IntentAction.FILTER_PROJECTS, "ai"), index_context)
        assert _effects(outcome) == [(EffectKind.APPLY_FILTER, "ai")]

    def test_redirects_then_applies_elsewhere(self, resolver, about_context):
        outcome = resolver.resolve(Intent(IntentAction.FILTER_PROJECTS, "ai"), about_context)
        assert _effects(outcome) == [
            (EffectKind.REDIRECT_TO_PAGE, "index.html"),
            (EffectKind.APPLY_FILTER, "ai"),
        ]

    def test_alias(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.FILTER_PROJECTS, "Artificial Intelligence"), index_context
        )
        assert outcome.primary.payload == "ai"

    def test_unknown_filter_falls_back(self, resolver, index_context):
        outcome = resolver.resolve(
            Intent(IntentAction.FILTER_PROJECTS, "gaming"), index_context
        )
        assert outcome.fallback_reason == "filter_not_found"


class TestFallbacks:
    def test_unknown_action(self, resolver, about_context):
        outcome = resolver.resolve(Intent(IntentAction.UNKNOWN, "whatever"), about_context)
        assert outcome.fallback_reason == "unknown_action"
        assert outcome.advisory == FALLBACK_ADVISORY

    def test_every_outcome_has_effects(self, resolver, index_context, about_context):
        for action in IntentAction:
            for context in (index_context, about_context):
                outcome = resolver.resolve(Intent(action, ""), context)
                assert outcome.effects

    def test_internal_error_is_contained(self, resolver, index_context):
        with patch.object(resolver, "_navigate_page", side_effect=RuntimeError("boom")):
            outcome = resolver.resolve(Intent(IntentAction.NAVIGATE_PAGE, "about"), index_context)
        assert outcome.fallback_reason == "internal_error"
        assert _effects(outcome) == [(EffectKind.SCROLL_WITHIN_PAGE, "#projects")]

    def test_intent_attached(self, resolver, index_context):
        intent = Intent(IntentAction.NAVIGATE_PROJECT, "tidbit")
        assert resolver.resolve(intent, index_context).intent is intent


class TestConfidenceGate:
    def test_low_remote_confidence_proceeds_silently(self, catalog, index_context):
        resolver = NavigationResolver(catalog, confidence_threshold=0.5)
        intent = Intent(IntentAction.NAVIGATE_PROJECT, "tidbit", confidence=0.2, source="remote")
        outcome = resolver.resolve(intent, index_context)
        assert outcome.primary.payload == "tidbit.html"
        assert outcome.advisory is None
        assert outcome.metadata["low_confidence"] is True

    def test_advise_policy(self, catalog, index_context):
        resolver = NavigationResolver(
            catalog, confidence_threshold=0.5, low_confidence_policy="advise"
        )
        intent = Intent(IntentAction.NAVIGATE_PROJECT, "tidbit", confidence=0.2, source="remote")
        outcome = resolver.resolve(intent, index_context)
        assert outcome.primary.payload == "tidbit.html"
        assert outcome.advisory == LOW_CONFIDENCE_ADVISORY

    def test_local_intents_not_gated(self, catalog, index_context):
        resolver = NavigationResolver(
            catalog, confidence_threshold=0.5, low_confidence_policy="advise"
        )
        intent = Intent(IntentAction.NAVIGATE_PROJECT, "tidbit", confidence=0.0)
        outcome = resolver.resolve(intent, index_context)
        assert outcome.advisory is None
        assert "low_confidence" not in outcome.metadata
