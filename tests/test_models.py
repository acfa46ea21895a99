"""Unit tests for voicenav data models."""

import pytest

from src.voicenav.models import (
    DestinationEntry,
    DestinationKind,
    EffectKind,
    Intent,
    IntentAction,
    NavigationEffect,
    NavigationOutcome,
    PageContext,
)

PROJECT_PAGES = ("oracle.html", "tidbit.html")


class TestPageContext:
    @pytest.mark.parametrize("path", ["", "/", None, "/index.html", "index.html"])
    def test_index_paths(self, path):
        context = PageContext.from_path(path, PROJECT_PAGES)
        assert context.current_page_id == "index.html"
        assert context.is_on_index_page
        assert not context.is_on_project_page

    def test_project_page(self):
        context = PageContext.from_path("/tidbit.html", PROJECT_PAGES)
        assert context.is_on_project_page
        assert not context.is_on_index_page
        assert not context.is_on_about_page

    def test_about_page(self):
        context = PageContext.from_path("/portfolio/about.html", PROJECT_PAGES)
        assert context.current_page_id == "about.html"
        assert context.is_on_about_page

    def test_query_and_hash_ignored(self):
        context = PageContext.from_path("/oracle.html?ref=voice#research", PROJECT_PAGES)
        assert context.current_page_id == "oracle.html"
        assert context.is_on_project_page

    def test_directory_path_is_index(self):
        assert PageContext.from_path("/portfolio/", PROJECT_PAGES).is_on_index_page

    def test_to_dict(self):
        assert PageContext().to_dict() == {
            "currentPage": "index.html",
            "isOnIndexPage": True,
            "isOnProjectPage": False,
            "isOnAboutPage": False,
        }


class TestIntentAction:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("navigate_project", IntentAction.NAVIGATE_PROJECT),
            ("NAVIGATE-PROJECT", IntentAction.NAVIGATE_PROJECT),
            (" go home ", IntentAction.GO_HOME),
            ("teleport", IntentAction.UNKNOWN),
            (None, IntentAction.UNKNOWN),
            (42, IntentAction.UNKNOWN),
            (IntentAction.FILTER_PROJECTS, IntentAction.FILTER_PROJECTS),
        ],
    )
    def test_parse(self, value, expected):
        assert IntentAction.parse(value) == expected


class TestDestinationEntry:
    def test_url_and_short_name(self):
        entry = DestinationEntry(
            id="tidbit::research",
            kind=DestinationKind.PROJECT_SECTION,
            locator="tidbit.html",
            anchor="#research",
            parent="tidbit",
        )
        assert entry.url == "tidbit.html#research"
        assert entry.short_name == "research"

    def test_url_without_anchor(self):
        entry = DestinationEntry(id="about", kind=DestinationKind.PAGE, locator="about.html")
        assert entry.url == "about.html"


class TestNavigationOutcome:
    def test_to_dict(self):
        outcome = NavigationOutcome(
            effects=[
                NavigationEffect(EffectKind.REDIRECT_TO_PAGE, "index.html"),
                NavigationEffect(EffectKind.APPLY_FILTER, "ai"),
            ],
            message="Showing ai projects",
            intent=Intent(IntentAction.FILTER_PROJECTS, "ai"),
        )
        data = outcome.to_dict()
        assert data["effects"] == [
            {"kind": "redirect_to_page", "payload": "index.html"},
            {"kind": "apply_filter", "payload": "ai"},
        ]
        assert data["intent"]["action"] == "filter_projects"
        assert data["superseded"] is False
        assert outcome.primary.payload == "index.html"
