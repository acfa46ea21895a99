"""Unit tests for the destination catalog.

Covers catalog integrity (unique ids, parent references), lookups and the
target resolution cascade.
"""

import pytest

from src.voicenav.catalog import (
    LANDING_SECTION_ID,
    Catalog,
    CatalogError,
    default_catalog,
    fold_key,
)
from src.voicenav.models import DestinationEntry, DestinationKind


class TestCatalogIntegrity:
    """Invariants that hold for the shipped catalog."""

    def test_ids_are_unique(self, catalog):
        ids = [entry.id for entry in catalog.entries]
        assert len(ids) == len(set(ids))

    def test_landing_is_declared_first(self, catalog):
        assert catalog.entries[0].id == LANDING_SECTION_ID

    def test_every_section_has_parent_of_right_kind(self, catalog):
        for entry in catalog.by_kind(DestinationKind.PROJECT_SECTION):
            assert catalog.get(entry.parent).kind == DestinationKind.PROJECT_PAGE
        for entry in catalog.by_kind(DestinationKind.ABOUT_SECTION):
            assert catalog.get(entry.parent).kind == DestinationKind.PAGE

    def test_every_project_has_final_designs_section(self, catalog):
        for project in catalog.by_kind(DestinationKind.PROJECT_PAGE):
            section = catalog.get(f"{project.id}::final-designs")
            assert section is not None
            assert section.locator == project.locator
            assert section.anchor == "#final-designs"

    def test_resume_is_external(self, catalog):
        resume = catalog.get("resume")
        assert resume.is_external
        assert resume.locator.endswith(".pdf")

    def test_project_pages(self, catalog):
        assert catalog.project_pages == [
            "oracle.html",
            "oracle-ai.html",
            "tunein.html",
            "tidbit.html",
        ]

    def test_default_catalog_is_shared(self):
        assert default_catalog() is default_catalog()


class TestCatalogValidation:
    """Construction rejects invalid data."""

    def test_duplicate_id_rejected(self):
        entry = DestinationEntry(id="x", kind=DestinationKind.SECTION, locator="index.html")
        with pytest.raises(CatalogError, match="Duplicate"):
            Catalog([entry, entry])

    def test_missing_parent_rejected(self):
        orphan = DestinationEntry(
            id="ghost::overview",
            kind=DestinationKind.PROJECT_SECTION,
            locator="ghost.html",
            anchor="#overview",
            parent="ghost",
        )
        with pytest.raises(CatalogError, match="ghost"):
            Catalog([orphan])

    def test_parent_of_wrong_kind_rejected(self):
        page = DestinationEntry(id="about", kind=DestinationKind.PAGE, locator="about.html")
        section = DestinationEntry(
            id="about::overview",
            kind=DestinationKind.PROJECT_SECTION,
            locator="about.html",
            parent="about",
        )
        with pytest.raises(CatalogError):
            Catalog([page, section])


class TestFoldKey:
    @pytest.mark.parametrize(
        "value", ["Oracle AI", "oracle_ai", "oracle-ai", "  ORACLE   AI ", "oracle--ai"]
    )
    def test_variants_fold_together(self, value):
        assert fold_key(value) == "oracle-ai"


class TestResolveKey:
    """Resolution cascade: exact, swapped separators, folded, partial."""

    @pytest.mark.parametrize("target", ["oracle-ai", "oracle ai", "Oracle-AI", "ORACLE AI"])
    def test_project_spellings(self, catalog, target):
        entry = catalog.resolve_key(target, [DestinationKind.PROJECT_PAGE])
        assert entry.id == "oracle-ai"

    def test_alias_match(self, catalog):
        entry = catalog.resolve_key("my work", [DestinationKind.SECTION])
        assert entry.id == "projects"

    def test_about_section_short_name(self, catalog):
        entry = catalog.resolve_key("interests-hobbies", [DestinationKind.ABOUT_SECTION])
        assert entry.id == "about::interests-hobbies"

    def test_partial_prefers_longest_contained_key(self, catalog):
        entry = catalog.resolve_key("the oracle ai project", [DestinationKind.PROJECT_PAGE])
        assert entry.id == "oracle-ai"

    def test_partial_key_containing_target(self, catalog):
        entry = catalog.resolve_key("tidb", [DestinationKind.PROJECT_PAGE])
        assert entry.id == "tidbit"

    def test_short_target_does_not_reverse_match(self, catalog):
        assert catalog.resolve_key("x", [DestinationKind.PROJECT_PAGE]) is None

    def test_kinds_restrict_search(self, catalog):
        assert catalog.resolve_key("tidbit", [DestinationKind.FILTER_TAG]) is None

    @pytest.mark.parametrize("target", ["", "   ", None])
    def test_empty_target(self, catalog, target):
        assert catalog.resolve_key(target, [DestinationKind.SECTION]) is None

    def test_kind_priority_order(self, catalog):
        entry = catalog.resolve_key(
            "about", [DestinationKind.PAGE, DestinationKind.ABOUT_SECTION]
        )
        assert entry.kind == DestinationKind.PAGE


class TestProjectHelpers:
    def test_infer_project_prefers_longest_id(self, catalog):
        assert catalog.infer_project("oracle-ai-case-study.html").id == "oracle-ai"
        assert catalog.infer_project("oracle.html").id == "oracle"
        assert catalog.infer_project("contact.html") is None

    def test_project_for_page(self, catalog):
        assert catalog.project_for_page("tunein.html").id == "tunein"
        assert catalog.project_for_page("index.html") is None

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("final designs", "final-designs"),
            ("Final Design", "final-designs"),
            ("designs", "final-designs"),
            ("conclusion", "takeaways"),
            ("tidbit::research", "research"),
            ("contact", None),
        ],
    )
    def test_section_name(self, catalog, name, expected):
        assert catalog.section_name(name) == expected

    def test_project_section(self, catalog):
        entry = catalog.project_section("tunein", "overview")
        assert entry.id == "tunein::overview"
        assert entry.url == "tunein.html#overview"
