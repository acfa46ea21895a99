"""Destination catalog for voice navigation.

Static registry of every navigable target on the portfolio site: index
sections, standalone pages, project pages and their sections, about-page
sections and project filter tags, plus the keyword hints the local scorer
uses. Built once at import time and never mutated afterwards.

Lookups go through a normalized-key index computed at construction, so the
resolution cascade (exact, hyphen/space swap, case-insensitive, substring)
does not re-derive candidate keys on every call.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from types import MappingProxyType

from .models import (
    ABOUT_PAGE,
    INDEX_PAGE,
    DestinationEntry,
    DestinationKind,
    KeywordHint,
)

logger = logging.getLogger("voicenav.catalog")

__all__ = [
    "COMBO_SECTION",
    "FINAL_DESIGNS_HINTS",
    "PROJECTS_SECTION_ID",
    "LANDING_SECTION_ID",
    "Catalog",
    "CatalogError",
    "default_catalog",
    "fold_key",
]

LANDING_SECTION_ID = "landing"
PROJECTS_SECTION_ID = "projects"
RESUME_URL = "./assets/Resume.pdf"

# Section a "project + final designs" utterance is remapped to
COMBO_SECTION = "final-designs"

_WS_RE = re.compile(r"[\s_]+")
_DASH_RE = re.compile(r"-{2,}")


class CatalogError(ValueError):
    """Raised when catalog data violates its invariants."""


def fold_key(value: str) -> str:
    """Fold a key for case/separator-insensitive comparison.

    "Oracle AI", "oracle_ai" and "oracle-ai" all fold to "oracle-ai".
    """
    folded = _WS_RE.sub("-", value.strip().lower())
    return _DASH_RE.sub("-", folded).strip("-")


def _hints(*pairs: tuple[str, int]) -> tuple[KeywordHint, ...]:
    return tuple(KeywordHint(phrase, weight) for phrase, weight in pairs)


# Generic "final designs" phrase group used for the project combo bonus
FINAL_DESIGNS_HINTS = _hints(
    ("final designs", 6),
    ("final deliverables", 5),
    ("final design", 5),
    ("finals", 3),
)

# =============================================================================
# CATALOG DATA
# =============================================================================

_PROJECTS: Sequence[tuple[str, str, str, tuple[str, ...], tuple[KeywordHint, ...]]] = (
    (
        "oracle",
        "oracle.html",
        "Oracle project page (components, design system work)",
        ("oracle project",),
        _hints(("oracle", 4)),
    ),
    (
        "oracle-ai",
        "oracle-ai.html",
        "Oracle AI project page (AI assistant for financial planning)",
        ("oracle ai", "financial planning"),
        _hints(("oracle ai", 5), ("oracle-ai", 5)),
    ),
    (
        "tunein",
        "tunein.html",
        "TuneIn project page (audio profiles)",
        ("tune in", "audio profiles"),
        _hints(("tunein", 5), ("tune in", 4)),
    ),
    (
        "tidbit",
        "tidbit.html",
        "Tidbit project page (digital scrapbooking, her favorite project)",
        ("tid bit", "scrapbooking"),
        _hints(
            ("tidbit", 5),
            ("tid bit", 4),
            ("naima's best project", 7),
            ("best project", 6),
            ("favorite project", 6),
            ("naima's favorite project", 7),
        ),
    ),
)

# Sections every project case study page carries: (name, description, aliases)
PROJECT_SECTIONS: Sequence[tuple[str, str, tuple[str, ...]]] = (
    ("overview", "Project overview", ()),
    ("research", "Research section", ()),
    ("final-designs", "Final designs section", ("designs", "final design", "final designs")),
    ("takeaways", "Takeaways and conclusions", ("takeaway", "conclusions", "conclusion")),
    ("process", "Process section", ()),
    ("ideation", "Ideation section", ()),
    ("prototyping", "Prototyping section", ("prototypes",)),
    ("testing", "Testing section", ("user testing",)),
)


def _build_entries() -> list[DestinationEntry]:
    entries = [
        # Index page sections
        DestinationEntry(
            id=LANDING_SECTION_ID,
            kind=DestinationKind.SECTION,
            locator=INDEX_PAGE,
            anchor="#landing",
            description="Landing section at the top of the home page",
            aliases=("home",),
            keyword_hints=_hints(
                ("home", 3), ("landing", 3), ("start", 2), ("top", 2), ("welcome", 2)
            ),
        ),
        DestinationEntry(
            id=PROJECTS_SECTION_ID,
            kind=DestinationKind.SECTION,
            locator=INDEX_PAGE,
            anchor="#projects",
            description='Portfolio projects section (use for "work", "portfolio", "projects", "my work")',
            aliases=("work", "portfolio", "my work"),
            keyword_hints=_hints(
                ("projects", 3),
                ("project", 2),
                ("work", 2),
                ("portfolio", 2),
                ("see my work", 3),
                ("view my work", 3),
            ),
        ),
        DestinationEntry(
            id="resume",
            kind=DestinationKind.SECTION,
            locator=RESUME_URL,
            is_external=True,
            description="Resume PDF, opened in a new tab",
            aliases=("cv",),
            keyword_hints=_hints(
                ("resume", 4), ("cv", 3), ("curriculum vitae", 3), ("experience", 2)
            ),
        ),
        # Standalone pages
        DestinationEntry(
            id="about",
            kind=DestinationKind.PAGE,
            locator=ABOUT_PAGE,
            description='About page (anything about Naima, "who is", "tell me about")',
            aliases=("about me", "about page"),
            keyword_hints=_hints(("about", 3), ("about me", 3), ("bio", 2)),
        ),
        # About page sections
        DestinationEntry(
            id="about::interests-hobbies",
            kind=DestinationKind.ABOUT_SECTION,
            locator=ABOUT_PAGE,
            anchor="#interests-hobbies",
            parent="about",
            description="Interests and hobbies, sports, what she does for fun",
            aliases=("hobbies", "interests"),
            keyword_hints=_hints(
                ("interests", 4),
                ("hobbies", 4),
                ("sports", 5),
                ("does naima play", 5),
                ("what does naima do for fun", 5),
                ("outside of work", 3),
            ),
        ),
        DestinationEntry(
            id="about::why-voice",
            kind=DestinationKind.ABOUT_SECTION,
            locator=ABOUT_PAGE,
            anchor="#why-voice",
            parent="about",
            description="Why she designs for voice",
            keyword_hints=_hints(
                ("why voice", 5), ("voice rationale", 3), ("voice design", 3)
            ),
        ),
        DestinationEntry(
            id="about::my-art",
            kind=DestinationKind.ABOUT_SECTION,
            locator=ABOUT_PAGE,
            anchor="#my-art",
            parent="about",
            description="Her artwork",
            aliases=("art", "artwork"),
            keyword_hints=_hints(("art", 3), ("my art", 4), ("artwork", 3)),
        ),
        DestinationEntry(
            id="about::music-experience",
            kind=DestinationKind.ABOUT_SECTION,
            locator=ABOUT_PAGE,
            anchor="#music-experience",
            parent="about",
            description="Music experience",
            aliases=("music",),
            keyword_hints=_hints(("music", 3), ("music experience", 4)),
        ),
    ]

    for project_id, page, description, aliases, hints in _PROJECTS:
        entries.append(
            DestinationEntry(
                id=project_id,
                kind=DestinationKind.PROJECT_PAGE,
                locator=page,
                description=description,
                aliases=aliases,
                keyword_hints=hints,
            )
        )

    # Deep links are reached through the combo remap, so they carry no hints
    for section, description, aliases in PROJECT_SECTIONS:
        for project_id, page, _, _, _ in _PROJECTS:
            entries.append(
                DestinationEntry(
                    id=f"{project_id}::{section}",
                    kind=DestinationKind.PROJECT_SECTION,
                    locator=page,
                    anchor=f"#{section}",
                    parent=project_id,
                    description=description,
                    aliases=aliases,
                )
            )

    entries.extend(
        [
            DestinationEntry(
                id="mobile",
                kind=DestinationKind.FILTER_TAG,
                locator="mobile",
                description="Mobile design projects",
                keyword_hints=_hints(
                    ("mobile design", 5),
                    ("mobile projects", 5),
                    ("mobile work", 4),
                    ("mobile portfolio", 4),
                    ("mobile", 2),
                ),
            ),
            DestinationEntry(
                id="web",
                kind=DestinationKind.FILTER_TAG,
                locator="web",
                description="Web design projects",
                aliases=("website",),
                keyword_hints=_hints(
                    ("web design", 5),
                    ("web projects", 5),
                    ("web work", 4),
                    ("website design", 4),
                    ("website projects", 4),
                ),
            ),
            DestinationEntry(
                id="consumer",
                kind=DestinationKind.FILTER_TAG,
                locator="consumer",
                description="Consumer product projects",
                keyword_hints=_hints(
                    ("consumer projects", 6),
                    ("consumer product", 5),
                    ("consumer work", 4),
                    ("consumer portfolio", 4),
                ),
            ),
            DestinationEntry(
                id="ai",
                kind=DestinationKind.FILTER_TAG,
                locator="ai",
                description="AI and AI interaction design projects",
                aliases=("artificial intelligence",),
                keyword_hints=_hints(
                    ("ai design", 6),
                    ("ai projects", 6),
                    ("ai interaction", 5),
                    ("artificial intelligence", 5),
                    ("ai portfolio", 5),
                ),
            ),
            DestinationEntry(
                id="enterprise",
                kind=DestinationKind.FILTER_TAG,
                locator="enterprise",
                description="Enterprise design projects",
                keyword_hints=_hints(
                    ("enterprise design", 6),
                    ("enterprise projects", 6),
                    ("enterprise work", 5),
                    ("enterprise portfolio", 5),
                ),
            ),
        ]
    )
    return entries


# =============================================================================
# CATALOG
# =============================================================================


class Catalog:
    """Immutable, ordered registry of DestinationEntry objects.

    Example:
        >>> catalog = default_catalog()
        >>> catalog.get("oracle-ai").locator
        'oracle-ai.html'
        >>> catalog.resolve_key("Oracle AI", [DestinationKind.PROJECT_PAGE]).id
        'oracle-ai'
    """

    def __init__(
        self,
        entries: Iterable[DestinationEntry],
        combo_hints: tuple[KeywordHint, ...] = FINAL_DESIGNS_HINTS,
    ):
        self._entries = tuple(entries)
        self.combo_hints = combo_hints
        self._by_id: dict[str, DestinationEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise CatalogError(f"Duplicate destination id: '{entry.id}'")
            self._by_id[entry.id] = entry
        self._validate_parents()

        # key -> entry, first declaration wins; one table per kind
        self._exact: dict[DestinationKind, dict[str, DestinationEntry]] = {}
        self._folded: dict[DestinationKind, dict[str, DestinationEntry]] = {}
        for entry in self._entries:
            exact = self._exact.setdefault(entry.kind, {})
            folded = self._folded.setdefault(entry.kind, {})
            for key in self._index_keys(entry):
                exact.setdefault(key, entry)
                folded.setdefault(fold_key(key), entry)

        self._section_names: dict[str, str] = {}
        for section, _, aliases in PROJECT_SECTIONS:
            for name in (section, *aliases):
                self._section_names.setdefault(fold_key(name), section)

        self._by_id_view = MappingProxyType(self._by_id)

        logger.debug(
            "catalog_built",
            extra={
                "entries": len(self._entries),
                "kinds": sorted(kind.value for kind in self._exact),
            },
        )

    def _validate_parents(self) -> None:
        expected = {
            DestinationKind.PROJECT_SECTION: DestinationKind.PROJECT_PAGE,
            DestinationKind.ABOUT_SECTION: DestinationKind.PAGE,
        }
        for entry in self._entries:
            parent_kind = expected.get(entry.kind)
            if parent_kind is None:
                continue
            parent = self._by_id.get(entry.parent or "")
            if parent is None or parent.kind != parent_kind:
                raise CatalogError(
                    f"Entry '{entry.id}' references missing {parent_kind.value} "
                    f"parent '{entry.parent}'"
                )

    @staticmethod
    def _index_keys(entry: DestinationEntry) -> list[str]:
        keys = [entry.id]
        if entry.kind == DestinationKind.ABOUT_SECTION:
            keys.append(entry.short_name)
        if entry.kind != DestinationKind.PROJECT_SECTION:
            keys.extend(entry.aliases)
        return keys

    @property
    def entries(self) -> tuple[DestinationEntry, ...]:
        """All entries in declaration order."""
        return self._entries

    @property
    def ids(self):
        return self._by_id_view.keys()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    def get(self, entry_id: str) -> DestinationEntry | None:
        """Look up an entry by exact id."""
        return self._by_id.get(entry_id)

    def by_kind(self, *kinds: DestinationKind) -> list[DestinationEntry]:
        """Entries of the given kinds, in declaration order."""
        wanted = set(kinds)
        return [entry for entry in self._entries if entry.kind in wanted]

    @property
    def project_pages(self) -> list[str]:
        """Page file names of all project pages."""
        return [e.locator for e in self.by_kind(DestinationKind.PROJECT_PAGE)]

    def project_for_page(self, page_id: str) -> DestinationEntry | None:
        """Project whose page is exactly ``page_id``."""
        for entry in self.by_kind(DestinationKind.PROJECT_PAGE):
            if entry.locator == page_id:
                return entry
        return None

    def infer_project(self, page_name: str) -> DestinationEntry | None:
        """Project whose id appears inside ``page_name``, longest id first.

        "oracle-ai-case-study.html" infers oracle-ai rather than oracle.
        """
        name = (page_name or "").lower()
        matches = [
            entry
            for entry in self.by_kind(DestinationKind.PROJECT_PAGE)
            if entry.id in name
        ]
        if not matches:
            return None
        return max(matches, key=lambda entry: len(entry.id))

    def section_name(self, name: str) -> str | None:
        """Canonical project section name for a spoken or model name."""
        if not name:
            return None
        folded = fold_key(name.rsplit("::", 1)[-1])
        if folded in self._section_names:
            return self._section_names[folded]
        for key, section in self._section_names.items():
            if key in folded:
                return section
        return None

    def project_section(self, project_id: str, section: str) -> DestinationEntry | None:
        """ProjectSection entry for ``project_id`` and a section name or alias."""
        canonical = self.section_name(section)
        if canonical is None:
            return None
        entry = self._by_id.get(f"{project_id}::{canonical}")
        if entry is not None and entry.kind == DestinationKind.PROJECT_SECTION:
            return entry
        return None

    def resolve_key(
        self, target: str, kinds: Iterable[DestinationKind]
    ) -> DestinationEntry | None:
        """Resolve a free-form target against entries of ``kinds``.

        Cascade, first hit wins:
        1. Exact id or alias
        2. Hyphen/space swapped ("oracle ai" <-> "oracle-ai")
        3. Case-insensitive (folded) match
        4. Substring partial match: the longest key contained in the target,
           then the first key containing the target

        Args:
            target: Target string from an intent
            kinds: Destination kinds to search, in priority order

        Returns:
            Matching entry, or None if nothing matched under any step
        """
        if not isinstance(target, str) or not target.strip():
            return None
        kinds = list(kinds)
        candidate = target.strip()

        for kind in kinds:
            exact = self._exact.get(kind, {})
            if candidate in exact:
                return exact[candidate]

        swapped = (re.sub(r"\s+", "-", candidate), candidate.replace("-", " "))
        for kind in kinds:
            exact = self._exact.get(kind, {})
            for variant in swapped:
                if variant in exact:
                    return exact[variant]

        folded = fold_key(candidate)
        for kind in kinds:
            table = self._folded.get(kind, {})
            if folded in table:
                return table[folded]

        return self._partial_match(folded, kinds)

    def _partial_match(
        self, folded: str, kinds: list[DestinationKind]
    ) -> DestinationEntry | None:
        if not folded:
            return None
        for kind in kinds:
            table = self._folded.get(kind, {})
            contained = [key for key in table if key and key in folded]
            if contained:
                best = max(contained, key=len)
                return table[best]
        # Reverse direction needs a few characters to avoid "a" matching everything
        if len(folded) < 3:
            return None
        for kind in kinds:
            table = self._folded.get(kind, {})
            for key, entry in table.items():
                if folded in key:
                    return entry
        return None


_DEFAULT_CATALOG: Catalog | None = None


def default_catalog() -> Catalog:
    """Process-wide catalog of the portfolio site, built on first use."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = Catalog(_build_entries())
    return _DEFAULT_CATALOG
