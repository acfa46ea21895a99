"""Data models for voice navigation.

Defines destinations, intents, page context and navigation effects.
Everything here is created per command and never persisted, except
DestinationEntry which lives in the frozen catalog.

Note: Uses (str, Enum) pattern for Python 3.10 compatibility.
"""

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "INDEX_PAGE",
    "DestinationEntry",
    "DestinationKind",
    "EffectKind",
    "Intent",
    "IntentAction",
    "KeywordHint",
    "NavigationEffect",
    "NavigationOutcome",
    "PageContext",
]

INDEX_PAGE = "index.html"
ABOUT_PAGE = "about.html"


class DestinationKind(str, Enum):
    """Kinds of addressable navigation targets."""

    SECTION = "section"  # Anchor on the index page
    PAGE = "page"  # Standalone page (about)
    PROJECT_PAGE = "project_page"
    PROJECT_SECTION = "project_section"  # Anchor on a project page
    ABOUT_SECTION = "about_section"  # Anchor on the about page
    FILTER_TAG = "filter_tag"  # Project filter chip on the index page


class IntentAction(str, Enum):
    """Navigation intents.

    Values double as the wire names the hosted model replies with.
    """

    NAVIGATE_SECTION = "navigate_section"
    NAVIGATE_PAGE = "navigate_page"
    NAVIGATE_PROJECT = "navigate_project"
    NAVIGATE_PROJECT_SECTION = "navigate_project_section"
    FILTER_PROJECTS = "filter_projects"
    GO_HOME = "go_home"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "IntentAction":
        """Map a wire action name onto an IntentAction, UNKNOWN if unrecognized."""
        if isinstance(value, IntentAction):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


class EffectKind(str, Enum):
    """Executable navigation effects understood by the DOM layer."""

    SCROLL_WITHIN_PAGE = "scroll_within_page"
    REDIRECT_TO_PAGE = "redirect_to_page"
    REDIRECT_TO_PAGE_WITH_ANCHOR = "redirect_to_page_with_anchor"
    OPEN_EXTERNAL = "open_external"
    APPLY_FILTER = "apply_filter"


@dataclass(frozen=True)
class KeywordHint:
    """Phrase and weight used by the local scorer."""

    phrase: str
    weight: int


@dataclass(frozen=True)
class DestinationEntry:
    """One addressable navigation target.

    Attributes:
        id: Unique key, e.g. "projects" or "oracle-ai::final-designs"
        kind: DestinationKind of the target
        locator: Page path, filter tag name or external URL
        anchor: In-page anchor ("#projects") or None for the page top
        is_external: True for off-site or downloadable resources
        keyword_hints: Ordered (phrase, weight) pairs for the local scorer
        parent: Parent page entry id for ProjectSection/AboutSection
        description: Human description rendered into the model prompt
        aliases: Extra names accepted by the resolution cascade
    """

    id: str
    kind: DestinationKind
    locator: str
    anchor: str | None = None
    is_external: bool = False
    keyword_hints: tuple[KeywordHint, ...] = ()
    parent: str | None = None
    description: str = ""
    aliases: tuple[str, ...] = ()

    @property
    def url(self) -> str:
        """Locator joined with the anchor."""
        return f"{self.locator}{self.anchor or ''}"

    @property
    def short_name(self) -> str:
        """Id without the parent prefix ("oracle::overview" -> "overview")."""
        return self.id.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class Intent:
    """Normalized output of an intent source.

    confidence is in [0, 1] for the remote interpreter. The local scorer
    leaves it at 1.0 and reports its raw ranking score in ``score``.
    """

    action: IntentAction
    target: str
    confidence: float = 1.0
    score: float | None = None
    source: str = "local"


@dataclass(frozen=True)
class PageContext:
    """Read-only snapshot of the page the visitor is on."""

    current_page_id: str = INDEX_PAGE
    is_on_index_page: bool = True
    is_on_project_page: bool = False
    is_on_about_page: bool = False

    @classmethod
    def from_path(cls, path: str | None, project_pages=()) -> "PageContext":
        """Compute context from a URL path such as "/work/tidbit.html".

        Args:
            path: Location pathname (query string and hash are ignored)
            project_pages: Page file names that count as project pages

        Returns:
            PageContext for the page at ``path``
        """
        raw = (path or "").split("?", 1)[0].split("#", 1)[0]
        page = raw.split("/")[-1] or INDEX_PAGE
        return cls(
            current_page_id=page,
            is_on_index_page=page == INDEX_PAGE,
            is_on_project_page=page in set(project_pages),
            is_on_about_page=page == ABOUT_PAGE,
        )

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page_id,
            "isOnIndexPage": self.is_on_index_page,
            "isOnProjectPage": self.is_on_project_page,
            "isOnAboutPage": self.is_on_about_page,
        }


@dataclass(frozen=True)
class NavigationEffect:
    """Resolved, executable outcome."""

    kind: EffectKind
    payload: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "payload": self.payload}


@dataclass
class NavigationOutcome:
    """Everything one command produces.

    Attributes:
        effects: Ordered effects; never empty
        message: Confirmation shown to the visitor
        advisory: Transient notice when a fallback or low confidence applied
        intent: Intent the outcome was resolved from
        fallback_reason: Why a fallback destination was used, if any
        superseded: True when a newer command started before this one finished
    """

    effects: list[NavigationEffect]
    message: str
    advisory: str | None = None
    intent: Intent | None = None
    fallback_reason: str | None = None
    superseded: bool = False
    metadata: dict = field(default_factory=dict)

    @property
    def primary(self) -> NavigationEffect:
        """First effect of the outcome."""
        return self.effects[0]

    def to_dict(self) -> dict:
        return {
            "effects": [effect.to_dict() for effect in self.effects],
            "message": self.message,
            "advisory": self.advisory,
            "intent": (
                {
                    "action": self.intent.action.value,
                    "target": self.intent.target,
                    "confidence": self.intent.confidence,
                    "source": self.intent.source,
                }
                if self.intent
                else None
            ),
            "fallback_reason": self.fallback_reason,
            "superseded": self.superseded,
        }
