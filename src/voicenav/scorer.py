"""Local keyword-weight intent scorer.

Offline, deterministic matcher used as the default intent source and as the
fallback when the remote interpreter fails. It normalizes an utterance,
scores every catalog entry by summed weights of the keyword phrases it
contains, and always returns an Intent.
"""

import logging
import re

from .catalog import (
    COMBO_SECTION,
    LANDING_SECTION_ID,
    Catalog,
    default_catalog,
)
from .models import DestinationEntry, DestinationKind, Intent, IntentAction, KeywordHint

logger = logging.getLogger("voicenav.scorer")

__all__ = ["COMBO_BONUS", "HEURISTIC_BOOSTS", "LocalScorer", "normalize_utterance"]

_PUNCT_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"\s+")

# Added on top of project + final designs scores for compound requests
COMBO_BONUS = 2

# (entry id or kind, trigger phrases, boost) for near-tie disambiguation
HEURISTIC_BOOSTS: tuple[tuple[str | DestinationKind, tuple[str, ...], int], ...] = (
    ("about::interests-hobbies", ("sports", "play"), 2),
    ("resume", ("hire",), 1),
    ("projects", ("portfolio",), 1),
    (DestinationKind.FILTER_TAG, ("project",), 1),
)

_ACTIONS = {
    DestinationKind.SECTION: IntentAction.NAVIGATE_SECTION,
    DestinationKind.PAGE: IntentAction.NAVIGATE_PAGE,
    DestinationKind.PROJECT_PAGE: IntentAction.NAVIGATE_PROJECT,
    DestinationKind.PROJECT_SECTION: IntentAction.NAVIGATE_PROJECT_SECTION,
    DestinationKind.ABOUT_SECTION: IntentAction.NAVIGATE_SECTION,
    DestinationKind.FILTER_TAG: IntentAction.FILTER_PROJECTS,
}


def normalize_utterance(text: str | None) -> str:
    """Lowercase, replace punctuation (except word chars, hyphen, space), collapse spaces.

    Idempotent: normalize_utterance(normalize_utterance(x)) == normalize_utterance(x).
    """
    if not text:
        return ""
    lowered = _PUNCT_RE.sub(" ", text.lower())
    return _SPACE_RE.sub(" ", lowered).strip()


def _phrase_score(text: str, hints: tuple[KeywordHint, ...]) -> int:
    # Plain containment, not tokenized: short phrases may over-match
    return sum(hint.weight for hint in hints if hint.phrase in text)


class LocalScorer:
    """Keyword scorer over a Catalog.

    Example:
        >>> scorer = LocalScorer()
        >>> scorer.score("open tidbit").target
        'tidbit'
        >>> scorer.score("asdkjhasd nonsense").score
        0
    """

    name = "local"

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or default_catalog()

    def _boost(self, entry: DestinationEntry, text: str) -> int:
        boost = 0
        for key, phrases, amount in HEURISTIC_BOOSTS:
            applies = entry.kind == key if isinstance(key, DestinationKind) else entry.id == key
            if applies and any(phrase in text for phrase in phrases):
                boost += amount
        return boost

    def _entry_score(self, entry: DestinationEntry, text: str, combo: int) -> int:
        score = _phrase_score(text, entry.keyword_hints)
        if entry.kind == DestinationKind.PROJECT_PAGE and combo > 0 and score > 0:
            score += score + combo + COMBO_BONUS
        return score + self._boost(entry, text)

    def score_all(self, utterance: str) -> list[tuple[DestinationEntry, int]]:
        """Score every catalog entry, in catalog order."""
        text = normalize_utterance(utterance)
        combo = _phrase_score(text, self.catalog.combo_hints)
        return [
            (entry, self._entry_score(entry, text, combo))
            for entry in self.catalog.entries
        ]

    def score(self, utterance: str) -> Intent:
        """Infer the best destination for ``utterance``.

        Total: never raises and never returns "no match". Ties go to the
        entry declared first in the catalog.
        """
        text = normalize_utterance(utterance)
        combo = _phrase_score(text, self.catalog.combo_hints)

        best: DestinationEntry | None = None
        best_score = float("-inf")
        for entry in self.catalog.entries:
            entry_score = self._entry_score(entry, text, combo)
            if entry_score > best_score:
                best, best_score = entry, entry_score

        if best is None:
            best = self.catalog.get(LANDING_SECTION_ID)
            best_score = 0

        if combo > 0 and best is not None and best.kind == DestinationKind.PROJECT_PAGE:
            section = self.catalog.get(f"{best.id}::{COMBO_SECTION}")
            if section is not None:
                best, best_score = section, best_score + 1

        intent = self._to_intent(best, best_score)
        logger.info(
            "local_intent_scored",
            extra={
                "action": intent.action.value,
                "target": intent.target,
                "score": best_score,
            },
        )
        return intent

    async def interpret(self, utterance: str, context=None) -> Intent:
        """IntentSource interface; context does not affect keyword scoring."""
        return self.score(utterance)

    @staticmethod
    def _to_intent(entry: DestinationEntry | None, score: float) -> Intent:
        if entry is None:
            return Intent(IntentAction.GO_HOME, LANDING_SECTION_ID, score=0, source="local")
        if entry.id == LANDING_SECTION_ID:
            action = IntentAction.GO_HOME
        else:
            action = _ACTIONS.get(entry.kind, IntentAction.UNKNOWN)
        return Intent(action=action, target=entry.id, confidence=1.0, score=score, source="local")
