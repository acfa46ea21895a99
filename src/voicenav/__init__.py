"""voicenav - voice navigation core for the portfolio site.

Turns recognized speech into navigation effects through:
- A frozen destination catalog (sections, pages, projects, filters)
- A local keyword scorer and a remote hosted-model interpreter
- One navigation resolver with fallbacks to the projects section
- The /api/voice proxy that keeps the upstream credential server side

Python Version: 3.10+ required
"""

# Configure logging before other imports
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .__version__ import __version__
from .catalog import Catalog, CatalogError, default_catalog
from .circuit_breaker import CircuitBreaker, CircuitState
from .config import VoiceNavConfig, get_config, reset_config
from .effects import DomAdapter, EffectExecutor, RecordingDom
from .interpreter import (
    EmptyReply,
    InterpretError,
    InterpretTimeout,
    InvalidShape,
    MalformedReply,
    NotConfigured,
    RemoteInterpreter,
    Unreachable,
    UpstreamError,
    parse_reply,
)
from .listening import ListeningState
from .models import (
    DestinationEntry,
    DestinationKind,
    EffectKind,
    Intent,
    IntentAction,
    KeywordHint,
    NavigationEffect,
    NavigationOutcome,
    PageContext,
)
from .navigator import IntentSource, VoiceNavigator, build_intent_source
from .resolver import NavigationResolver
from .scorer import LocalScorer, normalize_utterance

__all__ = [
    "Catalog",
    "CatalogError",
    "CircuitBreaker",
    "CircuitState",
    "DestinationEntry",
    "DestinationKind",
    "DomAdapter",
    "EffectExecutor",
    "EffectKind",
    "EmptyReply",
    "Intent",
    "IntentAction",
    "IntentSource",
    "InterpretError",
    "InterpretTimeout",
    "InvalidShape",
    "KeywordHint",
    "ListeningState",
    "LocalScorer",
    "MalformedReply",
    "NavigationEffect",
    "NavigationOutcome",
    "NavigationResolver",
    "NotConfigured",
    "PageContext",
    "RecordingDom",
    "RemoteInterpreter",
    "StructuredFormatter",
    "Unreachable",
    "UpstreamError",
    "VoiceNavConfig",
    "VoiceNavigator",
    "__version__",
    "build_intent_source",
    "configure_logging",
    "default_catalog",
    "get_config",
    "normalize_utterance",
    "parse_reply",
    "reset_config",
]
