"""System prompt templates for the remote intent interpreter.

The prompt lists the whole destination catalog so the hosted model needs no
outside knowledge of the site, plus the visitor's current page context and
the JSON reply contract.
"""

from .catalog import Catalog
from .models import DestinationKind, PageContext

__all__ = ["NAVIGATION_PROMPT", "build_system_prompt", "render_catalog"]

NAVIGATION_PROMPT = """You are a navigation assistant for Naima Patel's portfolio website.
Your job is to interpret voice commands and determine the user's navigation intent.

Current context:
- Current page: {current_page}
- Is on index page: {is_on_index_page}
- Is on project page: {is_on_project_page}
- Is on about page: {is_on_about_page}

Available navigation targets:

{catalog}

Respond with ONLY a JSON object in this exact format:
{{
  "action": "navigate_section" | "navigate_page" | "navigate_project" | "navigate_project_section" | "filter_projects" | "go_home" | "unknown",
  "target": "target-name",
  "confidence": 0.0-1.0
}}

IMPORTANT: Be flexible with natural language. Understand variations and synonyms.

Examples:
- "show me your work" -> {{"action": "navigate_section", "target": "projects", "confidence": 0.95}}
- "view my portfolio" -> {{"action": "navigate_section", "target": "projects", "confidence": 0.95}}
- "tell me more about naima" -> {{"action": "navigate_page", "target": "about", "confidence": 0.95}}
- "who are you" -> {{"action": "navigate_page", "target": "about", "confidence": 0.85}}
- "what does naima do for fun" -> {{"action": "navigate_section", "target": "about::interests-hobbies", "confidence": 0.9}}
- "open tidbit" -> {{"action": "navigate_project", "target": "tidbit", "confidence": 0.9}}
- "oracle ai project" -> {{"action": "navigate_project", "target": "oracle-ai", "confidence": 0.9}}
- "show me oracle ai final designs" -> {{"action": "navigate_project_section", "target": "oracle-ai::final-designs", "confidence": 0.9}}
- "go to final designs" -> {{"action": "navigate_project_section", "target": "final-designs", "confidence": 0.85}}
- "show me ai projects" -> {{"action": "filter_projects", "target": "ai", "confidence": 0.9}}
- "take me home" -> {{"action": "go_home", "target": "landing", "confidence": 0.95}}"""

_HEADINGS = (
    (DestinationKind.SECTION, "MAIN SECTIONS (action navigate_section, on index.html)"),
    (DestinationKind.PAGE, "STANDALONE PAGES (action navigate_page)"),
    (DestinationKind.ABOUT_SECTION, "ABOUT PAGE SECTIONS (action navigate_section)"),
    (DestinationKind.PROJECT_PAGE, "PROJECT PAGES (action navigate_project)"),
    (DestinationKind.FILTER_TAG, "PROJECT FILTERS (action filter_projects, on index.html)"),
)


def render_catalog(catalog: Catalog) -> str:
    """Render catalog entries as the prompt's target listing."""
    blocks = []
    for kind, heading in _HEADINGS:
        lines = [f"{heading}:"]
        for entry in catalog.by_kind(kind):
            line = f"- {entry.id}: {entry.description}"
            if entry.aliases:
                line += f" (also: {', '.join(entry.aliases)})"
            lines.append(line)
        blocks.append("\n".join(lines))

    # Project sections repeat per project; list each section name once
    sections: dict[str, str] = {}
    for entry in catalog.by_kind(DestinationKind.PROJECT_SECTION):
        sections.setdefault(entry.short_name, entry.description)
    lines = [
        "PROJECT PAGE SECTIONS (action navigate_project_section; "
        "target '<project>::<section>' or just '<section>' when already on a project page):"
    ]
    lines.extend(f"- {name}: {description}" for name, description in sections.items())
    blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_system_prompt(catalog: Catalog, context: PageContext) -> str:
    """Build the system instruction for one utterance.

    Args:
        catalog: Destination catalog to describe
        context: Current page context

    Returns:
        Formatted prompt string
    """
    return NAVIGATION_PROMPT.format(
        current_page=context.current_page_id,
        is_on_index_page=str(context.is_on_index_page).lower(),
        is_on_project_page=str(context.is_on_project_page).lower(),
        is_on_about_page=str(context.is_on_about_page).lower(),
        catalog=render_catalog(catalog),
    )
