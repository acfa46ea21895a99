"""Command line entry point.

Usage:
    voicenav "show me oracle ai final designs"
    voicenav "take me to the about page" --page oracle-ai.html --source local
    voicenav --list
    voicenav serve --port 3000
"""

import argparse
import asyncio
import json
import sys

from .catalog import default_catalog
from .config import get_config
from .interpreter import RemoteInterpreter
from .navigator import VoiceNavigator, build_intent_source
from .scorer import LocalScorer


def _resolve_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicenav",
        description="Resolve a spoken command into portfolio navigation effects.",
        epilog="Run 'voicenav serve --help' for the /api/voice proxy.",
    )
    parser.add_argument("utterance", nargs="?", help="Recognized speech text")
    parser.add_argument(
        "--page",
        default="/index.html",
        help="Current location path (default: /index.html)",
    )
    parser.add_argument(
        "--source",
        choices=["local", "remote"],
        help="Intent source (default: VOICENAV_INTENT_SOURCE)",
    )
    parser.add_argument(
        "--list", action="store_true", help="List catalog destinations and exit"
    )
    return parser


def _serve_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicenav serve", description="Run the /api/voice proxy service."
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=3000, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    return parser


def serve(argv: list[str]) -> int:
    import uvicorn

    args = _serve_parser().parse_args(argv)
    uvicorn.run(
        "voicenav.proxy:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=True,
    )
    return 0


def list_destinations() -> int:
    for entry in default_catalog().entries:
        print(f"{entry.id:<32}  {entry.kind.value:<16}  {entry.url}")
    return 0


async def resolve(utterance: str, page: str, source: str | None) -> dict:
    config = get_config()
    catalog = default_catalog()
    if source == "local":
        intent_source = LocalScorer(catalog)
    elif source == "remote":
        intent_source = RemoteInterpreter(catalog=catalog, config=config)
    else:
        intent_source = build_intent_source(config, catalog)

    navigator = VoiceNavigator(source=intent_source, catalog=catalog, config=config)
    async with navigator:
        outcome = await navigator.handle(utterance, navigator.context_for(page))
    return outcome.to_dict()


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "serve":
        return serve(argv[1:])

    parser = _resolve_parser()
    args = parser.parse_args(argv)
    if args.list:
        return list_destinations()
    if not args.utterance:
        parser.error("an utterance is required")

    result = asyncio.run(resolve(args.utterance, args.page, args.source))
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
