#!/usr/bin/env python3
"""Display the active voicenav configuration.

Read-only: prints resolved values from the environment, .env and defaults.
The upstream credential is only reported as set or missing.
"""

import sys
from pathlib import Path

# Allow running from repo root without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voicenav.config import get_config


def main() -> None:
    """Display current configuration."""
    try:
        config = get_config()
    except Exception as e:
        print(f"\nConfiguration Error: {e}\n", file=sys.stderr)
        sys.exit(1)

    print("\n" + "=" * 70)
    print("  voicenav Configuration")
    print("=" * 70 + "\n")

    print("  Intent Routing:")
    print(f"    INTENT_SOURCE:          {config.intent_source}")
    print(f"    REMOTE_FALLBACK:        {config.remote_fallback}")
    print(f"    CONFIDENCE_THRESHOLD:   {config.confidence_threshold}")
    print(f"    LOW_CONFIDENCE_POLICY:  {config.low_confidence_policy}")

    print("\n  Remote Interpreter:")
    print(f"    Proxy URL:      {config.proxy_url}")
    print(f"    Proxy timeout:  {config.proxy_timeout}s")
    print(
        f"    Circuit:        open after {config.circuit_failure_threshold} failures, "
        f"retry after {config.circuit_reset_timeout}s"
    )

    print("\n  Upstream Model (proxy side):")
    print(f"    Base URL:     {config.openai_base_url}")
    print(f"    Model:        {config.openai_model}")
    print(f"    Temperature:  {config.openai_temperature}")
    print(f"    Max tokens:   {config.openai_max_tokens}")
    print(f"    API key:      {'set' if config.has_upstream_credential else 'MISSING'}")

    print("\n  Deferred Filters:")
    print(f"    Retry every:  {config.filter_retry_interval_ms} ms")
    print(f"    Give up after: {config.filter_retry_timeout_ms} ms")

    print("\n  Logging:")
    print(f"    Level:  {config.log_level}")
    print(f"    Format: {config.log_format}")

    print("\n" + "=" * 70 + "\n")
    print("  To modify configuration:")
    print("    1. Copy .env.example to .env")
    print("    2. Edit .env with your values")
    print("    3. Restart the proxy (voicenav serve)")
    print("\n" + "=" * 70 + "\n")


if __name__ == "__main__":
    main()
