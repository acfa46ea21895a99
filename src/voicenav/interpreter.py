"""Remote intent interpreter.

Sends the utterance and page context to the hosted language model through
the /api/voice proxy and parses the model's reply into an Intent.

Every failure is raised as an InterpretError subclass. Callers are expected
to catch InterpretError and fall back; nothing here decides where to go.
"""

import json
import logging
import re
import time

import httpx

from .catalog import Catalog, default_catalog
from .config import VoiceNavConfig, get_config
from .models import Intent, IntentAction, PageContext
from .prompts import build_system_prompt

logger = logging.getLogger("voicenav.interpreter")

__all__ = [
    "EmptyReply",
    "InterpretError",
    "InterpretTimeout",
    "InvalidShape",
    "MalformedReply",
    "NotConfigured",
    "RemoteInterpreter",
    "Unreachable",
    "UpstreamError",
    "parse_reply",
]


class InterpretError(Exception):
    """Base class for remote interpretation failures."""

    reason = "error"


class Unreachable(InterpretError):
    """Network or transport failure reaching the proxy."""

    reason = "unreachable"


class InterpretTimeout(Unreachable):
    """The proxy did not answer within the configured timeout."""

    reason = "timeout"


class UpstreamError(InterpretError):
    """Proxy answered with a non-2xx status."""

    reason = "upstream_error"

    def __init__(self, status: int, detail: str = ""):
        self.status = status
        self.detail = detail
        super().__init__(f"Upstream error: HTTP {status}")


class NotConfigured(UpstreamError):
    """Proxy has no upstream credential configured."""

    reason = "not_configured"


class EmptyReply(InterpretError):
    """Reply text was empty."""

    reason = "empty_reply"


class MalformedReply(InterpretError):
    """Reply contained no parseable JSON object."""

    reason = "malformed_reply"


class InvalidShape(InterpretError):
    """Parsed object is missing action or target."""

    reason = "invalid_shape"


_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_BRACE_RE = re.compile(r"\{.*\}", re.DOTALL)


def _extract_json(text: str) -> dict:
    """Pull the JSON object out of a model reply.

    Handles clean JSON, JSON inside a markdown code block, and JSON with
    prose before or after it.
    """
    candidates = [text]
    block = _CODE_BLOCK_RE.search(text)
    if block:
        candidates.append(block.group(1))
    braces = _BRACE_RE.search(text)
    if braces:
        candidates.append(braces.group(0))

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result

    logger.warning("reply_json_parse_failed", extra={"reply_preview": text[:200]})
    raise MalformedReply(f"Could not parse JSON from reply: {text[:100]}")


def _coerce_confidence(value: object) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(1.0, max(0.0, confidence))


def parse_reply(reply: str | None) -> Intent:
    """Parse a model reply into an Intent.

    Args:
        reply: Raw reply text from the proxy

    Returns:
        Intent with source "remote"

    Raises:
        EmptyReply: If the reply is empty or whitespace
        MalformedReply: If no JSON object can be extracted
        InvalidShape: If action or target is missing
    """
    if reply is None or not str(reply).strip():
        raise EmptyReply("Empty reply from model")

    result = _extract_json(str(reply).strip())

    action = result.get("action")
    target = result.get("target")
    if not action or not target:
        logger.warning("reply_invalid_shape", extra={"keys": sorted(result)})
        raise InvalidShape("Reply is missing 'action' or 'target'")

    return Intent(
        action=IntentAction.parse(action),
        target=str(target),
        confidence=_coerce_confidence(result.get("confidence", 0.0)),
        source="remote",
    )


class RemoteInterpreter:
    """Intent source backed by the hosted model behind /api/voice.

    Example:
        >>> interpreter = RemoteInterpreter()
        >>> intent = await interpreter.interpret("open tidbit", PageContext())
        >>> intent.action
        <IntentAction.NAVIGATE_PROJECT: 'navigate_project'>
    """

    name = "remote"

    def __init__(
        self,
        catalog: Catalog | None = None,
        config: VoiceNavConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.catalog = catalog or default_catalog()
        self.config = config or get_config()
        self._client = client or httpx.AsyncClient(
            timeout=self.config.proxy_timeout,
            headers={"Content-Type": "application/json"},
        )

    async def interpret(self, utterance: str, context: PageContext) -> Intent:
        """Interpret ``utterance`` with the hosted model.

        Raises:
            InterpretTimeout: If the request exceeds the timeout
            Unreachable: If the proxy cannot be reached
            NotConfigured: If the proxy reports no upstream credential
            UpstreamError: On any other non-2xx status
            EmptyReply, MalformedReply, InvalidShape: On unusable replies
        """
        body = {
            "systemPrompt": build_system_prompt(self.catalog, context),
            "transcript": utterance,
        }
        start_time = time.time()
        try:
            response = await self._client.post(self.config.proxy_url, json=body)
        except httpx.TimeoutException as e:
            logger.error("proxy_timeout", extra={"error": str(e)})
            raise InterpretTimeout(f"Proxy request timed out: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("proxy_unreachable", extra={"error": str(e)})
            raise Unreachable(f"Proxy unreachable: {e}") from e

        latency_seconds = time.time() - start_time

        if not response.is_success:
            payload = self._error_payload(response)
            logger.error(
                "proxy_http_error",
                extra={"status": response.status_code, "error": payload.get("error")},
            )
            if response.status_code == 500 and "not configured" in str(
                payload.get("error", "")
            ).lower():
                raise NotConfigured(response.status_code, str(payload.get("error")))
            detail = payload.get("details") or payload.get("error") or ""
            raise UpstreamError(response.status_code, str(detail))

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedReply(f"Proxy returned non-JSON body: {e}") from e

        reply = data.get("reply") if isinstance(data, dict) else None
        intent = parse_reply(reply)

        logger.info(
            "remote_intent_parsed",
            extra={
                "action": intent.action.value,
                "target": intent.target,
                "confidence": intent.confidence,
                "latency_seconds": latency_seconds,
            },
        )
        return intent

    @staticmethod
    def _error_payload(response: httpx.Response) -> dict:
        try:
            payload = response.json()
        except ValueError:
            return {"error": response.text[:200]}
        return payload if isinstance(payload, dict) else {}

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
