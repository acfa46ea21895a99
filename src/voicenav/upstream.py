"""Async client for the upstream chat completions API.

Used only by the proxy service, which holds the credential. Sends the
system prompt and transcript as a two-message chat and returns the
assistant's reply text alongside the full response body.
"""

import logging

import httpx

from .config import VoiceNavConfig, get_config

logger = logging.getLogger("voicenav.upstream")

__all__ = ["OpenAIChatClient", "UpstreamStatusError"]


class UpstreamStatusError(Exception):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status: int, details: str):
        self.status = status
        self.details = details
        super().__init__(f"OpenAI API error: {status}")


class OpenAIChatClient:
    """Minimal chat completions client.

    Example:
        >>> client = OpenAIChatClient()
        >>> reply, full = await client.complete(system_prompt, "go to tidbit")
    """

    def __init__(
        self,
        config: VoiceNavConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or get_config()
        self._client = client or httpx.AsyncClient(timeout=self.config.upstream_timeout)

    @property
    def endpoint(self) -> str:
        return self.config.openai_base_url.rstrip("/") + "/chat/completions"

    def build_payload(self, system_prompt: str, transcript: str) -> dict:
        return {
            "model": self.config.openai_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": transcript},
            ],
            "temperature": self.config.openai_temperature,
            "max_tokens": self.config.openai_max_tokens,
        }

    async def complete(self, system_prompt: str, transcript: str) -> tuple[str, dict]:
        """Run one completion.

        Returns:
            (stripped reply text, full response body). Reply is "" when the response
            carries no choices.

        Raises:
            UpstreamStatusError: On a non-2xx status
            httpx.HTTPError: On transport failure
            ValueError: When the body is not a chat completion object
        """
        response = await self._client.post(
            self.endpoint,
            json=self.build_payload(system_prompt, transcript),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.openai_api_key.get_secret_value()}",
            },
        )

        if not response.is_success:
            logger.error(
                "upstream_http_error",
                extra={"status": response.status_code, "body_preview": response.text[:200]},
            )
            raise UpstreamStatusError(response.status_code, response.text)

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected upstream response: {type(data).__name__}")
        choices = data.get("choices") or []
        reply = ""
        if isinstance(choices, list) and choices:
            first = choices[0]
            message = first.get("message") if isinstance(first, dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            reply = content.strip() if isinstance(content, str) else ""

        logger.debug(
            "upstream_completion_received",
            extra={"model": data.get("model"), "usage": data.get("usage")},
        )
        return reply, data

    async def aclose(self) -> None:
        await self._client.aclose()
