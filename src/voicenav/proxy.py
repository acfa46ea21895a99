"""/api/voice proxy service.

Keeps the upstream credential server side: the browser posts
``{systemPrompt, transcript}`` and gets back ``{reply, fullResponse}``.

Status codes:
- 200: OPTIONS preflight, or a successful completion
- 400: systemPrompt or transcript missing
- 405: any method other than POST/OPTIONS
- 500: credential not configured, or an unexpected server error
- upstream status: passed through when the upstream call fails

Every response carries permissive CORS headers.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import make_asgi_app

from .__version__ import __version__
from .config import VoiceNavConfig, get_config
from .metrics import record_proxy_request
from .upstream import OpenAIChatClient, UpstreamStatusError

logger = logging.getLogger("voicenav.proxy")

__all__ = ["CORS_HEADERS", "create_app"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS, GET",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _respond(status_code: int, content: dict | None = None) -> Response:
    record_proxy_request(status_code)
    if content is None:
        return Response(status_code=status_code, headers=CORS_HEADERS)
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


async def _read_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def create_app(
    config: VoiceNavConfig | None = None,
    upstream: OpenAIChatClient | None = None,
) -> FastAPI:
    """Build the proxy application.

    Args:
        config: Settings, defaults to the global config
        upstream: Upstream client, injectable for tests
    """
    config = config or get_config()
    upstream = upstream or OpenAIChatClient(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "proxy_started",
            extra={
                "model": config.openai_model,
                "credential_configured": config.has_upstream_credential,
            },
        )
        yield
        await upstream.aclose()

    app = FastAPI(
        title="voicenav proxy",
        description="Forwards voice navigation prompts to the hosted model",
        version=__version__,
        lifespan=lifespan,
    )
    app.mount("/metrics", make_asgi_app())

    @app.get("/live", tags=["Health"])
    async def liveness():
        return {"status": "alive"}

    @app.api_route("/api/voice", methods=_ALL_METHODS, tags=["Voice"])
    async def voice(request: Request) -> Response:
        if request.method == "OPTIONS":
            return _respond(status.HTTP_200_OK)

        if request.method != "POST":
            return _respond(
                status.HTTP_405_METHOD_NOT_ALLOWED, {"error": "Method not allowed"}
            )

        try:
            body = await _read_body(request)
            system_prompt = body.get("systemPrompt")
            transcript = body.get("transcript")
            if not system_prompt or not transcript:
                return _respond(
                    status.HTTP_400_BAD_REQUEST,
                    {"error": "Missing systemPrompt or transcript"},
                )

            if not config.has_upstream_credential:
                logger.error("upstream_credential_missing")
                return _respond(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    {"error": "API key not configured"},
                )

            reply, full_response = await upstream.complete(system_prompt, transcript)
        except UpstreamStatusError as e:
            return _respond(e.status, {"error": str(e), "details": e.details})
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "proxy_request_failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return _respond(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"error": "Server error", "message": str(e)},
            )
        except Exception as e:
            logger.exception(
                "proxy_unexpected_error",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return _respond(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"error": "Server error", "message": str(e)},
            )

        logger.info("proxy_reply_sent", extra={"reply_length": len(reply)})
        return _respond(
            status.HTTP_200_OK, {"reply": reply, "fullResponse": full_response}
        )

    return app
