import logging
import time
from dataclasses import dataclass

import jwt
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from blog_api.security import TokenClaims, decode_token, parse_authorization_header

logger = logging.getLogger(__name__)

REQUEST_CONTEXT_KEY = "request_context"


@dataclass(frozen=True)
class RequestContext:
    """Per-request identity; ``claims`` is None for anonymous requests."""

    claims: TokenClaims | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.claims is not None


def resolve_request_context(authorization: str | None) -> RequestContext:
    """
    Build the request context from an ``Authorization`` header value.

    A missing, malformed, expired or badly signed token never rejects the
    request; it simply leaves it anonymous.  Guarded routes decide whether
    anonymity is acceptable.
    """
    token = parse_authorization_header(authorization)
    if token is None:
        return RequestContext()
    try:
        return RequestContext(claims=decode_token(token))
    except jwt.InvalidTokenError as exc:
        logger.debug("Ignoring invalid bearer token: %s", exc)
        return RequestContext()


# ---------------------------------------------------------------------------
# Middleware (pure ASGI, request state is written straight into the scope)
# ---------------------------------------------------------------------------

class RequestContextMiddleware:
    """
    Pure ASGI middleware that

    - decodes the bearer token and stores a :class:`RequestContext` in the
      request state (``request.state.request_context``);
    - adds an ``X-Response-Time-Ms`` header with the wall-clock time of
      the request;
    - logs one summary line per request.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        context = resolve_request_context(headers.get("authorization"))
        scope.setdefault("state", {})[REQUEST_CONTEXT_KEY] = context

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                headers = list(message.get("headers", []))
                headers.append((b"x-response-time-ms", str(duration_ms).encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "%s %s -> %d (%.2f ms, user=%s)",
                scope["method"],
                scope["path"],
                status_code,
                (time.perf_counter() - start) * 1000,
                context.claims.id if context.claims else "anonymous",
            )
