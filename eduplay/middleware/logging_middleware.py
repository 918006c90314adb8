"""
Request/response logging while DEBUG_MODE is on.
"""
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from eduplay import config

logger = logging.getLogger(__name__)

# Avatar uploads and media are logged by size only
_BINARY_PREFIXES = ("multipart/", "image/", "video/", "application/octet-stream")


def _describe_body(body: bytes, content_type: str) -> str:
    if content_type.startswith(_BINARY_PREFIXES):
        return f"<{len(body)} bytes of {content_type}>"
    return body.decode("utf-8", errors="replace")


async def _replay(chunks):
    for chunk in chunks:
        yield chunk


class LoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        if not config.DEBUG_MODE:
            return await call_next(request)

        # Starlette caches the body, so the route can still read it
        body = await request.body()
        line = f"--> {request.method} {request.url}"
        if body:
            line += f" {_describe_body(body, request.headers.get('content-type', ''))}"
        logger.info(line)

        response = await call_next(request)

        chunks = [chunk async for chunk in response.body_iterator]
        response.body_iterator = _replay(chunks)
        line = f"<-- {response.status_code} {request.method} {request.url.path}"
        if chunks:
            line += f" {_describe_body(b''.join(chunks), response.headers.get('content-type', ''))}"
        logger.info(line)
        return response
