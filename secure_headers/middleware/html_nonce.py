"""
HTML Nonce Middleware
Rewrites served HTML documents so every element carries the run nonce.
"""

import logging
from typing import Callable, List

from starlette.datastructures import Headers, MutableHeaders

logger = logging.getLogger(__name__)


class HTMLNonceMiddleware:
    """
    Middleware that passes every text/html response body through a transform.

    The body is buffered until the last chunk, transformed, and sent with a
    corrected Content-Length. Encoded (compressed) bodies, HEAD requests and
    non-HTML responses are passed through untouched.

    A HEAD response carries no body to rewrite, so its Content-Length is the
    length of the unrewritten document and is smaller than the one sent for
    the matching GET.
    """

    def __init__(self, app, transform: Callable[[str], str]):
        self.app = app
        self.transform = transform

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope.get("method") == "HEAD":
            await self.app(scope, receive, send)
            return

        start_message = None
        body_parts: List[bytes] = []

        async def send_wrapper(message):
            nonlocal start_message

            if message["type"] == "http.response.start":
                headers = Headers(raw=message.get("headers", []))
                content_type = headers.get("content-type", "")
                if content_type.startswith("text/html") and "content-encoding" not in headers:
                    # Hold the start message until the body is rewritten
                    start_message = message
                    return
                await send(message)
                return

            if message["type"] != "http.response.body" or start_message is None:
                await send(message)
                return

            body_parts.append(message.get("body", b""))
            if message.get("more_body", False):
                return

            html = b"".join(body_parts).decode("utf-8", errors="surrogateescape")
            body = self.transform(html).encode("utf-8", errors="surrogateescape")

            message_headers = MutableHeaders(scope=start_message)
            message_headers["content-length"] = str(len(body))
            logger.debug(f"Rewrote HTML response for {scope.get('path', '')}")

            await send(start_message)
            await send({"type": "http.response.body", "body": body, "more_body": False})

        await self.app(scope, receive, send_wrapper)
