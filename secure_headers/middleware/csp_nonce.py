"""
CSP Nonce Middleware
Exposes the run's shared nonce to every request.
"""

from secure_headers.pipeline.context import RunContext


class CSPNonceMiddleware:
    """
    Middleware that stores the shared CSP nonce on the request state.

    The nonce is resolved once per run and reused for every request, so
    headers, rewritten markup and templates always agree. It is available as
    request.state.csp_nonce for:
    1. Route handlers building responses by hand
    2. Templates (nonce="{{ csp_nonce }}")
    """

    def __init__(self, app, context: RunContext):
        self.app = app
        self.context = context

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            scope.setdefault("state", {})["csp_nonce"] = self.context.nonce
        await self.app(scope, receive, send)
