"""
Security Headers Middleware
Adds the Content-Security-Policy and hardening headers to all responses.
"""

from starlette.datastructures import MutableHeaders

from secure_headers.pipeline.context import RunContext
from secure_headers.services.policy_service import assemble_policy


class SecurityHeadersMiddleware:
    """
    Middleware that adds security headers to all responses.

    Headers implemented:
    - Content-Security-Policy (or -Report-Only): nonce-based policy
    - X-XSS-Protection: Legacy XSS filter
    - X-Frame-Options: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME sniffing
    - Referrer-Policy: Controls referrer information
    - Permissions-Policy: Restricts browser features
    - Cache-Control: Keeps served pages out of caches

    The policy is assembled for every request from the run context, then the
    request is always passed on. Headers with an empty configured value are
    not sent.
    """

    def __init__(self, app, context: RunContext):
        self.app = app
        self.context = context

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        policy = assemble_policy(self.context.options, self.context.nonce)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                for name, value in policy.items():
                    headers[name] = value

            await send(message)

        await self.app(scope, receive, send_wrapper)
