from secure_headers.middleware.csp_nonce import CSPNonceMiddleware
from secure_headers.middleware.html_nonce import HTMLNonceMiddleware
from secure_headers.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "CSPNonceMiddleware",
    "HTMLNonceMiddleware",
    "SecurityHeadersMiddleware",
]
