"""
Nonce Service
Resolves the CSP nonce shared by every response or asset of a run.
"""

import logging
import secrets

from secure_headers.pipeline.phase import Phase
from secure_headers.schemas.options import SecureHeadersOptions

logger = logging.getLogger(__name__)

NONCE_BYTES = 16


def generate_nonce() -> str:
    """Generate a cryptographically secure, URL-safe nonce."""
    return secrets.token_urlsafe(NONCE_BYTES)


def provide_nonce(phase: Phase, options: SecureHeadersOptions) -> str:
    """
    Resolve the nonce for a run.

    The serve phase gets a fresh random value. The build phase gets the
    configured placeholder, which the production web server replaces with a
    per-response value.

    Args:
        phase: Current pipeline phase
        options: Plugin options

    Returns:
        Nonce value to embed in headers and markup
    """
    if phase is Phase.SERVE:
        return generate_nonce()

    logger.debug(f"Using nonce placeholder '{options.nonce_placeholder}' for build")
    return options.nonce_placeholder
