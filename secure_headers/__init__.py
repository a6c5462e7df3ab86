from secure_headers.pipeline.context import RunContext
from secure_headers.plugin import SecureHeadersPlugin, secure_headers_plugin
from secure_headers.schemas.options import (
    ConfigurationError,
    SecureHeadersOptions,
    load_options,
)

__all__ = [
    "ConfigurationError",
    "RunContext",
    "SecureHeadersOptions",
    "SecureHeadersPlugin",
    "load_options",
    "secure_headers_plugin",
]
