"""
Secure Headers Plugin

Phase controller for the host asset pipeline. The host calls one method per
pipeline stage:

- config               (config-mutate)     register the localization alias
- config_resolved      (config-resolved)   learn the phase, resolve the nonce
- configure_server     (serve-request)     install the serve-phase middlewares
- transform_index_html (transform-html)    rewrite a served HTML document
- generate_bundle      (finalize-bundle)   rewrite HTML assets of the output

The resolved nonce lives in an immutable RunContext; no stage reads it from
shared mutable state.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from starlette.applications import Starlette

from secure_headers.constants.headers import (
    I18N_DEV_BUILD,
    I18N_PACKAGE,
    I18N_PROD_BUILD,
)
from secure_headers.middleware import (
    CSPNonceMiddleware,
    HTMLNonceMiddleware,
    SecurityHeadersMiddleware,
)
from secure_headers.pipeline.context import RunContext
from secure_headers.pipeline.phase import Phase
from secure_headers.schemas.options import SecureHeadersOptions, load_options
from secure_headers.services.bundle_service import Bundle, OutputItem, rewrite_bundle
from secure_headers.services.html_rewriter import rewrite_html
from secure_headers.services.nonce_service import provide_nonce

logger = logging.getLogger(__name__)

PLUGIN_NAME = "secure-headers-nonce"


class SecureHeadersPlugin:
    name = PLUGIN_NAME

    def __init__(self, options: Optional[SecureHeadersOptions] = None):
        self.options = options or SecureHeadersOptions()
        self._context: Optional[RunContext] = None

    @property
    def context(self) -> RunContext:
        if self._context is None:
            raise RuntimeError(
                "Secure headers plugin used before config_resolved() was called"
            )
        return self._context

    def config(self, host_config: Dict[str, Any], command: str) -> Dict[str, Any]:
        """
        Register the localization library alias on the host configuration.

        Serving resolves the library to its development build, bundling to its
        production build.
        """
        resolve = host_config.setdefault("resolve", {})
        alias = resolve.setdefault("alias", {})

        if self.options.process_i18n:
            phase = Phase.from_command(command)
            alias[I18N_PACKAGE] = I18N_DEV_BUILD if phase is Phase.SERVE else I18N_PROD_BUILD
            logger.info(f"Aliased {I18N_PACKAGE} to {alias[I18N_PACKAGE]}")

        return host_config

    def config_resolved(self, resolved_config: Dict[str, Any]) -> RunContext:
        """
        Resolve the phase and the nonce for this run.

        The nonce is also exposed to the host as
        ``resolved_config["html"]["csp_nonce"]`` so templates can read it.
        """
        phase = Phase.from_command(resolved_config.get("command", ""))
        nonce = provide_nonce(phase, self.options)
        self._context = RunContext(phase=phase, nonce=nonce, options=self.options)

        resolved_config.setdefault("html", {})["csp_nonce"] = nonce
        logger.info(f"Secure headers resolved for {phase.value} phase")
        return self._context

    def configure_server(self, app: Starlette) -> None:
        """Install the header, nonce and HTML rewriting middlewares."""
        context = self.context
        app.add_middleware(HTMLNonceMiddleware, transform=self.transform_index_html)
        app.add_middleware(CSPNonceMiddleware, context=context)
        app.add_middleware(SecurityHeadersMiddleware, context=context)

    def transform_index_html(self, html: str) -> str:
        context = self.context
        return rewrite_html(html, context.nonce, context.inject_shim)

    def generate_bundle(self, bundle: Mapping[str, OutputItem]) -> Bundle:
        context = self.context
        rewritten = rewrite_bundle(bundle, context.nonce, context.inject_shim)
        logger.info(f"Applied nonce to HTML assets of a {len(bundle)}-file bundle")
        return rewritten


def secure_headers_plugin(
    options: Union[SecureHeadersOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> SecureHeadersPlugin:
    """
    Create the plugin from an options record or mapping.

    Raises:
        ConfigurationError: If the options are invalid
    """
    return SecureHeadersPlugin(load_options(options, **overrides))
