"""
Development server.

Serves a static site root with the serve-phase hardening applied: every
response carries the CSP and hardening headers, and every HTML document is
rewritten with the run nonce and the dynamic-injection shim.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from secure_headers.config import Settings, settings as default_settings
from secure_headers.plugin import SecureHeadersPlugin, secure_headers_plugin

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler()])


def resolve_site_path(root: Path, path: str) -> Path:
    """
    Map a request path onto a file under the site root.

    Directories resolve to their index.html. Paths escaping the root or
    pointing at missing files raise a 404.
    """
    target = (root / path).resolve()
    if not target.is_relative_to(root):
        raise HTTPException(status_code=404, detail="Not Found")
    if target.is_dir():
        target = target / "index.html"
    if not target.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return target


def create_app(
    settings: Optional[Settings] = None,
    plugin: Optional[SecureHeadersPlugin] = None,
) -> FastAPI:
    """
    Build the development server for a site root.

    Runs the plugin's configuration stages for the serve command, so the
    nonce is resolved once here and shared by every request.
    """
    settings = settings or default_settings
    plugin = plugin or secure_headers_plugin(settings.plugin_options())
    root = Path(settings.ROOT_DIR).resolve()

    host_config = plugin.config({"command": "serve", "root": str(root)}, "serve")
    context = plugin.config_resolved(host_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan event handler for startup and shutdown events"""
        logger.info(f"[>>] Serving {root} with {context.phase.value} phase headers")
        if plugin.options.report_only:
            logger.warning("[WARN] CSP is in report-only mode, violations are not blocked")
        yield
        logger.info("[<<] Shutting down development server")

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan, docs_url=None, redoc_url=None)
    app.state.host_config = host_config

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log every unhandled exception"""
        logger.error(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            str(exc),
            exc_info=True,
        )
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok"}

    @app.get("/api/nonce")
    async def current_nonce(request: Request):
        return {"nonce": getattr(request.state, "csp_nonce", "")}

    @app.get("/{path:path}")
    async def serve_file(path: str):
        target = resolve_site_path(root, path)
        if target.suffix == ".html":
            return HTMLResponse(target.read_text(encoding="utf-8"))
        return FileResponse(target)

    plugin.configure_server(app)
    return app


if __name__ == "__main__":
    import uvicorn

    configure_logging(default_settings.LOG_LEVEL)
    uvicorn.run(
        create_app(),
        host=default_settings.HOST,
        port=default_settings.PORT,
    )
