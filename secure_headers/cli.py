#!/usr/bin/env python3
"""
Secure Headers CLI

Runs the pipeline phases from the command line.
Usage:
    secure-headers serve --root ./site --port 5173
    secure-headers build --out-dir ./dist
    secure-headers build --out-dir ./dist --placeholder '$request_id' --no-shim
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from secure_headers.config import Settings, settings as default_settings
from secure_headers.main import configure_logging, create_app
from secure_headers.plugin import secure_headers_plugin
from secure_headers.schemas.options import ConfigurationError
from secure_headers.services.bundle_service import load_bundle, write_bundle

logger = logging.getLogger(__name__)


def run_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    root = Path(args.root or settings.ROOT_DIR)
    if not root.is_dir():
        logger.error(f"[FAIL] Site root not found: {root}")
        return 1

    settings = settings.model_copy(update={"ROOT_DIR": str(root)})
    plugin = secure_headers_plugin(
        settings.plugin_options(report_only=args.report_only or settings.CSP_REPORT_ONLY)
    )
    uvicorn.run(
        create_app(settings, plugin),
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
    )
    return 0


def run_build(args: argparse.Namespace, settings: Settings) -> int:
    out_dir = Path(args.out_dir or settings.OUT_DIR)
    if not out_dir.is_dir():
        logger.error(f"[FAIL] Output directory not found: {out_dir}")
        return 1

    overrides = {}
    if args.placeholder:
        overrides["nonce_placeholder"] = args.placeholder
    if args.no_shim:
        overrides["bundle_shim"] = False
    plugin = secure_headers_plugin(settings.plugin_options(**overrides))

    host_config = plugin.config({"command": "build", "out_dir": str(out_dir)}, "build")
    plugin.config_resolved(host_config)

    bundle = load_bundle(out_dir)
    written = write_bundle(out_dir, bundle, plugin.generate_bundle(bundle))
    for file_name in written:
        logger.info(f"[OK] {file_name}")
    logger.info(f"Rewrote {len(written)} of {len(bundle)} file(s) in {out_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secure-headers",
        description="Apply CSP nonces and hardening headers to a site",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the development server")
    serve.add_argument("--root", help="Site root directory")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.add_argument("--report-only", action="store_true", help="Send the report-only CSP header")
    serve.set_defaults(handler=run_serve)

    build = subparsers.add_parser("build", help="Rewrite HTML files of a built output directory")
    build.add_argument("--out-dir", help="Output directory to rewrite in place")
    build.add_argument("--placeholder", help="Nonce placeholder substituted by the web server")
    build.add_argument("--no-shim", action="store_true", help="Do not inject the runtime nonce shim")
    build.set_defaults(handler=run_build)

    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)

    try:
        return args.handler(args, settings)
    except ConfigurationError as e:
        logger.error(f"[FAIL] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
