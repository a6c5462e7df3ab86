"""
Bundle Service - Nonce Rewriting of Finished Output Sets

The build phase hands over every generated file keyed by output path. HTML
assets are rewritten with the run nonce (the placeholder); code chunks and
non-HTML assets are passed through as the very same objects.

Also provides helpers to load an output directory from disk as a bundle and
write the rewritten assets back.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Literal, Mapping, Union

from secure_headers.services.html_rewriter import rewrite_html

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"

# Undecodable bytes survive a decode/encode round trip unchanged
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class OutputAsset:
    file_name: str
    source: Union[str, bytes]
    type: Literal["asset"] = "asset"


@dataclass(frozen=True)
class OutputChunk:
    file_name: str
    code: str
    type: Literal["chunk"] = "chunk"


OutputItem = Union[OutputAsset, OutputChunk]
Bundle = Dict[str, OutputItem]


def is_html_asset(item: OutputItem) -> bool:
    return item.type == "asset" and item.file_name.endswith(HTML_SUFFIX)


def rewrite_asset(asset: OutputAsset, nonce: str, inject_shim: bool) -> OutputAsset:
    source = asset.source
    if isinstance(source, bytes):
        rewritten = rewrite_html(source.decode(TEXT_ENCODING, TEXT_ERRORS), nonce, inject_shim)
        return replace(asset, source=rewritten.encode(TEXT_ENCODING, TEXT_ERRORS))
    return replace(asset, source=rewrite_html(source, nonce, inject_shim))


def rewrite_bundle(
    bundle: Mapping[str, OutputItem], nonce: str, inject_shim: bool = True
) -> Bundle:
    """
    Rewrite every HTML asset of an output bundle.

    Args:
        bundle: Generated files keyed by output path
        nonce: Nonce (placeholder in the build phase) to embed
        inject_shim: Whether HTML assets also receive the dynamic-injection shim

    Returns:
        New bundle with the same keys in the same order
    """
    rewritten: Bundle = {}
    for path, item in bundle.items():
        if is_html_asset(item):
            rewritten[path] = rewrite_asset(item, nonce, inject_shim)
            logger.debug(f"Rewrote nonces in {path}")
        else:
            rewritten[path] = item
    return rewritten


def load_bundle(out_dir: Path) -> Bundle:
    """
    Read every file under an output directory as a bundle of assets.

    HTML files are decoded as UTF-8 text, keeping invalid bytes as surrogate
    escapes; everything else is kept as bytes.
    Keys are POSIX paths relative to ``out_dir``.
    """
    bundle: Bundle = {}
    for path in sorted(p for p in out_dir.rglob("*") if p.is_file()):
        file_name = path.relative_to(out_dir).as_posix()
        if file_name.endswith(HTML_SUFFIX):
            source: Union[str, bytes] = path.read_bytes().decode(TEXT_ENCODING, TEXT_ERRORS)
        else:
            source = path.read_bytes()
        bundle[file_name] = OutputAsset(file_name=file_name, source=source)
    return bundle


def write_bundle(out_dir: Path, before: Mapping[str, OutputItem], after: Bundle) -> List[str]:
    """
    Write assets whose source changed back to disk.

    Returns:
        Output paths that were written
    """
    written = []
    for file_name, item in after.items():
        previous = before.get(file_name)
        if not isinstance(item, OutputAsset):
            continue
        if isinstance(previous, OutputAsset) and previous.source == item.source:
            continue
        target = out_dir / file_name
        if isinstance(item.source, bytes):
            target.write_bytes(item.source)
        else:
            target.write_bytes(item.source.encode(TEXT_ENCODING, TEXT_ERRORS))
        written.append(file_name)
    return written
