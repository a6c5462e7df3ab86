"""
HTML Rewriter

Best-effort text surgery that stamps a CSP nonce on the elements of an HTML
document. No DOM is built: each step is a targeted substitution over the
whole document, applied in a fixed order so later steps never re-match text
inserted by earlier ones.

Steps:
1. <script   -> <script nonce="..."   (every occurrence, not idempotent)
2. <style    -> <style nonce="..."    (every occurrence, not idempotent)
3. <link ...> gets nonce="..." appended unless it already has one
4. Any other start tag with a style attribute gets a sibling nonce attribute
   unless it already has one
5. The dynamic-injection shim is inserted before the first </head>

Malformed input never raises. A missing </head> only skips step 5.
"""

import logging
import re
from string import Template

logger = logging.getLogger(__name__)

SHIM_MARKER = "data-csp-nonce-shim"

# Attribute scans stop at the next "<" so malformed input stays linear
_LINK_TAG = re.compile(r"<link\s([^<>]*)>")

# Start tag with at least one attribute; quoted values may contain ">" but not "<"
_START_TAG = re.compile(r"<([a-zA-Z][\w:.-]*)(\s(?:[^<>\"']|\"[^\"<]*\"|'[^'<]*')*)>")
_QUOTED_VALUE = re.compile(r"\"[^\"]*\"|'[^']*'")
_STYLE_ATTRIBUTE = re.compile(r"(?:^|\s)style\s*=", re.IGNORECASE)
_NONCE_ATTRIBUTE = re.compile(r"(?:^|\s)nonce\s*=", re.IGNORECASE)

_SHIM_TEMPLATE = Template(
    """
<script nonce="$nonce" $marker>
  (function() {
    var nonce = "$nonce";
    var originalCreateElement = document.createElement;
    document.createElement = function() {
      var element = originalCreateElement.apply(document, arguments);
      var tagName = String(arguments[0]).toLowerCase();
      if (tagName === 'style' || tagName === 'script') {
        element.nonce = nonce;
      }
      return element;
    };
    // Styles inserted by third-party code after the initial render
    var originalInsertBefore = Element.prototype.insertBefore;
    Element.prototype.insertBefore = function(newNode, referenceNode) {
      if (newNode.tagName && newNode.tagName.toLowerCase() === 'style' && !newNode.nonce) {
        newNode.nonce = nonce;
      }
      return originalInsertBefore.call(this, newNode, referenceNode);
    };
    var originalAppendChild = Element.prototype.appendChild;
    Element.prototype.appendChild = function(newNode) {
      if (newNode.tagName && newNode.tagName.toLowerCase() === 'style' && !newNode.nonce) {
        newNode.nonce = nonce;
      }
      return originalAppendChild.call(this, newNode);
    };
  })();
</script>
"""
)


def build_nonce_shim(nonce: str) -> str:
    """Return the script block that stamps dynamically created elements."""
    return _SHIM_TEMPLATE.substitute(nonce=nonce, marker=SHIM_MARKER)


def tag_scripts(html: str, nonce: str) -> str:
    return html.replace("<script", f'<script nonce="{nonce}"')


def tag_styles(html: str, nonce: str) -> str:
    return html.replace("<style", f'<style nonce="{nonce}"')


def tag_links(html: str, nonce: str) -> str:
    def replace(match: "re.Match[str]") -> str:
        attributes = match.group(1)
        if "nonce=" in attributes:
            return match.group(0)
        attributes = attributes.strip()
        if attributes.endswith("/"):
            attributes = attributes[:-1].rstrip()
        return f'<link {attributes} nonce="{nonce}">'

    return _LINK_TAG.sub(replace, html)


def tag_inline_styles(html: str, nonce: str) -> str:
    """
    Add a nonce attribute next to every style attribute.

    The style value itself is left untouched. Elements that already carry a
    nonce (including those tagged by the earlier steps) are skipped.
    """

    def replace(match: "re.Match[str]") -> str:
        tag_name, attributes = match.group(1), match.group(2)
        # Attribute names inside quoted values must not count
        bare = _QUOTED_VALUE.sub('""', attributes)
        if not _STYLE_ATTRIBUTE.search(bare) or _NONCE_ATTRIBUTE.search(bare):
            return match.group(0)
        return f'<{tag_name} nonce="{nonce}"{attributes}>'

    return _START_TAG.sub(replace, html)


def insert_shim(html: str, nonce: str) -> str:
    if SHIM_MARKER in html:
        return html
    if "</head>" not in html:
        logger.debug("No </head> found, skipping nonce shim")
        return html
    return html.replace("</head>", f"{build_nonce_shim(nonce)}</head>", 1)


def rewrite_html(html: str, nonce: str, inject_shim: bool = True) -> str:
    """
    Stamp a nonce on every script, style, link and inline-styled element.

    Args:
        html: Document text
        nonce: Nonce value or placeholder to embed
        inject_shim: Whether to insert the dynamic-injection shim before </head>

    Returns:
        Rewritten document text
    """
    html = tag_scripts(html, nonce)
    html = tag_styles(html, nonce)
    html = tag_links(html, nonce)
    html = tag_inline_styles(html, nonce)
    if inject_shim:
        html = insert_shim(html, nonce)
    return html
