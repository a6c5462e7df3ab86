import re

import pytest

from secure_headers.schemas.options import SecureHeadersOptions

NONCE_IN_POLICY = re.compile(r"'nonce-([^']+)'")

SAMPLE_PAGE = """<!doctype html>
<html>
  <head>
    <title>Sample</title>
    <link rel="stylesheet" href="/assets/app.css">
    <style>.banner { color: red; }</style>
  </head>
  <body>
    <div class="banner" style="display: none">Hello</div>
    <script type="module" src="/assets/app.js"></script>
  </body>
</html>
"""


def policy_nonce(policy: str) -> str:
    """Extract the nonce embedded in a CSP header value."""
    match = NONCE_IN_POLICY.search(policy)
    assert match, f"no nonce in policy: {policy}"
    return match.group(1)


@pytest.fixture
def options():
    return SecureHeadersOptions()


@pytest.fixture
def site_dir(tmp_path):
    """A small static site with an HTML page and non-HTML assets."""
    (tmp_path / "assets").mkdir()
    (tmp_path / "index.html").write_text(SAMPLE_PAGE, encoding="utf-8")
    (tmp_path / "assets" / "app.css").write_text(".banner{color:red}", encoding="utf-8")
    (tmp_path / "assets" / "app.js").write_text("document.createElement('style');", encoding="utf-8")
    return tmp_path
