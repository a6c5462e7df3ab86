from secure_headers.schemas.options import SecureHeadersOptions
from secure_headers.services.policy_service import (
    assemble_policy,
    build_policy,
    resolve_directive,
)

DIRECTIVES = [
    "default-src",
    "script-src",
    "style-src",
    "img-src",
    "font-src",
    "object-src",
    "base-uri",
    "frame-src",
    "form-action",
    "frame-ancestors",
    "worker-src",
    "connect-src",
]


def test_default_policy(options):
    assert build_policy(options, "abc") == (
        "default-src 'self'; "
        "script-src 'self' 'nonce-abc'; "
        "style-src 'self' 'nonce-abc'; "
        "img-src 'self' data:; "
        "font-src 'self'; "
        "object-src 'none'; "
        "base-uri 'self'; "
        "frame-src 'self'; "
        "form-action 'self'; "
        "frame-ancestors 'none'; "
        "worker-src 'self'; "
        "connect-src 'self'; "
        "upgrade-insecure-requests"
    )


def test_every_directive_once_in_order():
    options = SecureHeadersOptions(
        default_src="'none'",
        img_src="'self' https://img.example.com",
        connect_src="'self' wss://example.com",
        script_src=lambda nonce: f"'nonce-{nonce}' 'strict-dynamic'",
    )
    clauses = build_policy(options, "n0nce").split("; ")

    assert clauses[-1] == "upgrade-insecure-requests"
    names = [clause.split(" ", 1)[0] for clause in clauses[:-1]]
    assert names == DIRECTIVES
    assert "img-src 'self' https://img.example.com" in clauses
    assert "script-src 'nonce-n0nce' 'strict-dynamic'" in clauses


def test_directive_functions_receive_nonce():
    options = SecureHeadersOptions(
        style_src=lambda nonce: f"'self' 'nonce-{nonce}' https://fonts.example.com"
    )
    assert resolve_directive(options, "style_src", "xyz") == (
        "'self' 'nonce-xyz' https://fonts.example.com"
    )
    assert resolve_directive(options, "script_src", "xyz") == "'self' 'nonce-xyz'"


def test_literal_directive_string_used_as_is():
    options = SecureHeadersOptions(script_src="'self' 'unsafe-inline'")
    assert resolve_directive(options, "script_src", "xyz") == "'self' 'unsafe-inline'"


def test_directive_functions_evaluated_on_every_assembly():
    calls = []

    def script_src(nonce):
        calls.append(nonce)
        return f"'nonce-{nonce}'"

    options = SecureHeadersOptions(script_src=script_src)
    assemble_policy(options, "one")
    assemble_policy(options, "two")
    assert calls == ["one", "two"]


def test_report_only_toggles_header_name_only():
    enforced = assemble_policy(SecureHeadersOptions(), "abc")
    report_only = assemble_policy(SecureHeadersOptions(report_only=True), "abc")

    assert enforced.header_name == "Content-Security-Policy"
    assert report_only.header_name == "Content-Security-Policy-Report-Only"
    assert enforced.value == report_only.value


def test_auxiliary_headers_defaults(options):
    policy = assemble_policy(options, "abc")
    assert policy.extra_headers == [
        ("X-XSS-Protection", "1; mode=block"),
        ("X-Frame-Options", "DENY"),
        ("X-Content-Type-Options", "nosniff"),
        ("Referrer-Policy", "strict-origin-when-cross-origin"),
        ("Permissions-Policy", "camera=(), microphone=(), geolocation=()"),
        ("Cache-Control", "no-store, max-age=0"),
    ]


def test_empty_auxiliary_headers_are_omitted():
    options = SecureHeadersOptions(xss_protection="", cache_control="")
    names = [name for name, _ in assemble_policy(options, "abc").extra_headers]
    assert "X-XSS-Protection" not in names
    assert "Cache-Control" not in names
    assert "X-Frame-Options" in names


def test_items_yield_policy_header_first(options):
    items = list(assemble_policy(options, "abc").items())
    assert items[0][0] == "Content-Security-Policy"
    assert len(items) == 7
