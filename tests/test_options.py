import pytest
from pydantic import ValidationError

from secure_headers.schemas.options import (
    ConfigurationError,
    SecureHeadersOptions,
    load_options,
)


def test_defaults():
    options = load_options()
    assert options.report_only is False
    assert options.process_i18n is False
    assert options.nonce_placeholder == "NONCE_PLACEHOLDER"
    assert options.bundle_shim is True
    assert options.script_src is None
    assert options.frame_ancestors == "'none'"


def test_camel_case_option_names_accepted():
    options = load_options(
        {"reportOnly": True, "processI18n": True, "noncePlaceholder": "__NONCE__"}
    )
    assert options.report_only is True
    assert options.process_i18n is True
    assert options.nonce_placeholder == "__NONCE__"


def test_overrides_apply_on_top_of_mapping():
    options = load_options({"frameOptions": "SAMEORIGIN"}, frame_options="DENY", imgSrc="'none'")
    assert options.frame_options == "DENY"
    assert options.img_src == "'none'"


def test_existing_options_returned_unchanged():
    options = SecureHeadersOptions(report_only=True)
    assert load_options(options) is options

    derived = load_options(options, cache_control="")
    assert derived is not options
    assert derived.report_only is True
    assert derived.cache_control == ""


def test_options_are_read_only():
    options = SecureHeadersOptions()
    with pytest.raises(ValidationError):
        options.report_only = True


def test_non_callable_directive_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        load_options(script_src=42)
    assert "script_src" in str(exc_info.value)


def test_directive_function_accepted():
    options = load_options(styleSrc=lambda nonce: f"'nonce-{nonce}'")
    assert options.style_src("x") == "'nonce-x'"


def test_unknown_option_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        load_options({"scriptSource": "'self'"})
    assert "scriptSource" in str(exc_info.value)


@pytest.mark.parametrize("placeholder", ["", "has space", 'quo"te', "<tag>"])
def test_unsafe_placeholder_rejected(placeholder):
    with pytest.raises(ConfigurationError):
        load_options(nonce_placeholder=placeholder)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


@pytest.mark.parametrize(
    "field, value",
    [
        ("permissions_policy", "camera=(…)"),
        ("img_src", "'self' https://bild.example.com。"),
        ("cache_control", "no-store\r\nSet-Cookie: a=b"),
        ("connect_src", "'self'\nwss://example.com"),
        ("script_src", "'self' ‘unsafe-inline’"),
    ],
)
def test_values_unsafe_for_headers_rejected(field, value):
    with pytest.raises(ConfigurationError) as exc_info:
        load_options({field: value})
    assert field in str(exc_info.value)


def test_latin1_header_value_accepted():
    options = load_options(referrer_policy="no-referrer", img_src="'self' https://café.example")
    assert options.img_src == "'self' https://café.example"
