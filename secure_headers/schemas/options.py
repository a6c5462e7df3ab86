"""
Plugin Options Schema

Immutable options record supplied once per run. Every field is optional and
falls back to the documented default. Options are accepted either by field
name (report_only) or by the camelCase name used in JavaScript build configs
(reportOnly).
"""

import re
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

DirectiveSource = Union[str, Callable[[str], str]]

# Placeholder is written verbatim into HTML attributes and the shim's JS strings
_PLACEHOLDER_PATTERN = re.compile(r"^[^\s\"'<>`\\]+$")


class ConfigurationError(ValueError):
    """Raised at setup time when plugin options are invalid."""


def _option_alias(field_name: str) -> str:
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class SecureHeadersOptions(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=_option_alias,
        populate_by_name=True,
    )

    # Behaviour
    report_only: bool = False
    process_i18n: bool = False
    nonce_placeholder: str = "NONCE_PLACEHOLDER"
    bundle_shim: bool = True

    # CSP directives
    default_src: str = "'self'"
    script_src: Optional[DirectiveSource] = None
    style_src: Optional[DirectiveSource] = None
    img_src: str = "'self' data:"
    font_src: str = "'self'"
    object_src: str = "'none'"
    frame_src: str = "'self'"
    base_uri: str = "'self'"
    form_action: str = "'self'"
    frame_ancestors: str = "'none'"
    worker_src: str = "'self'"
    connect_src: str = "'self'"

    # Auxiliary headers (empty string disables the header)
    xss_protection: str = "1; mode=block"
    frame_options: str = "DENY"
    content_type_options: str = "nosniff"
    referrer_policy: str = "strict-origin-when-cross-origin"
    permissions_policy: str = "camera=(), microphone=(), geolocation=()"
    cache_control: str = "no-store, max-age=0"

    @field_validator("script_src", "style_src", mode="before")
    @classmethod
    def check_directive_source(cls, value: Any, info):
        if value is None or isinstance(value, str) or callable(value):
            return value
        raise ValueError(
            f"{info.field_name} must be a string or a function of the nonce, "
            f"got {type(value).__name__}"
        )

    @field_validator(
        "nonce_placeholder",
        "default_src",
        "script_src",
        "style_src",
        "img_src",
        "font_src",
        "object_src",
        "frame_src",
        "base_uri",
        "form_action",
        "frame_ancestors",
        "worker_src",
        "connect_src",
        "xss_protection",
        "frame_options",
        "content_type_options",
        "referrer_policy",
        "permissions_policy",
        "cache_control",
    )
    @classmethod
    def check_header_value(cls, value: Any, info):
        # Sent as HTTP header values: Latin-1 only, no line breaks
        if not isinstance(value, str):
            return value
        if "\r" in value or "\n" in value:
            raise ValueError(f"{info.field_name} must not contain line breaks")
        try:
            value.encode("latin-1")
        except UnicodeEncodeError:
            raise ValueError(
                f"{info.field_name} must only contain Latin-1 characters"
            ) from None
        return value

    @field_validator("nonce_placeholder")
    @classmethod
    def check_placeholder(cls, value: str) -> str:
        if not _PLACEHOLDER_PATTERN.match(value):
            raise ValueError(
                "nonce_placeholder must be non-empty and free of whitespace, "
                "quotes, backslashes and angle brackets"
            )
        return value


_FIELD_BY_ALIAS = {
    field.alias or name: name
    for name, field in SecureHeadersOptions.model_fields.items()
}


def _normalize_keys(values: Mapping[str, Any]) -> dict:
    """Map camelCase option names onto field names, leaving unknown keys as-is."""
    return {_FIELD_BY_ALIAS.get(key, key): value for key, value in values.items()}


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "options"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def load_options(
    options: Union[SecureHeadersOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> SecureHeadersOptions:
    """
    Build a validated options record.

    Args:
        options: Existing options, a mapping of option names, or None for defaults
        **overrides: Individual options applied on top of ``options``

    Returns:
        Frozen SecureHeadersOptions

    Raises:
        ConfigurationError: If any option has the wrong type or an unknown name
    """
    if isinstance(options, SecureHeadersOptions):
        if not overrides:
            return options
        data = {name: getattr(options, name) for name in _FIELD_BY_ALIAS.values()}
    else:
        data = _normalize_keys(options or {})
    data.update(_normalize_keys(overrides))

    try:
        return SecureHeadersOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid secure headers options: {_format_errors(exc)}"
        ) from exc
