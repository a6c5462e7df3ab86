"""
Policy Service
Assembles the Content-Security-Policy header and the auxiliary hardening headers.

The policy is recomputed on every call: script-src and style-src may be
functions of the nonce and are evaluated lazily.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from secure_headers.constants.headers import (
    AUXILIARY_HEADERS,
    CSP_HEADER,
    CSP_REPORT_ONLY_HEADER,
    DIRECTIVE_ORDER,
    NONCE_DIRECTIVES,
    UPGRADE_INSECURE_REQUESTS,
)
from secure_headers.schemas.options import SecureHeadersOptions


@dataclass(frozen=True)
class PolicyHeaders:
    header_name: str
    value: str
    extra_headers: List[Tuple[str, str]] = field(default_factory=list)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Policy header first, then auxiliary headers in emission order."""
        yield self.header_name, self.value
        yield from self.extra_headers


def default_nonce_source(nonce: str) -> str:
    return f"'self' 'nonce-{nonce}'"


def resolve_directive(options: SecureHeadersOptions, field_name: str, nonce: str) -> str:
    """
    Resolve the value of a single directive.

    Nonce-aware directives accept a literal string or a function of the
    nonce and default to ``'self' 'nonce-<nonce>'``.
    """
    value = getattr(options, field_name)
    if field_name not in NONCE_DIRECTIVES:
        return value
    if value is None:
        return default_nonce_source(nonce)
    if callable(value):
        return value(nonce)
    return value


def build_policy(options: SecureHeadersOptions, nonce: str) -> str:
    clauses = [
        f"{directive} {resolve_directive(options, field_name, nonce)}"
        for directive, field_name in DIRECTIVE_ORDER
    ]
    clauses.append(UPGRADE_INSECURE_REQUESTS)
    return "; ".join(clauses)


def assemble_policy(options: SecureHeadersOptions, nonce: str) -> PolicyHeaders:
    """
    Assemble every header emitted in the serve phase.

    Args:
        options: Plugin options
        nonce: Nonce of the current run

    Returns:
        PolicyHeaders with the CSP header name and value plus the non-empty
        auxiliary headers
    """
    header_name = CSP_REPORT_ONLY_HEADER if options.report_only else CSP_HEADER
    extra_headers = [
        (name, getattr(options, field_name))
        for name, field_name in AUXILIARY_HEADERS
        if getattr(options, field_name)
    ]
    return PolicyHeaders(
        header_name=header_name,
        value=build_policy(options, nonce),
        extra_headers=extra_headers,
    )
