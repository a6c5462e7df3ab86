from dataclasses import dataclass

from secure_headers.pipeline.phase import Phase
from secure_headers.schemas.options import SecureHeadersOptions


@dataclass(frozen=True)
class RunContext:
    """
    Immutable per-run state threaded into every component.

    Created once when the host configuration is resolved; the nonce is never
    regenerated for the lifetime of the run.
    """

    phase: Phase
    nonce: str
    options: SecureHeadersOptions

    @property
    def is_serving(self) -> bool:
        return self.phase is Phase.SERVE

    @property
    def inject_shim(self) -> bool:
        return self.is_serving or self.options.bundle_shim
