from secure_headers.pipeline.context import RunContext
from secure_headers.pipeline.phase import Phase

__all__ = ["Phase", "RunContext"]
