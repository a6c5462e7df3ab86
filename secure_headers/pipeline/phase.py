import enum


class Phase(str, enum.Enum):
    """Lifecycle phase of the host pipeline for the current run."""

    SERVE = "serve"
    BUILD = "build"

    @classmethod
    def from_command(cls, command: str) -> "Phase":
        # The host pipeline only knows "serve" and "build"
        if command == cls.SERVE.value:
            return cls.SERVE
        return cls.BUILD
