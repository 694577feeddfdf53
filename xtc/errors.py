"""Exception hierarchy.

Everything the orchestrator raises derives from XtcError. Stage failures
carry the stage name, the rendered command and its exit status so the
pipeline can report a single, attributed cause.
"""


class XtcError(Exception):
    pass


class ConfigError(XtcError):
    """Invalid BootstrapConfig value, config file or job hint."""


class PreconditionError(XtcError):
    """State reset could not clear the build or install roots."""


class ScopeError(XtcError):
    """Environment overlay applied or reverted out of turn."""


class OrderError(XtcError):
    """A stage list violates the bootstrap dependency order."""


class CommandError(XtcError):
    """An external command exited non-zero where output was required."""

    def __init__(self, command: str, status: int):
        super().__init__(f"{command!r} exited with status {status}")
        self.command = command
        self.status = status


class StageError(XtcError):
    """A mandatory command of a stage failed."""

    phase = "stage"

    def __init__(self, stage: str, command: str, status: int, reason: str = ""):
        msg = f"stage {stage!r}: {self.phase} failed (status {status}): {command}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.stage = stage
        self.command = command
        self.status = status


class ConfigurationError(StageError):
    phase = "configure"


class BuildError(StageError):
    phase = "build"


class InstallError(StageError):
    phase = "install"


PHASE_ERRORS: dict[str, type[StageError]] = {
    "configure": ConfigurationError,
    "build": BuildError,
    "install": InstallError,
}
