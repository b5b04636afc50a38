"""Exceptions raised by the generation stages.

Every error is fatal for the run. Each class records the stage it belongs to
and the exit code the CLI reports for it.
"""

from __future__ import annotations

from fsmgen.utils.result import ExitCode


class FsmGenError(Exception):
    """Base class for all generator failures."""

    stage = "generate"
    exit_code = ExitCode.GENERAL_ERROR


class ParseError(FsmGenError):
    """Schema bytes do not decode into the expected structure."""

    stage = "load"
    exit_code = ExitCode.PARSE_FAILED


class ModelError(FsmGenError):
    """The schema decoded but does not describe a valid machine."""

    stage = "build"
    exit_code = ExitCode.MODEL_INVALID


class AmbiguousEventError(ModelError):
    """One event name leads to two different destinations."""

    def __init__(self, event: str, destination: str, conflicting: str, state: str) -> None:
        self.event = event
        self.destinations = (destination, conflicting)
        self.state = state
        super().__init__(
            f"event {event!r} has two destinations, {destination!r} and "
            f"{conflicting!r} (declared again in state {state!r})"
        )


class IdentifierCollisionError(ModelError):
    """Distinct raw names normalize to the same generated symbol."""

    def __init__(self, symbol: str, names: tuple[str, ...]) -> None:
        self.symbol = symbol
        self.names = names
        joined = ", ".join(repr(n) for n in names)
        super().__init__(f"names {joined} all normalize to symbol {symbol!r}")


class UndeclaredStateError(ModelError):
    """A state is referenced but never declared under `states`."""

    def __init__(self, state: str, referenced_by: str) -> None:
        self.state = state
        self.referenced_by = referenced_by
        super().__init__(f"state {state!r} referenced by {referenced_by} is not declared")


class RenderError(FsmGenError):
    """The template could not be rendered."""

    stage = "render"
    exit_code = ExitCode.RENDER_FAILED


class FormatError(FsmGenError):
    """Rendered text is not valid Python source."""

    stage = "format"
    exit_code = ExitCode.FORMAT_FAILED


class WriteError(FsmGenError):
    """The output artifact could not be written."""

    stage = "write"
    exit_code = ExitCode.WRITE_FAILED
