"""Ok/Err results for the config and pipeline layers.

Stages raise; `generate`, `check` and the config loaders catch at their
boundary and hand back a Result, so the CLI maps each failure to an exit
status in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class ResultError(Exception):
    """Unwrapped the wrong side of a Result."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ResultError(f"expected an error, got Ok({self.value!r})")


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ResultError(f"expected a value, got Err({self.error})")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class PipelineError:
    """
    A failed generation run.

    Attributes:
        stage: load, build, render, format or write
        code: Process exit status for this failure
        message: Human-readable reason
        cause: The exception raised by the stage
    """

    stage: str
    code: int
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


@dataclass(frozen=True)
class ConfigError:
    """An unusable configuration value; `field` names the setting."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"invalid {self.field}: {self.message}"


class ExitCode:
    """Process exit statuses."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CHECK_MISMATCH = 1
    USAGE_ERROR = 2

    CONFIG_INVALID = 10

    # One per pipeline stage
    PARSE_FAILED = 20
    MODEL_INVALID = 21
    FORMAT_FAILED = 22
    WRITE_FAILED = 23
    RENDER_FAILED = 24
