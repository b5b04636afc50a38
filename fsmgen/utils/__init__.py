"""Utility modules for fsmgen."""

from fsmgen.utils.atomic import AtomicWriteError, atomic_write, atomic_write_text
from fsmgen.utils.logging import (
    configure_logging,
    get_logger,
    log_stage,
    set_source_file,
)
from fsmgen.utils.result import (
    ConfigError,
    Err,
    ExitCode,
    Ok,
    PipelineError,
    Result,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "log_stage",
    "set_source_file",
    # Atomic writes
    "AtomicWriteError",
    "atomic_write",
    "atomic_write_text",
    # Results
    "ConfigError",
    "Err",
    "ExitCode",
    "Ok",
    "PipelineError",
    "Result",
]
