"""Artifact writer: derive the output path and persist rendered source."""

from __future__ import annotations

from pathlib import Path

from fsmgen.errors import WriteError
from fsmgen.utils.atomic import AtomicWriteError, atomic_write_text
from fsmgen.utils.logging import get_logger

logger = get_logger("writer")

OUTPUT_SUFFIX = ".py"


def output_path_for(input_path: Path, suffix: str = OUTPUT_SUFFIX) -> Path:
    """
    Derive the artifact path from the schema path.

    The schema's last extension is replaced: light.json -> light.py,
    machines/door.fsm.yaml -> machines/door.fsm.py.
    """
    input_path = Path(input_path)
    if input_path.suffix:
        return input_path.with_suffix(suffix)
    return input_path.with_name(input_path.name + suffix)


def write_artifact(path: Path, content: str, source_path: Path | None = None) -> Path:
    """
    Atomically write the rendered module.

    Args:
        path: Destination path
        content: Rendered, validated source text
        source_path: Schema path; writing over it is refused

    Returns:
        The written path

    Raises:
        WriteError: If the file cannot be written
    """
    path = Path(path)
    if source_path is not None and path.resolve() == Path(source_path).resolve():
        raise WriteError(f"output path {path} would overwrite the schema")

    try:
        atomic_write_text(path, content)
    except AtomicWriteError as e:
        raise WriteError(str(e)) from e

    logger.info("artifact_written", path=str(path), bytes=len(content.encode("utf-8")))
    return path
