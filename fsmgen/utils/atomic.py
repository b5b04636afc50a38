"""Atomic artifact writes.

The generated module is written to a hidden sibling file, flushed to disk
and renamed over the target. Readers see either the previous artifact or
the complete new one, never a truncated file.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from fsmgen.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """The artifact could not be replaced."""


def _sibling_temp(target: Path) -> Path:
    # Must share the target's directory: os.replace is only atomic within a filesystem
    fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    os.close(fd)
    return Path(name)


@contextmanager
def atomic_write(path: Path, encoding: str = "utf-8") -> Iterator[IO[str]]:
    """
    Open a text stream whose content replaces `path` on successful exit.

    Newlines are written untranslated so output is byte-identical across
    platforms. If the block raises, `path` is left as it was and the
    temporary file is removed.

    Raises:
        AtomicWriteError: Wrapping whatever made the write fail
    """
    target = Path(path)
    temp: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        temp = _sibling_temp(target)
        with open(temp, "w", encoding=encoding, newline="") as stream:
            yield stream
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temp, target)
        temp = None
    except Exception as e:
        logger.error("atomic_write_failed", path=str(target), error=str(e))
        raise AtomicWriteError(f"cannot write {target}: {e}") from e
    finally:
        if temp is not None:
            temp.unlink(missing_ok=True)

    logger.debug("atomic_write_success", path=str(target))


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Replace `path` with `content` in one step."""
    with atomic_write(path, encoding=encoding) as stream:
        stream.write(content)
