"""Tests for fsmgen.writer and the atomic write helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from fsmgen.errors import WriteError
from fsmgen.utils.atomic import AtomicWriteError, atomic_write, atomic_write_text
from fsmgen.writer import output_path_for, write_artifact


class TestOutputPathFor:
    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            ("light.json", "light.py"),
            ("machines/door.yaml", "machines/door.py"),
            ("machines/door.fsm.yaml", "machines/door.fsm.py"),
            ("noext", "noext.py"),
        ],
    )
    def test_replaces_last_extension(self, schema: str, expected: str) -> None:
        assert output_path_for(Path(schema)) == Path(expected)

    def test_custom_suffix(self) -> None:
        assert output_path_for(Path("light.json"), ".pyi") == Path("light.pyi")


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.py"
        atomic_write_text(target, "x = 1\n")
        assert target.read_text(encoding="utf-8") == "x = 1\n"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "out.py"
        atomic_write_text(target, "x = 1\n")
        assert target.exists()

    def test_failure_keeps_previous_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.py"
        target.write_text("old\n", encoding="utf-8")

        with pytest.raises(AtomicWriteError):
            with atomic_write(target) as f:
                f.write("partial")
                raise RuntimeError("boom")

        assert target.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["out.py"]


class TestWriteArtifact:
    def test_writes_and_returns_path(self, tmp_path: Path) -> None:
        target = tmp_path / "light.py"
        assert write_artifact(target, "x = 1\n") == target
        assert target.read_text(encoding="utf-8") == "x = 1\n"

    def test_overwrites_previous_artifact(self, tmp_path: Path) -> None:
        target = tmp_path / "light.py"
        target.write_text("old\n", encoding="utf-8")
        write_artifact(target, "new\n")
        assert target.read_text(encoding="utf-8") == "new\n"

    def test_refuses_to_overwrite_schema(self, tmp_path: Path) -> None:
        schema = tmp_path / "light.py"
        schema.write_text("{}", encoding="utf-8")
        with pytest.raises(WriteError, match="overwrite the schema"):
            write_artifact(schema, "x = 1\n", source_path=schema)
        assert schema.read_text(encoding="utf-8") == "{}"

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(WriteError) as excinfo:
            write_artifact(blocker / "light.py", "x = 1\n")
        assert excinfo.value.exit_code == 23
