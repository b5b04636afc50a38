"""Shared fixtures for fsmgen tests."""

from __future__ import annotations

import importlib.util
import json
import shutil
import sys
import uuid
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterator

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TRAFFIC_LIGHT: dict[str, Any] = {
    "initial": "red",
    "states": {
        "red": {"on": {"go": "green"}},
        "green": {"on": {"stop": "red"}},
    },
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FSMGEN_* variables from the calling shell out of the tests."""
    for name in (
        "FSMGEN_PACKAGE",
        "FSMGEN_FILE",
        "FSMGEN_ENGINE",
        "FSMGEN_STRICT",
        "FSMGEN_LOG_LEVEL",
        "FSMGEN_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def traffic_light() -> dict[str, Any]:
    return json.loads(json.dumps(TRAFFIC_LIGHT))


@pytest.fixture
def write_schema(tmp_path: Path) -> Callable[..., Path]:
    """Write a schema dict as JSON into tmp_path and return its path."""

    def _write(data: dict[str, Any], name: str = "machine.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def copy_fixture(tmp_path: Path) -> Callable[[str], Path]:
    """Copy a file from tests/fixtures into tmp_path."""

    def _copy(name: str) -> Path:
        target = tmp_path / name
        shutil.copy(FIXTURES_DIR / name, target)
        return target

    return _copy


@pytest.fixture
def import_module() -> Iterator[Callable[[Path], ModuleType]]:
    """Import a generated module from a file path under a unique name."""
    names: list[str] = []

    def _import(path: Path) -> ModuleType:
        name = f"fsmgen_generated_{uuid.uuid4().hex}"
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        names.append(name)
        spec.loader.exec_module(module)
        return module

    yield _import

    for name in names:
        sys.modules.pop(name, None)
