"""Tests for fsmgen.generator.validator."""

from __future__ import annotations

import pytest

from fsmgen.errors import FormatError
from fsmgen.generator import SourceValidator, ensure_valid_source


class TestSourceValidator:
    def test_valid_source(self) -> None:
        result = SourceValidator().validate("x = 1\n", "ok.py")
        assert result.valid
        assert not result.has_errors

    def test_syntax_error(self) -> None:
        result = SourceValidator().validate("TurnSignalState = LightState('turn-signal'\n", "bad.py")
        assert not result.valid
        assert result.has_errors
        assert result.syntax_errors[0].startswith("bad.py")

    def test_invalid_identifier(self) -> None:
        result = SourceValidator().validate("Turn-signalState = 1\n", "light.py")
        assert result.has_errors

    def test_undefined_module_name(self) -> None:
        source = "TRANSITIONS = [{\"dest\": GhostState}]\n"
        result = SourceValidator().validate(source, "ghost.py")
        assert result.has_errors
        assert "GhostState" in result.syntax_errors[0]

    def test_name_used_before_assignment(self) -> None:
        result = SourceValidator().validate("A = B\nB = 1\n", "order.py")
        assert result.has_errors

    def test_function_bodies_and_annotations_are_not_evaluated(self) -> None:
        source = (
            "from __future__ import annotations\n"
            "from typing import NewType\n"
            "S = NewType(\"S\", str)\n"
            "XS: list[Later] = [S(c) for c in \"ab\"]\n"
            "class M:\n"
            "    def f(self) -> Later:\n"
            "        return missing\n"
        )
        assert SourceValidator().validate(source, "ok.py").valid


class TestEnsureValidSource:
    def test_returns_result(self) -> None:
        assert ensure_valid_source("def f():\n    return 1\n").valid

    def test_raises_format_error(self) -> None:
        with pytest.raises(FormatError) as excinfo:
            ensure_valid_source("def f(:\n", "light.py")
        assert excinfo.value.stage == "format"
        assert excinfo.value.exit_code == 22
        assert "light.py" in str(excinfo.value)
