"""Tests for fsmgen.loader: schema decoding."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fsmgen.errors import ParseError
from fsmgen.loader import detect_format, load_schema, load_schema_bytes
from fsmgen.models import RawSchema, RawState


def _json(data: object) -> bytes:
    return json.dumps(data).encode("utf-8")


class TestLoadJson:
    def test_traffic_light(self, traffic_light: dict) -> None:
        schema = load_schema_bytes(_json(traffic_light))
        assert schema.initial == "red"
        assert schema.states["red"] == RawState(on={"go": "green"})
        assert schema.states["green"].on == {"stop": "red"}

    def test_optional_fields_default_to_empty(self) -> None:
        schema = load_schema_bytes(b'{"initial": "a"}')
        assert schema == RawSchema(id="", initial="a", description="", states={})

    def test_null_state_record_is_empty(self) -> None:
        schema = load_schema_bytes(b'{"initial": "a", "states": {"a": null}}')
        assert schema.states["a"] == RawState()

    def test_state_type_tag(self) -> None:
        schema = load_schema_bytes(b'{"states": {"done": {"type": "final"}}}')
        assert schema.states["done"].type == "final"
        assert schema.states["done"].on == {}

    def test_unknown_keys_are_ignored(self) -> None:
        schema = load_schema_bytes(b'{"initial": "a", "version": 3, "states": {"a": {"entry": "x"}}}')
        assert schema.states["a"] == RawState()

    def test_legacy_descriptions_key(self) -> None:
        schema = load_schema_bytes(b'{"descriptions": "legacy"}')
        assert schema.description == "legacy"

    def test_description_wins_over_descriptions(self) -> None:
        schema = load_schema_bytes(b'{"description": "new", "descriptions": "legacy"}')
        assert schema.description == "new"

    def test_does_not_check_initial_is_declared(self) -> None:
        schema = load_schema_bytes(b'{"initial": "nowhere", "states": {"a": {"on": {"x": "b"}}}}')
        assert schema.initial == "nowhere"


class TestParseErrors:
    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"{",
            b'{"initial": "a", "states": {',
            b"\xff\xfe\x00",
        ],
    )
    def test_corrupt_input(self, data: bytes) -> None:
        with pytest.raises(ParseError):
            load_schema_bytes(data)

    @pytest.mark.parametrize(
        "document",
        [
            [],
            "just a string",
            {"states": []},
            {"states": {"a": "not a mapping"}},
            {"states": {"a": {"on": ["go"]}}},
            {"states": {"a": {"on": {"go": 1}}}},
            {"states": {"a": {"type": 5}}},
            {"initial": 3},
            {"id": ["x"]},
            {"description": {"text": "x"}},
        ],
    )
    def test_wrong_shape(self, document: object) -> None:
        with pytest.raises(ParseError):
            load_schema_bytes(_json(document))

    def test_unsupported_format(self) -> None:
        with pytest.raises(ParseError, match="unsupported"):
            load_schema_bytes(b"{}", fmt="toml")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="cannot read"):
            load_schema(tmp_path / "missing.json")

    def test_parse_error_stage(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            load_schema_bytes(b"[]")
        assert excinfo.value.stage == "load"


class TestLoadYaml:
    def test_yaml_fixture(self, fixtures_dir: Path) -> None:
        schema = load_schema(fixtures_dir / "door.yaml")
        assert schema.id == "door"
        assert schema.initial == "closed"
        assert schema.description.startswith("A door with a lock.")
        assert schema.states["closed"].on == {"open": "opened", "lock": "locked"}
        assert schema.states["broken"] == RawState(type="final")

    def test_bare_on_key(self) -> None:
        # YAML 1.1 turns a bare `on` key into True
        schema = load_schema_bytes(b"states:\n  a:\n    on:\n      go: b\n", fmt="yaml")
        assert schema.states["a"].on == {"go": "b"}

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ParseError, match="YAML"):
            load_schema_bytes(b"states: [unclosed", fmt="yaml")

    def test_non_string_destination(self) -> None:
        with pytest.raises(ParseError):
            load_schema_bytes(b"states:\n  a:\n    on:\n      go: yes\n", fmt="yaml")


class TestDetectFormat:
    @pytest.mark.parametrize(
        ("name", "fmt"),
        [
            ("light.json", "json"),
            ("light.yaml", "yaml"),
            ("light.YML", "yaml"),
            ("light", "json"),
        ],
    )
    def test_suffixes(self, name: str, fmt: str) -> None:
        assert detect_format(Path(name)) == fmt
