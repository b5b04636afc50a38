"""Schema loader: decode raw bytes into a RawSchema.

Only the shape of the input is checked here. Whether the initial state or a
destination is actually declared is the model builder's business.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from fsmgen.errors import ParseError
from fsmgen.models import RawSchema, RawState
from fsmgen.utils.logging import get_logger

logger = get_logger("loader")

YAML_SUFFIXES = (".yaml", ".yml")


def detect_format(path: Path) -> str:
    """Pick the decoder from the file suffix; JSON unless it looks like YAML."""
    return "yaml" if Path(path).suffix.lower() in YAML_SUFFIXES else "json"


def load_schema(path: Path) -> RawSchema:
    """
    Read and decode a schema file.

    Args:
        path: Path to a JSON or YAML schema

    Returns:
        Decoded RawSchema

    Raises:
        ParseError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ParseError(f"cannot read schema {path}: {e}") from e

    schema = load_schema_bytes(data, fmt=detect_format(path), origin=str(path))
    logger.info(
        "schema_loaded",
        path=str(path),
        schema_id=schema.id,
        initial=schema.initial,
        description=schema.description,
        states=len(schema.states),
    )
    return schema


def load_schema_bytes(data: bytes, fmt: str = "json", origin: str = "<bytes>") -> RawSchema:
    """
    Decode schema bytes.

    Args:
        data: Raw file content
        fmt: 'json' or 'yaml'
        origin: Name used in error messages

    Returns:
        Decoded RawSchema

    Raises:
        ParseError: On corrupt input or a field of the wrong type
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{origin}: not valid UTF-8: {e}") from e

    if fmt == "yaml":
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"{origin}: failed to parse YAML: {e}") from e
    elif fmt == "json":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"{origin}: failed to parse JSON: {e}") from e
    else:
        raise ParseError(f"{origin}: unsupported schema format {fmt!r}")

    return parse_schema(document, origin=origin)


def parse_schema(document: Any, origin: str = "<schema>") -> RawSchema:
    """Check the decoded document's shape and build a RawSchema from it."""
    if not isinstance(document, dict):
        raise ParseError(
            f"{origin}: top-level value must be a mapping, got {type(document).__name__}"
        )

    # Older schemas spell the key "descriptions".
    description = document.get("description")
    if description is None:
        description = document.get("descriptions")

    states_data = document.get("states")
    if states_data is None:
        states_data = {}
    if not isinstance(states_data, dict):
        raise ParseError(
            f"{origin}: 'states' must be a mapping, got {type(states_data).__name__}"
        )

    states: dict[str, RawState] = {}
    for name, record in states_data.items():
        if not isinstance(name, str):
            raise ParseError(f"{origin}: state names must be strings, got {name!r}")
        states[name] = _parse_state(name, record, origin)

    return RawSchema(
        id=_optional_str(document, "id", origin),
        initial=_optional_str(document, "initial", origin),
        description=_as_str(description, "description", origin),
        states=states,
    )


def _parse_state(name: str, record: Any, origin: str) -> RawState:
    if record is None:
        return RawState()
    if not isinstance(record, dict):
        raise ParseError(
            f"{origin}: state {name!r} must be a mapping, got {type(record).__name__}"
        )

    # YAML 1.1 reads a bare `on:` key as boolean True.
    table = record.get("on", record.get(True))
    if table is None:
        table = {}
    if not isinstance(table, dict):
        raise ParseError(
            f"{origin}: state {name!r}: 'on' must be a mapping, got {type(table).__name__}"
        )

    on: dict[str, str] = {}
    for event, destination in table.items():
        if not isinstance(event, str):
            raise ParseError(f"{origin}: state {name!r}: event names must be strings, got {event!r}")
        if not isinstance(destination, str):
            raise ParseError(
                f"{origin}: state {name!r}: destination of event {event!r} must be a string, "
                f"got {type(destination).__name__}"
            )
        on[event] = destination

    return RawState(on=on, type=_optional_str(record, "type", f"{origin}: state {name!r}"))


def _optional_str(data: dict, key: str, origin: str) -> str:
    return _as_str(data.get(key), key, origin)


def _as_str(value: Any, key: str, origin: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"{origin}: '{key}' must be a string, got {type(value).__name__}")
    return value
