"""Raw schema shape, as decoded from the input file."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawState:
    """
    One entry of the schema's `states` mapping.

    Attributes:
        on: Transition table, event name -> destination state name
        type: Optional state-type tag (e.g. "final")
    """

    on: dict[str, str] = field(default_factory=dict)
    type: str = ""


@dataclass(frozen=True)
class RawSchema:
    """
    Untrusted schema value produced by the loader.

    No cross-field validation has happened yet: the initial state or any
    destination may name a state that is not declared.
    """

    id: str = ""
    initial: str = ""
    description: str = ""
    states: dict[str, RawState] = field(default_factory=dict)
