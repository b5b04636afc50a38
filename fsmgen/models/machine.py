"""Validated, immutable machine model consumed by the renderer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class State:
    """
    A named condition the machine can occupy.

    Attributes:
        name: Raw state name from the schema
        kind: Optional state-type tag carried through from the schema
    """

    name: str
    kind: str = ""


@dataclass(frozen=True)
class Event:
    """
    A named trigger and the single transition it causes.

    Attributes:
        name: Raw event name from the schema
        sources: Every state whose transition table declares this event
        destination: The one state this event leads to
    """

    name: str
    sources: tuple[str, ...]
    destination: str


@dataclass(frozen=True)
class Model:
    """
    Complete machine description.

    `states` holds the ordinary states only; the initial state lives in
    `initial` and is never repeated in `states`.
    """

    initial: State
    states: tuple[State, ...]
    events: tuple[Event, ...]
    id: str = ""
    description: str = ""

    @property
    def all_states(self) -> tuple[State, ...]:
        """Initial state first, then the ordinary states."""
        return (self.initial, *self.states)

    @property
    def state_names(self) -> list[str]:
        return [s.name for s in self.all_states]

    @property
    def event_names(self) -> list[str]:
        return [e.name for e in self.events]

    @property
    def transition_count(self) -> int:
        """Number of transition rules registered with the engine."""
        return len(self.events)

    def event(self, name: str) -> Event:
        """Look up an event by raw name."""
        for event in self.events:
            if event.name == name:
                return event
        raise KeyError(name)
