"""Model builder: turn a RawSchema into a validated, immutable Model."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable

from fsmgen.errors import AmbiguousEventError, IdentifierCollisionError, UndeclaredStateError
from fsmgen.generator.naming import event_symbol, state_symbol
from fsmgen.models import Event, Model, RawSchema, State
from fsmgen.utils.logging import get_logger

logger = get_logger("generator.builder")


def build_model(raw: RawSchema, strict: bool = False) -> Model:
    """
    Build the machine model.

    States are visited in name order and each state's transition table in
    event-name order, so the result does not depend on the input's key order.
    Outside strict mode an undeclared destination becomes an ordinary state.

    Args:
        raw: Decoded schema
        strict: Also require the initial state and every destination to be
            declared under `states`

    Returns:
        Frozen Model

    Raises:
        AmbiguousEventError: If an event has two different destinations
        IdentifierCollisionError: If two names normalize to the same symbol
        UndeclaredStateError: In strict mode, for a reference to an undeclared state
    """
    sources: dict[str, list[str]] = {}
    destinations: dict[str, str] = {}

    for state_name in sorted(raw.states):
        table = raw.states[state_name].on
        for event_name in sorted(table):
            destination = table[event_name]
            if event_name not in destinations:
                destinations[event_name] = destination
                sources[event_name] = [state_name]
                continue

            if destinations[event_name] != destination:
                logger.error(
                    "ambiguous_event",
                    event_name=event_name,
                    destination=destinations[event_name],
                    conflicting=destination,
                    state=state_name,
                )
                raise AmbiguousEventError(
                    event_name, destinations[event_name], destination, state_name
                )
            sources[event_name].append(state_name)

    if strict:
        _check_references(raw, destinations)

    # Undeclared destinations still need a state the engine can enter
    referenced = set(raw.states) | set(destinations.values())
    initial = State(raw.initial, raw.states[raw.initial].type if raw.initial in raw.states else "")
    states = tuple(
        State(name, raw.states[name].type if name in raw.states else "")
        for name in sorted(referenced)
        if name != raw.initial
    )
    events = tuple(
        Event(name, tuple(sources[name]), destinations[name])
        for name in sorted(destinations)
    )

    _check_collisions([initial.name, *(s.name for s in states)], state_symbol)
    _check_collisions([e.name for e in events], event_symbol)

    model = Model(
        initial=initial,
        states=states,
        events=events,
        id=raw.id,
        description=raw.description,
    )
    logger.info(
        "model_built",
        schema_id=model.id,
        initial=initial.name,
        states=len(model.all_states),
        events=len(events),
    )
    return model


def _check_collisions(names: Iterable[str], symbol: Callable[[str], str]) -> None:
    by_symbol: dict[str, list[str]] = defaultdict(list)
    for name in names:
        by_symbol[symbol(name)].append(name)

    for sym in sorted(by_symbol):
        clashing = by_symbol[sym]
        if len(clashing) > 1:
            raise IdentifierCollisionError(sym, tuple(clashing))


def _check_references(raw: RawSchema, destinations: dict[str, str]) -> None:
    if raw.initial not in raw.states:
        raise UndeclaredStateError(raw.initial, "the initial state")

    for event_name in sorted(destinations):
        if destinations[event_name] not in raw.states:
            raise UndeclaredStateError(destinations[event_name], f"event {event_name!r}")
