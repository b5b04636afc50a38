"""Identifier normalizer: human-written names to generated symbol names.

The mapping is lossy. "RED", "red" and "Red" all become "Red", and
"turn_signal" and "turn signal" both become "TurnSignal". Collisions are
detected by the model builder, not here.
"""

from __future__ import annotations

STATE_SUFFIX = "State"
EVENT_SUFFIX = "Event"


def normalize(name: str, suffix: str) -> str:
    """
    Build a symbol name from a raw name and a role suffix.

    Underscores become spaces, the whole name is lowercased, each
    whitespace-separated word gets an upper-case first letter, whitespace is
    dropped and the suffix appended.

    Args:
        name: Raw state or event name
        suffix: Role suffix ("State" or "Event")

    Returns:
        Symbol name, e.g. "TurnSignalState" for ("turn_signal", "State")
    """
    words = name.replace("_", " ").lower().split()
    return "".join(word[:1].upper() + word[1:] for word in words) + suffix


def state_symbol(name: str) -> str:
    return normalize(name, STATE_SUFFIX)


def event_symbol(name: str) -> str:
    return normalize(name, EVENT_SUFFIX)
