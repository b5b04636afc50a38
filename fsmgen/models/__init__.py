"""Data models for fsmgen."""

from fsmgen.models.machine import Event, Model, State
from fsmgen.models.schema import RawSchema, RawState

__all__ = [
    # Raw input
    "RawSchema",
    "RawState",
    # Validated model
    "Event",
    "Model",
    "State",
]
