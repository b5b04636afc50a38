"""fsmgen: generate typed state machine wrappers from declarative schemas."""

__version__ = "0.1.0"
