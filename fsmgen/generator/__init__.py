"""State machine wrapper generator: model building, naming and rendering."""

from fsmgen.generator.builder import build_model
from fsmgen.generator.naming import event_symbol, normalize, state_symbol
from fsmgen.generator.renderer import Renderer, render_model
from fsmgen.generator.validator import SourceValidator, ValidationResult, ensure_valid_source

__all__ = [
    # Model
    "build_model",
    # Naming
    "normalize",
    "state_symbol",
    "event_symbol",
    # Rendering
    "Renderer",
    "render_model",
    # Validation
    "SourceValidator",
    "ValidationResult",
    "ensure_valid_source",
]
