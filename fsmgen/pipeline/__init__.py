"""Generation pipeline."""

from fsmgen.pipeline.runner import check, generate, render_schema

__all__ = ["check", "generate", "render_schema"]
