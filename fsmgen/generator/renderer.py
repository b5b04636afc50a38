"""Renderer: project a Model into Python source through a Jinja2 template."""

from __future__ import annotations

import keyword
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from fsmgen.config.settings import DEFAULT_PACKAGE
from fsmgen.errors import RenderError
from fsmgen.generator.naming import event_symbol, state_symbol
from fsmgen.models import Model
from fsmgen.utils.logging import get_logger

logger = get_logger("generator.renderer")

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "machine.py.j2"

ENGINE_CLASSES = {
    "sync": "transitions.Machine",
    "async": "transitions.extensions.asyncio.AsyncMachine",
}


# Module-level names every generated module defines
RESERVED_NAMES = ("STATES", "TRANSITIONS", "NewType", "Any", "Mapping", "Optional", "_Engine")

# Event names the engine refuses as triggers (its model_attribute)
ENGINE_RESERVED_EVENTS = ("state",)


def _single_line(value: str) -> str:
    return " ".join(str(value).split())


def _comment_block(text: str) -> str:
    lines = [line.rstrip() for line in str(text).splitlines()]
    return "\n".join(f"# {line}" if line else "#" for line in lines)


def _kind_comment(kind: str) -> str:
    kind = _single_line(kind)
    return f"  # {kind}" if kind else ""


class Renderer:
    """Renders machine models into Python modules."""

    def __init__(
        self,
        package: str = DEFAULT_PACKAGE,
        engine: str = "sync",
        templates_dir: Optional[Path] = None,
    ) -> None:
        """
        Initialize the renderer.

        Args:
            package: Package name recorded in the generated header
            engine: 'sync' for transitions.Machine, 'async' for AsyncMachine
            templates_dir: Directory holding the Jinja2 templates
        """
        if engine not in ENGINE_CLASSES:
            raise ValueError(f"unknown engine {engine!r}, expected one of {sorted(ENGINE_CLASSES)}")

        self.package = package
        self.engine = engine
        self.templates_dir = Path(templates_dir or TEMPLATES_DIR)

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["state_symbol"] = state_symbol
        self.env.filters["event_symbol"] = event_symbol
        self.env.filters["pystr"] = repr
        self.env.filters["comment"] = _single_line
        self.env.filters["comment_block"] = _comment_block
        self.env.filters["kind_comment"] = _kind_comment

    def render(self, model: Model, type_name: str) -> str:
        """
        Render the wrapper module for a model.

        Args:
            model: Validated machine model
            type_name: Name of the generated wrapper class

        Returns:
            Python source text

        Raises:
            RenderError: If the type name is unusable or the template fails
        """
        if not type_name.isidentifier() or keyword.iskeyword(type_name):
            raise RenderError(f"type name {type_name!r} is not a valid Python identifier")
        self._check_reserved(model, type_name)

        try:
            template = self.env.get_template(TEMPLATE_NAME)
            source = template.render(
                model=model,
                type_name=type_name,
                package=self.package,
                engine=self.engine,
                engine_class=ENGINE_CLASSES[self.engine],
            )
        except TemplateError as e:
            logger.error("render_failed", template=TEMPLATE_NAME, error=str(e))
            raise RenderError(f"failed to render {TEMPLATE_NAME}: {e}") from e

        logger.debug(
            "model_rendered",
            type_name=type_name,
            engine=self.engine,
            lines=source.count("\n"),
        )
        return source

    @staticmethod
    def _check_reserved(model: Model, type_name: str) -> None:
        """Refuse names that would shadow the module's own names or that the engine rejects."""
        if type_name in RESERVED_NAMES:
            raise RenderError(f"type name {type_name!r} is reserved in generated modules")

        for event in model.events:
            if event.name in ENGINE_RESERVED_EVENTS:
                raise RenderError(
                    f"event name {event.name!r} is reserved by the transitions engine"
                )

        reserved = {type_name, f"{type_name}State", f"{type_name}Event"}
        symbols = [state_symbol(s.name) for s in model.all_states]
        symbols += [event_symbol(e.name) for e in model.events]
        for symbol in symbols:
            if symbol in reserved:
                raise RenderError(
                    f"generated symbol {symbol!r} clashes with a name reserved for type {type_name!r}"
                )


def render_model(
    model: Model,
    type_name: str,
    package: str = DEFAULT_PACKAGE,
    engine: str = "sync",
) -> str:
    """Render a model with the bundled template."""
    return Renderer(package=package, engine=engine).render(model, type_name)
