"""Generation pipeline: load -> build -> render -> validate -> write.

Stages run strictly in order. The first failure ends the run and nothing is
written.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fsmgen.config.settings import GeneratorConfig
from fsmgen.errors import FsmGenError, WriteError
from fsmgen.generator.builder import build_model
from fsmgen.generator.renderer import Renderer
from fsmgen.generator.validator import ensure_valid_source
from fsmgen.loader import load_schema
from fsmgen.utils.logging import get_logger, log_stage
from fsmgen.utils.result import Err, Ok, PipelineError, Result
from fsmgen.writer import output_path_for, write_artifact

logger = get_logger("pipeline.runner")


def render_schema(
    schema_path: Path,
    type_name: str,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """
    Run every stage except the write and return the validated source.

    Raises:
        FsmGenError: From whichever stage failed
    """
    config = config or GeneratorConfig()
    schema_path = Path(schema_path)

    with log_stage("load"):
        raw = load_schema(schema_path)

    with log_stage("build"):
        model = build_model(raw, strict=config.strict)

    with log_stage("render"):
        source = Renderer(package=config.package, engine=config.engine).render(model, type_name)

    with log_stage("format"):
        ensure_valid_source(source, filename=str(output_path_for(schema_path, config.output_suffix)))

    return source


def _to_pipeline_error(error: FsmGenError) -> PipelineError:
    logger.error("stage_failed", failed_stage=error.stage, error=str(error))
    return PipelineError(
        stage=error.stage,
        code=error.exit_code,
        message=str(error),
        cause=error,
    )


def generate(
    schema_path: Path,
    type_name: str,
    config: Optional[GeneratorConfig] = None,
    output_path: Optional[Path] = None,
) -> Result[Path, PipelineError]:
    """
    Generate the wrapper module for a schema and write it next to the schema.

    Args:
        schema_path: Path to the schema file
        type_name: Name of the generated wrapper class
        config: Generator configuration
        output_path: Override for the derived output path

    Returns:
        Ok(path written) or Err(PipelineError) naming the failed stage
    """
    config = config or GeneratorConfig()
    schema_path = Path(schema_path)
    destination = Path(output_path) if output_path else output_path_for(schema_path, config.output_suffix)

    logger.info(
        "generation_started",
        schema=str(schema_path),
        type_name=type_name,
        package=config.package,
        engine=config.engine,
    )

    try:
        source = render_schema(schema_path, type_name, config)
        with log_stage("write"):
            write_artifact(destination, source, source_path=schema_path)
    except FsmGenError as e:
        return Err(_to_pipeline_error(e))

    logger.info("generation_completed", output=str(destination))
    return Ok(destination)


def check(
    schema_path: Path,
    type_name: str,
    config: Optional[GeneratorConfig] = None,
    output_path: Optional[Path] = None,
) -> Result[bool, PipelineError]:
    """
    Compare the existing artifact with what would be generated.

    Returns:
        Ok(True) if the artifact is up to date, Ok(False) if it is missing or
        stale, Err(PipelineError) if generation itself fails
    """
    config = config or GeneratorConfig()
    schema_path = Path(schema_path)
    destination = Path(output_path) if output_path else output_path_for(schema_path, config.output_suffix)

    try:
        source = render_schema(schema_path, type_name, config)
    except FsmGenError as e:
        return Err(_to_pipeline_error(e))

    if not destination.exists():
        logger.warning("artifact_missing", path=str(destination))
        return Ok(False)

    try:
        up_to_date = destination.read_text(encoding="utf-8") == source
    except (OSError, UnicodeDecodeError) as e:
        return Err(_to_pipeline_error(WriteError(f"cannot read existing artifact {destination}: {e}")))

    if not up_to_date:
        logger.warning("artifact_stale", path=str(destination))
    return Ok(up_to_date)
