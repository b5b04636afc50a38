"""CLI entry point for fsmgen."""

from __future__ import annotations

import keyword
import sys
from pathlib import Path
from typing import Optional

import click

from fsmgen import __version__
from fsmgen.config.settings import ENGINES, GeneratorConfig, load_config
from fsmgen.errors import FsmGenError
from fsmgen.pipeline.runner import check, generate, render_schema
from fsmgen.utils.logging import configure_logging, get_logger, set_source_file
from fsmgen.utils.result import ExitCode, PipelineError


def _fail(error: object, code: int) -> None:
    click.echo(f"error: {error}", err=True)
    sys.exit(code)


def _validate_type_name(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise click.BadParameter(f"{value!r} is not a valid Python identifier")
    return value


def _resolve_config(
    config_path: Optional[Path],
    package: Optional[str],
    engine: Optional[str],
    strict: bool,
    log_level: Optional[str],
    log_format: Optional[str],
) -> GeneratorConfig:
    result = load_config(config_path)
    if result.is_err():
        _fail(result.unwrap_err(), ExitCode.CONFIG_INVALID)
    config = result.unwrap().with_overrides(
        package=package,
        engine=engine,
        strict=True if strict else None,
        log_level=log_level,
        log_format=log_format,
    )

    validation = config.validate()
    if validation.is_err():
        _fail(validation.unwrap_err(), ExitCode.CONFIG_INVALID)
    return config


def _report(error: PipelineError) -> None:
    _fail(error, error.code)


@click.command()
@click.argument("schema", type=click.Path(path_type=Path, dir_okay=False))
@click.argument("type_name", callback=_validate_type_name)
@click.option(
    "--package",
    default=None,
    help="Package name recorded in the generated header [env: FSMGEN_PACKAGE]",
)
@click.option(
    "--engine",
    type=click.Choice(ENGINES),
    default=None,
    help="Target transitions.Machine (sync) or AsyncMachine (async) [env: FSMGEN_ENGINE]",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail when the initial state or a destination is not declared [env: FSMGEN_STRICT]",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write here instead of next to the schema",
)
@click.option(
    "--stdout",
    "to_stdout",
    is_flag=True,
    default=False,
    help="Print the generated module instead of writing it",
)
@click.option(
    "--check",
    "check_only",
    is_flag=True,
    default=False,
    help="Exit 1 if the existing module differs from what would be generated",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path, dir_okay=False),
    default=None,
    help="Path to a YAML configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level [env: FSMGEN_LOG_LEVEL]",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format [env: FSMGEN_LOG_FORMAT]",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    schema: Path,
    type_name: str,
    package: Optional[str],
    engine: Optional[str],
    strict: bool,
    output_path: Optional[Path],
    to_stdout: bool,
    check_only: bool,
    config_path: Optional[Path],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    Generate a typed state machine wrapper from SCHEMA.

    SCHEMA is a JSON or YAML machine description; TYPE_NAME is the name of
    the generated wrapper class. The module is written next to the schema
    with its extension replaced by .py.
    """
    if to_stdout and check_only:
        raise click.UsageError("--stdout and --check are mutually exclusive")

    config = _resolve_config(config_path, package, engine, strict, log_level, log_format)

    configure_logging(level=config.logging.level, format_type=config.logging.format)
    set_source_file(config.source_file)
    logger = get_logger("cli")
    logger.info("fsmgen_started", program=ctx.info_name, source_file=config.source_file)

    if to_stdout:
        try:
            source = render_schema(schema, type_name, config)
        except FsmGenError as e:
            _fail(f"[{e.stage}] {e}", e.exit_code)
        click.echo(source, nl=False)
        return

    if check_only:
        result = check(schema, type_name, config, output_path=output_path)
        if result.is_err():
            _report(result.unwrap_err())
        if not result.unwrap():
            _fail("generated module is missing or out of date", ExitCode.CHECK_MISMATCH)
        return

    result = generate(schema, type_name, config, output_path=output_path)
    if result.is_err():
        _report(result.unwrap_err())


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.USAGE_ERROR)


if __name__ == "__main__":
    main()
