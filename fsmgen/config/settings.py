"""Generator configuration.

Values come from built-in defaults, then an optional YAML file, then
FSMGEN_* environment variables, then CLI options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from fsmgen.utils.result import ConfigError, Err, Ok, Result

DEFAULT_PACKAGE = "main"

ENGINES = ("sync", "async")
LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")

# Environment variable names
ENV_PACKAGE = "FSMGEN_PACKAGE"
ENV_SOURCE_FILE = "FSMGEN_FILE"
ENV_ENGINE = "FSMGEN_ENGINE"
ENV_STRICT = "FSMGEN_STRICT"
ENV_LOG_LEVEL = "FSMGEN_LOG_LEVEL"
ENV_LOG_FORMAT = "FSMGEN_LOG_FORMAT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "text"


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Complete generator configuration.

    Attributes:
        package: Package name recorded in the generated header
        engine: 'sync' (transitions.Machine) or 'async' (AsyncMachine)
        strict: Require the initial state and all destinations to be declared
        output_suffix: Extension of the generated artifact
        source_file: Human-readable source name, used only in log output
        logging: Logging settings
    """

    package: str = DEFAULT_PACKAGE
    engine: str = "sync"
    strict: bool = False
    output_suffix: str = ".py"
    source_file: str = ""
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(
        cls, path: Path, base: Optional["GeneratorConfig"] = None
    ) -> Result["GeneratorConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file
            base: Configuration supplying values the file leaves out

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message=f"Top-level YAML must be a mapping, got {type(data).__name__}",
            ))

        return cls.from_dict(data, base=base)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], base: Optional["GeneratorConfig"] = None
    ) -> Result["GeneratorConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary
            base: Configuration supplying values the dictionary leaves out

        Returns:
            Result with loaded config or error
        """
        base = base or cls()

        logging_data = data.get("logging") or {}
        if not isinstance(logging_data, dict):
            return Err(ConfigError(field="logging", message="Must be a mapping"))

        strict = data.get("strict", base.strict)
        if not isinstance(strict, bool):
            return Err(ConfigError(field="strict", message=f"Must be a boolean, got {strict!r}"))

        for key in ("package", "engine", "output_suffix"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                return Err(ConfigError(field=key, message=f"Must be a string, got {value!r}"))

        config = replace(
            base,
            package=data.get("package", base.package),
            engine=data.get("engine", base.engine),
            strict=strict,
            output_suffix=data.get("output_suffix", base.output_suffix),
            logging=LoggingConfig(
                level=str(logging_data.get("level", base.logging.level)),
                format=str(logging_data.get("format", base.logging.format)),
            ),
        )
        return Ok(config)

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        base: Optional["GeneratorConfig"] = None,
    ) -> Result["GeneratorConfig", ConfigError]:
        """
        Overlay FSMGEN_* environment variables.

        An unset or empty FSMGEN_PACKAGE keeps the base package name.
        """
        env = os.environ if env is None else env
        base = base or cls()

        strict = base.strict
        raw_strict = env.get(ENV_STRICT)
        if raw_strict is not None:
            lowered = raw_strict.strip().lower()
            if lowered in _TRUE_VALUES:
                strict = True
            elif lowered in _FALSE_VALUES:
                strict = False
            else:
                return Err(ConfigError(
                    field=ENV_STRICT,
                    message=f"Expected a boolean, got {raw_strict!r}",
                ))

        return Ok(replace(
            base,
            package=env.get(ENV_PACKAGE) or base.package,
            engine=env.get(ENV_ENGINE) or base.engine,
            strict=strict,
            source_file=env.get(ENV_SOURCE_FILE) or base.source_file,
            logging=LoggingConfig(
                level=env.get(ENV_LOG_LEVEL) or base.logging.level,
                format=env.get(ENV_LOG_FORMAT) or base.logging.format,
            ),
        ))

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if not all(part.isidentifier() for part in self.package.split(".")):
            return Err(ConfigError(
                field="package",
                message=f"Must be a dotted Python name, got {self.package!r}",
            ))

        if self.engine not in ENGINES:
            return Err(ConfigError(
                field="engine",
                message=f"Must be one of {', '.join(ENGINES)}, got {self.engine!r}",
            ))

        if not self.output_suffix.startswith(".") or len(self.output_suffix) < 2:
            return Err(ConfigError(
                field="output_suffix",
                message=f"Must look like '.py', got {self.output_suffix!r}",
            ))

        if self.logging.level.lower() not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format!r}",
            ))

        return Ok(None)

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        """
        Return a new config with the given non-None values replaced.

        `log_level` and `log_format` update the nested logging settings.
        """
        log_level = overrides.pop("log_level", None)
        log_format = overrides.pop("log_format", None)
        values = {k: v for k, v in overrides.items() if v is not None}

        logging_config = LoggingConfig(
            level=log_level or self.logging.level,
            format=log_format or self.logging.format,
        )
        return replace(self, logging=logging_config, **values)


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Result[GeneratorConfig, ConfigError]:
    """
    Load configuration: defaults, then the YAML file (if given), then env.

    Args:
        path: Optional YAML configuration file
        env: Environment mapping (defaults to os.environ)

    Returns:
        Result with validated config or error
    """
    config = GeneratorConfig()

    if path is not None:
        result = GeneratorConfig.from_yaml(path, base=config)
        if result.is_err():
            return result
        config = result.unwrap()

    result = GeneratorConfig.from_env(env, base=config)
    if result.is_err():
        return result
    config = result.unwrap()

    validation_result = config.validate()
    if validation_result.is_err():
        return Err(validation_result.unwrap_err())

    return Ok(config)
