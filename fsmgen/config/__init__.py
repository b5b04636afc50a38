"""Configuration module for fsmgen."""

from fsmgen.config.settings import GeneratorConfig, LoggingConfig, load_config

__all__ = ["GeneratorConfig", "LoggingConfig", "load_config"]
