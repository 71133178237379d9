"""Python-standard logging configuration for polyservice applications.

Library modules only ever call logging.getLogger(__name__). Applications that
want ready-made output call setup_logging(), which applies a dictConfig loaded
from a YAML file (the packaged default, or one of their own).
"""

from __future__ import annotations

import logging
import logging.config
import sys
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG = "logging.yaml"


class LoggingError(Exception):
    """Exception raised for logging configuration errors."""

    pass


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load logging configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file. None loads the
            configuration packaged with polyservice.

    Returns:
        Logging configuration dictionary

    Raises:
        LoggingError: If configuration cannot be loaded or parsed

    """
    try:
        if config_path is None:
            text = (
                resources.files("polyservice")
                .joinpath("config", DEFAULT_CONFIG)
                .read_text(encoding="utf-8")
            )
        else:
            text = config_path.read_text(encoding="utf-8")
        config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoggingError(f"Failed to parse YAML config {config_path}: {e}") from e
    except OSError as e:
        raise LoggingError(f"Failed to read config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise LoggingError(f"Invalid configuration format in {config_path}")
    return config


def setup_logging(
    config_path: Path | str | None = None,
    level: str | None = None,
    force_basic: bool = False,
) -> None:
    """Configure logging using Python standard dictConfig.

    Args:
        config_path: Path to logging configuration file (packaged default if None)
        level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force_basic: Force basic console logging (fallback mode)

    """
    if force_basic:
        _setup_basic_logging(level or "INFO")
        return

    try:
        if isinstance(config_path, str):
            config_path = Path(config_path)
        config = load_config(config_path)

        if level:
            if not isinstance(logging.getLevelName(level.upper()), int):
                raise LoggingError(f"Invalid log level: {level}")
            for logger_config in config.get("loggers", {}).values():
                logger_config["level"] = level.upper()
            if "root" in config:
                config["root"]["level"] = level.upper()

        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(
            "Logging configured from: %s", config_path or DEFAULT_CONFIG
        )

    except (LoggingError, KeyError, ValueError, TypeError) as e:
        fallback_level = level or "INFO"
        _setup_basic_logging(fallback_level)
        logging.getLogger(__name__).warning(
            "Failed to configure logging from file (%s), using basic console logging at %s level",
            e,
            fallback_level,
        )


def _setup_basic_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
