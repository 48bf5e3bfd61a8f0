"""
Inputs loader: reads task inputs from a YAML file or KEY=VALUE pairs.

Outside a pipeline agent there are no ``INPUT_*`` variables, so the CLI
accepts inputs from a file and from the command line instead. Values
are normalised to the strings the agent would have passed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when an inputs file or input pair is invalid."""


def _as_input_string(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_inputs_file(path: Path) -> dict[str, str]:
    """Load a flat YAML mapping of task inputs.

    Args:
        path: Path to the YAML file.

    Returns:
        Input name → string value. Null values are dropped.

    Raises:
        ConfigError: If the file is missing or not a flat mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Inputs file not found: {path}")

    logger.debug("Loading inputs from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    inputs: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise ConfigError(f"Input '{key}' in {path} must be a scalar value")
        inputs[str(key)] = _as_input_string(value)

    logger.info("Loaded %d input(s) from %s", len(inputs), path)
    return inputs


def parse_input_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``NAME=VALUE`` strings. Only the first '=' splits."""
    inputs: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Expected NAME=VALUE, got {pair!r}")
        inputs[name.strip()] = value
    return inputs
