"""Load a :class:`ReconciliationConfig` from a YAML file.

Example file::

    base: main
    branch: config-sync/updates
    commit-message: Regenerate configuration
    add-paths:
      - generated/
    is-config-sync: true

Hyphenated keys are accepted alongside the field names themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import aiofiles
import yaml
from pydantic import ValidationError

from .exceptions import ConfigError, ConfigParseError
from .models.branch import ReconciliationConfig

logger = logging.getLogger(__name__)


def parse_config(content: str, source: str = "<string>") -> ReconciliationConfig:
    """Parse YAML *content* into a :class:`ReconciliationConfig`."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        logger.error("YAML parse error in %s: %s", source, exc)
        raise ConfigParseError(f"Invalid YAML in {source}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {source}")

    normalized: dict[str, Any] = {str(key).replace("-", "_"): value for key, value in data.items()}
    try:
        return ReconciliationConfig.model_validate(normalized)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(path: Path) -> ReconciliationConfig:
    """Read and parse the configuration file at *path*."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    return parse_config(path.read_text(encoding="utf-8"), str(path))


async def async_load_config(path: Path) -> ReconciliationConfig:
    """Async variant of :func:`load_config`."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    async with aiofiles.open(path, encoding="utf-8") as fh:
        content = await fh.read()

    logger.info("Read config file: %s (%d bytes)", path, len(content))
    return parse_config(content, str(path))
