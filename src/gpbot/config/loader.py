from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from gpbot.config.models import BotConfig
from gpbot.core.errors import ConfigError

_PLACEHOLDER = re.compile(r"\$\{([A-Z0-9_]+)\}")


def load_config(path: str) -> BotConfig:
    """Read a YAML config, fill ${VAR} placeholders from the environment and validate it."""
    document = _read_document(Path(path))
    try:
        return BotConfig.model_validate(expand_placeholders(document))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def expand_placeholders(value: Any) -> Any:
    if isinstance(value, str):
        return _PLACEHOLDER.sub(_lookup_env, value)
    if isinstance(value, list):
        return [expand_placeholders(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_placeholders(item) for key, item in value.items()}
    return value


def _read_document(config_path: Path) -> dict[str, Any]:
    if not config_path.is_file():
        raise ConfigError(f"Config file does not exist: {config_path}")
    # Values from .env never override variables already set in the environment.
    load_dotenv()
    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read config file: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return document


def _lookup_env(match: re.Match[str]) -> str:
    name = match.group(1)
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value
