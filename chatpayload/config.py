"""Configuration parsing for chatpayload."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chatpayload.history import read_structured_file, validate_history
from chatpayload.messages import Message

_CONFIG_KEY_ALIASES: dict[str, str] = {
    "systemPrompt": "system",
    "system-prompt": "system",
    "historyPath": "history",
    "outPath": "out",
}

# Keys holding an inline conversation instead of a flag value.
_INLINE_HISTORY_KEYS = ("messages", "history")


@dataclass(frozen=True)
class ConfigFile:
    """Flag values and optional inline conversation read from a config file."""

    raw_args: dict[str, str | bool] = field(default_factory=dict)
    history: list[Message] | None = None


def _flatten(value: Any, prefix: str, out: dict[str, Any]) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, child in value.items():
            _flatten(child, f"{prefix}.{key}" if prefix else str(key), out)
        return
    out[prefix] = value


def _flag_name(key: str) -> str:
    name = key.strip().removeprefix("--")
    return _CONFIG_KEY_ALIASES.get(name, name)


def _to_raw_value(key: str, value: Any) -> str | bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"Unsupported value for config key '{key}'.")


def load_config(config_path: str) -> ConfigFile:
    """Loads a YAML/JSON config file.

    Scalar keys become raw CLI-like flag values. A ``messages`` list (or a
    ``history`` list) is read as an inline conversation and validated the same
    way history files are.

    Raises:
        FileNotFoundError: Config file does not exist.
        ValueError: Config format is invalid or unsupported.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        parsed = read_structured_file(path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Config file is not valid YAML/JSON: {config_path}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Config must be a YAML/JSON object at the root.")

    history: list[Message] | None = None
    remaining = dict(parsed)
    for key in _INLINE_HISTORY_KEYS:
        if isinstance(remaining.get(key), list):
            if history is not None:
                raise ValueError("Config defines both 'messages' and 'history' lists.")
            history = validate_history(remaining.pop(key), source="Config messages")

    flat: dict[str, Any] = {}
    _flatten(remaining, "", flat)

    raw_args: dict[str, str | bool] = {}
    for key, value in flat.items():
        if not key.strip():
            continue
        raw_args[_flag_name(key)] = _to_raw_value(key, value)
    return ConfigFile(raw_args=raw_args, history=history)
