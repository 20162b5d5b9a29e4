"""Conversation history loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

import yaml

from chatpayload.messages import Message


def _validate_entry(entry: Any, label: str) -> Message:
    if not isinstance(entry, dict):
        raise ValueError(f"{label} must be an object.")
    for key in ("role", "content"):
        value = entry.get(key)
        if not isinstance(value, str):
            raise ValueError(f"{label} missing string '{key}'.")
    return cast(Message, entry)


def validate_history(entries: Any, source: str = "History") -> list[Message]:
    """Checks that every entry has string ``role`` and ``content`` fields.

    Entries are returned as-is, so keys beyond role/content are kept.

    Raises:
        ValueError: ``entries`` is not a list or an entry is malformed.
    """
    if not isinstance(entries, list):
        raise ValueError(f"{source} must be a list of messages.")
    return [
        _validate_entry(entry, f"{source} entry {index}")
        for index, entry in enumerate(entries, start=1)
    ]


def read_structured_file(path: Path) -> Any:
    """Parses a JSON or YAML file, choosing JSON when the text opens with { or [."""
    text = path.read_text(encoding="utf-8")
    trimmed = text.lstrip("\ufeff \t\r\n")
    if trimmed.startswith("{") or trimmed.startswith("["):
        return json.loads(trimmed)
    return yaml.safe_load(text)


def _load_jsonl(path: Path) -> list[Message]:
    history: list[Message] = []
    with path.open("r", encoding="utf-8-sig") as stream:
        for index, raw_line in enumerate(stream, start=1):
            stripped = raw_line.strip()
            if not stripped:
                continue
            try:
                record = json.loads(stripped)
            except json.JSONDecodeError as exc:
                raise ValueError(
                    f"History line {index} is not valid JSON: {exc.msg}"
                ) from exc
            history.append(_validate_entry(record, f"History line {index}"))
    return history


def load_history(file_path: str) -> list[Message]:
    """Loads a conversation history file.

    ``.jsonl`` files hold one message object per line. Any other file is read
    as JSON or YAML whose root is either a list of messages or an object with
    a ``messages`` list.

    Raises:
        FileNotFoundError: History file does not exist.
        ValueError: File content is not a valid history.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"History file not found: {file_path}")
    if not path.is_file():
        raise ValueError(f"Not a file: {file_path}")

    if path.suffix.lower() == ".jsonl":
        return _load_jsonl(path)

    try:
        parsed = read_structured_file(path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"History file is not valid YAML/JSON: {file_path}") from exc
    if parsed is None:
        return []
    if isinstance(parsed, dict):
        parsed = parsed.get("messages")
    return validate_history(parsed)
