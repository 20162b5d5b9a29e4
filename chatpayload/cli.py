"""CLI implementation for chatpayload."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console

from chatpayload import __version__
from chatpayload.config import load_config
from chatpayload.history import load_history
from chatpayload.messages import SUPPORTED_PROVIDERS, Message, build_payload

DEFAULT_PROVIDER = "openai"
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class Args:
    """Parsed CLI args."""

    provider: str
    model: str
    system_prompt: str
    temperature: float
    history_path: str | None
    out_path: str | None
    pretty: bool
    verbose: bool


def _usage_line() -> str:
    return "Usage: chatpayload --provider gemini|openai [--model <name>] [options]"


def _help_text() -> str:
    lines = [
        f"chatpayload {__version__}",
        "",
        _usage_line(),
        "",
        "Options:",
        "  --help                          Show this help message and exit.",
        "  --version                       Print the CLI version and exit.",
        "  --config <file>                 Load options from a YAML/JSON config file.",
        "  --provider gemini|openai        Target API shape (default: openai).",
        "  --model <name>                  Model name (required for openai).",
        "  --system <text>                 Optional system prompt.",
        "  --temperature <num>             Sampling temperature (default: 0.7).",
        "  --history <file>                Conversation as JSON, JSONL or YAML.",
        "  --out <file>                    Write payload JSON to a file (default: stdout).",
        "  --pretty                        Print indented, highlighted JSON.",
        "  --verbose                       Print a summary line to stderr.",
        "",
    ]
    return "\n".join(lines)


def _parse_raw_args(argv: list[str]) -> dict[str, str | bool]:
    args: dict[str, str | bool] = {}
    index = 0
    while index < len(argv):
        token = argv[index]
        if not token.startswith("--"):
            index += 1
            continue
        if "=" in token:
            key, value = token[2:].split("=", 1)
            if key:
                args[key] = value
            index += 1
            continue
        key = token[2:]
        next_token = argv[index + 1] if index + 1 < len(argv) else None
        if next_token is None or next_token.startswith("--"):
            args[key] = True
            index += 1
        else:
            args[key] = next_token
            index += 2
    return args


def _optional_str(value: str | bool | None) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _flag_enabled(value: str | bool | None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return value.strip().lower() != "false"


def _parse_args_from_raw(raw: dict[str, str | bool]) -> Args:
    provider = (_optional_str(raw.get("provider")) or DEFAULT_PROVIDER).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"{_usage_line()} (unsupported provider: {provider})")

    model = _optional_str(raw.get("model")) or ""
    if provider == "openai" and not model:
        raise ValueError(f"{_usage_line()} (--model is required for openai)")

    system_raw = raw.get("system")
    system_prompt = system_raw if isinstance(system_raw, str) else ""

    temperature = DEFAULT_TEMPERATURE
    temperature_raw = raw.get("temperature")
    if temperature_raw is not None:
        try:
            temperature = float(str(temperature_raw))
        except ValueError as exc:
            raise ValueError(
                f"{_usage_line()} (--temperature must be a number)"
            ) from exc

    return Args(
        provider=provider,
        model=model,
        system_prompt=system_prompt,
        temperature=temperature,
        history_path=_optional_str(raw.get("history")),
        out_path=_optional_str(raw.get("out")),
        pretty=_flag_enabled(raw.get("pretty")),
        verbose=_flag_enabled(raw.get("verbose")),
    )


def _resolve_config(
    cli_raw: dict[str, str | bool],
) -> tuple[dict[str, str | bool], list[Message] | None]:
    config_raw_value = cli_raw.get("config")
    if config_raw_value is None:
        return cli_raw, None
    if not isinstance(config_raw_value, str) or not config_raw_value.strip():
        raise ValueError(f"{_usage_line()} --config <file>")
    config = load_config(str(Path(config_raw_value).resolve()))
    return {**config.raw_args, **cli_raw}, config.history


def parse_args(argv: list[str]) -> Args:
    """Parses CLI and config arguments with CLI precedence."""
    merged, _ = _resolve_config(_parse_raw_args(argv))
    return _parse_args_from_raw(merged)


def _write_payload(payload: dict[str, Any], args: Args) -> None:
    if args.out_path is not None:
        indent = 2 if args.pretty else None
        text = json.dumps(payload, ensure_ascii=False, indent=indent)
        Path(args.out_path).write_text(text + "\n", encoding="utf-8")
        return
    if args.pretty:
        Console(file=sys.stdout).print_json(data=payload)
        return
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _summary_line(args: Args, history: list[Message]) -> str:
    has_system = bool(args.system_prompt.strip())
    return (
        f"{args.provider}: {len(history)} history entries, "
        f"system prompt {'applied' if has_system else 'none'}, "
        f"temperature {args.temperature}"
    )


def run(argv: list[str]) -> int:
    if "--help" in argv or "-h" in argv:
        print(_help_text())
        return 0
    if "--version" in argv or "-v" in argv:
        print(f"chatpayload {__version__}")
        return 0

    try:
        merged, inline_history = _resolve_config(_parse_raw_args(argv))
        args = _parse_args_from_raw(merged)
    except Exception as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    history: list[Message] = inline_history or []
    if args.history_path is not None:
        try:
            history = load_history(str(Path(args.history_path).resolve()))
        except Exception as exc:
            sys.stderr.write(f"{exc}\n")
            return 1

    payload = build_payload(
        args.provider,
        args.model,
        args.system_prompt,
        history,
        args.temperature,
    )
    if args.verbose:
        sys.stderr.write(_summary_line(args, history) + "\n")

    try:
        _write_payload(payload, args)
    except OSError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(run(sys.argv[1:]))
