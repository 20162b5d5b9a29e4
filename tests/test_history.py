"""Tests for history loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from chatpayload.history import load_history, validate_history


def test_load_history_jsonl(tmp_path: Path) -> None:
    path = tmp_path / "conv.jsonl"
    path.write_text(
        "\n".join(
            [
                '{"role":"user","content":"hi"}',
                "",
                '{"role":"assistant","content":"hello","name":"bot"}',
                "",
            ]
        ),
        encoding="utf-8",
    )
    assert load_history(str(path)) == [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello", "name": "bot"},
    ]


def test_load_history_jsonl_reports_bad_line(tmp_path: Path) -> None:
    path = tmp_path / "conv.jsonl"
    path.write_text('{"role":"user","content":"hi"}\nnot json\n', encoding="utf-8")
    with pytest.raises(ValueError, match="History line 2 is not valid JSON"):
        load_history(str(path))


def test_load_history_jsonl_reports_missing_content(tmp_path: Path) -> None:
    path = tmp_path / "conv.jsonl"
    path.write_text('{"role":"user"}\n', encoding="utf-8")
    with pytest.raises(ValueError, match="History line 1 missing string 'content'"):
        load_history(str(path))


def test_load_history_json_list(tmp_path: Path) -> None:
    path = tmp_path / "conv.json"
    path.write_text(
        '[\n\t{"role": "user", "content": "hi"}\n]\n', encoding="utf-8"
    )
    assert load_history(str(path)) == [{"role": "user", "content": "hi"}]


def test_load_history_yaml_messages_object(tmp_path: Path) -> None:
    path = tmp_path / "conv.yaml"
    path.write_text(
        "\n".join(
            [
                "messages:",
                "  - role: user",
                "    content: |",
                "      line1",
                "      line2",
                "  - role: assistant",
                "    content: ok",
                "",
            ]
        ),
        encoding="utf-8",
    )
    assert load_history(str(path)) == [
        {"role": "user", "content": "line1\nline2\n"},
        {"role": "assistant", "content": "ok"},
    ]


def test_load_history_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_history(str(path)) == []


def test_load_history_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="History file not found"):
        load_history(str(tmp_path / "nope.json"))


def test_load_history_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('[{"role": "user",', encoding="utf-8")
    with pytest.raises(ValueError, match="not valid YAML/JSON"):
        load_history(str(path))


def test_validate_history_rejects_non_list() -> None:
    with pytest.raises(ValueError, match="History must be a list of messages"):
        validate_history({"role": "user", "content": "hi"})


def test_validate_history_rejects_non_object_entry() -> None:
    with pytest.raises(ValueError, match="History entry 2 must be an object"):
        validate_history([{"role": "user", "content": "hi"}, "oops"])


def test_validate_history_rejects_non_string_role() -> None:
    with pytest.raises(ValueError, match="entry 1 missing string 'role'"):
        validate_history([{"role": 3, "content": "hi"}])


def test_validate_history_keeps_entry_identity() -> None:
    entry = {"role": "user", "content": "hi"}
    assert validate_history([entry])[0] is entry


def test_load_history_jsonl_with_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "conv.jsonl"
    path.write_text('{"role":"user","content":"hi"}\n', encoding="utf-8-sig")
    assert load_history(str(path)) == [{"role": "user", "content": "hi"}]
