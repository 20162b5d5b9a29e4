"""Chat payload builders for Gemini and OpenAI-compatible APIs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal, TypedDict, cast

from openai.types.chat import ChatCompletionMessageParam

GEMINI_SYSTEM_PREFIX = "System instruction: "
GEMINI_SYSTEM_ACK = "Understood. I will follow these instructions."

SUPPORTED_PROVIDERS: tuple[str, ...] = ("gemini", "openai")


class Message(TypedDict):
    """One conversation turn as supplied by the caller."""

    role: str
    content: str


class GeminiPart(TypedDict):
    text: str


class GeminiContent(TypedDict):
    role: Literal["user", "model"]
    parts: list[GeminiPart]


class GeminiGenerationConfig(TypedDict):
    temperature: float


class GeminiPayload(TypedDict):
    contents: list[GeminiContent]
    generationConfig: GeminiGenerationConfig


class OpenAIPayload(TypedDict):
    model: str
    messages: list[ChatCompletionMessageParam]
    temperature: float
    stream: Literal[True]


def _has_system_prompt(system_prompt: str | None) -> bool:
    return bool(system_prompt and system_prompt.strip())


def _gemini_turn(role: Literal["user", "model"], text: str) -> GeminiContent:
    return {"role": role, "parts": [{"text": text}]}


def build_gemini_payload(
    system_prompt: str | None,
    history: Sequence[Message],
    temperature: float,
) -> GeminiPayload:
    """Builds a Gemini generateContent request body.

    Gemini has no system role in ``contents``, so a non-blank system prompt is
    sent as a user turn followed by a fixed model acknowledgment.

    Args:
        system_prompt: Optional system prompt. Blank values are ignored.
        history: Conversation turns in order. ``"assistant"`` maps to
            ``"model"``; every other role maps to ``"user"``.
        temperature: Sampling temperature, passed through unchanged.

    Returns:
        Payload with ``contents`` and ``generationConfig``.
    """
    contents: list[GeminiContent] = []
    if _has_system_prompt(system_prompt):
        contents.append(_gemini_turn("user", f"{GEMINI_SYSTEM_PREFIX}{system_prompt}"))
        contents.append(_gemini_turn("model", GEMINI_SYSTEM_ACK))

    for message in history:
        role: Literal["user", "model"] = (
            "model" if message["role"] == "assistant" else "user"
        )
        contents.append(_gemini_turn(role, message["content"]))

    return {
        "contents": contents,
        "generationConfig": {"temperature": temperature},
    }


def build_openai_payload(
    model: str,
    system_prompt: str | None,
    history: Sequence[Message],
    temperature: float,
) -> OpenAIPayload:
    """Builds a streaming OpenAI-compatible chat/completions request body.

    History entries are passed through as-is, so extra keys survive.
    """
    messages: list[ChatCompletionMessageParam] = []
    if _has_system_prompt(system_prompt):
        messages.append({"role": "system", "content": cast(str, system_prompt)})
    messages.extend(cast(list[ChatCompletionMessageParam], list(history)))

    return {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "stream": True,
    }


def build_payload(
    provider: str,
    model: str,
    system_prompt: str | None,
    history: Sequence[Message],
    temperature: float,
) -> dict[str, Any]:
    """Builds the request body for the named provider.

    Raises:
        ValueError: Provider is not one of ``SUPPORTED_PROVIDERS``.
    """
    normalized = provider.strip().lower()
    if normalized == "gemini":
        return cast(
            dict[str, Any],
            build_gemini_payload(system_prompt, history, temperature),
        )
    if normalized == "openai":
        return cast(
            dict[str, Any],
            build_openai_payload(model, system_prompt, history, temperature),
        )
    raise ValueError(
        f"Unsupported provider: {provider!r}. "
        f"Expected one of: {', '.join(SUPPORTED_PROVIDERS)}."
    )
