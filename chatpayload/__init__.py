"""Request body builders for Gemini and OpenAI-compatible chat APIs."""

from __future__ import annotations

from chatpayload.messages import (
    SUPPORTED_PROVIDERS,
    GeminiPayload,
    Message,
    OpenAIPayload,
    build_gemini_payload,
    build_openai_payload,
    build_payload,
)

__version__ = "0.1.0"

__all__ = [
    "SUPPORTED_PROVIDERS",
    "GeminiPayload",
    "Message",
    "OpenAIPayload",
    "__version__",
    "build_gemini_payload",
    "build_openai_payload",
    "build_payload",
]
