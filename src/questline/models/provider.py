"""LLM provider data models."""

from __future__ import annotations

from enum import Enum


class Provider(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    XAI = "xai"

    @property
    def label(self) -> str:
        return PROVIDER_LABELS[self]


PROVIDER_LABELS: dict[Provider, str] = {
    Provider.GEMINI: "Gemini",
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.XAI: "xAI",
}

AI_MODELS: dict[Provider, list[str]] = {
    Provider.GEMINI: [
        "gemini-2.5-flash",
        "gemini-2.5-flash-lite",
    ],
    Provider.OPENAI: [
        "gpt-4o-mini",
        "gpt-4.1-mini",
        "gpt-5-nano",
    ],
    Provider.ANTHROPIC: [
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
    ],
    Provider.XAI: [
        "grok-beta",
    ],
}
