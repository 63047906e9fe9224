"""xAI (Grok) provider. The API is OpenAI-compatible."""

from __future__ import annotations

from ..models.provider import Provider
from .openai_provider import OpenAIProvider


class XAIProvider(OpenAIProvider):
    name = "xai"
    provider = Provider.XAI
    DEFAULT_ENDPOINT = "https://api.x.ai"
