"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import Optional

from ..models.provider import Provider
from .base import BaseProvider


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    provider = Provider.ANTHROPIC
    DEFAULT_ENDPOINT = "https://api.anthropic.com"

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]:
        body = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }

        headers = {
            "x-api-key": api_key,
            "anthropic-version": self.config.get("api_version", "2023-06-01"),
            "content-type": "application/json",
        }

        data = await self._post_json(f"{self.endpoint}/v1/messages", body, headers)

        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise self._malformed(data)
        for block in blocks:
            if isinstance(block, dict) and block.get("type") == "text":
                return self._checked_text(block.get("text"), data)
        return None
