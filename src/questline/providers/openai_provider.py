"""OpenAI chat completions provider."""

from __future__ import annotations

from typing import Optional

from ..models.provider import Provider
from .base import BaseProvider


class OpenAIProvider(BaseProvider):
    name = "openai"
    provider = Provider.OPENAI
    DEFAULT_ENDPOINT = "https://api.openai.com"

    @property
    def url(self) -> str:
        return f"{self.endpoint}/v1/chat/completions"

    def _headers(self, api_key: str) -> dict:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

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
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        data = await self._post_json(self.url, body, self._headers(api_key))

        choices = data.get("choices")
        if not isinstance(choices, list):
            raise self._malformed(data)
        if not choices:
            return None
        try:
            content = choices[0]["message"].get("content")
        except (KeyError, TypeError, AttributeError) as e:
            raise self._malformed(data) from e
        return self._checked_text(content, data)
