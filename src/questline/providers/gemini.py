"""Google Gemini generateContent provider (REST)."""

from __future__ import annotations

from typing import Optional

from ..models.provider import Provider
from .base import BaseProvider


class GeminiProvider(BaseProvider):
    name = "gemini"
    provider = Provider.GEMINI
    DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com"

    def url_for(self, model: str) -> str:
        return f"{self.endpoint}/v1beta/models/{model}:generateContent"

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]:
        body: dict = {
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": temperature,
            },
        }
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

        data = await self._post_json(self.url_for(model), body, headers)

        # A blocked prompt comes back with no candidates at all
        candidates = data.get("candidates")
        if candidates is None:
            return None
        if not isinstance(candidates, list):
            raise self._malformed(data)
        if not candidates:
            return None

        try:
            parts = candidates[0].get("content", {}).get("parts", [])
        except AttributeError as e:
            raise self._malformed(data) from e
        if not isinstance(parts, list):
            raise self._malformed(data)
        texts = [
            self._checked_text(p["text"], data)
            for p in parts
            if isinstance(p, dict) and p.get("text")
        ]
        return "".join(texts) or None
