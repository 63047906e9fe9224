"""Offline provider used for dry runs.

Returns a canned response that names the model and echoes the start of both
prompts, after a short delay so the single-flight marker is observable.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from ..models.provider import Provider


class SimulatedProvider:
    def __init__(self, provider: Provider, provider_config: dict, common_config: dict):
        self.provider = provider
        self.name = f"simulated-{provider.value}"
        self.config = provider_config
        self.delay = common_config.get("simulate_delay_seconds", 0.0)

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]:
        if self.delay:
            await asyncio.sleep(self.delay)
        return (
            f"[Simulated {model} Response]\n\n"
            f'Based on the system prompt: "{system_prompt[:20]}..."\n\n'
            f'Here is the analysis of: "{user_prompt[:20]}..."'
        )
