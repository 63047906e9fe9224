"""Shared fixtures for Questline tests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from questline.core.credentials import CredentialStore
from questline.core.executor import PipelineExecutor
from questline.core.log import ExecutionLog
from questline.core.registry import AgentRegistry
from questline.models.agent import AgentDefinition
from questline.models.ledger import ResourceLedger
from questline.models.provider import Provider
from questline.providers.base import ProviderAdapter


class FakeProvider:
    """Deterministic provider: returns queued replies or raises queued errors."""

    def __init__(self, name: str = "fake", replies: Optional[list] = None):
        self.name = name
        self.replies = list(replies or [])
        self.calls: list[dict] = []

    async def complete(self, api_key, model, system_prompt, user_prompt, max_tokens, temperature):
        self.calls.append(
            {
                "api_key": api_key,
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        reply = self.replies.pop(0) if self.replies else f"output of {model}: {user_prompt}"
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def adapter(fake_provider: FakeProvider) -> ProviderAdapter:
    return ProviderAdapter({p: fake_provider for p in Provider})


@pytest.fixture
def agents() -> list[AgentDefinition]:
    return [
        AgentDefinition(
            id="analyst",
            name="Regulatory Analyst",
            provider=Provider.GEMINI,
            model="gemini-2.5-flash",
            max_tokens=4000,
            temperature=0.2,
            system_prompt="Analyze the device.",
        ),
        AgentDefinition(
            id="writer",
            name="Submission Writer",
            provider=Provider.OPENAI,
            model="gpt-4o-mini",
            max_tokens=6000,
            temperature=0.7,
            system_prompt="Draft the summary.",
        ),
    ]


@pytest.fixture
def registry(agents: list[AgentDefinition]) -> AgentRegistry:
    return AgentRegistry(agents)


@pytest.fixture
def credentials() -> CredentialStore:
    return CredentialStore({"gemini": "g-key", "openai": "o-key"})


@pytest.fixture
def executor(registry: AgentRegistry, adapter: ProviderAdapter, credentials: CredentialStore) -> PipelineExecutor:
    return PipelineExecutor(
        registry=registry,
        adapter=adapter,
        credentials=credentials,
        ledger=ResourceLedger(),
        log=ExecutionLog(),
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A config file with a three-stage pipeline."""
    path = tmp_path / "questline.yaml"
    path.write_text(
        "ai:\n"
        "  timeout_seconds: 30\n"
        "  simulate_delay_seconds: 0\n"
        "pipeline:\n"
        "  agents:\n"
        "    - id: intake\n"
        "      name: Intake\n"
        "      provider: anthropic\n"
        "      model: claude-3-5-haiku-20241022\n"
        "      max_tokens: 1000\n"
        "    - id: critic\n"
        "      name: Critic\n"
        "      provider: xai\n"
        "      model: grok-beta\n"
        "      max_tokens: 2000\n"
        "      temperature: 0.1\n"
        "    - id: editor\n"
        "      name: Editor\n"
        "      provider: openai\n"
        "      model: gpt-5-nano\n"
        "      max_tokens: 500\n",
        encoding="utf-8",
    )
    return path
