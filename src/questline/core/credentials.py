"""In-memory API key store. Keys are never written anywhere."""

from __future__ import annotations

import os
from typing import Optional

from ..models.provider import Provider


class CredentialStore:
    def __init__(self, keys: Optional[dict[Provider | str, str]] = None):
        self._keys: dict[Provider, str] = {}
        for provider, key in (keys or {}).items():
            self.set(provider, key)

    def set(self, provider: Provider | str, key: Optional[str]) -> None:
        self._keys[Provider(provider)] = (key or "").strip()

    def get(self, provider: Provider | str) -> str:
        return self._keys.get(Provider(provider), "")

    def has(self, provider: Provider | str) -> bool:
        return bool(self.get(provider))

    def providers(self) -> list[Provider]:
        return [p for p in Provider if self.has(p)]

    @classmethod
    def from_env(cls, config: Optional[dict] = None) -> "CredentialStore":
        """Pre-populate one provider's key from one environment variable."""
        cred_config = (config or {}).get("credentials") or {}
        env_var = cred_config.get("env_var", "API_KEY")
        provider = cred_config.get("provider", Provider.GEMINI.value)

        store = cls()
        value = os.environ.get(env_var)
        if value:
            store.set(provider, value)
        return store
