"""Exception taxonomy for pipeline runs and registry edits."""

from __future__ import annotations


class QuestlineError(Exception):
    """Base class for all Questline errors."""

    kind: str = "error"


class MissingCredentialError(QuestlineError):
    """The provider selected by an agent has no API key."""

    kind = "missing_credential"


class InsufficientResourceError(QuestlineError):
    """Mana is below the execution threshold."""

    kind = "insufficient_resource"


class ProviderCallError(QuestlineError):
    """The provider call failed (HTTP status, transport or malformed body)."""

    kind = "provider_call_failed"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PipelineBusyError(QuestlineError):
    """Another agent already holds the single-flight token."""

    kind = "busy"


class UnknownAgentError(QuestlineError, LookupError):
    """No agent with the given id or index is registered."""


class DuplicateAgentError(QuestlineError):
    """An agent with the same id is already registered."""
