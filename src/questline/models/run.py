"""Pipeline run data models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .agent import AgentDefinition
from .ledger import ResourceLedger
from .log import LogEntry


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunResult(BaseModel):
    agent_id: str
    state: RunState
    input: str = ""
    output: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    ledger: ResourceLedger
    duration_seconds: float = 0

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.SUCCEEDED


class PipelineSnapshot(BaseModel):
    """Read-only view of the executor for the presentation layer."""

    agents: list[AgentDefinition] = []
    outputs: dict[str, str] = {}
    logs: list[LogEntry] = []
    log_counts: dict[str, int] = {}
    ledger: ResourceLedger = ResourceLedger()
    running_agent_id: Optional[str] = None
    follow_up_questions: list[str] = []
