"""Pipeline executor: runs one agent at a time against the ledger.

Each run moves an agent Idle -> Running -> Succeeded/Failed -> Idle. At most
one agent is Running at any time. The ledger and the output map are only
written here, in the terminal transitions.
"""

from __future__ import annotations

import time
from typing import Optional

from ..errors import InsufficientResourceError, PipelineBusyError, QuestlineError
from ..models.agent import AgentDefinition
from ..models.ledger import ResourceLedger
from ..models.log import LogSeverity
from ..models.run import PipelineSnapshot, RunResult, RunState
from ..providers.base import ProviderAdapter
from .agents import FOLLOW_UP_QUESTIONS
from .credentials import CredentialStore
from .ledger import apply_failure, apply_success, can_run
from .log import ExecutionLog
from .registry import AgentRegistry


class PipelineExecutor:
    def __init__(
        self,
        registry: AgentRegistry,
        adapter: ProviderAdapter,
        credentials: Optional[CredentialStore] = None,
        ledger: Optional[ResourceLedger] = None,
        log: Optional[ExecutionLog] = None,
        follow_up_questions: Optional[list[str]] = None,
    ):
        self.registry = registry
        self.adapter = adapter
        self.credentials = credentials or CredentialStore()
        self.ledger = ledger or ResourceLedger()
        self.log = log or ExecutionLog()
        self.follow_up_questions = list(
            FOLLOW_UP_QUESTIONS if follow_up_questions is None else follow_up_questions
        )
        self.global_input = ""
        self.outputs: dict[str, str] = {}
        self.running_agent_id: Optional[str] = None
        self._states: dict[str, RunState] = {}

    @property
    def is_running(self) -> bool:
        return self.running_agent_id is not None

    def state_of(self, agent_id: str) -> RunState:
        """Current state of an agent; Running only while its call is in flight."""
        self.registry.get(agent_id)
        if self.running_agent_id == agent_id:
            return RunState.RUNNING
        return self._states.get(agent_id, RunState.IDLE)

    def resolve_input(self, agent_id: str) -> str:
        """Global input for stage 0, otherwise the previous stage's latest output."""
        previous = self.registry.previous(agent_id)
        if previous is None:
            return self.global_input
        return self.outputs.get(previous.id, "")

    def _reject(self, agent: AgentDefinition, error: QuestlineError) -> RunResult:
        self.log.append(LogSeverity.ERROR, str(error))
        return RunResult(
            agent_id=agent.id,
            state=RunState.IDLE,
            error=str(error),
            error_kind=error.kind,
            ledger=self.ledger,
        )

    async def run(self, agent_id: str, input_override: Optional[str] = None) -> RunResult:
        """Run one agent. Provider and credential failures never escape."""
        agent = self.registry.get(agent_id)

        if self.running_agent_id is not None:
            running = self.registry.get(self.running_agent_id)
            return self._reject(
                agent,
                PipelineBusyError(
                    f"Agent {agent.name} cannot start: {running.name} is still running."
                ),
            )

        if not can_run(self.ledger):
            return self._reject(
                agent, InsufficientResourceError("Not enough Mana to run agent! Rest needed.")
            )

        self.running_agent_id = agent.id
        start = time.time()
        try:
            self.log.append(LogSeverity.INFO, f"Starting agent: {agent.name} ({agent.model})...")
            user_prompt = input_override if input_override is not None else self.resolve_input(agent.id)

            try:
                output = await self.adapter.call(
                    agent.provider,
                    self.credentials.get(agent.provider),
                    agent.model,
                    agent.system_prompt,
                    user_prompt,
                    agent.max_tokens,
                    agent.temperature,
                )
            except Exception as e:
                kind = e.kind if isinstance(e, QuestlineError) else "provider_call_failed"
                message = str(e) or type(e).__name__
                self.log.append(LogSeverity.ERROR, f"Agent {agent.name} failed: {message}")
                self.ledger = apply_failure(self.ledger)
                self._states[agent.id] = RunState.FAILED
                return RunResult(
                    agent_id=agent.id,
                    state=RunState.FAILED,
                    input=user_prompt,
                    error=message,
                    error_kind=kind,
                    ledger=self.ledger,
                    duration_seconds=round(time.time() - start, 2),
                )

            self.outputs[agent.id] = output
            self.log.append(LogSeverity.SUCCESS, f"Agent {agent.name} completed successfully.")
            self.ledger = apply_success(self.ledger)
            self._states[agent.id] = RunState.SUCCEEDED
            return RunResult(
                agent_id=agent.id,
                state=RunState.SUCCEEDED,
                input=user_prompt,
                output=output,
                ledger=self.ledger,
                duration_seconds=round(time.time() - start, 2),
            )
        finally:
            self.running_agent_id = None

    async def run_pipeline(
        self,
        global_input: Optional[str] = None,
        stop_on_failure: bool = True,
    ) -> list[RunResult]:
        """Run every stage in order, each reading the previous stage's output."""
        if global_input is not None:
            self.global_input = global_input

        results: list[RunResult] = []
        for agent in self.registry:
            result = await self.run(agent.id)
            results.append(result)
            if stop_on_failure and not result.succeeded:
                break
        return results

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            agents=list(self.registry),
            outputs=dict(self.outputs),
            logs=list(self.log.entries),
            log_counts={k.value: v for k, v in self.log.counts().items()},
            ledger=self.ledger,
            running_agent_id=self.running_agent_id,
            follow_up_questions=list(self.follow_up_questions),
        )
