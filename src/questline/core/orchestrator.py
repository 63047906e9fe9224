"""Pipeline session orchestrator.

Builds the executor from configuration, runs the pipeline (or one agent)
and prints results to the console. Returns a process exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .. import __version__
from ..errors import UnknownAgentError
from ..models.provider import Provider
from ..models.run import RunResult
from ..providers.base import build_adapter
from .agents import load_follow_up_questions
from .config import get_effective_config
from .credentials import CredentialStore
from .executor import PipelineExecutor
from .log import ExecutionLog
from .registry import AgentRegistry

console = Console()


def build_executor(
    config: dict,
    keys: Optional[dict[str, str]] = None,
    out: Optional[Console] = None,
) -> PipelineExecutor:
    """Wire registry, adapter, credentials and log from resolved config."""
    credentials = CredentialStore.from_env(config)
    for provider, key in (keys or {}).items():
        credentials.set(provider, key)

    return PipelineExecutor(
        registry=AgentRegistry.from_config(config),
        adapter=build_adapter(config),
        credentials=credentials,
        log=ExecutionLog(console=out),
        follow_up_questions=load_follow_up_questions(config),
    )


def print_result(result: RunResult, executor: PipelineExecutor) -> None:
    agent = executor.registry.get(result.agent_id)
    if result.succeeded:
        console.print(
            Panel(
                escape(result.output or ""),
                title=f"{escape(agent.name)} ({escape(agent.model)})",
                subtitle=f"{result.duration_seconds}s",
                border_style="green",
            )
        )
    else:
        console.print(f"  [red]FAILED[/red] {escape(agent.name)}: {escape(result.error or '')}")


def print_status(executor: PipelineExecutor) -> None:
    ledger = executor.ledger
    counts = executor.log.counts()
    console.print(
        f"  Health: [red]{ledger.health}[/red]  Mana: [yellow]{ledger.mana}[/yellow]  "
        f"XP: [magenta]{ledger.experience}[/magenta]  Level: [bold]{ledger.level}[/bold]"
    )
    console.print(
        "  Log: "
        + ", ".join(f"{count} {severity.value}" for severity, count in counts.items())
    )


async def run_session(
    global_input: str,
    agent_id: Optional[str] = None,
    config_path: Optional[Path] = None,
    dry_run: bool = False,
    keys: Optional[dict[str, str]] = None,
    stop_on_failure: Optional[bool] = None,
) -> int:
    """Run the configured pipeline once. Returns exit code."""
    cli_overrides: dict = {}
    if dry_run:
        cli_overrides["ai"] = {"simulate": True}

    config = get_effective_config(config_path, cli_overrides=cli_overrides or None)

    try:
        executor = build_executor(config, keys=keys, out=console)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        console.print(f"  [red]ERROR[/red] Invalid pipeline configuration: {escape(str(e))}")
        return 2

    if dry_run:
        # Simulated backends still go through the credential check
        for provider in Provider:
            if not executor.credentials.has(provider):
                executor.credentials.set(provider, "dry-run")

    executor.global_input = global_input

    console.print()
    console.print(f"  [bold cyan]QUESTLINE[/bold cyan] v{__version__}")
    console.print(
        "  Stages:  [white]"
        + escape(" -> ".join(agent.name for agent in executor.registry))
        + "[/white]"
    )
    if dry_run:
        console.print("  Mode:    [yellow]DRY RUN[/yellow]")
    console.print()

    if agent_id:
        try:
            results = [await executor.run(agent_id)]
        except UnknownAgentError as e:
            console.print(f"  [red]ERROR[/red] {escape(str(e))}")
            return 2
    else:
        if stop_on_failure is None:
            stop_on_failure = bool(config.get("pipeline", {}).get("stop_on_failure", True))
        results = await executor.run_pipeline(stop_on_failure=stop_on_failure)

    console.print()
    for result in results:
        print_result(result, executor)
    print_status(executor)
    console.print()

    return 0 if results and all(r.succeeded for r in results) else 1
