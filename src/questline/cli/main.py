"""Questline command line entry point."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from ..models.provider import AI_MODELS, Provider


def _parse_keys(values: tuple[str, ...]) -> dict[str, str]:
    keys: dict[str, str] = {}
    valid = {p.value for p in Provider}
    for value in values:
        provider, sep, key = value.partition("=")
        provider = provider.strip().lower()
        if not sep or provider not in valid:
            raise click.BadParameter(
                f"expected PROVIDER=KEY with PROVIDER one of {', '.join(sorted(valid))}",
                param_hint="--key",
            )
        keys[provider] = key.strip()
    return keys


@click.group()
def cli() -> None:
    """Questline - run a sequential pipeline of LLM agents."""


@cli.command()
@click.option("--input", "-i", "input_text", type=str, help="Global input for the first stage")
@click.option("--input-file", type=click.Path(exists=True, dir_okay=False), help="Read global input from a file")
@click.option("--agent", "-a", type=str, help="Run a single agent by id")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Config file")
@click.option("--dry-run", is_flag=True, help="Use simulated providers (no API calls)")
@click.option("--key", "-k", "keys", multiple=True, help="API key as PROVIDER=KEY (repeatable)")
@click.option("--continue-on-failure", is_flag=True, help="Keep running later stages after a failure")
def run(
    input_text: str | None,
    input_file: str | None,
    agent: str | None,
    config_path: str | None,
    dry_run: bool,
    keys: tuple[str, ...],
    continue_on_failure: bool,
) -> None:
    """Run the pipeline, or one agent with --agent."""
    from ..core.orchestrator import run_session

    if input_file:
        global_input = Path(input_file).read_text(encoding="utf-8")
    else:
        global_input = input_text or ""

    exit_code = asyncio.run(
        run_session(
            global_input=global_input,
            agent_id=agent.strip() if agent else None,
            config_path=Path(config_path) if config_path else None,
            dry_run=dry_run,
            keys=_parse_keys(keys),
            stop_on_failure=False if continue_on_failure else None,
        )
    )
    sys.exit(exit_code)


@cli.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Config file")
def agents(config_path: str | None) -> None:
    """List the configured pipeline stages in order."""
    from ..core.config import get_effective_config
    from ..core.registry import AgentRegistry

    config = get_effective_config(Path(config_path) if config_path else None)
    registry = AgentRegistry.from_config(config)
    for index, agent in enumerate(registry):
        click.echo(
            f"{index}. {agent.id}: {agent.name} [{agent.provider.value}/{agent.model}] "
            f"max_tokens={agent.max_tokens} temperature={agent.temperature}"
        )


@cli.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Config file")
def questions(config_path: str | None) -> None:
    """List the follow-up questions to consider after a run."""
    from ..core.agents import load_follow_up_questions
    from ..core.config import get_effective_config

    config = get_effective_config(Path(config_path) if config_path else None)
    for index, question in enumerate(load_follow_up_questions(config), start=1):
        click.echo(f"{index}. {question}")


@cli.command()
def models() -> None:
    """List supported models per provider."""
    for provider in Provider:
        click.echo(f"{provider.value}:")
        for model in AI_MODELS[provider]:
            click.echo(f"  {model}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
