"""Click CLI group: agent management, model listing, ask and chat commands."""

from __future__ import annotations

import asyncio
import json

import click

from vaultagents.agents.registry import AgentRegistry
from vaultagents.agents.types import BUILTIN_TOOL_NAMES
from vaultagents.cli.chat import format_reply, resolve_agent, send
from vaultagents.config import get_settings
from vaultagents.errors import VaultAgentsError
from vaultagents.logging import configure_logging
from vaultagents.orchestrator.factory import build_client, build_orchestrator, build_registry
from vaultagents.orchestrator.loop import Orchestrator
from vaultagents.providers.base import ChatMessage
from vaultagents.providers.ollama import model_capabilities


def _registry() -> AgentRegistry:
    try:
        return build_registry(get_settings())
    except VaultAgentsError as exc:
        raise click.ClickException(str(exc)) from exc


def _orchestrator(registry: AgentRegistry) -> Orchestrator:
    try:
        return build_orchestrator(get_settings(), registry)
    except VaultAgentsError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Local multi-agent assistant CLI."""
    configure_logging(log_level)


@cli.command("agents")
@click.option("--json", "json_output", is_flag=True, help="Print agents as JSON.")
def list_agents(json_output: bool) -> None:
    """List configured agents."""
    agents = _registry().get_agents()
    if json_output:
        click.echo(json.dumps([agent.to_dict() for agent in agents], indent=2))
        return
    for agent in agents:
        tools = ", ".join(agent.enabled_tools) or "no tools"
        click.echo(f"{agent.id}\t{agent.name}\t{agent.model}\t{tools}")


@cli.command("create-agent")
@click.option("--name", required=True)
@click.option("--model", default=None, help="Model name (default: DEFAULT_MODEL).")
@click.option("--system-prompt", default="You are a helpful AI assistant.", show_default=True)
@click.option(
    "--tool",
    "tools",
    multiple=True,
    type=click.Choice(BUILTIN_TOOL_NAMES),
    help="Enable a tool; repeat for several.",
)
@click.option("--allowed-paths", default="", help="Comma-separated vault path prefixes.")
def create_agent(
    name: str,
    model: str | None,
    system_prompt: str,
    tools: tuple[str, ...],
    allowed_paths: str,
) -> None:
    """Create an agent and print its id."""
    registry = _registry()
    try:
        agent = registry.create_agent(
            name,
            system_prompt,
            model or get_settings().default_model,
            enabled_tools=tools,
            allowed_paths=allowed_paths,
        )
    except VaultAgentsError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(agent.id)


@cli.command("delete-agent")
@click.argument("agent_id")
def delete_agent(agent_id: str) -> None:
    """Delete an agent."""
    registry = _registry()
    try:
        deleted = registry.delete_agent(agent_id)
    except VaultAgentsError as exc:
        raise click.ClickException(str(exc)) from exc
    if not deleted:
        raise click.ClickException(f"agent not found: {agent_id}")
    click.echo(f"deleted {agent_id}")


@cli.command()
def models() -> None:
    """List models installed on the model server."""
    registry = _registry()
    client = build_client(get_settings(), registry)
    for item in asyncio.run(client.list_models()):
        click.echo(str(item.get("name", "")))


@cli.command()
def health() -> None:
    """Check that the model server answers."""
    registry = _registry()
    client = build_client(get_settings(), registry)
    if not asyncio.run(client.health_check()):
        raise click.ClickException(f"model server unreachable at {client.base_url}")
    click.echo(f"ok {client.base_url}")


@cli.command("show-model")
@click.argument("name")
def show_model(name: str) -> None:
    """Show a model's capability tags."""
    registry = _registry()
    client = build_client(get_settings(), registry)
    details = asyncio.run(client.show_model(name))
    if details is None:
        raise click.ClickException(f"model not found or server unreachable: {name}")
    tags = model_capabilities(name, details)
    click.echo(f"{name}: {', '.join(tags) or 'no special capabilities'}")


@cli.command()
@click.argument("agent_id")
@click.argument("message")
@click.option("--json", "json_output", is_flag=True, help="Print structured JSON response.")
def ask(agent_id: str, message: str, json_output: bool) -> None:
    """Send one message to an agent and print the reply."""
    registry = _registry()
    agent = resolve_agent(registry, agent_id)
    orchestrator = _orchestrator(registry)
    reply = asyncio.run(send(orchestrator, agent, [], message, quiet=json_output))
    click.echo(format_reply(reply, json_output=json_output))
    if reply.error and not reply.assistant_text:
        raise SystemExit(1)


@cli.command()
@click.argument("agent_id")
def chat(agent_id: str) -> None:
    """Interactive chat with one agent; history lasts for the session only."""
    registry = _registry()
    agent = resolve_agent(registry, agent_id)
    orchestrator = _orchestrator(registry)
    history: list[ChatMessage] = []
    click.echo(f"agent: {agent.name} ({agent.id}) (type /quit to exit, /clear to reset)")
    while True:
        try:
            message = click.prompt("you", prompt_suffix=" > ").strip()
        except (EOFError, KeyboardInterrupt, click.Abort):
            click.echo()
            break
        if not message:
            continue
        if message.lower() in {"/quit", "/exit"}:
            break
        if message.lower() == "/clear":
            history = []
            click.echo("history cleared")
            continue
        reply = asyncio.run(send(orchestrator, agent, history, message))
        history = reply.history
        if reply.assistant_text:
            click.echo(f"{agent.name} > {reply.assistant_text}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
