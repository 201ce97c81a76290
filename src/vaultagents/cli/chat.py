"""CLI chat helpers for talking to an agent."""

from __future__ import annotations

import json
from dataclasses import dataclass

import click

from vaultagents.agents.registry import AgentRegistry
from vaultagents.agents.types import Agent
from vaultagents.orchestrator.loop import Orchestrator, StatusUpdate, last_assistant_reply
from vaultagents.providers.base import ChatMessage


@dataclass(frozen=True)
class AssistantReply:
    agent_id: str
    assistant_text: str
    error: str | None
    history: list[ChatMessage]


def resolve_agent(registry: AgentRegistry, agent_id: str) -> Agent:
    agent = registry.get_agent(agent_id)
    if agent is None:
        known = ", ".join(a.id for a in registry.get_agents()) or "none"
        raise click.ClickException(f"agent not found: {agent_id} (known: {known})")
    return agent


def render_status(update: StatusUpdate) -> None:
    if update.status in {"tool_running", "error"} and update.message:
        click.echo(f"[{update.status}] {update.message}", err=True)


async def send(
    orchestrator: Orchestrator,
    agent: Agent,
    history: list[ChatMessage],
    message: str,
    *,
    quiet: bool = False,
) -> AssistantReply:
    errors: list[str] = []

    def on_status(update: StatusUpdate) -> None:
        if update.status == "error" and update.message:
            errors.append(update.message)
        if not quiet:
            render_status(update)

    base = [*history, ChatMessage(role="user", content=message)]
    result = await orchestrator.run(agent, base, on_status)
    reply = last_assistant_reply(result[len(base):])
    return AssistantReply(
        agent_id=agent.id,
        assistant_text=reply or "",
        error=errors[-1] if errors else None,
        history=result,
    )


def format_reply(reply: AssistantReply, json_output: bool) -> str:
    if not json_output:
        return reply.assistant_text
    return json.dumps(
        {
            "agent_id": reply.agent_id,
            "assistant": reply.assistant_text,
            "error": reply.error,
            "messages": [message.to_wire() for message in reply.history],
        }
    )
