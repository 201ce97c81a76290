"""Agent tool-calling loop implementation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from vaultagents.agents.registry import AgentRegistry
from vaultagents.agents.types import Agent
from vaultagents.ids import new_id
from vaultagents.logging import bound_context
from vaultagents.orchestrator.prompt_builder import build_system_prompt
from vaultagents.providers.base import ChatMessage, InferenceClient
from vaultagents.tools.catalog import ToolCatalog
from vaultagents.tools.registry import DelegationResult

MAX_TOOL_ITERATIONS = 5
DEFAULT_MODEL = "llama3.2-latest"
logger = logging.getLogger(__name__)

Status = Literal["loading", "tool_running", "tool_result", "done", "error"]


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    status: Status
    message: str | None = None


StatusCallback = Callable[[StatusUpdate], None]


def _error_text(exc: BaseException) -> str:
    text = str(exc).strip()
    return text or type(exc).__name__


def last_assistant_reply(history: list[ChatMessage]) -> str | None:
    for message in reversed(history):
        if message.role == "assistant":
            return message.content
    return None


class Orchestrator:
    """Drives the bounded exchange between the model server and the tool catalog.

    A run never raises for model or tool failures. Inference errors end the
    run with an ``error`` status, tool failures become tool messages, and
    ``done`` is emitted exactly once however the run ends.
    """

    def __init__(
        self,
        client: InferenceClient,
        agents: AgentRegistry,
        catalog: ToolCatalog,
        *,
        max_iterations: int = MAX_TOOL_ITERATIONS,
        default_model: str = DEFAULT_MODEL,
    ) -> None:
        self.client = client
        self.agents = agents
        self.catalog = catalog
        self.max_iterations = max_iterations
        self.default_model = default_model

    async def run(
        self,
        agent: Agent,
        history: list[ChatMessage],
        on_status: StatusCallback | None = None,
        *,
        depth: int = 0,
    ) -> list[ChatMessage]:
        run_id = new_id("run")
        with bound_context(run_id=run_id, agent_id=agent.id, depth=depth):
            return await self._run(agent, list(history), on_status, run_id, depth)

    async def _run(
        self,
        agent: Agent,
        messages: list[ChatMessage],
        on_status: StatusCallback | None,
        run_id: str,
        depth: int,
    ) -> list[ChatMessage]:
        def notify(status: Status, message: str | None = None) -> None:
            if on_status is None:
                return
            try:
                on_status(StatusUpdate(status=status, message=message))
            except Exception:
                logger.warning("Status callback failed for %s", status, exc_info=True)

        system_prompt = build_system_prompt(agent, self.agents.get_agents())
        tools = self.catalog.definitions_for(agent)
        model = agent.model.strip() or self.default_model
        logger.info(
            "Starting run %s for agent %s (model=%s, tools=%d, depth=%d)",
            run_id,
            agent.id,
            model,
            len(tools),
            depth,
        )

        iterations = 0
        outcome = "cutoff"
        try:
            while iterations < self.max_iterations:
                iterations += 1
                notify("loading")
                convo = [ChatMessage(role="system", content=system_prompt), *messages]
                try:
                    response = await self.client.chat(model, convo, tools)
                except Exception as exc:
                    logger.warning(
                        "Inference failed on iteration %d/%d: %s",
                        iterations,
                        self.max_iterations,
                        exc,
                    )
                    notify("error", _error_text(exc))
                    outcome = "error"
                    break

                messages.append(response)
                if not response.tool_calls:
                    outcome = "answered"
                    break

                logger.info(
                    "Iteration %d/%d requested tools: %s",
                    iterations,
                    self.max_iterations,
                    ", ".join(call.name for call in response.tool_calls),
                )
                for call in response.tool_calls:
                    notify("tool_running", f"Running tool: {call.name}...")
                    result = await self.catalog.execute(
                        call.name,
                        call.arguments,
                        agent,
                        depth=depth,
                        delegate=self._delegate,
                    )
                    messages.append(ChatMessage(role="tool", content=result))
                    notify("tool_result", f"Tool {call.name} finished.")

            if outcome == "cutoff":
                logger.warning(
                    "Run %s stopped after %d iterations without a final answer",
                    run_id,
                    iterations,
                )
        finally:
            notify("done")
            logger.info(
                "Finished run %s (%s) after %d iteration(s), %d message(s)",
                run_id,
                outcome,
                iterations,
                len(messages),
            )
        return messages

    async def _delegate(self, target: Agent, prompt: str, depth: int) -> DelegationResult:
        errors: list[str] = []

        def record(update: StatusUpdate) -> None:
            if update.status == "error" and update.message:
                errors.append(update.message)

        nested = await self.run(
            target,
            [ChatMessage(role="user", content=prompt)],
            record,
            depth=depth,
        )
        # a run cut off mid tool call ends on an assistant turn with no text
        reply = last_assistant_reply(nested[1:])
        return DelegationResult(
            reply=reply if reply and reply.strip() else None,
            error=errors[-1] if errors else None,
        )
