"""Built-in tool catalog with per-agent permission checks."""

import logging
from datetime import datetime
from typing import Any

from vaultagents.agents.registry import AgentRegistry
from vaultagents.agents.types import (
    TOOL_CALL_AGENT,
    TOOL_GET_CURRENT_TIME,
    TOOL_READ_VAULT_FILE,
    TOOL_SEND_NOTIFICATION,
    Agent,
)
from vaultagents.errors import NotificationDeniedError, NotificationUnsupportedError
from vaultagents.tools.notify import Notifier
from vaultagents.tools.paths import has_dot_segments, is_path_allowed, normalize_vault_path
from vaultagents.tools.registry import Delegate, ToolContext, ToolRegistry
from vaultagents.tools.vault import VaultReader

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_TITLE = "AI Agent alert"
DEFAULT_NOTIFICATION_BODY = "No message content was provided by the agent."

_READ_VAULT_FILE_PARAMS: dict[str, object] = {
    "type": "object",
    "properties": {
        "path": {
            "type": "string",
            "description": "The relative path to the file in the vault (e.g., 'Folder/Note.md').",
        }
    },
    "required": ["path"],
}
_CALL_AGENT_PARAMS: dict[str, object] = {
    "type": "object",
    "properties": {
        "agentId": {"type": "string", "description": "The ID of the agent to call."},
        "prompt": {
            "type": "string",
            "description": "The question or task for the other agent.",
        },
    },
    "required": ["agentId", "prompt"],
}
_SEND_NOTIFICATION_PARAMS: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A very SHORT title for the notification (e.g. 'Project Update').",
        },
        "body": {
            "type": "string",
            "description": (
                "The COMPLETE and DETAILED message text to show in the notification. "
                "Do NOT leave this empty."
            ),
        },
    },
    "required": ["title", "body"],
}


def _string_arg(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def format_agent_directory(agents: list[Agent]) -> str:
    return ", ".join(f'"{agent.name}" (id: {agent.id})' for agent in agents)


class ToolCatalog:
    """The fixed set of tools an agent may be granted.

    ``execute`` never raises: every failure comes back as result text so
    it can be fed to the model as a tool message.
    """

    def __init__(
        self,
        agents: AgentRegistry,
        *,
        vault: VaultReader,
        notifier: Notifier,
        max_delegation_depth: int = 3,
    ) -> None:
        self.agents = agents
        self.vault = vault
        self.notifier = notifier
        self.max_delegation_depth = max_delegation_depth
        self.registry = ToolRegistry()
        self.registry.register(
            TOOL_GET_CURRENT_TIME,
            "Get the current date and time.",
            self._get_current_time,
        )
        self.registry.register(
            TOOL_READ_VAULT_FILE,
            "Read the content of a file from the vault.",
            self._read_vault_file,
            _READ_VAULT_FILE_PARAMS,
        )
        self.registry.register(
            TOOL_CALL_AGENT,
            "Ask another AI agent for help or specific information.",
            self._call_agent,
            _CALL_AGENT_PARAMS,
        )
        self.registry.register(
            TOOL_SEND_NOTIFICATION,
            (
                "Show a persistent system-level popup notification. Use this to ensure "
                "the user sees an important message even if the app is minimized."
            ),
            self._send_notification,
            _SEND_NOTIFICATION_PARAMS,
        )

    def definitions_for(self, agent: Agent) -> list[dict[str, object]]:
        if not agent.enabled_tools:
            return []
        return self.registry.schemas(set(agent.enabled_tools))

    async def execute(
        self,
        name: str,
        arguments: dict[str, Any],
        agent: Agent,
        *,
        depth: int = 0,
        delegate: Delegate | None = None,
    ) -> str:
        # The advertised schema is already filtered; models still echo
        # tool names they were never offered.
        if not agent.can_use(name):
            logger.info("Denied tool %s for agent %s", name, agent.id)
            return f'Error: Agent "{agent.name}" does not have permission to use the "{name}" tool.'

        tool = self.registry.get(name)
        if tool is None:
            return f'Error: Unknown tool "{name}"'

        context = ToolContext(agent=agent, depth=depth, delegate=delegate)
        try:
            return await tool.handler(arguments if isinstance(arguments, dict) else {}, context)
        except Exception as exc:
            logger.exception("Tool execution failed for '%s'", name)
            return f'Error executing tool "{name}": {exc}'

    async def _get_current_time(self, arguments: dict[str, Any], context: ToolContext) -> str:
        del arguments, context
        return datetime.now().astimezone().strftime("%c %Z").strip()

    async def _read_vault_file(self, arguments: dict[str, Any], context: ToolContext) -> str:
        path = _string_arg(arguments, "path").strip()
        if not path:
            return 'Error: Missing required argument "path".'
        if has_dot_segments(normalize_vault_path(path)):
            return f'Error: File not found at path "{path}"'
        agent = context.agent
        if not is_path_allowed(path, agent.allowed_paths):
            logger.info("Denied path %s for agent %s", path, agent.id)
            return f'Error: Agent "{agent.name}" does not have permission to access the path "{path}".'
        text = await self.vault.read_text(path)
        if text is None:
            return f'Error: File not found at path "{path}"'
        return text

    async def _call_agent(self, arguments: dict[str, Any], context: ToolContext) -> str:
        agent_id = _string_arg(arguments, "agentId").strip()
        prompt = _string_arg(arguments, "prompt")
        target = self.agents.get_agent(agent_id)
        if target is None:
            available = format_agent_directory(self.agents.get_agents())
            return f'Error: Agent with ID "{agent_id}" not found. Available agents: {available}'
        if context.depth >= self.max_delegation_depth:
            logger.warning(
                "Delegation from %s to %s refused at depth %d",
                context.agent.id,
                target.id,
                context.depth,
            )
            return (
                f"Error: Cannot call agent {target.name}: delegation depth limit "
                f"({self.max_delegation_depth}) reached. Answer with the information you have."
            )
        if context.delegate is None:
            return f"Error calling agent {target.name}: delegation is not available here."

        logger.info(
            "Agent %s delegating to %s at depth %d",
            context.agent.id,
            target.id,
            context.depth + 1,
        )
        result = await context.delegate(target, prompt, context.depth + 1)
        if result.reply is None:
            if result.error:
                return f"Error calling agent {target.name}: {result.error}"
            return f"Error: No response from {target.name}"
        return f"Response from {target.name}: {result.reply}"

    async def _send_notification(self, arguments: dict[str, Any], context: ToolContext) -> str:
        title = _string_arg(arguments, "title").strip() or DEFAULT_NOTIFICATION_TITLE
        body = _string_arg(arguments, "body").strip() or DEFAULT_NOTIFICATION_BODY
        logger.info("Agent %s notification: %s", context.agent.id, title)
        try:
            await self.notifier.notify(title, body)
        except NotificationUnsupportedError as exc:
            logger.info("Notifications unsupported: %s", exc)
            return "Error: System notifications are not supported."
        except NotificationDeniedError as exc:
            logger.info("Notification permission denied: %s", exc)
            return "Error: Notification permission denied."
        except Exception as exc:
            logger.warning("Notification failed: %s", exc)
            return f"Error triggering notification: {exc}"
        return "Persistent notification sent."
