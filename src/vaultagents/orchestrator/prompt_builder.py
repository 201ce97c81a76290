"""System prompt assembly for orchestration runs."""

from vaultagents.agents.types import Agent

ORCHESTRATION_RULES = """\
### Orchestration Rules:
1. Only call another agent if you cannot fulfill the user's request with your existing knowledge or tools.
2. If the user's request is a simple follow-up that you can answer, do NOT call another agent.
3. When you call an agent, be specific in your prompt to them.
4. **Action Mandate**: If the user asks you to perform an action (like sending a notification or reading a file), you MUST use the corresponding tool. Do NOT just describe it in text.
5. **Notification Sequencing**: Do NOT call `send_notification` until you have obtained ALL the information requested. If you need to read a file or call another agent, do that FIRST. Send the notification only as the FINAL step once you have the content ready.
6. **Tool Precision**: When calling a tool, you MUST provide all required arguments. You MUST put the actual message into the 'body' argument.
    - Example: `send_notification(title: "Task Done", body: "I have finished reading the project file and summarized it.")`
7. **Output Format**: Always respond to the user in plain, conversational text. Do NOT use JSON formatting for your final response.
8. You are aware of the following available agents:
{agent_directory}"""

NO_OTHER_AGENTS = "- (no other agents are configured)"


def render_agent_directory(agent: Agent, agents: list[Agent]) -> str:
    lines = [f"- {other.name} (id: {other.id})" for other in agents if other.id != agent.id]
    return "\n".join(lines) if lines else NO_OTHER_AGENTS


def build_system_prompt(agent: Agent, agents: list[Agent]) -> str:
    rules = ORCHESTRATION_RULES.format(agent_directory=render_agent_directory(agent, agents))
    persona = agent.system_prompt.strip()
    if not persona:
        return rules
    return f"{persona}\n\n{rules}"
