"""AI Agents package."""

from bills_agent.agents.ai_agents import (
    AssistantUnavailableError,
    BillsAssistant,
    SYSTEM_PROMPT,
)

__all__ = [
    "AssistantUnavailableError",
    "BillsAssistant",
    "SYSTEM_PROMPT",
]
