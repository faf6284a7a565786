"""AI companion chat agent."""

from counselhub.core.companion.companion_agent import CompanionAgent, to_history_messages
from counselhub.core.companion.companion_prompt import COMPANION_PROMPT, get_companion_prompt

__all__ = [
    "CompanionAgent",
    "to_history_messages",
    "COMPANION_PROMPT",
    "get_companion_prompt",
]
