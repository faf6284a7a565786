"""
AI companion service.

Dependencies: counselhub.core.companion
System role: AI chat use case
"""

import logging

from counselhub.boundary.db.models import UserModel
from counselhub.core.companion.companion_agent import CompanionAgent
from counselhub.models.ai import ChatTurn

logger = logging.getLogger(__name__)


class CompanionService:
    """Routes /ai/chat requests to the companion agent."""

    def __init__(self, agent: CompanionAgent) -> None:
        self.agent = agent

    async def chat(self, actor: UserModel, message: str, history: list[ChatTurn]) -> str:
        """
        Reply to a user message in the context of earlier turns.

        Raises:
            CompanionUnavailableError: If the model cannot answer
        """
        logger.info(
            "Companion chat",
            extra={"user_id": str(actor.id), "history_turns": len(history)},
        )
        return await self.agent.areply(
            message.strip(),
            [(turn.role, turn.content) for turn in history],
        )
