"""
AI companion agent.

Single-turn chat chain (prompt | chat model | string parser) fed with a
window of the client's conversation history. The model is injectable so
tests can pass a fake chat model.

Dependencies: langchain_core, langchain_google_genai, tenacity, counselhub.observability
System role: LLM orchestration for /ai/chat
"""

import logging
from collections.abc import Sequence

from dotenv import load_dotenv
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from counselhub.core.companion.companion_prompt import get_companion_prompt
from counselhub.core.exceptions import CompanionUnavailableError
from counselhub.observability.langfuse_tracer import LangfuseTracer

load_dotenv()
logger = logging.getLogger(__name__)


def to_history_messages(
    history: Sequence[tuple[str, str]],
    window: int,
) -> list[BaseMessage]:
    """
    Convert (role, content) pairs into LangChain messages.

    Only the last `window` turns are kept. Unknown roles and empty turns
    are dropped.
    """
    if window <= 0:
        return []
    messages: list[BaseMessage] = []
    for role, content in list(history)[-window:]:
        if not content or not content.strip():
            continue
        if role == "user":
            messages.append(HumanMessage(content=content))
        elif role in ("assistant", "ai"):
            messages.append(AIMessage(content=content))
        elif role == "system":
            messages.append(SystemMessage(content=content))
    return messages


class CompanionAgent:
    """
    Supportive-listener chat companion.

    Wraps a chat model in a prompt chain and maps every model failure to
    CompanionUnavailableError.
    """

    def __init__(
        self,
        model: BaseChatModel | None = None,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.4,
        history_window: int = 10,
        google_api_key: str | None = None,
        tracer: LangfuseTracer | None = None,
        max_attempts: int = 3,
        retry_initial_wait: float = 1.0,
    ) -> None:
        """
        Initialize companion agent.

        Args:
            model: Chat model to use. If None, builds a Gemini chat model.
            model_id: Gemini model identifier
            temperature: Sampling temperature
            history_window: Number of previous turns forwarded to the model
            google_api_key: API key for Gemini (falls back to GOOGLE_API_KEY)
            tracer: Langfuse tracer providing callbacks
            max_attempts: Model calls per reply before giving up
            retry_initial_wait: First backoff delay in seconds
        """
        if model is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            kwargs = {"model": model_id, "temperature": temperature}
            if google_api_key:
                kwargs["google_api_key"] = google_api_key
            model = ChatGoogleGenerativeAI(**kwargs)

        self._model_id = model_id
        self._history_window = history_window
        self._tracer = tracer
        self._max_attempts = max(1, max_attempts)
        self._retry_initial_wait = retry_initial_wait
        self._chain = get_companion_prompt() | model | StrOutputParser()

    async def areply(
        self,
        message: str,
        history: Sequence[tuple[str, str]] = (),
    ) -> str:
        """
        Produce the companion's reply to a message.

        Args:
            message: Latest user message
            history: Earlier (role, content) turns, oldest first

        Returns:
            str: Reply text

        Raises:
            CompanionUnavailableError: If the model call fails or returns nothing
        """
        chat_history = to_history_messages(history, self._history_window)
        config = {}
        if self._tracer is not None and self._tracer.enabled:
            config["callbacks"] = self._tracer.callbacks()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(
                initial=self._retry_initial_wait,
                max=30,
                jitter=self._retry_initial_wait,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:areply - Retry {retry_state.attempt_number}/{self._max_attempts} after model error"
            ),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    reply = await self._chain.ainvoke(
                        {"message": message, "chat_history": chat_history},
                        config=config,
                    )
        except Exception as e:
            logger.exception(
                "Companion model call failed",
                extra={"model_id": self._model_id, "error": str(e)},
            )
            raise CompanionUnavailableError(
                "The AI companion is unavailable right now",
                {"model_id": self._model_id},
            ) from e

        reply = (reply or "").strip()
        if not reply:
            raise CompanionUnavailableError(
                "The AI companion returned an empty reply",
                {"model_id": self._model_id},
            )
        return reply
