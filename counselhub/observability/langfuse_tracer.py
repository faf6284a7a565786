"""
Langfuse tracing integration.

Singleton tracer handing out LangChain callback handlers for AI companion
calls. Inactive unless tracing is enabled and both keys are configured.

Dependencies: langfuse, counselhub.configs
System role: Tracing for LLM operations
"""

import logging

from counselhub.configs import get_settings

logger = logging.getLogger(__name__)


class LangfuseTracer:
    """Langfuse tracer singleton."""

    _instance: "LangfuseTracer | None" = None

    def __new__(cls) -> "LangfuseTracer":
        """Singleton pattern for tracer instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Initialize Langfuse client with configuration."""
        obs_settings = get_settings().observability
        self._enabled = obs_settings.tracing_configured

        if not self._enabled:
            logger.info("Langfuse tracing disabled")
            return

        from langfuse import Langfuse

        Langfuse(
            public_key=obs_settings.public_key,
            secret_key=obs_settings.secret_key,
            host=obs_settings.host,
        )
        logger.info("Langfuse tracing enabled", extra={"host": obs_settings.host})

    @property
    def enabled(self) -> bool:
        return self._enabled

    def callbacks(self) -> list:
        """
        Build LangChain callbacks for one model invocation.

        Returns:
            list: A Langfuse CallbackHandler when enabled, otherwise empty
        """
        if not self._enabled:
            return []
        from langfuse.langchain import CallbackHandler

        return [CallbackHandler()]
