"""Text-completion collaborator.

The generation service only needs "system + user instruction in, text out".
This module defines that port and the pydantic_ai-backed implementation.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from loguru import logger
from pydantic_ai import Agent
from pydantic_ai.models import Model

from runplanner.config.settings import Settings
from runplanner.llm.model import get_model


class TextCompletionClient(Protocol):
    async def complete(self, system_instruction: str, user_instruction: str, timeout: float) -> str:
        """Return the model's text reply; raise on failure or when timeout elapses."""
        ...


class AgentCompletionClient:
    """Completion client running a plain-text pydantic_ai Agent per request."""

    def __init__(self, model: Model | str, temperature: float = 1.0) -> None:
        self._model = model
        self._temperature = temperature

    async def complete(self, system_instruction: str, user_instruction: str, timeout: float) -> str:
        agent = Agent(
            model=self._model,
            system_prompt=system_instruction,
            output_type=str,
        )
        logger.debug(
            "Calling LLM for completion",
            system_prompt_length=len(system_instruction),
            user_prompt_length=len(user_instruction),
            timeout=timeout,
        )
        result = await asyncio.wait_for(
            agent.run(user_instruction, model_settings={"temperature": self._temperature}),
            timeout=timeout,
        )
        return result.output


def build_completion_client(config: Settings) -> TextCompletionClient | None:
    """Build the configured completion client, or None if generation is disabled."""
    if not config.generation_enabled:
        logger.info("OPENAI_API_KEY not set; plan generation disabled")
        return None
    model = get_model("openai", config.generation_model, config.openai_api_key)
    return AgentCompletionClient(model, temperature=config.generation_temperature)
