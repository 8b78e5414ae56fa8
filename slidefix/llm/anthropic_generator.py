"""
Claude (Anthropic) text-generation backend.
"""

import logging
import os
from typing import Optional

import anthropic
from anthropic import Anthropic

from slidefix.errors import CollaboratorUnavailable
from slidefix.llm.base import TextGenerator

logger = logging.getLogger(__name__)


class AnthropicGenerator(TextGenerator):
    """Generates review and correction text with Claude."""

    SYSTEM_PROMPT = """You are an expert presentation coach reviewing slide decks.

Priorities:
1) Base every suggestion on the slides you are shown.
2) Prefer concrete, directly applicable edits over general advice.
3) When asked for JSON, return valid JSON only. No extra text, no markdown code blocks, no explanations."""

    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        timeout: float = 120.0,
        client: Optional[Anthropic] = None,
    ):
        super().__init__()
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if client is None and not self.api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY env var or pass api_key parameter."
            )

        self.client = client or Anthropic(api_key=self.api_key, timeout=timeout)
        self.model = model
        self.max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        logger.debug("[LLM] Sending %d-character prompt to %s", len(prompt), self.model)
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self.SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise CollaboratorUnavailable(f"Anthropic request failed: {e}") from e

        text = "".join(
            getattr(block, "text", "") for block in response.content if block.type == "text"
        )
        logger.debug("[LLM] Received %d characters", len(text))
        return text
