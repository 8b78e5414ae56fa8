"""
Text-generation backends.

Supports:
- Ollama (local, preferred when reachable)
- Anthropic Claude
"""

import logging

from slidefix.config import ReviewSettings
from slidefix.llm.anthropic_generator import AnthropicGenerator
from slidefix.llm.base import TextGenerator
from slidefix.llm.ollama import OllamaGenerator

logger = logging.getLogger(__name__)


def create_generator(settings: ReviewSettings) -> TextGenerator:
    """
    Build the backend named by ``settings.provider``.

    ``auto`` uses a reachable local Ollama first and falls back to Anthropic.
    """
    if settings.provider in ("auto", "ollama"):
        ollama = OllamaGenerator(
            base_url=settings.ollama_url,
            model=settings.model or settings.ollama_model,
            timeout=settings.timeout,
        )
        if settings.provider == "ollama":
            return ollama
        if ollama.available():
            logger.info("[LLM] Using local Ollama at %s", ollama.base_url)
            return ollama
        logger.info("[LLM] Ollama not reachable at %s, trying Anthropic", ollama.base_url)

    if settings.provider in ("auto", "anthropic"):
        return AnthropicGenerator(
            model=settings.model or settings.anthropic_model,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
        )

    raise ValueError(f"Unknown provider: {settings.provider}")


__all__ = ["AnthropicGenerator", "OllamaGenerator", "TextGenerator", "create_generator"]
