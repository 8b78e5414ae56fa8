"""
Local Ollama text-generation backend.

Talks to the Ollama HTTP API directly with requests:
- GET  /api/tags  reachability check
- POST /api/chat  non-streaming chat completion
"""

import logging
from typing import Optional

import requests

from slidefix.errors import CollaboratorUnavailable
from slidefix.llm.base import TextGenerator

logger = logging.getLogger(__name__)


class OllamaGenerator(TextGenerator):
    """Generates text with a model served by a local Ollama instance."""

    DEFAULT_URL = "http://localhost:11434"
    DEFAULT_MODEL = "llama3.2:latest"

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        model: str = DEFAULT_MODEL,
        timeout: int = 120,
        check_timeout: int = 5,
        system: Optional[str] = None,
    ):
        super().__init__()
        base_url = base_url.rstrip("/")
        # OLLAMA_API_BASE is commonly given with the /api suffix
        if base_url.endswith("/api"):
            base_url = base_url[: -len("/api")]
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.check_timeout = check_timeout
        self.system = system

    def available(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=self.check_timeout)
        except requests.RequestException:
            return False
        return response.status_code == 200

    def generate(self, prompt: str) -> str:
        messages = []
        if self.system:
            messages.append({"role": "system", "content": self.system})
        messages.append({"role": "user", "content": prompt})

        logger.debug("[LLM] Sending %d-character prompt to ollama/%s", len(prompt), self.model)
        try:
            response = requests.post(
                f"{self.base_url}/api/chat",
                json={"model": self.model, "messages": messages, "stream": False},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise CollaboratorUnavailable(
                "Ollama request timed out. The model might be busy or the request too complex."
            ) from e
        except requests.RequestException as e:
            raise CollaboratorUnavailable(f"Ollama request failed: {e}") from e

        if response.status_code != 200:
            raise CollaboratorUnavailable(
                f"Ollama API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CollaboratorUnavailable(f"Invalid JSON response from Ollama: {e}") from e

        return (data.get("message") or {}).get("content") or ""
