"""
Base text-generation interface.
"""

from abc import ABC, abstractmethod


class TextGenerator(ABC):
    """
    Abstract base class for language-model backends.

    ``generate`` is a blocking call. Implementations own their timeout and
    retry policy and raise ``CollaboratorUnavailable`` when the call fails;
    malformed output is returned as-is for the recovery chain to handle.
    """

    def __init__(self):
        self.name = self.__class__.__name__.replace("Generator", "").lower()

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a single prompt and return the response text.

        Args:
            prompt: Full user prompt

        Returns:
            Response text (may be empty or malformed)
        """
        pass

    def available(self) -> bool:
        """Cheap reachability check. Backends without one assume True."""
        return True
