"""
Settings for a review run.
"""

import os
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_TARGET_OUTCOME = "Engage audience and clearly communicate key concepts"

# focus area -> question asked in the review prompt
FOCUS_AREAS = {
    "flow": "Flow and transitions: Are slides logically ordered? Are transitions smooth?",
    "intro_conclusion": "Introduction/Conclusion: Strong opening and closing? Clear agenda and takeaways?",
    "pacing": "Pacing: Is {slide_count} slides appropriate for {duration} minutes?",
    "examples": "Examples: Are there enough practical examples and case studies?",
    "interactive": "Interactivity: Are there Q&A breaks, exercises, or audience engagement points?",
    "depth": "Content depth: Is coverage balanced? Too shallow or too deep anywhere?",
    "engagement": "Engagement: Will the audience stay interested throughout?",
    "technical": "Technical accuracy: Are technical concepts properly explained and sequenced?",
    "redundancy": "Redundancy: Is there repetitive or overlapping content?",
    "coherence": "Coherence: Does the presentation tell a clear, unified story?",
}


class ReviewRequest(BaseModel):
    """What the user wants the structure review to look at."""

    focus_areas: List[str] = Field(default_factory=lambda: ["flow", "intro_conclusion"])
    specific_issues: str = ""
    target_outcome: str = DEFAULT_TARGET_OUTCOME

    @field_validator("focus_areas")
    @classmethod
    def validate_focus_areas(cls, v: List[str]) -> List[str]:
        unknown = [area for area in v if area not in FOCUS_AREAS]
        if unknown:
            raise ValueError(f"Unknown focus areas: {', '.join(unknown)}")
        if not v:
            raise ValueError("Select at least one focus area")
        return v


class ReviewSettings(BaseModel):
    """Collaborator and loop settings."""

    provider: Literal["auto", "anthropic", "ollama"] = Field(
        default="auto", description="Text-generation backend"
    )
    model: Optional[str] = Field(default=None, description="Overrides the provider's default model")
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2:latest"
    max_tokens: int = Field(default=4096, gt=0)
    timeout: int = Field(default=120, gt=0, description="Request timeout in seconds")
    max_iterations: int = Field(default=3, ge=1, le=3)

    @classmethod
    def from_env(cls, **overrides) -> "ReviewSettings":
        """Build settings from environment variables; explicit overrides win."""
        values = {}
        if os.getenv("SLIDEFIX_PROVIDER"):
            values["provider"] = os.getenv("SLIDEFIX_PROVIDER")
        if os.getenv("DEFAULT_AI_MODEL"):
            values["model"] = os.getenv("DEFAULT_AI_MODEL")
        if os.getenv("OLLAMA_API_BASE"):
            values["ollama_url"] = os.getenv("OLLAMA_API_BASE")
        if os.getenv("SLIDEFIX_TIMEOUT"):
            values["timeout"] = int(os.getenv("SLIDEFIX_TIMEOUT"))
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
