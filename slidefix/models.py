"""
Core data models for SlideFix.

Defines the slide deck, the fix operations proposed by the language model,
and the reports produced while applying them. All models use Pydantic so
that loosely-shaped model output can be validated field by field.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_lines(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [_as_text(item) for item in value if item is not None]
    return [_as_text(value)]


# --- Deck models ---


class Slide(BaseModel):
    """
    A single slide.

    ``position`` is 1-based and owned by the deck: it is reassigned whenever
    the deck is mutated and cannot be set from outside.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    body: List[str] = Field(default_factory=list, alias="content")
    notes: str = ""

    _position: int = PrivateAttr(default=0)

    @field_validator("title", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("body", mode="before")
    @classmethod
    def coerce_body(cls, v: Any) -> List[str]:
        return _as_lines(v)

    @property
    def position(self) -> int:
        return self._position

    def is_empty(self) -> bool:
        return not self.title.strip() and not self.body and not self.notes.strip()

    def display_summary(self) -> str:
        return f"{self.title} ({len(self.body)} points)"


class Deck(BaseModel):
    """An ordered slide deck plus the talk metadata used in review prompts."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: str = ""
    target_audience: str = ""
    duration_minutes: int = Field(default=30, ge=0)
    slides: List[Slide] = Field(default_factory=list)

    @model_validator(mode="after")
    def assign_positions(self) -> "Deck":
        self.renumber()
        return self

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    def renumber(self) -> None:
        """Re-derive every slide position from list order (1..N)."""
        for index, slide in enumerate(self.slides, start=1):
            slide._position = index

    def positions(self) -> List[int]:
        return [slide.position for slide in self.slides]

    def add_slide(self, slide: Optional[Slide] = None) -> Slide:
        slide = slide if slide is not None else Slide()
        self.slides.append(slide)
        self.renumber()
        return slide

    def insert_slide_at(self, index: int, slide: Optional[Slide] = None) -> Slide:
        """Insert at a 0-based index, clamped to [0, slide_count]."""
        index = max(0, min(index, len(self.slides)))
        slide = slide if slide is not None else Slide()
        self.slides.insert(index, slide)
        self.renumber()
        return slide

    def get_slide(self, index: int) -> Optional[Slide]:
        if not self._valid_index(index):
            return None
        return self.slides[index]

    def remove_slide(self, index: int) -> Optional[Slide]:
        if not self._valid_index(index):
            return None
        removed = self.slides.pop(index)
        removed._position = 0
        self.renumber()
        return removed

    def move_slide(self, from_index: int, to_index: int) -> bool:
        if not (self._valid_index(from_index) and self._valid_index(to_index)):
            return False
        slide = self.slides.pop(from_index)
        self.slides.insert(to_index, slide)
        self.renumber()
        return True

    def estimated_duration(self) -> int:
        """Rough talk length in minutes: 2.5 per slide, plus Q&A for long decks."""
        minutes = len(self.slides) * 2.5
        if len(self.slides) > 10:
            minutes += 5
        return int(minutes + 0.5)

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.slides)

    def to_dict(self) -> Dict[str, Any]:
        """Export to dict for JSON serialization."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deck":
        """Load from dict."""
        return cls.model_validate(data)


# --- Fix models (output of the review prompt) ---


class CanonicalFixKind(str, Enum):
    """Closed set of fix kinds the engine recognises."""

    ADD_SLIDE = "add_slide"
    MODIFY_SLIDE = "modify_slide"
    REORDER_SLIDES = "reorder_slides"
    SPLIT_SLIDE = "split_slide"
    MERGE_SLIDES = "merge_slides"
    UNSUPPORTED = "unsupported"

    @property
    def auto_applicable(self) -> bool:
        return self in (CanonicalFixKind.ADD_SLIDE, CanonicalFixKind.MODIFY_SLIDE)


class NormalizedKind(BaseModel):
    """A canonical kind plus the label token it was derived from."""

    model_config = ConfigDict(frozen=True)

    kind: CanonicalFixKind
    label: str = ""

    @property
    def auto_applicable(self) -> bool:
        return self.kind.auto_applicable


class FixContent(BaseModel):
    """Slide fields carried by a fix. Any field may be missing."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    body: Optional[List[str]] = Field(default=None, alias="content")
    notes: Optional[str] = None

    @field_validator("title", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return None if v is None else _as_text(v)

    @field_validator("body", mode="before")
    @classmethod
    def coerce_body(cls, v: Any) -> Optional[List[str]]:
        return None if v is None else _as_lines(v)

    def is_complete(self) -> bool:
        return self.title is not None and self.body is not None and self.notes is not None

    def is_empty(self) -> bool:
        return self.title is None and self.body is None and self.notes is None


class Fix(BaseModel):
    """One proposed edit, as produced by the language model."""

    model_config = ConfigDict(populate_by_name=True)

    kind_label: str = Field(default="", alias="type")
    description: str = ""
    action: Optional[str] = None
    position_descriptor: str = Field(default="", alias="position")
    payload: Optional[FixContent] = Field(default=None, alias="new_content")

    @field_validator("kind_label", "description", "position_descriptor", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("action", mode="before")
    @classmethod
    def coerce_action(cls, v: Any) -> Optional[str]:
        return None if v is None else _as_text(v)

    @field_validator("payload", mode="before")
    @classmethod
    def drop_malformed_payload(cls, v: Any) -> Any:
        # Models sometimes answer with prose here; treat that as "no payload".
        if v is None or isinstance(v, (dict, FixContent)):
            return v
        return None


class Issue(BaseModel):
    """A structural problem reported by the analysis."""

    model_config = ConfigDict(populate_by_name=True)

    category: str = ""
    severity: str = ""
    description: str = ""
    affected_positions: List[int] = Field(default_factory=list, alias="affected_slides")
    impact: str = ""

    @field_validator("category", "severity", "description", "impact", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("affected_positions", mode="before")
    @classmethod
    def coerce_positions(cls, v: Any) -> List[int]:
        if v is None or isinstance(v, dict):
            return []
        if not isinstance(v, (list, tuple)):
            v = [v]
        positions = []
        for item in v:
            if isinstance(item, bool):
                continue
            if isinstance(item, int):
                positions.append(item)
            elif isinstance(item, float):
                # 3.0 is slide 3; 2.5 names no slide
                if item.is_integer():
                    positions.append(int(item))
            elif isinstance(item, str):
                positions.extend(int(n) for n in re.findall(r"\d+", item))
        return positions


def _validate_items(model: Type[ModelT], items: Any) -> List[ModelT]:
    """Validate list entries one by one, dropping the ones that do not fit."""
    if not isinstance(items, list):
        return []
    valid = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning("[Analysis] Ignoring %s entry %d: not an object", model.__name__, i)
            continue
        try:
            valid.append(model.model_validate(item))
        except (ValidationError, TypeError) as e:
            logger.warning("[Analysis] Ignoring %s entry %d: %s", model.__name__, i, e)
    return valid


class StructuralAnalysis(BaseModel):
    """Issues and fixes recovered from one analysis response."""

    model_config = ConfigDict(populate_by_name=True)

    issues: List[Issue] = Field(default_factory=list, alias="issues_found")
    fixes: List[Fix] = Field(default_factory=list)
    overall_assessment: str = ""

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "StructuralAnalysis":
        """Build from a recovered JSON object, keeping every entry that validates."""
        issues = data.get("issues_found")
        if issues is None:
            issues = data.get("issues")
        return cls(
            issues=_validate_items(Issue, issues),
            fixes=_validate_items(Fix, data.get("fixes")),
            overall_assessment=_as_text(data.get("overall_assessment")),
        )


# --- Results ---


class FixFailure(BaseModel):
    """A fix that raised while being applied."""

    index: int
    description: str = ""
    error: str = ""


class ApplyResult(BaseModel):
    """Outcome of applying one batch of fixes."""

    applied: int = 0
    guidance: List[str] = Field(default_factory=list)
    failures: List[FixFailure] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)

    def as_tuple(self) -> Tuple[int, List[str]]:
        return self.applied, self.guidance


class LoopState(str, Enum):
    """States of the review-and-fix loop."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    APPLYING = "applying"
    AWAITING_CONTINUATION = "awaiting_continuation"
    CONVERGED = "converged"
    CAPPED = "capped"
    USER_STOPPED = "user_stopped"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (
            LoopState.CONVERGED,
            LoopState.CAPPED,
            LoopState.USER_STOPPED,
            LoopState.FAILED,
        )


class ReviewReport(BaseModel):
    """Summary handed back to the host when the loop stops."""

    state: LoopState = LoopState.IDLE
    iterations: int = 0
    fixes_applied: int = 0
    guidance: List[str] = Field(default_factory=list)
    failures: List[FixFailure] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    uninterpreted_response: Optional[str] = None
    overall_assessment: str = ""
