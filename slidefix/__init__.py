"""
SlideFix: iterative structure review and repair for slide decks.

A language model reviews the deck, its loosely-formed JSON reply is
recovered into fixes, and the fixes that can be applied automatically are
applied before the next review round.
"""

__version__ = "0.1.0"
__author__ = "SlideFix Team"

from slidefix.models import (
    ApplyResult,
    Deck,
    Fix,
    LoopState,
    ReviewReport,
    Slide,
    StructuralAnalysis,
)
from slidefix.fixes import apply_fixes
from slidefix.recovery import recover_json
from slidefix.review import ConvergenceLoop

__all__ = [
    "ApplyResult",
    "ConvergenceLoop",
    "Deck",
    "Fix",
    "LoopState",
    "ReviewReport",
    "Slide",
    "StructuralAnalysis",
    "apply_fixes",
    "recover_json",
]
