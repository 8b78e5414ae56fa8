"""
Structure review: prompts and the iterative review-and-fix loop.
"""

from slidefix.review.loop import MAX_ITERATIONS, ConvergenceLoop
from slidefix.review.prompts import (
    build_review_prompt,
    build_text_analysis_prompt,
    describe_structure,
)

__all__ = [
    "MAX_ITERATIONS",
    "ConvergenceLoop",
    "build_review_prompt",
    "build_text_analysis_prompt",
    "describe_structure",
]
