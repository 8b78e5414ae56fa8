"""
Fix handling: kind normalization, content synthesis, position resolution
and the application engine.
"""

from slidefix.fixes.engine import apply_fixes
from slidefix.fixes.normalizer import is_auto_applicable, manual_guidance, normalize
from slidefix.fixes.positions import resolve, resolve_insert_index, resolve_target_index
from slidefix.fixes.synthesizer import complete_payload, synthesize

__all__ = [
    "apply_fixes",
    "complete_payload",
    "is_auto_applicable",
    "manual_guidance",
    "normalize",
    "resolve",
    "resolve_insert_index",
    "resolve_target_index",
    "synthesize",
]
