"""
Recovery of structured data from unreliable language-model output.
"""

from slidefix.recovery.json_repair import (
    Corrector,
    RecoveryResult,
    RecoveryStrategy,
    ai_corrector,
    analysis_from_value,
    apply_heuristic_fixes,
    extract_json_object,
    parse_analysis,
    recover_json,
)

__all__ = [
    "Corrector",
    "RecoveryResult",
    "RecoveryStrategy",
    "ai_corrector",
    "analysis_from_value",
    "apply_heuristic_fixes",
    "extract_json_object",
    "parse_analysis",
    "recover_json",
]
