"""
Fix-kind normalization and manual-action guidance.

Models are told to use one fix type per fix but still send compound labels
such as ``"modify_slide|reorder_slides"`` or invent new ones. ``normalize``
maps any label onto the closed ``CanonicalFixKind`` set, and
``manual_guidance`` explains what to do by hand for kinds that cannot be
applied automatically. Both are pure functions.
"""

import re
from typing import List, Tuple

from slidefix.models import CanonicalFixKind, Fix, NormalizedKind

# Earlier entries win when a compound label names several kinds
PRIORITY_ORDER: List[CanonicalFixKind] = [
    CanonicalFixKind.ADD_SLIDE,
    CanonicalFixKind.MODIFY_SLIDE,
    CanonicalFixKind.REORDER_SLIDES,
    CanonicalFixKind.SPLIT_SLIDE,
    CanonicalFixKind.MERGE_SLIDES,
]

LABEL_DELIMITER = "|"


def split_label(kind_label: str) -> List[str]:
    """Split a possibly-compound label into its non-empty tokens."""
    if not kind_label:
        return []
    return [token.strip() for token in kind_label.split(LABEL_DELIMITER) if token.strip()]


def normalize(kind_label: str) -> NormalizedKind:
    """
    Map a fix label to one canonical kind.

    Tokens are compared case-insensitively. When none of the known kinds is
    present the first token is returned verbatim as UNSUPPORTED.
    """
    tokens = split_label(kind_label)
    candidates = {token.lower() for token in tokens}

    for kind in PRIORITY_ORDER:
        if kind.value in candidates:
            return NormalizedKind(kind=kind, label=kind.value)

    return NormalizedKind(kind=CanonicalFixKind.UNSUPPORTED, label=tokens[0] if tokens else "")


def is_auto_applicable(fix: Fix) -> bool:
    return normalize(fix.kind_label).auto_applicable


def _suggestion(fix: Fix) -> str:
    return fix.action or fix.description


# (pattern, message builder) checked against the label, then the description
_KEYWORD_GUIDANCE: List[Tuple[re.Pattern, str]] = [
    (
        re.compile(r"reorder|rearrange", re.IGNORECASE),
        "Use 'Reorder slides' from the main menu. Suggestion: {suggestion}",
    ),
    (
        re.compile(r"split|divide", re.IGNORECASE),
        "Use 'Edit existing slide' and break the content into multiple slides. "
        "Suggestion: {suggestion}",
    ),
    (
        re.compile(r"merge|combine", re.IGNORECASE),
        "Use 'Edit existing slide' to copy content from the related slides into one, "
        "then 'Delete slide' on the leftovers. Suggestion: {suggestion}",
    ),
    (
        re.compile(r"interactive|engagement", re.IGNORECASE),
        "Use 'Edit existing slide' to add interactive elements such as Q&A prompts, "
        "polls, or exercises. Suggestion: {suggestion}",
    ),
    (
        re.compile(r"example|case.?study", re.IGNORECASE),
        "Use 'Create new slide' and add practical, real-world examples. "
        "Suggestion: {suggestion}",
    ),
]

_VERB_GUIDANCE: List[Tuple[re.Pattern, str]] = [
    (
        re.compile(r"\b(add(s|ed|ing)?|creat(e|es|ed|ing))\b", re.IGNORECASE),
        "Consider using 'Create new slide' from the main menu.",
    ),
    (
        re.compile(r"\b(edit|modif|updat)\w*", re.IGNORECASE),
        "Use 'Edit existing slide' from the main menu.",
    ),
    (re.compile(r"\b(remov|delet)\w*", re.IGNORECASE), "Use 'Delete slide' from the main menu."),
]


def manual_guidance(fix: Fix) -> str:
    """
    Build the manual-action instruction for a fix that cannot be auto-applied.

    Deterministic: the same fix always produces the same text.
    """
    suggestion = _suggestion(fix)

    for text in (fix.kind_label, fix.description):
        if not text:
            continue
        for pattern, template in _KEYWORD_GUIDANCE:
            if pattern.search(text):
                return template.format(suggestion=suggestion)

    message = f"Manual action required: {fix.description}"
    for pattern, hint in _VERB_GUIDANCE:
        if pattern.search(fix.description):
            return f"{message} -> {hint}"
    return message
