"""
Position descriptors -> deck indices.

Fix positions are generated against the deck as the model saw it, so they
regularly point past the end once earlier fixes in the same batch have
run. Out-of-range values are clamped rather than rejected, except for a
modify target past the last slide, which has nothing to modify.

Descriptors:
    "end"              append
    "after_slide_<n>"  insert so the new slide becomes position n+1
    "slide_<n>"        the existing slide at position n
"""

import re
from typing import Optional

END = "end"

_AFTER_SLIDE = re.compile(r"^after[_\s]?slide[_\s]?(-?\d+)$", re.IGNORECASE)
_SLIDE = re.compile(r"^slide[_\s]?(-?\d+)$", re.IGNORECASE)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _normalize(descriptor: Optional[str]) -> str:
    return (descriptor or "").strip()


def is_end(descriptor: Optional[str]) -> bool:
    return _normalize(descriptor).lower() == END


def parse_after_slide(descriptor: Optional[str]) -> Optional[int]:
    match = _AFTER_SLIDE.match(_normalize(descriptor))
    return int(match.group(1)) if match else None


def parse_slide(descriptor: Optional[str]) -> Optional[int]:
    match = _SLIDE.match(_normalize(descriptor))
    return int(match.group(1)) if match else None


def resolve_insert_index(descriptor: Optional[str], deck_length: int) -> int:
    """0-based insertion index for an added slide. Unknown descriptors append."""
    after = parse_after_slide(descriptor)
    if after is not None:
        return _clamp(after, 0, deck_length)
    return deck_length


def resolve_target_index(descriptor: Optional[str], deck_length: int) -> Optional[int]:
    """
    0-based index of the slide a modify fix targets.

    Positions below 1 clamp to the first slide. Returns None for an empty
    deck, a position past the last slide, or any other descriptor.
    """
    number = parse_slide(descriptor)
    if number is None or deck_length <= 0:
        return None
    number = max(number, 1)
    if number > deck_length:
        return None
    return number - 1


def resolve(descriptor: Optional[str], deck_length: int) -> Optional[int]:
    """
    Resolve any descriptor form against the current deck length.

    Returns the insertion index for "end"/"after_slide_<n>", the target slot
    for "slide_<n>", and None when the descriptor is not understood or the
    target does not exist.
    """
    if is_end(descriptor):
        return deck_length
    if parse_after_slide(descriptor) is not None:
        return resolve_insert_index(descriptor, deck_length)
    return resolve_target_index(descriptor, deck_length)
