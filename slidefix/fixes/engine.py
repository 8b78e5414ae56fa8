"""
Applies a batch of fixes to a deck.
"""

import logging
from typing import Iterable

from slidefix.fixes.normalizer import manual_guidance, normalize
from slidefix.fixes.positions import resolve_insert_index, resolve_target_index
from slidefix.fixes.synthesizer import complete_payload
from slidefix.models import ApplyResult, CanonicalFixKind, Deck, Fix, FixFailure, Slide

logger = logging.getLogger(__name__)


def apply_add_slide(deck: Deck, fix: Fix) -> Slide:
    """Insert a new slide built from the fix payload (synthesized where missing)."""
    content = complete_payload(fix)
    slide = Slide(title=content.title, body=content.body, notes=content.notes)
    index = resolve_insert_index(fix.position_descriptor, deck.slide_count)
    deck.insert_slide_at(index, slide)
    logger.info("[Fixes] Added slide %d: %s", slide.position, slide.title)
    return slide


def apply_modify_slide(deck: Deck, fix: Fix) -> bool:
    """
    Overwrite the payload fields that are present on the target slide.

    Returns False, without touching the deck, when the target does not exist
    or the payload carries no fields.
    """
    index = resolve_target_index(fix.position_descriptor, deck.slide_count)
    if index is None:
        logger.info("[Fixes] No slide at %r", fix.position_descriptor)
        return False

    payload = fix.payload
    if payload is None or payload.is_empty():
        logger.info("[Fixes] Nothing to change on slide %d", index + 1)
        return False

    slide = deck.slides[index]
    if payload.title is not None:
        slide.title = payload.title
    if payload.body is not None:
        slide.body = list(payload.body)
    if payload.notes is not None:
        slide.notes = payload.notes
    logger.info("[Fixes] Modified slide %d: %s", index + 1, slide.title)
    return True


def apply_fixes(deck: Deck, fixes: Iterable[Fix]) -> ApplyResult:
    """
    Apply fixes in order and renumber the deck afterwards.

    Only add/modify fixes mutate the deck. Every other kind produces a
    manual-action guidance message. A fix that raises is recorded as a
    failure and the batch carries on.

    Args:
        deck: Deck to mutate in place
        fixes: Fixes from one analysis

    Returns:
        ApplyResult with the applied count, guidance, failures and skips
    """
    result = ApplyResult()

    for i, fix in enumerate(fixes, start=1):
        logger.debug("[Fixes] %d. %s", i, fix.description)
        try:
            kind = normalize(fix.kind_label).kind

            if kind == CanonicalFixKind.ADD_SLIDE:
                apply_add_slide(deck, fix)
                result.applied += 1
            elif kind == CanonicalFixKind.MODIFY_SLIDE:
                if apply_modify_slide(deck, fix):
                    result.applied += 1
                else:
                    logger.info("[Fixes] Skipping fix %d", i)
                    result.skipped.append(fix.description)
            else:
                logger.info("[Fixes] Fix %d requires manual action (%s)", i, fix.kind_label)
                result.guidance.append(manual_guidance(fix))
        except Exception as e:
            logger.warning("[Fixes] Failed to apply fix %d: %s", i, e)
            result.failures.append(FixFailure(index=i, description=fix.description, error=str(e)))

    deck.renumber()
    return result
