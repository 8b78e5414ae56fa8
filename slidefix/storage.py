"""
Deck persistence as JSON.
"""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from slidefix.models import Deck

logger = logging.getLogger(__name__)


def load_deck(path: Path) -> Deck:
    """Load a deck from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Deck not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return Deck.from_dict(data)


def _conflicts(existing: dict, deck: Deck) -> bool:
    return (
        len(existing.get("slides") or []) != deck.slide_count
        or existing.get("title") != deck.title
        or existing.get("description") != deck.description
    )


def save_deck(deck: Deck, path: Path) -> Optional[Path]:
    """
    Write a deck to JSON.

    If the file already holds a deck that differs in slide count, title or
    description (e.g. it was edited elsewhere), it is copied to
    ``<name>.backup_<timestamp>`` first.

    Returns:
        Path of the backup, or None when no backup was made
    """
    path = Path(path)
    backup_path = None

    if path.exists():
        try:
            existing = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("[Storage] Existing file %s appears corrupted. Overwriting...", path)
        else:
            if isinstance(existing, dict) and _conflicts(existing, deck):
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                backup_path = path.with_name(f"{path.name}.backup_{timestamp}")
                shutil.copy2(path, backup_path)
                logger.warning("[Storage] File conflict detected! Created backup: %s", backup_path)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(deck.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info("[Storage] Saved deck to %s", path)
    return backup_path
