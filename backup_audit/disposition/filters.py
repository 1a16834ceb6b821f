import logging
from typing import Callable, Optional

from .. import config
from ..models import FileRecord

Predicate = Callable[[FileRecord], bool]

FILTER_MENU = "Filter by (1) Photos only, (2) Videos only, (3) Filename pattern: "
PATTERN_PROMPT = "Enter filename pattern to match: "


def photos_only(record: FileRecord) -> bool:
    return record.path.suffix.lower() in config.PHOTO_EXTS


def videos_only(record: FileRecord) -> bool:
    return record.path.suffix.lower() in config.VIDEO_EXTS


def name_contains(pattern: str) -> Predicate:
    needle = pattern.lower()
    return lambda record: needle in record.name.lower()


def choose_filter(prompter) -> Optional[Predicate]:
    """Asks which filter to use; returns None (after warning) for an unusable answer."""
    choice = prompter.ask(FILTER_MENU).strip()
    if choice == "1":
        logging.info("Filtering by photos only")
        return photos_only
    if choice == "2":
        logging.info("Filtering by videos only")
        return videos_only
    if choice == "3":
        pattern = prompter.ask(PATTERN_PROMPT).strip()
        if not pattern:
            logging.warning("Empty pattern. Filter not applied.")
            return None
        logging.info(f"Filtering by pattern: '{pattern}'")
        return name_contains(pattern)

    logging.warning(f"Invalid choice '{choice}'. Filter not applied.")
    return None
