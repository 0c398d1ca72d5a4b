import logging
import re
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from songlib.models.dto import LyricsVerseDTO
from songlib.repository import LyricsRepository

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def split_verses(text: Optional[str]) -> List[str]:
    """Split lyrics into verses, one per line.

    Blank text yields no verses. Otherwise every line becomes a verse,
    empty lines included, in their original order.
    """
    if not text or not text.strip():
        return []
    return _LINE_BREAK.split(text)


def join_verses(verses: Iterable[str]) -> str:
    return "\n".join(verses)


class LyricsStore:
    """Numbered verse storage on top of ``LyricsRepository``."""

    def __init__(self, repository: Optional[LyricsRepository] = None):
        self._repo = repository or LyricsRepository()

    def split_and_store(self, session: Session, song_id: str, text: Optional[str]) -> int:
        verses = [
            LyricsVerseDTO(verse_number=number, verse=verse)
            for number, verse in enumerate(split_verses(text), start=1)
        ]
        self._repo.add_verses(session, song_id, verses)
        logger.debug("Stored %d verses for song %s", len(verses), song_id)
        return len(verses)

    def get_all(self, session: Session, song_id: str) -> List[str]:
        return [v.verse for v in self._repo.get_all(session, song_id)]

    def get_text(self, session: Session, song_id: str) -> str:
        return join_verses(self.get_all(session, song_id))

    def get_paginated(self, session: Session, song_id: str, limit: int, offset: int) -> List[LyricsVerseDTO]:
        return self._repo.get_paginated(session, song_id, limit, offset)

    def delete_all(self, session: Session, song_id: str) -> int:
        return self._repo.delete_all(session, song_id)

    def replace(self, session: Session, song_id: str, text: Optional[str]) -> int:
        """Drop every verse of the song, then store ``text`` from verse 1."""
        self.delete_all(session, song_id)
        return self.split_and_store(session, song_id, text)


__all__ = ["LyricsStore", "split_verses", "join_verses"]
