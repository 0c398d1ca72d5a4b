from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from songlib.database.db_manager import LyricsVerse
from songlib.models.dto import LyricsVerseDTO
from .errors import RepositoryError


class LyricsRepository:
    def add_verses(self, session: Session, song_id: str, verses: Iterable[LyricsVerseDTO]) -> None:
        rows = [
            LyricsVerse(song_id=song_id, verse=v.verse, verse_number=v.verse_number)
            for v in verses
        ]
        if not rows:
            return
        try:
            session.add_all(rows)
            session.flush()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to add lyrics for song {song_id}") from exc

    def get_all(self, session: Session, song_id: str) -> List[LyricsVerseDTO]:
        stmt = (
            select(LyricsVerse.verse_number, LyricsVerse.verse)
            .where(LyricsVerse.song_id == song_id)
            .order_by(LyricsVerse.verse_number)
        )
        return self._fetch(session, stmt, song_id)

    def get_paginated(self, session: Session, song_id: str, limit: int, offset: int) -> List[LyricsVerseDTO]:
        stmt = (
            select(LyricsVerse.verse_number, LyricsVerse.verse)
            .where(LyricsVerse.song_id == song_id)
            .order_by(LyricsVerse.verse_number)
            .limit(limit)
            .offset(offset)
        )
        return self._fetch(session, stmt, song_id)

    def delete_all(self, session: Session, song_id: str) -> int:
        try:
            result = session.execute(delete(LyricsVerse).where(LyricsVerse.song_id == song_id))
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to delete lyrics for song {song_id}") from exc
        return result.rowcount or 0

    @staticmethod
    def _fetch(session: Session, stmt, song_id: str) -> List[LyricsVerseDTO]:
        try:
            rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to fetch lyrics for song {song_id}") from exc
        return [LyricsVerseDTO(verse_number=number, verse=verse) for number, verse in rows]


__all__ = ["LyricsRepository"]
