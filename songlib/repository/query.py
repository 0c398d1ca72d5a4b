"""Composable SELECT for song search.

Predicates are accumulated as SQLAlchemy clause objects, so every user value
ends up as a bound parameter. Ordering and limit/offset are applied last when
the statement is built.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import Select, and_, select
from sqlalchemy.sql.elements import ColumnElement

from songlib.database.db_manager import Group, LyricsVerse, Song
from songlib.models.dto import SongFilter


class SongQueryBuilder:
    """Accumulate optional song-search predicates and render one statement."""

    def __init__(self) -> None:
        self._predicates: List[ColumnElement[bool]] = []
        self._limit = 0
        self._offset = 0

    @property
    def predicates(self) -> List[ColumnElement[bool]]:
        return list(self._predicates)

    def contains(self, column, value: Optional[str]) -> "SongQueryBuilder":
        """Case-insensitive substring match; ``%`` and ``_`` in ``value`` are literal."""
        if value:
            self._predicates.append(column.icontains(value, autoescape=True))
        return self

    def equals(self, column, value) -> "SongQueryBuilder":
        if value:
            self._predicates.append(column == value)
        return self

    def between(self, column, start: Optional[date], end: Optional[date]) -> "SongQueryBuilder":
        if start and end:
            self._predicates.append(column.between(start, end))
        elif start:
            self._predicates.append(column >= start)
        elif end:
            self._predicates.append(column <= end)
        return self

    def paginate(self, limit: int, offset: int) -> "SongQueryBuilder":
        self._limit = max(0, limit or 0)
        self._offset = max(0, offset or 0)
        return self

    def build(self) -> Select:
        stmt = (
            select(Song.id, Song.title, Song.release_date, Group.name, Song.link)
            .join(Group, Song.group_id == Group.id)
            .outerjoin(LyricsVerse, LyricsVerse.song_id == Song.id)
            .distinct()
        )
        if self._predicates:
            stmt = stmt.where(and_(*self._predicates))
        stmt = stmt.order_by(Song.id.asc(), Song.release_date.desc())
        if self._limit:
            stmt = stmt.limit(self._limit)
        if self._offset:
            stmt = stmt.offset(self._offset)
        return stmt

    @classmethod
    def from_filter(cls, song_filter: SongFilter) -> "SongQueryBuilder":
        return (
            cls()
            .between(Song.release_date, song_filter.start_date, song_filter.end_date)
            .contains(Song.title, song_filter.title)
            .equals(Song.link, song_filter.link)
            .contains(Group.name, song_filter.group)
            .contains(LyricsVerse.verse, song_filter.text)
            .paginate(song_filter.limit, song_filter.offset)
        )


__all__ = ["SongQueryBuilder"]
