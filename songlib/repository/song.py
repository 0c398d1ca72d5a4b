from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from songlib.database.db_manager import Group, Song
from songlib.models.dto import SongDTO, SongFilter
from .errors import AlreadyExistsError, EmptyUpdateError, NotFoundError, RepositoryError
from .query import SongQueryBuilder


logger = logging.getLogger(__name__)

# Columns a partial update may touch
UPDATABLE_COLUMNS = ("title", "release_date", "group_id", "link")


def _row_to_dto(row) -> SongDTO:
    song_id, title, release_date, group_name, link = row
    return SongDTO(
        id=song_id,
        title=title,
        release_date=release_date,
        group_name=group_name,
        link=link or "",
    )


class SongRepository:
    def create(
        self,
        session: Session,
        *,
        title: str,
        group_id: str,
        release_date: Optional[date],
        link: str,
    ) -> str:
        song = Song(title=title, group_id=group_id, release_date=release_date, link=link or "")
        try:
            session.add(song)
            session.flush()
        except IntegrityError as exc:
            raise AlreadyExistsError(f"song {title!r} already exists for group {group_id}") from exc
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to create song {title!r}") from exc
        return song.id

    def get_by_id(self, session: Session, song_id: str) -> SongDTO:
        stmt = (
            select(Song.id, Song.title, Song.release_date, Group.name, Song.link)
            .join(Group, Song.group_id == Group.id)
            .where(Song.id == song_id)
        )
        try:
            row = session.execute(stmt).one_or_none()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to fetch song {song_id}") from exc
        if row is None:
            raise NotFoundError(f"song {song_id} not found")
        return _row_to_dto(row)

    def exists(self, session: Session, song_id: str) -> bool:
        try:
            found = session.execute(select(Song.id).where(Song.id == song_id)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to fetch song {song_id}") from exc
        return found is not None

    def search(self, session: Session, song_filter: SongFilter) -> List[SongDTO]:
        stmt = SongQueryBuilder.from_filter(song_filter).build()
        try:
            rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError("failed to query songs") from exc
        return [_row_to_dto(row) for row in rows]

    def update(self, session: Session, song_id: str, values: Dict[str, Any]) -> None:
        changes = {key: value for key, value in values.items() if key in UPDATABLE_COLUMNS}
        # Callers may pass a whole payload; nothing left after filtering is the caller's error
        if not changes:
            raise EmptyUpdateError("no fields to update")
        stmt = (
            update(Song)
            .where(Song.id == song_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        try:
            result = session.execute(stmt)
        except IntegrityError as exc:
            raise AlreadyExistsError(f"song {song_id} conflicts with an existing song") from exc
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to update song with ID {song_id}") from exc
        if not result.rowcount:
            raise NotFoundError(f"song {song_id} not found")
        logger.debug("Updated song %s: %s", song_id, sorted(changes))

    def delete(self, session: Session, song_id: str) -> None:
        try:
            result = session.execute(
                delete(Song).where(Song.id == song_id).execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to delete song with ID {song_id}") from exc
        if not result.rowcount:
            raise NotFoundError(f"song {song_id} not found")


__all__ = ["SongRepository", "UPDATABLE_COLUMNS"]
