"""Song use cases: create, read, search, update, delete, paginated lyrics.

Every write use case runs in one transaction on a single session, and that
session is passed explicitly to each repository call so the song row, its
group and its verses commit or roll back together.
"""

import logging
from contextlib import contextmanager
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from songlib.database.db_manager import db
from songlib.database.transaction import transaction
from songlib.models.dto import MAX_LIMIT, MAX_PAGE, LyricsVerseDTO, SongDTO, SongFilter, SongUpdate
from songlib.observability.metrics import record_song_operation
from songlib.observability.tracing import set_span_outcome, song_span
from songlib.repository import (
    AlreadyExistsError,
    EmptyUpdateError,
    GroupRepository,
    LyricsRepository,
    NotFoundError,
    RepositoryError,
    SongRepository,
)
from .errors import (
    NothingToUpdateError,
    SongAlreadyExistsError,
    SongDomainError,
    SongNotFoundError,
    SongServiceError,
)
from .group_resolver import GroupResolver
from .lyrics_store import LyricsStore

logger = logging.getLogger(__name__)


@contextmanager
def _observed(operation: str, **attributes):
    """Count the use case by outcome and trace it as ``songlib.<operation>``."""
    with song_span(operation, **attributes) as span:
        try:
            yield span
        except SongDomainError as exc:
            record_song_operation(operation, "rejected")
            set_span_outcome(span, "rejected", error=type(exc).__name__)
            raise
        except BaseException:
            record_song_operation(operation, "failed")
            set_span_outcome(span, "failed")
            raise
        else:
            record_song_operation(operation, "ok")
            set_span_outcome(span, "ok")


class SongService:
    def __init__(
        self,
        detail_client,
        *,
        session_factory: Optional[Callable[[], Session]] = None,
        songs: Optional[SongRepository] = None,
        groups: Optional[GroupRepository] = None,
        lyrics: Optional[LyricsRepository] = None,
    ):
        """Build the service around an injected detail client.

        ``detail_client`` needs ``fetch_detail(group_name, title)``;
        ``session_factory`` defaults to the Flask-SQLAlchemy scoped session.
        """
        self._detail_client = detail_client
        self._session_factory = session_factory or (lambda: db.session)
        self._songs = songs or SongRepository()
        self._groups = GroupResolver(groups)
        self._lyrics = LyricsStore(lyrics)

    def _session(self) -> Session:
        return self._session_factory()

    # --- writes ---
    def create_song(self, group_name: str, title: str) -> str:
        session = self._session()
        with _observed("create", group=group_name, title=title) as span:
            try:
                with transaction(session):
                    group_id = self._groups.resolve(session, group_name)
                    detail = self._detail_client.fetch_detail(group_name, title)
                    try:
                        song_id = self._songs.create(
                            session,
                            title=title,
                            group_id=group_id,
                            release_date=detail.release_date,
                            link=detail.link,
                        )
                    except AlreadyExistsError as exc:
                        raise SongAlreadyExistsError() from exc
                    verse_count = self._lyrics.split_and_store(session, song_id, detail.text)
            except RepositoryError as exc:
                logger.error(
                    "Failed to create song %s - %s: %s", group_name, title, exc,
                    extra={"group": group_name, "operation": "create", "outcome": "failed"},
                )
                raise SongServiceError(f"failed to create song: {exc}") from exc
            if span is not None:
                span.set_attribute("songlib.song_id", song_id)
                span.set_attribute("songlib.verse_count", verse_count)

        logger.info(
            "Created song %s (%s - %s) with %d verses", song_id, group_name, title, verse_count,
            extra={"song_id": song_id, "group": group_name, "operation": "create", "outcome": "ok"},
        )
        return song_id

    def update_song(self, update: SongUpdate) -> None:
        supplied = update.supplied()
        session = self._session()
        with _observed("update", song_id=update.id, fields=",".join(sorted(supplied))):
            if not supplied:
                raise NothingToUpdateError()
            try:
                with transaction(session):
                    values = update.row_values()
                    if "group_name" in supplied:
                        values["group_id"] = self._groups.resolve(session, update.group_name)

                    if values:
                        try:
                            self._songs.update(session, update.id, values)
                        except NotFoundError as exc:
                            raise SongNotFoundError() from exc
                        except AlreadyExistsError as exc:
                            raise SongAlreadyExistsError() from exc
                        except EmptyUpdateError as exc:
                            raise NothingToUpdateError() from exc
                    elif not self._songs.exists(session, update.id):
                        raise SongNotFoundError()

                    if "lyrics" in supplied:
                        self._lyrics.replace(session, update.id, update.lyrics)
            except RepositoryError as exc:
                logger.error("Failed to update song %s: %s", update.id, exc)
                raise SongServiceError(f"failed to update the song: {exc}") from exc

        logger.info(
            "Updated song %s: %s", update.id, ", ".join(sorted(supplied)),
            extra={"song_id": update.id, "operation": "update", "outcome": "ok"},
        )

    def delete_song(self, song_id: str) -> None:
        session = self._session()
        with _observed("delete", song_id=song_id):
            try:
                with transaction(session):
                    self._lyrics.delete_all(session, song_id)
                    try:
                        self._songs.delete(session, song_id)
                    except NotFoundError as exc:
                        raise SongNotFoundError() from exc
            except RepositoryError as exc:
                logger.error("Failed to delete song %s: %s", song_id, exc)
                raise SongServiceError(f"failed to delete the song: {exc}") from exc

        logger.info("Deleted song %s", song_id, extra={"song_id": song_id, "operation": "delete", "outcome": "ok"})

    # --- reads ---
    def get_song(self, song_id: str) -> SongDTO:
        session = self._session()
        try:
            song = self._songs.get_by_id(session, song_id)
        except NotFoundError as exc:
            raise SongNotFoundError() from exc
        except RepositoryError as exc:
            raise SongServiceError(f"failed to retrieve the song: {exc}") from exc
        return self._with_lyrics(session, song)

    def get_songs(self, song_filter: Optional[SongFilter] = None) -> List[SongDTO]:
        session = self._session()
        try:
            songs = self._songs.search(session, song_filter or SongFilter())
        except RepositoryError as exc:
            raise SongServiceError(f"failed to retrieve songs: {exc}") from exc
        return [self._with_lyrics(session, song) for song in songs]

    def get_paginated_lyrics(self, song_id: str, page: int, limit: int) -> List[LyricsVerseDTO]:
        if page < 1 or limit < 1:
            raise SongDomainError("page and limit must be positive")
        if page > MAX_PAGE or limit > MAX_LIMIT:
            raise SongDomainError(f"page must not exceed {MAX_PAGE} and limit must not exceed {MAX_LIMIT}")
        offset = (page - 1) * limit
        try:
            return self._lyrics.get_paginated(self._session(), song_id, limit, offset)
        except RepositoryError as exc:
            raise SongServiceError(f"failed to retrieve lyrics: {exc}") from exc

    def _with_lyrics(self, session: Session, song: SongDTO) -> SongDTO:
        try:
            text = self._lyrics.get_text(session, song.id)
        except RepositoryError as exc:
            raise SongServiceError(f"error while retrieving lyrics for song: {exc}") from exc
        return song.model_copy(update={"lyrics": text})


__all__ = ["SongService"]
