"""Catalog domain services (songs, groups, lyrics, external details)."""

from .detail_client import SongDetailClient
from .errors import (
    DetailFetchError,
    NothingToUpdateError,
    SongAlreadyExistsError,
    SongDomainError,
    SongNotFoundError,
    SongServiceError,
)
from .group_resolver import GroupResolver
from .lyrics_store import LyricsStore, join_verses, split_verses
from .song_service import SongService

__all__ = [
    "SongDetailClient",
    "DetailFetchError",
    "NothingToUpdateError",
    "SongAlreadyExistsError",
    "SongDomainError",
    "SongNotFoundError",
    "SongServiceError",
    "GroupResolver",
    "LyricsStore",
    "join_verses",
    "split_verses",
    "SongService",
]
