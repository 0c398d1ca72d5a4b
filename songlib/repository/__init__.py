"""SQLAlchemy repositories for songs, groups and lyric verses."""

from .errors import AlreadyExistsError, EmptyUpdateError, NotFoundError, RepositoryError
from .group import GroupRepository
from .lyrics import LyricsRepository
from .query import SongQueryBuilder
from .song import SongRepository

__all__ = [
    "AlreadyExistsError",
    "EmptyUpdateError",
    "NotFoundError",
    "RepositoryError",
    "GroupRepository",
    "LyricsRepository",
    "SongQueryBuilder",
    "SongRepository",
]
