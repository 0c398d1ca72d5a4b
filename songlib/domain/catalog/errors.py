class SongServiceError(Exception):
    """Internal failure of a song use case; shown to clients as a 500."""


class DetailFetchError(SongServiceError):
    """The external song detail service was unreachable or answered badly."""


class SongDomainError(SongServiceError):
    """Client-correctable outcome of a song use case."""


class SongNotFoundError(SongDomainError):
    def __init__(self, message: str = "song not found"):
        super().__init__(message)


class SongAlreadyExistsError(SongDomainError):
    def __init__(self, message: str = "song already exists"):
        super().__init__(message)


class NothingToUpdateError(SongDomainError):
    def __init__(self, message: str = "no fields to update"):
        super().__init__(message)


__all__ = [
    "SongServiceError",
    "DetailFetchError",
    "SongDomainError",
    "SongNotFoundError",
    "SongAlreadyExistsError",
    "NothingToUpdateError",
]
