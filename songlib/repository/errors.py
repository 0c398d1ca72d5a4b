class RepositoryError(Exception):
    """Storage failure with context; the original error is chained."""


class NotFoundError(RepositoryError):
    """The addressed row does not exist."""


class AlreadyExistsError(RepositoryError):
    """A unique constraint rejected the write."""


class EmptyUpdateError(RepositoryError):
    """An update was requested without any column to change."""


__all__ = ["RepositoryError", "NotFoundError", "AlreadyExistsError", "EmptyUpdateError"]
