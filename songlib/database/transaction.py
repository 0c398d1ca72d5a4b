from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit ``session`` when the block completes, roll it back on any exception.

    Every write inside the block must go through the yielded session.
    """
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise


__all__ = ["transaction"]
