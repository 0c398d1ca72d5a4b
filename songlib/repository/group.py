from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from songlib.database.db_manager import Group
from .errors import AlreadyExistsError, NotFoundError, RepositoryError


logger = logging.getLogger(__name__)


class GroupRepository:
    """Groups by name. Every call runs on the session handed in by the caller."""

    def get_id_by_name(self, session: Session, name: str) -> str:
        try:
            group_id = session.execute(
                select(Group.id).where(Group.name == name)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to get group {name!r}") from exc
        if group_id is None:
            raise NotFoundError(f"group {name!r} not found")
        return group_id

    def create(self, session: Session, name: str) -> str:
        """Insert a group inside a SAVEPOINT so a duplicate leaves the outer transaction usable."""
        group = Group(name=name)
        try:
            with session.begin_nested():
                session.add(group)
        except IntegrityError as exc:
            raise AlreadyExistsError(f"group {name!r} already exists") from exc
        except SQLAlchemyError as exc:
            raise RepositoryError(f"failed to create group {name!r}") from exc
        logger.debug("Created group %s (%s)", name, group.id)
        return group.id


__all__ = ["GroupRepository"]
