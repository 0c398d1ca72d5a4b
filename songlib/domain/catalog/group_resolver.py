import logging
from typing import Optional

from sqlalchemy.orm import Session

from songlib.repository import AlreadyExistsError, GroupRepository, NotFoundError

logger = logging.getLogger(__name__)


class GroupResolver:
    def __init__(self, repository: Optional[GroupRepository] = None):
        self._repo = repository or GroupRepository()

    def resolve(self, session: Session, name: str) -> str:
        """Return the id of the group called ``name``, creating it when missing.

        A concurrent request may insert the same name between lookup and
        insert; the unique constraint rejects ours and the winner's id is used.
        """
        try:
            return self._repo.get_id_by_name(session, name)
        except NotFoundError:
            pass

        try:
            group_id = self._repo.create(session, name)
        except AlreadyExistsError:
            logger.info("Group %s was created concurrently; reusing it", name)
            return self._repo.get_id_by_name(session, name)
        logger.info("Created group %s", name)
        return group_id


__all__ = ["GroupResolver"]
