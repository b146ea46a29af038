import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillgap.core.exceptions import StorageError


class BaseService:
    """
    Shared plumbing for database-backed services: the request session,
    a per-service logger, and commit-or-rollback handling.
    """

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_warning(self, message: str):
        self._logger.warning(message)

    def commit(self, action: str):
        """Commit the unit of work; on failure roll back so nothing is partially applied."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"{action} failed: {e}", exc_info=True)
            raise StorageError(f"Failed to {action}") from e
