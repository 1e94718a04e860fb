import contextlib
import logging

from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from core.matching.errors import TransientStoreFailure

logger = logging.getLogger(__name__)


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    @contextlib.contextmanager
    def store_call(self, operation: str):
        """
        Translate timeouts and lost connections into TransientStoreFailure.

        Other database errors propagate unchanged.
        """
        try:
            yield
        except (OperationalError, PoolTimeoutError) as e:
            self._abort(operation, e)
            raise TransientStoreFailure(f"{operation} failed: {e}") from e
        except DBAPIError as e:
            if not e.connection_invalidated:
                raise
            self._abort(operation, e)
            raise TransientStoreFailure(f"{operation} failed: connection lost") from e

    def _abort(self, operation: str, error: Exception) -> None:
        logger.warning(f"Transient store failure during {operation}: {error}")
        self.db.rollback()
