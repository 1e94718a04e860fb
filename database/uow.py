import contextlib
import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig, get_config
from core.matching import MatchingService
from database.database import new_session
from database.repositories import LikeRepository, ProfileRepository

logger = logging.getLogger(__name__)


def build_matching_service(session: Session, config: Optional[MatchingConfig] = None) -> MatchingService:
    """Wire a MatchingService to SQL repositories sharing one Session."""
    return MatchingService(
        directory=ProfileRepository(session),
        ledger=LikeRepository(session),
        config=config or get_config().matching
    )


@contextlib.contextmanager
def matching_uow(config: Optional[MatchingConfig] = None):
    """Per-unit-of-work transaction scope.

    Yields a MatchingService bound to a fresh Session. Commits on success,
    rolls back on exception, always closes. Like edges are committed by the
    ledger as soon as they are created, independent of this scope.

    Usage:
        with matching_uow() as service:
            candidates = service.select_candidates(user_id)
    """
    session = new_session()
    try:
        yield build_matching_service(session, config)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
