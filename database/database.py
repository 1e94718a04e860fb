import contextlib
import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from core.config_loader import DatabaseConfig, get_config

logger = logging.getLogger(__name__)

# Bound lazily by get_engine(); objects stay usable after commit
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)


def build_engine(config: DatabaseConfig) -> Engine:
    """
    Create an engine whose calls cannot block indefinitely.

    Postgres gets a server-side statement_timeout and a connect timeout;
    every pooled backend gets a pool checkout timeout.
    """
    url = make_url(config.url)
    backend = url.get_backend_name()
    kwargs = {'echo': config.echo, 'pool_pre_ping': True}

    if backend == 'sqlite':
        kwargs['connect_args'] = {
            'check_same_thread': False,
            'timeout': config.connect_timeout_seconds,
        }
        if url.database in (None, '', ':memory:'):
            kwargs['poolclass'] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout_seconds,
        )
        if backend == 'postgresql':
            kwargs['connect_args'] = {
                'connect_timeout': config.connect_timeout_seconds,
                'options': f"-c statement_timeout={config.statement_timeout_ms}",
            }

    return create_engine(config.url, **kwargs)


@lru_cache()
def get_engine() -> Engine:
    engine = build_engine(get_config().database)
    SessionLocal.configure(bind=engine)
    logger.debug(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def new_session() -> Session:
    get_engine()
    return SessionLocal()


def get_db():
    db = new_session()
    try:
        yield db
    finally:
        db.close()


@contextlib.contextmanager
def db_session_scope():
    """Provide a transactional scope around a series of operations."""
    session = new_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
