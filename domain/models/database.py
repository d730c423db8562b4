"""
Engine, session factory and schema bootstrap for the relational store.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger("messmate.database")

Base = declarative_base()


def _engine_options(url: str) -> dict:
    # SQLite connections are shared between the request thread and the threadpool
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.database_url, echo=settings.db_echo, future=True, **_engine_options(settings.database_url)
)

SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database():
    """Create any missing tables"""
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info(f"Database schema ready backend={engine.url.get_backend_name()}")


def get_db_session():
    """Yield a session per request, rolling back work left uncommitted by a failure"""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
