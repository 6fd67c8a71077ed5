"""Database Connection"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import logging
from config.settings import Settings

logger = logging.getLogger(__name__)
settings = Settings()


def _make_engine_kw(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        return {
            "echo": settings.DEBUG,
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"echo": settings.DEBUG, "pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_make_engine_kw(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


async def init_db():
    try:
        from database.base import Base
        # Register models on the metadata before create_all
        from backend.models import kv_entry  # noqa: F401
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized at %s", engine.url)
    except Exception as e:
        logger.error(f"Database init failed: {e}")
        raise

