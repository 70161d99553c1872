import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import settings
from models import ai_log, exercise, medication, recovery_log, reminder, user, viewer  # noqa: F401  (register tables)
from models.base import Base
from services.seed_service import seed_demo_data

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_db() -> None:
    """Create missing tables, then load the demo accounts when enabled."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready dialect=%s", engine.dialect.name)

    if settings.seed_demo_data:
        with SessionLocal() as db:
            seed_demo_data(db)
        logger.info("Demo data seeded")
