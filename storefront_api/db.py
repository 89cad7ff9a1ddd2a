from __future__ import annotations

import logging
import time

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront_api.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.database_url, future=True)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)
Base = declarative_base()


def init_db(attempts: int = 30) -> None:
    # tables are registered on Base by importing the orm module
    from storefront_api.store import orm  # noqa: F401

    for attempt in range(attempts):
        try:
            Base.metadata.create_all(bind=engine)
            return
        except Exception:
            logger.warning("database not ready (attempt %d/%d)", attempt + 1, attempts)
            time.sleep(1)
    raise RuntimeError(f"could not initialise database at {engine.url!r}")
