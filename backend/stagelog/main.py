"""
StageLog statistics core
Composition root: logging setup and engine wiring
"""

import logging
import sys
from datetime import date
from typing import Optional

from stagelog.config import Settings, get_settings
from stagelog.services.batching import WriteBatcher
from stagelog.services.cache import TTLCache
from stagelog.services.engine import StatisticsEngine
from stagelog.stores import InMemoryPerformanceStore, PerformanceStore, SqlAlchemyPerformanceStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings if settings is not None else get_settings()
    log_level = logging.DEBUG if settings.is_development else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_memory_store(persist=None, settings: Optional[Settings] = None) -> InMemoryPerformanceStore:
    """In-memory store; ``persist`` writes are debounced by the configured batch window."""
    settings = settings if settings is not None else get_settings()
    batcher = WriteBatcher(settings.write_batch_delay_seconds) if persist is not None else None
    return InMemoryPerformanceStore(persist=persist, batcher=batcher)


def create_sql_store(settings: Optional[Settings] = None) -> SqlAlchemyPerformanceStore:
    from stagelog.database import build_engine, build_session_factory, init_db

    settings = settings if settings is not None else get_settings()
    engine = build_engine(settings.database_url)
    init_db(engine)
    logger.info("Database tables created/verified")
    return SqlAlchemyPerformanceStore(build_session_factory(engine))


def create_statistics_engine(
    store: Optional[PerformanceStore] = None,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> StatisticsEngine:
    settings = settings if settings is not None else get_settings()
    if store is None:
        store = create_sql_store(settings)
    cache = TTLCache(default_ttl=settings.cache_default_ttl_seconds)
    logger.info("Starting StageLog statistics engine (%s)", settings.environment)
    return StatisticsEngine(store, cache=cache, settings=settings, today=today)
