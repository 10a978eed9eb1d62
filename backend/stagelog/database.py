from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from stagelog.config import get_settings

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    database_url = database_url.replace("postgres://", "postgresql://", 1)

    # Handle SQLite connection args
    connect_args = {}
    engine_kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Single shared connection so every session sees the same in-memory database
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_recycle"] = 1800

    return create_engine(database_url, connect_args=connect_args, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    import stagelog.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = build_session_factory(engine)

