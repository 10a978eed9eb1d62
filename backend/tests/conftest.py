"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from stagelog.config import Settings
from stagelog.database import build_engine, build_session_factory, init_db
from stagelog.stores import InMemoryPerformanceStore, SqlAlchemyPerformanceStore
from stagelog.stores.records import build_performance

TODAY = date(2026, 10, 18)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        environment="test",
        reference_date=TODAY,
        write_batch_delay_ms=0,
    )


@pytest.fixture
def make_performance():
    """Build a validated performance record with its weighted rating derived."""

    def factory(**overrides):
        data = {
            "show_id": "show-default",
            "date_seen": "2026-09-18",
            "theatre_name": "Cambridge Theatre",
            "city": "London",
            "production_type": "West End",
        }
        data.update(overrides)
        return build_performance(data)

    return factory


@pytest.fixture
def memory_store() -> InMemoryPerformanceStore:
    return InMemoryPerformanceStore()


@pytest.fixture
def sql_store() -> SqlAlchemyPerformanceStore:
    engine = build_engine("sqlite://")
    init_db(engine)
    yield SqlAlchemyPerformanceStore(build_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every store implementation must honour the same contract."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def clock():
    class FakeClock:
        def __init__(self) -> None:
            self.now = 1000.0

        def __call__(self) -> float:
            return self.now

        def advance(self, seconds: float) -> None:
            self.now += seconds

    return FakeClock()
