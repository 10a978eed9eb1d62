from stagelog.stores.interfaces import MutationEvent, MutationKind, PerformanceStore
from stagelog.stores.memory import InMemoryPerformanceStore
from stagelog.stores.sql import SqlAlchemyPerformanceStore

__all__ = [
    "MutationEvent",
    "MutationKind",
    "PerformanceStore",
    "InMemoryPerformanceStore",
    "SqlAlchemyPerformanceStore",
]
