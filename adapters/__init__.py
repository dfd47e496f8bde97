"""
EcoEngine Adapters.

Implementations of the SnapshotBackend protocol. The ORM adapter imports
the models lazily, so this package is safe to import before app loading.
"""

from ecoengine.adapters.memory import InMemorySnapshotBackend
from ecoengine.adapters.orm import OrmSnapshotBackend

__all__ = [
    "OrmSnapshotBackend",
    "InMemorySnapshotBackend",
]
