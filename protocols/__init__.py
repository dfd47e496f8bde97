"""
EcoEngine Protocols.

Defines interfaces for external integrations.
"""

from ecoengine.protocols.snapshot import (
    FrozenRecipe,
    RecipeGraphSnapshot,
    SnapshotBackend,
)

__all__ = [
    # Snapshot Protocol
    "SnapshotBackend",
    # Snapshot types
    "RecipeGraphSnapshot",
    "FrozenRecipe",
]
