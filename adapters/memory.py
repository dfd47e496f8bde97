"""
In-memory Snapshot Backend -- recipe graphs held in plain dicts.

Use this adapter for scripting, development or tests that should not
depend on the database.

Configuration:
    ECOENGINE = {
        "SNAPSHOT_BACKEND": "ecoengine.adapters.memory.InMemorySnapshotBackend",
    }
"""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

from ecoengine.exceptions import EcoError
from ecoengine.protocols.snapshot import FrozenRecipe, SnapshotBackend


class InMemorySnapshotBackend(SnapshotBackend):
    """
    Dict-backed implementation of the SnapshotBackend protocol.

    Usage:
        backend = InMemorySnapshotBackend()
        backend.register(cookbook_id, pantry={iron, ore}, recipes=[smelt_iron])
        snapshot = backend.snapshot(cookbook_id)
    """

    def __init__(self):
        self._pantries: dict[UUID, set[UUID]] = {}
        self._recipes: dict[UUID, list[FrozenRecipe]] = {}

    def register(
        self,
        cookbook_id: UUID,
        pantry: Iterable[UUID],
        recipes: Iterable[FrozenRecipe] = (),
    ) -> None:
        """Store (or replace) the pantry and recipes of a cookbook."""
        self._pantries[cookbook_id] = set(pantry)
        self._recipes[cookbook_id] = list(recipes)

    def list_pantry_commodities(self, cookbook_id: UUID) -> set[UUID]:
        try:
            return set(self._pantries[cookbook_id])
        except KeyError:
            raise EcoError("COOKBOOK_NOT_FOUND", cookbook=str(cookbook_id)) from None

    def list_recipes_producing(self, cookbook_id: UUID) -> dict[UUID, set[FrozenRecipe]]:
        if cookbook_id not in self._recipes:
            raise EcoError("COOKBOOK_NOT_FOUND", cookbook=str(cookbook_id))

        grouped: dict[UUID, set[FrozenRecipe]] = {}
        for recipe in self._recipes[cookbook_id]:
            grouped.setdefault(recipe.product, set()).add(recipe)
        return grouped
