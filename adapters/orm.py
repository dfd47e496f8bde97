"""
ORM Snapshot Backend.

Implements SnapshotBackend on top of the ecoengine models: one query for
the pantry, one query (plus prefetch) for the recipes of a cookbook.

Configuration (default):
    ECOENGINE = {
        "SNAPSHOT_BACKEND": "ecoengine.adapters.orm.OrmSnapshotBackend",
    }
"""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import DatabaseError

from ecoengine.exceptions import EcoError, SnapshotError
from ecoengine.protocols.snapshot import FrozenRecipe, SnapshotBackend

logger = logging.getLogger(__name__)


class OrmSnapshotBackend(SnapshotBackend):
    """
    Reads cookbooks, pantries and recipes through the Django ORM.

    Database failures are reported as SnapshotError (SNAPSHOT_UNAVAILABLE);
    an unknown cookbook as EcoError (COOKBOOK_NOT_FOUND).
    """

    def list_pantry_commodities(self, cookbook_id: UUID) -> set[UUID]:
        from ecoengine.models import Cookbook

        try:
            cookbook = Cookbook.objects.get(uuid=cookbook_id)
            return cookbook.pantry_ids()
        except Cookbook.DoesNotExist:
            raise EcoError("COOKBOOK_NOT_FOUND", cookbook=str(cookbook_id)) from None
        except DatabaseError as e:
            logger.error(f"Failed to read pantry of cookbook {cookbook_id}: {e}")
            raise SnapshotError(
                "SNAPSHOT_UNAVAILABLE", cookbook=str(cookbook_id), reason=str(e)
            ) from e

    def list_recipes_producing(self, cookbook_id: UUID) -> dict[UUID, set[FrozenRecipe]]:
        from ecoengine.models import Recipe

        grouped: dict[UUID, set[FrozenRecipe]] = {}
        try:
            recipes = (
                Recipe.objects.filter(cookbook__uuid=cookbook_id)
                .select_related("product")
                .prefetch_related("ingredients__commodity")
            )
            for recipe in recipes:
                frozen = recipe.freeze()
                grouped.setdefault(frozen.product, set()).add(frozen)
        except DatabaseError as e:
            logger.error(f"Failed to read recipes of cookbook {cookbook_id}: {e}")
            raise SnapshotError(
                "SNAPSHOT_UNAVAILABLE", cookbook=str(cookbook_id), reason=str(e)
            ) from e

        return grouped
