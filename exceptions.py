"""
EcoEngine Exceptions.

All ecoengine errors are wrapped in EcoError for consistent handling.
"""

from typing import Any


class EcoError(Exception):
    """
    Base exception for all EcoEngine errors.

    Usage:
        raise EcoError('COMMODITY_IN_USE', commodity=str(commodity.uuid))

    Attributes:
        code: Error code (COMMODITY_IN_USE, GHOST_COMMODITY, etc.)
        details: Additional context as keyword arguments
        http_status: Status the API layer answers with
    """

    http_status = 400

    def __init__(self, code: str, **details: Any):
        self.code = code
        self.details = details
        message = f"{code}: {details}" if details else code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{type(self).__name__}({self.code}: {details_str})"
        return f"{type(self).__name__}({self.code})"


class ClassificationConflict(EcoError):
    """A commodity was classified twice in one Analysis or Diff."""

    http_status = 500

    def __init__(self, commodity, current: str, attempted: str):
        super().__init__(
            "CLASSIFICATION_CONFLICT",
            commodity=str(commodity),
            current=current,
            attempted=attempted,
        )


class SnapshotError(EcoError):
    """The recipe graph could not be read for a cookbook."""

    http_status = 503


# Common error codes
# CLASSIFICATION_CONFLICT: Commodity already classified differently
# GHOST_COMMODITY: Commodity in a diff union but in neither pantry
# COMMODITY_NOT_FUNGIBLE: Value requested for a nonfungible commodity
# COMMODITY_NOT_IN_PANTRY: Commodity is not part of the cookbook's pantry
# COMMODITY_IN_USE: A recipe of the cookbook produces or consumes the commodity
# COOKBOOK_NOT_FOUND: Cookbook does not exist
# UNSUPPORTED_PRODUCT: Recipe product outside the cookbook's pantry
# UNSUPPORTED_INGREDIENT: Recipe ingredient outside the cookbook's pantry
# INVALID_QUANTITY: Ingredient quantity is not a positive integer
# SNAPSHOT_UNAVAILABLE: Snapshot backend failed to read the recipe graph
