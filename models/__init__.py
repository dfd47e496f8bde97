"""
EcoEngine Models.

Core models for commodity valuation:
- Commodity: anything with a value
- Cookbook: a collection of recipes plus its pantry of commodities
- Recipe: how a commodity is obtained (work method, cost, ingredients)
- Ingredient: commodity consumed by a recipe
"""

from ecoengine.models.commodity import Commodity
from ecoengine.models.cookbook import Cookbook
from ecoengine.models.recipe import Ingredient, Recipe, Work

__all__ = [
    "Commodity",
    "Cookbook",
    "Recipe",
    "Ingredient",
    "Work",
]
