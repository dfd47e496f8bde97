"""
Django EcoEngine - Commodity valuation for recipe-driven game economies.

Values every commodity of a cookbook through its cheapest cycle-free
recipe chain, and reports what changed between two cookbooks.

Usage:
    from ecoengine import eco, EcoError

    analysis = eco.analyze(vanilla)
    for commodity in analysis.nonfungible_ids():
        print(f"Unproducible: {commodity}")

    diff = eco.diff(vanilla, modded)
    for commodity, delta in diff.modified.items():
        print(f"{commodity}: {delta:+}")
"""

from ecoengine.exceptions import ClassificationConflict, EcoError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("eco", "Eco"):
        from ecoengine.service import Eco

        return Eco
    if name in ("Analysis", "Diff"):
        from ecoengine import results

        return getattr(results, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["eco", "Eco", "EcoError", "ClassificationConflict", "Analysis", "Diff"]
__version__ = "0.1.0"
