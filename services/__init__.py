"""
EcoEngine Services.

Pure computations over immutable snapshots:
- valuation: cheapest cycle-free recipe chain per commodity
- diff: MODIFIED / DISAPPEARING / NEW across two analyses
"""

from ecoengine.services.diff import DiffEngine, diff
from ecoengine.services.valuation import ValuationEngine, analyze, combine_cost

__all__ = [
    "ValuationEngine",
    "DiffEngine",
    "analyze",
    "diff",
    "combine_cost",
]
