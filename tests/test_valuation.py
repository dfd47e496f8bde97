"""
Tests for the valuation engine (ecoengine.services.valuation).

Runs against frozen snapshots only, no database.
"""

import uuid
from decimal import Context, Decimal

import pytest

from ecoengine.adapters.memory import InMemorySnapshotBackend
from ecoengine.exceptions import EcoError
from ecoengine.protocols.snapshot import FrozenRecipe, RecipeGraphSnapshot
from ecoengine.results import NONFUNGIBLE, Fungible
from ecoengine.services import ValuationEngine, analyze, combine_cost
from ecoengine.services.valuation import DEFAULT_PRECISION


def commodity():
    return uuid.uuid4()


def recipe(product, work="CRAFT", cost=1, ingredients=None):
    return FrozenRecipe.of(
        id=uuid.uuid4(),
        product=product,
        work=work,
        cost=cost,
        ingredients=ingredients,
    )


def snapshot(pantry, recipes=()):
    return RecipeGraphSnapshot.build(pantry, list(recipes))


# ═══════════════════════════════════════════════════════════════════
# combine_cost
# ═══════════════════════════════════════════════════════════════════


class TestCombineCost:
    def test_purchase_adds_flat_cost(self):
        frozen = recipe(commodity(), work="PURCHASE", cost=2)
        assert combine_cost(frozen, Decimal("3")) == Decimal("5")

    def test_craft_multiplies(self):
        frozen = recipe(commodity(), work="CRAFT", cost=2)
        assert combine_cost(frozen, Decimal("3")) == Decimal("6")

    @pytest.mark.parametrize("work", ["OBTAIN", "SMELT", "WAIT", "SELL"])
    def test_other_work_multiplies(self, work):
        frozen = recipe(commodity(), work=work, cost="1.5")
        assert combine_cost(frozen, Decimal("4")) == Decimal("6.0")


# ═══════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════


class TestFungibility:
    def test_pure_resource_is_worth_its_purchase_cost(self):
        ore = commodity()
        analysis = analyze(snapshot({ore}, [recipe(ore, work="PURCHASE", cost=7)]))

        assert analysis.is_fungible(ore)
        assert analysis.value_of(ore) == Decimal("7")

    def test_commodity_without_recipes_is_nonfungible(self):
        orphan = commodity()
        analysis = analyze(snapshot({orphan}))

        assert not analysis.is_fungible(orphan)
        assert orphan in analysis.nonfungible_ids()

    def test_recipe_with_nonfungible_ingredient_is_unusable(self):
        orphan, product = commodity(), commodity()
        analysis = analyze(snapshot(
            {orphan, product},
            [recipe(product, ingredients={orphan: 1})],
        ))

        assert analysis.nonfungible_ids() == {orphan, product}

    def test_ingredient_outside_pantry_is_nonfungible(self):
        product, outsider = commodity(), commodity()
        analysis = analyze(snapshot(
            {product},
            [
                recipe(outsider, work="PURCHASE", cost=1),
                recipe(product, ingredients={outsider: 2}),
            ],
        ))

        assert analysis.commodity_ids() == {product}
        assert not analysis.is_fungible(product)

    def test_work_methods_combine_ingredient_cost(self):
        ore, bought, crafted = commodity(), commodity(), commodity()
        analysis = analyze(snapshot(
            {ore, bought, crafted},
            [
                recipe(ore, work="PURCHASE", cost=3),
                recipe(bought, work="PURCHASE", cost=2, ingredients={ore: 1}),
                recipe(crafted, work="CRAFT", cost=2, ingredients={ore: 1}),
            ],
        ))

        assert analysis.value_of(bought) == Decimal("5")
        assert analysis.value_of(crafted) == Decimal("6")

    def test_quantities_scale_ingredient_cost(self):
        ore, ingot = commodity(), commodity()
        analysis = analyze(snapshot(
            {ore, ingot},
            [
                recipe(ore, work="PURCHASE", cost="2.5"),
                recipe(ingot, work="SMELT", cost=1, ingredients={ore: 4}),
            ],
        ))

        assert analysis.value_of(ingot) == Decimal("10.0")

    def test_minimum_over_recipes(self):
        gem = commodity()
        analysis = analyze(snapshot(
            {gem},
            [
                recipe(gem, work="PURCHASE", cost=10),
                recipe(gem, work="PURCHASE", cost=4),
            ],
        ))

        assert analysis.value_of(gem) == Decimal("4")

    def test_minimum_skips_unusable_recipes(self):
        gem, orphan = commodity(), commodity()
        analysis = analyze(snapshot(
            {gem, orphan},
            [
                recipe(gem, work="PURCHASE", cost=0, ingredients={orphan: 1}),
                recipe(gem, work="PURCHASE", cost=9),
            ],
        ))

        assert analysis.value_of(gem) == Decimal("9")

    def test_zero_cost_recipe_wins(self):
        water = commodity()
        analysis = analyze(snapshot(
            {water},
            [
                recipe(water, work="PURCHASE", cost=3),
                recipe(water, work="OBTAIN", cost=5),
            ],
        ))

        # OBTAIN without ingredients multiplies a zero ingredient cost
        assert analysis.value_of(water) == Decimal("0")


# ═══════════════════════════════════════════════════════════════════
# Cycles
# ═══════════════════════════════════════════════════════════════════


class TestCycles:
    def test_two_cycle_is_nonfungible(self):
        a, b = commodity(), commodity()
        analysis = analyze(snapshot(
            {a, b},
            [
                recipe(a, ingredients={b: 1}),
                recipe(b, ingredients={a: 1}),
            ],
        ))

        assert analysis.nonfungible_ids() == {a, b}

    def test_self_loop_is_skipped(self):
        seed = commodity()
        analysis = analyze(snapshot(
            {seed},
            [
                recipe(seed, work="WAIT", cost=2, ingredients={seed: 1}),
                recipe(seed, work="PURCHASE", cost=8),
            ],
        ))

        assert analysis.value_of(seed) == Decimal("8")

    def test_cycle_with_escape_hatch(self):
        # iron ↔ block, iron also buyable
        iron, block = commodity(), commodity()
        analysis = analyze(snapshot(
            {iron, block},
            [
                recipe(iron, work="CRAFT", cost=1, ingredients={block: 1}),
                recipe(iron, work="PURCHASE", cost=2),
                recipe(block, work="CRAFT", cost=1, ingredients={iron: 9}),
            ],
        ))

        assert analysis.value_of(iron) == Decimal("2")
        assert analysis.value_of(block) == Decimal("18")

    def test_longer_cycle_terminates(self):
        ring = [commodity() for _ in range(6)]
        recipes = [
            recipe(ring[i], ingredients={ring[(i + 1) % len(ring)]: 1})
            for i in range(len(ring))
        ]
        analysis = analyze(snapshot(set(ring), recipes))

        assert analysis.nonfungible_ids() == set(ring)


# ═══════════════════════════════════════════════════════════════════
# Engine behaviour
# ═══════════════════════════════════════════════════════════════════


def _crafting_tree():
    ore, coal, iron, steel, sword = (commodity() for _ in range(5))
    recipes = [
        recipe(ore, work="PURCHASE", cost=1),
        recipe(coal, work="PURCHASE", cost=2),
        recipe(iron, work="SMELT", cost=1, ingredients={ore: 1, coal: 1}),
        recipe(iron, work="CRAFT", cost=1, ingredients={steel: 1}),
        recipe(steel, work="SMELT", cost=2, ingredients={iron: 2, coal: 1}),
        recipe(sword, work="CRAFT", cost=1, ingredients={steel: 2, iron: 1}),
    ]
    return snapshot({ore, coal, iron, steel, sword}, recipes), (ore, coal, iron, steel, sword)


class TestEngine:
    def test_deterministic(self):
        snap, _ = _crafting_tree()
        assert analyze(snap) == analyze(snap)

    def test_memoization_does_not_change_results(self):
        snap, (ore, coal, iron, steel, sword) = _crafting_tree()

        memoized = analyze(snap, memoize=True)
        plain = analyze(snap, memoize=False)

        assert memoized == plain
        assert memoized.value_of(iron) == Decimal("3")
        assert memoized.value_of(steel) == Decimal("16")
        assert memoized.value_of(sword) == Decimal("35")

    def test_value_of_single_commodity(self):
        snap, (ore, coal, iron, steel, sword) = _crafting_tree()
        engine = ValuationEngine(snap)

        assert engine.value_of(iron) == Fungible(Decimal("3"))
        assert engine.value_of(commodity()) is NONFUNGIBLE

    def test_deep_chain_does_not_exhaust_the_stack(self):
        chain = [commodity() for _ in range(5000)]
        recipes = [recipe(chain[0], work="PURCHASE", cost=1)]
        recipes += [
            recipe(chain[i], work="PURCHASE", cost=1, ingredients={chain[i - 1]: 1})
            for i in range(1, len(chain))
        ]

        analysis = analyze(snapshot(set(chain), recipes))

        assert analysis.value_of(chain[-1]) == Decimal("5000")

    def test_every_pantry_commodity_is_classified(self):
        snap, ids = _crafting_tree()
        analysis = analyze(snap)

        assert analysis.commodity_ids() == set(ids)
        assert len(analysis) == len(ids)

    def test_precision_bounds_significant_digits(self):
        cost = Decimal("9999999999.9999")
        ore, ingot, plate = commodity(), commodity(), commodity()
        snap = snapshot({ore, ingot, plate}, [
            recipe(ore, work="PURCHASE", cost=cost),
            recipe(ingot, work="CRAFT", cost=cost, ingredients={ore: 1}),
            recipe(plate, work="CRAFT", cost=cost, ingredients={ingot: 1}),
        ])
        exact = Decimal(f"{99999999999999 ** 3}E-12")

        wide = analyze(snap, precision=50).value_of(plate)
        default = analyze(snap).value_of(plate)

        assert wide == exact
        assert default != exact
        assert default == Context(prec=DEFAULT_PRECISION).plus(exact)
        assert ValuationEngine(snap, precision=50).value_of(plate) == Fungible(exact)

    def test_values_beyond_default_exponent_range(self):
        ore, ingot = commodity(), commodity()
        snap = snapshot({ore, ingot}, [
            recipe(ore, work="PURCHASE", cost="1E+600000"),
            recipe(ingot, work="CRAFT", cost="1E+600000", ingredients={ore: 1}),
        ])

        assert analyze(snap).value_of(ingot) == Decimal("1E+1200000")


# ═══════════════════════════════════════════════════════════════════
# In-memory backend
# ═══════════════════════════════════════════════════════════════════


class TestInMemoryBackend:
    def test_snapshot_roundtrip(self):
        cookbook = uuid.uuid4()
        ore, ingot = commodity(), commodity()
        backend = InMemorySnapshotBackend()
        backend.register(
            cookbook,
            pantry={ore, ingot},
            recipes=[
                recipe(ore, work="PURCHASE", cost=2),
                recipe(ingot, work="SMELT", cost=3, ingredients={ore: 1}),
            ],
        )

        snap = backend.snapshot(cookbook)

        assert snap.cookbook == cookbook
        assert snap.pantry == {ore, ingot}
        assert analyze(snap).value_of(ingot) == Decimal("6")

    def test_unknown_cookbook(self):
        with pytest.raises(EcoError) as exc:
            InMemorySnapshotBackend().snapshot(uuid.uuid4())
        assert exc.value.code == "COOKBOOK_NOT_FOUND"

    def test_recipes_outside_pantry_are_dropped(self):
        cookbook = uuid.uuid4()
        inside, outside = commodity(), commodity()
        backend = InMemorySnapshotBackend()
        backend.register(cookbook, {inside}, [recipe(outside, work="PURCHASE")])

        snap = backend.snapshot(cookbook)

        assert snap.recipes_for(outside) == ()
        assert outside not in snap.recipes
