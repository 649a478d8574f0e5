"""Tests for quantity normalization and recipe composition."""

import pytest

from kcal_tracker.domain.catalog import Catalog
from kcal_tracker.domain.models import (
    AbsoluteAmount,
    Basis,
    IngredientEntry,
    Recipe,
    RecipeEntry,
    RecipeLine,
    ServingFactor,
    Totals,
)
from kcal_tracker.domain.nutrition import (
    entry_totals,
    normalize,
    resolve_recipe,
    sum_entries,
)
from tests.conftest import make_ingredient


def _as_tuple(totals: Totals) -> tuple[float, ...]:
    return (totals.kcal, totals.protein, totals.carbs, totals.fat, totals.price)


@pytest.mark.parametrize("basis", [Basis.PER_100_G, Basis.PER_100_ML])
def test_normalize_is_identity_at_100_units(basis: Basis) -> None:
    ingredient = make_ingredient(basis=basis)

    totals = normalize(ingredient, 100)

    assert totals == Totals(kcal=389, protein=13, carbs=66, fat=7, price=0.19)


def test_normalize_per_piece_scales_linearly() -> None:
    egg = make_ingredient(
        "egg", name="Egg", basis=Basis.PIECE, kcal=78, protein=6.3, carbs=0.6,
        fat=5.3, price=0.35,
    )

    single = normalize(egg, 3)
    double = normalize(egg, 6)

    assert _as_tuple(double) == pytest.approx(_as_tuple(single.scaled(2)))
    assert single.kcal == pytest.approx(234)


def test_normalize_oats_breakfast_portion() -> None:
    totals = normalize(make_ingredient(), 80)

    assert _as_tuple(totals) == pytest.approx((311.2, 10.4, 52.8, 5.6, 0.152))


def test_normalize_does_not_validate_amount() -> None:
    totals = normalize(make_ingredient(), -100)

    assert totals.kcal == -389


def test_resolve_recipe_empty_lines_is_zero() -> None:
    assert resolve_recipe(Recipe(id="r", name="Empty"), Catalog()) == Totals()


def test_resolve_recipe_is_order_independent() -> None:
    ingredients = Catalog(
        [
            make_ingredient(),
            make_ingredient("milk", name="Milk", basis=Basis.PER_100_ML, kcal=64,
                            protein=3.4, carbs=4.8, fat=3.5, price=0.11),
        ]
    )
    lines = (
        RecipeLine("oats", AbsoluteAmount(80)),
        RecipeLine("milk", AbsoluteAmount(250)),
    )
    forward = resolve_recipe(Recipe("r", "Porridge", lines), ingredients)
    backward = resolve_recipe(Recipe("r", "Porridge", lines[::-1]), ingredients)

    assert _as_tuple(forward) == pytest.approx(_as_tuple(backward))
    assert forward.kcal == pytest.approx(311.2 + 160)


def test_resolve_recipe_skips_dangling_lines() -> None:
    ingredients = Catalog([make_ingredient()])
    recipe = Recipe(
        id="r",
        name="Porridge",
        lines=(
            RecipeLine("oats", AbsoluteAmount(80)),
            RecipeLine("deleted", AbsoluteAmount(200)),
        ),
    )

    totals = resolve_recipe(recipe, ingredients)

    assert totals == normalize(make_ingredient(), 80)


def test_entry_totals_scales_recipe_by_factor() -> None:
    ingredients = Catalog([make_ingredient()])
    recipes = Catalog(
        [Recipe("r", "Porridge", (RecipeLine("oats", AbsoluteAmount(100)),))]
    )
    entry = RecipeEntry(id="e", ref_id="r", factor=ServingFactor(0.5))

    totals = entry_totals(entry, ingredients, recipes)

    assert totals is not None
    assert totals.kcal == pytest.approx(194.5)


def test_entry_totals_returns_none_for_stale_reference() -> None:
    entry = IngredientEntry(id="e", ref_id="gone", amount=AbsoluteAmount(50))

    assert entry_totals(entry, Catalog(), Catalog()) is None


def test_sum_entries_ignores_stale_entries() -> None:
    ingredients = Catalog([make_ingredient()])
    entries = [
        IngredientEntry(id="a", ref_id="oats", amount=AbsoluteAmount(100)),
        IngredientEntry(id="b", ref_id="gone", amount=AbsoluteAmount(100)),
        RecipeEntry(id="c", ref_id="gone", factor=ServingFactor(1)),
    ]

    assert sum_entries(entries, ingredients, Catalog()).kcal == pytest.approx(389)
