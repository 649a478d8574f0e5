"""Nutrition and cost calculations over ingredients, recipes and entries."""

from collections.abc import Iterable
from typing import assert_never

from kcal_tracker.domain.catalog import Catalog
from kcal_tracker.domain.models import (
    ZERO_TOTALS,
    Basis,
    Entry,
    Ingredient,
    IngredientEntry,
    Recipe,
    RecipeEntry,
    Totals,
)


def normalize(ingredient: Ingredient, amount: float) -> Totals:
    """Convert per-basis values and an amount into absolute totals."""
    if ingredient.basis in (Basis.PER_100_G, Basis.PER_100_ML):
        factor = amount / 100
    else:
        factor = amount
    return Totals(
        kcal=ingredient.kcal * factor,
        protein=ingredient.protein * factor,
        carbs=ingredient.carbs * factor,
        fat=ingredient.fat * factor,
        price=ingredient.price * factor,
    )


def resolve_recipe(recipe: Recipe, ingredients: Catalog[Ingredient]) -> Totals:
    """Sum a recipe's lines; lines with unknown ingredients are skipped."""
    total = ZERO_TOTALS
    for line in recipe.lines:
        ingredient = ingredients.find(line.ingredient_id)
        if ingredient is None:
            continue
        total = total + normalize(ingredient, line.amount)
    return total


def entry_totals(
    entry: Entry,
    ingredients: Catalog[Ingredient],
    recipes: Catalog[Recipe],
) -> Totals | None:
    """Return what an entry contributes, or None for a stale reference."""
    match entry:
        case IngredientEntry():
            ingredient = ingredients.find(entry.ref_id)
            if ingredient is None:
                return None
            return normalize(ingredient, entry.amount)
        case RecipeEntry():
            recipe = recipes.find(entry.ref_id)
            if recipe is None:
                return None
            return resolve_recipe(recipe, ingredients).scaled(entry.factor)
        case _:
            assert_never(entry)


def is_resolvable(
    entry: Entry,
    ingredients: Catalog[Ingredient],
    recipes: Catalog[Recipe],
) -> bool:
    """Return True when the entry's reference still exists."""
    match entry:
        case IngredientEntry():
            return ingredients.find(entry.ref_id) is not None
        case RecipeEntry():
            return recipes.find(entry.ref_id) is not None
        case _:
            assert_never(entry)


def sum_entries(
    entries: Iterable[Entry],
    ingredients: Catalog[Ingredient],
    recipes: Catalog[Recipe],
) -> Totals:
    """Sum the contributions of entries, ignoring stale references."""
    total = ZERO_TOTALS
    for entry in entries:
        contribution = entry_totals(entry, ingredients, recipes)
        if contribution is not None:
            total = total + contribution
    return total
