"""Services for managing ingredients and recipes."""

import locale
import logging
import unicodedata
from dataclasses import dataclass
from typing import TypeVar
from uuid import uuid4

from kcal_tracker.domain.errors import (
    InvalidInputError,
    NotFoundError,
    ReferencedByRecipeError,
)
from kcal_tracker.domain.models import (
    AbsoluteAmount,
    Ingredient,
    Recipe,
    RecipeLine,
    Totals,
)
from kcal_tracker.domain.nutrition import resolve_recipe
from kcal_tracker.domain.validation import (
    optional_text,
    require_basis,
    require_name,
    require_non_negative,
    require_positive,
)
from kcal_tracker.services.state import StateService

_logger = logging.getLogger(__name__)

_Named = TypeVar("_Named", Ingredient, Recipe)

_NUTRIENT_LABELS = {
    "kcal": "kcal",
    "protein": "Protein",
    "carbs": "Carbs",
    "fat": "Fat",
    "price": "Price",
}


@dataclass
class CatalogService:
    """Application service for the ingredient and recipe catalogs."""

    state: StateService

    def list_ingredients(self, query: str | None = None) -> list[Ingredient]:
        """Return ingredients sorted by name, filtered by name or brand."""
        needle = (query or "").strip().lower()
        items = [
            item
            for item in self.state.document.ingredients
            if not needle
            or needle in item.name.lower()
            or needle in (item.brand or "").lower()
        ]
        return _sort_by_name(items)

    def get_ingredient(self, ingredient_id: str) -> Ingredient:
        ingredient = self.state.document.ingredients.find(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        return ingredient

    def create_ingredient(self, payload: dict[str, object]) -> Ingredient:
        """Validate and add a new ingredient."""
        ingredient = _ingredient_from_payload(uuid4().hex, payload)
        self.state.document.ingredients.add(ingredient)
        self.state.commit()
        return ingredient

    def update_ingredient(
        self, ingredient_id: str, payload: dict[str, object]
    ) -> Ingredient:
        """Replace the fields of an existing ingredient."""
        self.get_ingredient(ingredient_id)
        ingredient = _ingredient_from_payload(ingredient_id, payload)
        self.state.document.ingredients.replace(ingredient)
        self.state.commit()
        return ingredient

    def delete_ingredient(self, ingredient_id: str) -> None:
        """Delete an ingredient unless a recipe still uses it.

        Day log entries that point at the ingredient are kept; they are
        hidden from views and totals from now on.
        """
        self.get_ingredient(ingredient_id)
        recipe_ids = self.recipes_using(ingredient_id)
        if recipe_ids:
            raise ReferencedByRecipeError(ingredient_id, recipe_ids)
        self.state.document.ingredients.remove(ingredient_id)
        self.state.commit()
        _logger.info("Deleted ingredient %s", ingredient_id)

    def recipes_using(self, ingredient_id: str) -> list[str]:
        """Return ids of recipes with a line for this ingredient."""
        return [
            recipe.id
            for recipe in self.state.document.recipes
            if any(line.ingredient_id == ingredient_id for line in recipe.lines)
        ]

    def list_recipes(self, query: str | None = None) -> list[Recipe]:
        """Return recipes sorted by name, filtered by name."""
        needle = (query or "").strip().lower()
        items = [
            recipe
            for recipe in self.state.document.recipes
            if not needle or needle in recipe.name.lower()
        ]
        return _sort_by_name(items)

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.state.document.recipes.find(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    def create_recipe(self, payload: dict[str, object]) -> Recipe:
        """Validate and add a new recipe."""
        recipe = _recipe_from_payload(uuid4().hex, payload)
        self.state.document.recipes.add(recipe)
        self.state.commit()
        return recipe

    def update_recipe(self, recipe_id: str, payload: dict[str, object]) -> Recipe:
        """Replace the name and lines of an existing recipe."""
        self.get_recipe(recipe_id)
        recipe = _recipe_from_payload(recipe_id, payload)
        self.state.document.recipes.replace(recipe)
        self.state.commit()
        return recipe

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe; logged entries for it stay stored but hidden."""
        self.get_recipe(recipe_id)
        self.state.document.recipes.remove(recipe_id)
        self.state.commit()
        _logger.info("Deleted recipe %s", recipe_id)

    def recipe_totals(self, recipe_id: str) -> Totals:
        """Return per-batch totals for a recipe."""
        return resolve_recipe(
            self.get_recipe(recipe_id), self.state.document.ingredients
        )


def _collation_key(name: str) -> tuple[str, str]:
    """Compare case- and accent-insensitively first, then by locale."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), locale.strxfrm(name)


def _sort_by_name(items: list[_Named]) -> list[_Named]:
    return sorted(items, key=lambda item: _collation_key(item.name))


def _ingredient_from_payload(
    ingredient_id: str, payload: dict[str, object]
) -> Ingredient:
    values = {
        key: require_non_negative(payload.get(key), label)
        for key, label in _NUTRIENT_LABELS.items()
    }
    return Ingredient(
        id=ingredient_id,
        name=require_name(payload.get("name")),
        brand=optional_text(payload.get("brand")),
        basis=require_basis(payload.get("basis")),
        kcal=values["kcal"],
        protein=values["protein"],
        carbs=values["carbs"],
        fat=values["fat"],
        price=values["price"],
    )


def _recipe_from_payload(recipe_id: str, payload: dict[str, object]) -> Recipe:
    name = require_name(payload.get("name"))
    raw_lines = payload.get("lines")
    if not isinstance(raw_lines, list) or not raw_lines:
        raise InvalidInputError("Add at least one ingredient.")
    lines: list[RecipeLine] = []
    for raw_line in raw_lines:
        if not isinstance(raw_line, dict):
            raise InvalidInputError("Invalid recipe line.")
        ingredient_id = raw_line.get("ingredient_id")
        if not ingredient_id:
            raise InvalidInputError("Recipe line is missing an ingredient.")
        lines.append(
            RecipeLine(
                ingredient_id=str(ingredient_id),
                amount=AbsoluteAmount(
                    require_positive(raw_line.get("amount"), "Amount")
                ),
            )
        )
    return Recipe(id=recipe_id, name=name, lines=tuple(lines))
