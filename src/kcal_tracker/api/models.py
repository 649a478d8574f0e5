"""Pydantic models for API request payloads."""

from typing import Literal

from pydantic import BaseModel, Field

# Numbers may arrive as JSON numbers or as text such as "0,19"; the
# services parse and validate them.
NumberInput = float | str | None


class IngredientPayload(BaseModel):
    """Ingredient editor submission."""

    name: str = ""
    brand: str | None = None
    basis: str = Field(default="100g", description="100g, 100ml or piece")
    kcal: NumberInput = None
    protein: NumberInput = None
    carbs: NumberInput = None
    fat: NumberInput = None
    price: NumberInput = None


class RecipeLinePayload(BaseModel):
    """Ingredient line inside a recipe submission."""

    ingredient_id: str
    amount: NumberInput = None


class RecipePayload(BaseModel):
    """Recipe editor submission."""

    name: str = ""
    lines: list[RecipeLinePayload] = Field(default_factory=list)


class EntryPayload(BaseModel):
    """Log an ingredient amount or a recipe serving factor for a day."""

    type: Literal["ingredient", "recipe"]
    ref_id: str
    amount: NumberInput = None
    meal: str | None = None


class GoalsPayload(BaseModel):
    """Daily goals submission."""

    kcal: NumberInput = None
    protein: NumberInput = None
    price: NumberInput = None
    carbs: NumberInput = None
    fat: NumberInput = None


class SelectionPayload(BaseModel):
    """Change the selected day."""

    action: Literal["previous", "next", "today", "select"]
    day_key: str | None = None
