"""State document aggregate and its persisted JSON shape."""

import logging
import math
from dataclasses import dataclass, field
from typing import Annotated, Literal, TypeVar, assert_never

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from kcal_tracker.domain.catalog import Catalog
from kcal_tracker.domain.errors import DocumentShapeError
from kcal_tracker.domain.models import (
    DEFAULT_GOALS,
    AbsoluteAmount,
    Basis,
    Entry,
    Goals,
    Ingredient,
    IngredientEntry,
    Meal,
    Recipe,
    RecipeEntry,
    RecipeLine,
    ServingFactor,
)
from kcal_tracker.domain.validation import parse_number

SCHEMA_VERSION = 2

_logger = logging.getLogger(__name__)


@dataclass
class StateDocument:
    """Catalogs, day logs and goals: everything that is persisted."""

    ingredients: Catalog[Ingredient] = field(default_factory=Catalog)
    recipes: Catalog[Recipe] = field(default_factory=Catalog)
    day_logs: dict[str, list[Entry]] = field(default_factory=dict)
    goals: Goals = DEFAULT_GOALS

    @classmethod
    def empty(cls) -> "StateDocument":
        return cls()


def _lenient_number(value: object) -> float:
    number = parse_number(value)
    return number if math.isfinite(number) else 0.0


def _lenient_basis(value: object) -> Basis:
    # Anything that is not a per-100 basis is counted per piece.
    try:
        return Basis(str(value))
    except ValueError:
        return Basis.PIECE


def _lenient_meal(value: object) -> Meal | None:
    try:
        return Meal(str(value)) if value is not None else None
    except ValueError:
        return None


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


LenientNumber = Annotated[float, BeforeValidator(_lenient_number)]


class _Record(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, extra="ignore"
    )


R = TypeVar("R", bound=_Record)


class IngredientRecord(_Record):
    """Persisted ingredient."""

    id: str
    name: str = ""
    brand: Annotated[str | None, BeforeValidator(_optional_text)] = None
    unit_type: Annotated[Basis, BeforeValidator(_lenient_basis)] = Field(
        default=Basis.PER_100_G, alias="unitType"
    )
    kcal: LenientNumber = 0.0
    protein: LenientNumber = 0.0
    carbs: LenientNumber = 0.0
    fat: LenientNumber = 0.0
    price: LenientNumber = 0.0


class RecipeLineRecord(_Record):
    """Persisted recipe line."""

    ingredient_id: str = Field(alias="ingredientId")
    amount: LenientNumber = 0.0


class RecipeRecord(_Record):
    """Persisted recipe."""

    id: str
    name: str = ""
    items: list[RecipeLineRecord] = Field(default_factory=list)


class EntryRecord(_Record):
    """Persisted day log entry."""

    id: str
    type: Literal["ingredient", "recipe"]
    ref_id: str = Field(alias="refId")
    amount: LenientNumber = 0.0
    meal: Annotated[Meal | None, BeforeValidator(_lenient_meal)] = None


def _goal_or_default(name: str) -> BeforeValidator:
    default = getattr(DEFAULT_GOALS, name)

    def validate(value: object) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return default
        if not math.isfinite(value) or value <= 0:
            return default
        return float(value)

    return BeforeValidator(validate)


class GoalsRecord(_Record):
    """Persisted goals; invalid fields fall back to defaults."""

    kcal: Annotated[float, _goal_or_default("kcal")] = DEFAULT_GOALS.kcal
    protein: Annotated[float, _goal_or_default("protein")] = DEFAULT_GOALS.protein
    price: Annotated[float, _goal_or_default("price")] = DEFAULT_GOALS.price
    carbs: Annotated[float, _goal_or_default("carbs")] = DEFAULT_GOALS.carbs
    fat: Annotated[float, _goal_or_default("fat")] = DEFAULT_GOALS.fat


def read_document(raw: object) -> StateDocument:
    """Build a document from stored data, resetting malformed sections."""
    if not isinstance(raw, dict):
        _logger.warning("Stored document is not an object; starting empty")
        return StateDocument.empty()
    ingredients = raw.get("ingredients")
    recipes = raw.get("recipes")
    day_logs = raw.get("dayLogs")
    goals = raw.get("goals")
    return _build_document(
        ingredients if isinstance(ingredients, list) else [],
        recipes if isinstance(recipes, list) else [],
        day_logs if isinstance(day_logs, dict) else {},
        goals if isinstance(goals, dict) else {},
    )


def parse_import(raw: object) -> StateDocument:
    """Validate an imported document's structure and build it.

    Raises DocumentShapeError when the document is not an object, when
    ``ingredients`` or ``recipes`` are not arrays, or when ``dayLogs`` or
    ``goals`` are not objects.
    """
    if not isinstance(raw, dict):
        raise DocumentShapeError("Invalid document")
    if not isinstance(raw.get("ingredients"), list):
        raise DocumentShapeError("Missing ingredients")
    if not isinstance(raw.get("recipes"), list):
        raise DocumentShapeError("Missing recipes")
    if not isinstance(raw.get("dayLogs"), dict):
        raise DocumentShapeError("Missing dayLogs")
    if not isinstance(raw.get("goals"), dict):
        raise DocumentShapeError("Missing goals")
    return _build_document(
        raw["ingredients"], raw["recipes"], raw["dayLogs"], raw["goals"]
    )


def dump_document(
    document: StateDocument, schema_version: int | None = None
) -> dict[str, object]:
    """Serialize a document into its persisted JSON shape."""
    payload: dict[str, object] = {
        "ingredients": [
            _ingredient_record(item).model_dump(mode="json", by_alias=True)
            for item in document.ingredients
        ],
        "recipes": [
            _recipe_record(recipe).model_dump(mode="json", by_alias=True)
            for recipe in document.recipes
        ],
        "dayLogs": {
            day_key: [
                _entry_record(entry).model_dump(
                    mode="json", by_alias=True, exclude_none=True
                )
                for entry in entries
            ]
            for day_key, entries in document.day_logs.items()
        },
        "goals": GoalsRecord(
            kcal=document.goals.kcal,
            protein=document.goals.protein,
            price=document.goals.price,
            carbs=document.goals.carbs,
            fat=document.goals.fat,
        ).model_dump(),
    }
    if schema_version is not None:
        payload["schemaVersion"] = schema_version
    return payload


def _build_document(
    ingredients: list[object],
    recipes: list[object],
    day_logs: dict[str, object],
    goals: dict[str, object],
) -> StateDocument:
    document = StateDocument(goals=_goals(GoalsRecord.model_validate(goals)))
    for raw_ingredient in ingredients:
        record = _validate(IngredientRecord, raw_ingredient, "ingredient")
        if record is not None:
            document.ingredients.add(_ingredient(record))
    for raw_recipe in recipes:
        record = _validate(RecipeRecord, raw_recipe, "recipe")
        if record is not None:
            document.recipes.add(_recipe(record))
    for day_key, raw_entries in day_logs.items():
        entries: list[Entry] = []
        for raw_entry in raw_entries if isinstance(raw_entries, list) else []:
            record = _validate(EntryRecord, raw_entry, "day log entry")
            if record is not None:
                entries.append(_entry(record))
        document.day_logs[str(day_key)] = entries
    return document


def _validate(model: type[R], raw: object, label: str) -> R | None:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        _logger.warning(
            "Skipping unreadable %s: %s errors", label, exc.error_count()
        )
        return None


def _goals(record: GoalsRecord) -> Goals:
    return Goals(
        kcal=record.kcal,
        protein=record.protein,
        price=record.price,
        carbs=record.carbs,
        fat=record.fat,
    )


def _ingredient(record: IngredientRecord) -> Ingredient:
    return Ingredient(
        id=record.id,
        name=record.name,
        brand=record.brand,
        basis=record.unit_type,
        kcal=record.kcal,
        protein=record.protein,
        carbs=record.carbs,
        fat=record.fat,
        price=record.price,
    )


def _ingredient_record(ingredient: Ingredient) -> IngredientRecord:
    return IngredientRecord(
        id=ingredient.id,
        name=ingredient.name,
        brand=ingredient.brand,
        unit_type=ingredient.basis,
        kcal=ingredient.kcal,
        protein=ingredient.protein,
        carbs=ingredient.carbs,
        fat=ingredient.fat,
        price=ingredient.price,
    )


def _recipe(record: RecipeRecord) -> Recipe:
    return Recipe(
        id=record.id,
        name=record.name,
        lines=tuple(
            RecipeLine(
                ingredient_id=item.ingredient_id,
                amount=AbsoluteAmount(item.amount),
            )
            for item in record.items
        ),
    )


def _recipe_record(recipe: Recipe) -> RecipeRecord:
    return RecipeRecord(
        id=recipe.id,
        name=recipe.name,
        items=[
            RecipeLineRecord(ingredient_id=line.ingredient_id, amount=line.amount)
            for line in recipe.lines
        ],
    )


def _entry(record: EntryRecord) -> Entry:
    if record.type == "ingredient":
        return IngredientEntry(
            id=record.id,
            ref_id=record.ref_id,
            amount=AbsoluteAmount(record.amount),
            meal=record.meal,
        )
    return RecipeEntry(
        id=record.id,
        ref_id=record.ref_id,
        factor=ServingFactor(record.amount),
        meal=record.meal,
    )


def _entry_record(entry: Entry) -> EntryRecord:
    match entry:
        case IngredientEntry():
            return EntryRecord(
                id=entry.id,
                type="ingredient",
                ref_id=entry.ref_id,
                amount=entry.amount,
                meal=entry.meal,
            )
        case RecipeEntry():
            return EntryRecord(
                id=entry.id,
                type="recipe",
                ref_id=entry.ref_id,
                amount=entry.factor,
                meal=entry.meal,
            )
        case _:
            assert_never(entry)
