"""Domain models for the kcal tracker."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import NewType

# Grams, milliliters or piece count in an ingredient's basis unit.
AbsoluteAmount = NewType("AbsoluteAmount", float)
# Multiplier applied to a recipe's per-batch totals (0.5 = half portion).
ServingFactor = NewType("ServingFactor", float)


class Basis(StrEnum):
    """Reference quantity an ingredient's values are expressed per."""

    PER_100_G = "100g"
    PER_100_ML = "100ml"
    PIECE = "piece"


class Meal(StrEnum):
    """Meal slot an entry is logged under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACKS = "snacks"
    DINNER = "dinner"


MEALS: tuple[Meal, ...] = (Meal.BREAKFAST, Meal.LUNCH, Meal.SNACKS, Meal.DINNER)
DEFAULT_MEAL = Meal.SNACKS


@dataclass(frozen=True)
class Totals:
    """Absolute nutrition and cost amounts."""

    kcal: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    price: float = 0.0

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            kcal=self.kcal + other.kcal,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            price=self.price + other.price,
        )

    def scaled(self, factor: float) -> "Totals":
        """Return totals multiplied by a factor."""
        return Totals(
            kcal=self.kcal * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
            price=self.price * factor,
        )


ZERO_TOTALS = Totals()


@dataclass(frozen=True)
class Ingredient:
    """Reusable food item with values per one unit of basis."""

    id: str
    name: str
    brand: str | None
    basis: Basis
    kcal: float
    protein: float
    carbs: float
    fat: float
    price: float


@dataclass(frozen=True)
class RecipeLine:
    """One ingredient with its amount inside a recipe."""

    ingredient_id: str
    amount: AbsoluteAmount


@dataclass(frozen=True)
class Recipe:
    """Composite dish made of ingredient lines."""

    id: str
    name: str
    lines: tuple[RecipeLine, ...] = ()


@dataclass(frozen=True)
class IngredientEntry:
    """Logged consumption of an ingredient in absolute units."""

    id: str
    ref_id: str
    amount: AbsoluteAmount
    meal: Meal | None = None

    @property
    def meal_slot(self) -> Meal:
        """Meal slot, treating untagged entries as snacks."""
        return self.meal or DEFAULT_MEAL


@dataclass(frozen=True)
class RecipeEntry:
    """Logged consumption of a recipe scaled by a serving factor."""

    id: str
    ref_id: str
    factor: ServingFactor
    meal: Meal | None = None

    @property
    def meal_slot(self) -> Meal:
        """Meal slot, treating untagged entries as snacks."""
        return self.meal or DEFAULT_MEAL


Entry = IngredientEntry | RecipeEntry


@dataclass(frozen=True)
class Goals:
    """Daily targets per nutrition and cost dimension."""

    kcal: float = 2500.0
    protein: float = 160.0
    price: float = 15.0
    carbs: float = 300.0
    fat: float = 80.0


DEFAULT_GOALS = Goals()


@dataclass(frozen=True)
class EntryView:
    """Visible ledger entry with its resolved name and contribution."""

    entry: Entry
    name: str
    basis: Basis | None
    totals: Totals = field(default=ZERO_TOTALS)
