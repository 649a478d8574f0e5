"""Day ledger: logged entries per day and their totals."""

from dataclasses import dataclass
from typing import assert_never
from uuid import uuid4

from kcal_tracker.domain.calendar import parse_day_key
from kcal_tracker.domain.models import (
    AbsoluteAmount,
    Entry,
    EntryView,
    IngredientEntry,
    Meal,
    RecipeEntry,
    ServingFactor,
    Totals,
)
from kcal_tracker.domain.nutrition import entry_totals, is_resolvable, sum_entries
from kcal_tracker.domain.validation import optional_meal, require_positive
from kcal_tracker.services.state import StateService


@dataclass
class DayLedgerService:
    """Service for logging consumption against day keys."""

    state: StateService

    def log_ingredient(
        self, day_key: str, ingredient_id: str, amount: object, meal: object = None
    ) -> IngredientEntry:
        """Append an ingredient entry with an absolute amount."""
        entry = IngredientEntry(
            id=uuid4().hex,
            ref_id=ingredient_id,
            amount=AbsoluteAmount(require_positive(amount, "Amount")),
            meal=optional_meal(meal),
        )
        self.append(day_key, entry)
        return entry

    def log_recipe(
        self, day_key: str, recipe_id: str, factor: object, meal: object = None
    ) -> RecipeEntry:
        """Append a recipe entry scaled by a serving factor."""
        entry = RecipeEntry(
            id=uuid4().hex,
            ref_id=recipe_id,
            factor=ServingFactor(require_positive(factor, "Factor")),
            meal=optional_meal(meal),
        )
        self.append(day_key, entry)
        return entry

    def append(self, day_key: str, entry: Entry) -> None:
        """Store an entry under a day; references are checked on read."""
        parse_day_key(day_key)
        match entry:
            case IngredientEntry():
                require_positive(entry.amount, "Amount")
            case RecipeEntry():
                require_positive(entry.factor, "Factor")
            case _:
                assert_never(entry)
        self.state.document.day_logs.setdefault(day_key, []).append(entry)
        self.state.commit()

    def remove(self, day_key: str, entry_id: str) -> bool:
        """Remove the first entry with this id; no-op when absent."""
        entries = self.state.document.day_logs.get(day_key)
        if not entries:
            return False
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                del entries[index]
                self.state.commit()
                return True
        return False

    def stored_entries(self, day_key: str) -> list[Entry]:
        """Return every stored entry, including stale references."""
        return list(self.state.document.day_logs.get(day_key, []))

    def entries_for(self, day_key: str) -> list[Entry]:
        """Return the day's entries whose references still resolve."""
        document = self.state.document
        return [
            entry
            for entry in document.day_logs.get(day_key, [])
            if is_resolvable(entry, document.ingredients, document.recipes)
        ]

    def entries_for_meal(self, day_key: str, meal: Meal) -> list[Entry]:
        return [
            entry for entry in self.entries_for(day_key) if entry.meal_slot == meal
        ]

    def totals_for(self, day_key: str) -> Totals:
        document = self.state.document
        return sum_entries(
            self.entries_for(day_key), document.ingredients, document.recipes
        )

    def totals_for_meal(self, day_key: str, meal: Meal) -> Totals:
        document = self.state.document
        return sum_entries(
            self.entries_for_meal(day_key, meal),
            document.ingredients,
            document.recipes,
        )

    def entry_views(self, day_key: str) -> list[EntryView]:
        """Project visible entries with names and contributed totals."""
        document = self.state.document
        views: list[EntryView] = []
        for entry in self.entries_for(day_key):
            totals = entry_totals(entry, document.ingredients, document.recipes)
            if totals is None:
                continue
            match entry:
                case IngredientEntry():
                    ingredient = document.ingredients.find(entry.ref_id)
                    name = ingredient.name if ingredient else ""
                    basis = ingredient.basis if ingredient else None
                case RecipeEntry():
                    recipe = document.recipes.find(entry.ref_id)
                    name = recipe.name if recipe else ""
                    basis = None
                case _:
                    assert_never(entry)
            views.append(EntryView(entry=entry, name=name, basis=basis, totals=totals))
        return views

    def oldest_day_key(self) -> str | None:
        """Return the earliest day key with at least one stored entry."""
        keys = sorted(
            key for key, entries in self.state.document.day_logs.items() if entries
        )
        return keys[0] if keys else None
