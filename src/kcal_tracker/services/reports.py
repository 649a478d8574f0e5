"""Day and meal reports against the daily goals."""

from dataclasses import dataclass

from kcal_tracker.domain.calendar import parse_day_key
from kcal_tracker.domain.goals import (
    DEFAULT_PALETTE,
    RGB,
    RatioPalette,
    percent_of_goal,
    price_per_100_kcal,
    price_per_100_protein,
    protein_per_100_kcal,
    ratio_color,
    reference_price_per_100_kcal,
    reference_price_per_100_protein,
)
from kcal_tracker.domain.models import MEALS, EntryView, Goals, Meal, Totals
from kcal_tracker.services.ledger import DayLedgerService


@dataclass(frozen=True)
class GoalPercents:
    """Whole percentages of each daily goal."""

    kcal: int
    protein: int
    carbs: int
    fat: int
    price: int


@dataclass(frozen=True)
class MealReport:
    """Totals, goal percentages and cost ratios for one meal slot."""

    meal: Meal
    totals: Totals
    percents: GoalPercents
    price_per_100_protein: float
    price_per_100_kcal: float
    protein_per_100_kcal: float
    protein_ratio_color: RGB
    kcal_ratio_color: RGB
    entries: list[EntryView]


@dataclass(frozen=True)
class DayReport:
    """Everything shown for a single day."""

    day_key: str
    goals: Goals
    totals: Totals
    percents: GoalPercents
    reference_price_per_100_protein: float
    reference_price_per_100_kcal: float
    entries: list[EntryView]
    meals: list[MealReport]


def goal_percents(totals: Totals, goals: Goals) -> GoalPercents:
    return GoalPercents(
        kcal=percent_of_goal(totals.kcal, goals.kcal),
        protein=percent_of_goal(totals.protein, goals.protein),
        carbs=percent_of_goal(totals.carbs, goals.carbs),
        fat=percent_of_goal(totals.fat, goals.fat),
        price=percent_of_goal(totals.price, goals.price),
    )


@dataclass
class ReportService:
    """Computes derived totals for a day on demand."""

    ledger: DayLedgerService
    palette: RatioPalette = DEFAULT_PALETTE

    def day_report(self, day_key: str) -> DayReport:
        parse_day_key(day_key)
        goals = self.ledger.state.document.goals
        entries = self.ledger.entry_views(day_key)
        totals = sum((view.totals for view in entries), Totals())
        reference_protein = reference_price_per_100_protein(goals)
        reference_kcal = reference_price_per_100_kcal(goals)
        meals = []
        for meal in MEALS:
            meal_entries = [view for view in entries if view.entry.meal_slot == meal]
            meal_totals = sum((view.totals for view in meal_entries), Totals())
            per_protein = price_per_100_protein(meal_totals)
            per_kcal = price_per_100_kcal(meal_totals)
            meals.append(
                MealReport(
                    meal=meal,
                    totals=meal_totals,
                    percents=goal_percents(meal_totals, goals),
                    price_per_100_protein=per_protein,
                    price_per_100_kcal=per_kcal,
                    protein_per_100_kcal=protein_per_100_kcal(meal_totals),
                    protein_ratio_color=ratio_color(
                        per_protein, reference_protein, self.palette
                    ),
                    kcal_ratio_color=ratio_color(
                        per_kcal, reference_kcal, self.palette
                    ),
                    entries=meal_entries,
                )
            )
        return DayReport(
            day_key=day_key,
            goals=goals,
            totals=totals,
            percents=goal_percents(totals, goals),
            reference_price_per_100_protein=reference_protein,
            reference_price_per_100_kcal=reference_kcal,
            entries=entries,
            meals=meals,
        )
