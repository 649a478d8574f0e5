"""Daily goals service."""

from dataclasses import dataclass

from kcal_tracker.domain.models import Goals
from kcal_tracker.domain.validation import require_positive
from kcal_tracker.services.state import StateService


@dataclass
class GoalsService:
    """Service for reading and setting daily goals."""

    state: StateService

    def get_goals(self) -> Goals:
        return self.state.document.goals

    def set_goals(self, payload: dict[str, object]) -> Goals:
        """Replace all goals; every value must be a number > 0."""
        goals = Goals(
            kcal=require_positive(payload.get("kcal"), "kcal goal"),
            protein=require_positive(payload.get("protein"), "Protein goal"),
            price=require_positive(payload.get("price"), "Price goal"),
            carbs=require_positive(payload.get("carbs"), "Carbs goal"),
            fat=require_positive(payload.get("fat"), "Fat goal"),
        )
        self.state.document.goals = goals
        self.state.commit()
        return goals
