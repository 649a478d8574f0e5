"""Errors raised by tracker operations."""


class TrackerError(Exception):
    """Base class for user-facing tracker errors."""


class InvalidInputError(TrackerError):
    """Raised when a requested mutation carries invalid input."""


class NotFoundError(TrackerError):
    """Raised when an entity id does not exist."""


class ReferencedByRecipeError(TrackerError):
    """Raised when deleting an ingredient that recipes still use."""

    def __init__(self, ingredient_id: str, recipe_ids: list[str]) -> None:
        super().__init__(
            "This ingredient is used in a recipe. "
            "Remove it from the recipes first."
        )
        self.ingredient_id = ingredient_id
        self.recipe_ids = recipe_ids


class DocumentShapeError(TrackerError):
    """Raised when an imported document has the wrong structure."""
