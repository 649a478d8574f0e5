"""Input parsing and validation for user-submitted values."""

import math

from kcal_tracker.domain.errors import InvalidInputError
from kcal_tracker.domain.models import Basis, Meal


def parse_number(value: object) -> float:
    """Parse a number, accepting a decimal comma; NaN when unreadable."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace(",", ".", 1)
        if not cleaned:
            return math.nan
        try:
            number = float(cleaned)
        except ValueError:
            return math.nan
        return number if math.isfinite(number) else math.nan
    return math.nan


def require_name(value: object, label: str = "Name") -> str:
    name = str(value or "").strip()
    if not name:
        raise InvalidInputError(f"{label} is missing.")
    return name


def optional_text(value: object) -> str | None:
    text = str(value or "").strip()
    return text or None


def require_non_negative(value: object, label: str) -> float:
    number = parse_number(value)
    if not math.isfinite(number) or number < 0:
        raise InvalidInputError(f"{label} must be a number >= 0.")
    return number


def require_positive(value: object, label: str) -> float:
    number = parse_number(value)
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{label} must be > 0.")
    return number


def require_basis(value: object) -> Basis:
    try:
        return Basis(str(value))
    except ValueError as exc:
        raise InvalidInputError(f"Invalid unit: {value!r}.") from exc


def optional_meal(value: object) -> Meal | None:
    """Return the meal slot for a value; None leaves the entry untagged."""
    if value is None or value == "":
        return None
    try:
        return Meal(str(value))
    except ValueError as exc:
        raise InvalidInputError(f"Invalid meal: {value!r}.") from exc
