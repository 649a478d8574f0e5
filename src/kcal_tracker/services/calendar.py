"""Day navigation bounded by today and the oldest logged day."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from kcal_tracker.domain.calendar import (
    current_day_key,
    next_day_key,
    parse_day_key,
    previous_day_key,
)
from kcal_tracker.services.ledger import DayLedgerService

Clock = Callable[[], datetime]


def local_clock(timezone_name: str | None = None) -> Clock:
    """Return a clock for the given IANA timezone, or system local time."""
    if timezone_name:
        tz = ZoneInfo(timezone_name)
        return lambda: datetime.now(tz=tz)
    return datetime.now


@dataclass
class DayNavigator:
    """Computes neighbouring day keys within the navigable range."""

    ledger: DayLedgerService
    clock: Clock

    def today(self) -> str:
        return current_day_key(self.clock())

    def can_go_back(self, day_key: str) -> bool:
        return self.previous(day_key) is not None

    def can_go_forward(self, day_key: str) -> bool:
        return self.next(day_key) is not None

    def previous(self, day_key: str) -> str | None:
        """Return the previous day, or None before the oldest logged day."""
        oldest = self.ledger.oldest_day_key()
        if oldest is None:
            return None
        candidate = previous_day_key(day_key)
        if candidate < oldest:
            return None
        return candidate

    def next(self, day_key: str) -> str | None:
        """Return the next day, or None when it would be in the future."""
        today = self.today()
        if day_key >= today:
            return None
        candidate = next_day_key(day_key)
        if candidate > today:
            return None
        return candidate


@dataclass
class DayCursor:
    """The currently selected day, following the rollover while on today."""

    navigator: DayNavigator
    selected: str = field(default="")
    _last_today: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        today = self.navigator.today()
        self._last_today = today
        if not self.selected:
            self.selected = today

    def refresh(self) -> str:
        """Move along with the rollover if today was selected."""
        today = self.navigator.today()
        if self.selected == self._last_today and today != self._last_today:
            self.selected = today
        self._last_today = today
        return self.selected

    def go_previous(self) -> str:
        self.refresh()
        previous = self.navigator.previous(self.selected)
        if previous is not None:
            self.selected = previous
        return self.selected

    def go_next(self) -> str:
        self.refresh()
        following = self.navigator.next(self.selected)
        if following is not None:
            self.selected = following
        return self.selected

    def go_today(self) -> str:
        self.refresh()
        self.selected = self._last_today
        return self.selected

    def select(self, day_key: str) -> str:
        """Select a day directly; future days are clamped to today."""
        parse_day_key(day_key)
        self.refresh()
        self.selected = min(day_key, self._last_today)
        return self.selected

    def clamp(self) -> str:
        """Keep the selection from being ahead of today."""
        self.refresh()
        if self.selected > self._last_today:
            self.selected = self._last_today
        return self.selected
