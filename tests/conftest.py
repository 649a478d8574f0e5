"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from kcal_tracker.config import Settings
from kcal_tracker.containers import AppContainer, build_container
from kcal_tracker.domain.models import Basis, Ingredient
from kcal_tracker.services.calendar import DayNavigator
from kcal_tracker.services.catalog import CatalogService
from kcal_tracker.services.goals import GoalsService
from kcal_tracker.services.ledger import DayLedgerService
from kcal_tracker.services.state import DocumentStore, StateService

TODAY = "2024-06-02"


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """In-memory document store for tests."""

    text: str | None = None
    saves: list[str] = field(default_factory=list)

    def load(self) -> str | None:
        return self.text

    def save(self, text: str) -> None:
        self.text = text
        self.saves.append(text)


@dataclass
class FakeClock:
    """Clock returning a settable local time."""

    now: datetime = field(default_factory=lambda: datetime(2024, 6, 2, 12, 0))

    def __call__(self) -> datetime:
        return self.now


def make_ingredient(ingredient_id: str = "oats", **overrides: object) -> Ingredient:
    values: dict[str, object] = {
        "id": ingredient_id,
        "name": "Oats",
        "brand": None,
        "basis": Basis.PER_100_G,
        "kcal": 389.0,
        "protein": 13.0,
        "carbs": 66.0,
        "fat": 7.0,
        "price": 0.19,
    }
    values.update(overrides)
    return Ingredient(**values)  # type: ignore[arg-type]


OATS_PAYLOAD: dict[str, object] = {
    "name": "Oats",
    "basis": "100g",
    "kcal": 389,
    "protein": 13,
    "carbs": 66,
    "fat": 7,
    "price": 0.19,
}


@pytest.fixture
def settings() -> Settings:
    return Settings(state_file="unused.json", timezone=None)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_service(store: InMemoryDocumentStore) -> StateService:
    state = StateService(store)
    state.load()
    return state


@pytest.fixture
def catalog_service(state_service: StateService) -> CatalogService:
    return CatalogService(state_service)


@pytest.fixture
def ledger_service(state_service: StateService) -> DayLedgerService:
    return DayLedgerService(state_service)


@pytest.fixture
def goals_service(state_service: StateService) -> GoalsService:
    return GoalsService(state_service)


@pytest.fixture
def navigator(ledger_service: DayLedgerService, clock: FakeClock) -> DayNavigator:
    return DayNavigator(ledger=ledger_service, clock=clock)


@pytest.fixture
def container(
    settings: Settings, store: InMemoryDocumentStore, clock: FakeClock
) -> AppContainer:
    return build_container(settings, store=store, clock=clock)
