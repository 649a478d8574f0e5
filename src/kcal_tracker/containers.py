"""Dependency container wiring for the application."""

from dataclasses import dataclass

from kcal_tracker.adapters.json_file_store import JsonFileStore
from kcal_tracker.config import Settings, parse_timezone
from kcal_tracker.services.calendar import Clock, DayCursor, DayNavigator, local_clock
from kcal_tracker.services.catalog import CatalogService
from kcal_tracker.services.goals import GoalsService
from kcal_tracker.services.ledger import DayLedgerService
from kcal_tracker.services.reports import ReportService
from kcal_tracker.services.state import DocumentStore, StateService
from kcal_tracker.services.transfer import TransferService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state_service: StateService
    catalog_service: CatalogService
    ledger_service: DayLedgerService
    goals_service: GoalsService
    report_service: ReportService
    transfer_service: TransferService
    navigator: DayNavigator
    cursor: DayCursor


def build_container(
    settings: Settings | None = None,
    store: DocumentStore | None = None,
    clock: Clock | None = None,
) -> AppContainer:
    """Create the default dependency container and load the stored state."""
    resolved_settings = settings or Settings()
    resolved_store = store or JsonFileStore(resolved_settings.state_file)
    resolved_clock = clock or local_clock(parse_timezone(resolved_settings.timezone))

    state_service = StateService(resolved_store)
    state_service.load()

    ledger_service = DayLedgerService(state_service)
    navigator = DayNavigator(ledger=ledger_service, clock=resolved_clock)
    return AppContainer(
        settings=resolved_settings,
        state_service=state_service,
        catalog_service=CatalogService(state_service),
        ledger_service=ledger_service,
        goals_service=GoalsService(state_service),
        report_service=ReportService(
            ledger=ledger_service, palette=resolved_settings.ratio_palette()
        ),
        transfer_service=TransferService(state=state_service, clock=resolved_clock),
        navigator=navigator,
        cursor=DayCursor(navigator),
    )
