import json

import pytest

from kcal_tracker.domain.document import dump_document
from kcal_tracker.domain.errors import DocumentShapeError
from kcal_tracker.services.catalog import CatalogService
from kcal_tracker.services.ledger import DayLedgerService
from kcal_tracker.services.state import StateService
from kcal_tracker.services.transfer import TransferService
from tests.conftest import OATS_PAYLOAD, TODAY, FakeClock, InMemoryDocumentStore


@pytest.fixture
def transfer_service(state_service: StateService, clock: FakeClock) -> TransferService:
    return TransferService(state=state_service, clock=clock)


def test_export_includes_schema_version(transfer_service: TransferService) -> None:
    exported = json.loads(transfer_service.export_json())

    assert exported["schemaVersion"] == 2
    assert exported["ingredients"] == []
    assert exported["goals"]["kcal"] == 2500


def test_export_filename_uses_current_day(transfer_service: TransferService) -> None:
    assert transfer_service.export_filename() == f"tracker-export-{TODAY}.json"


def test_export_then_import_round_trips(
    transfer_service: TransferService,
    catalog_service: CatalogService,
    ledger_service: DayLedgerService,
    state_service: StateService,
) -> None:
    oats = catalog_service.create_ingredient(dict(OATS_PAYLOAD))
    ledger_service.log_ingredient(TODAY, oats.id, 80, "breakfast")
    before = dump_document(state_service.document)
    exported = transfer_service.export_json()

    catalog_service.delete_ingredient(oats.id)
    transfer_service.import_json(exported)

    assert dump_document(state_service.document) == before
    assert ledger_service.totals_for(TODAY).kcal == pytest.approx(311.2)


def test_import_replaces_state_and_persists(
    transfer_service: TransferService,
    state_service: StateService,
    store: InMemoryDocumentStore,
) -> None:
    transfer_service.import_document(
        {
            "ingredients": [{"id": "egg", "name": "Egg", "unitType": "piece"}],
            "recipes": [],
            "dayLogs": {},
            "goals": {"kcal": 1800},
        }
    )

    assert [item.id for item in state_service.document.ingredients] == ["egg"]
    assert state_service.document.goals.kcal == 1800
    assert json.loads(store.text or "")["goals"]["kcal"] == 1800


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("{not json", "Invalid JSON"),
        ('{"ingredients": [], "recipes": [], "dayLogs": {}}', "Missing goals"),
        ("[1, 2]", "Invalid document"),
    ],
)
def test_rejected_import_leaves_state_untouched(
    transfer_service: TransferService,
    catalog_service: CatalogService,
    state_service: StateService,
    store: InMemoryDocumentStore,
    text: str,
    message: str,
) -> None:
    catalog_service.create_ingredient(dict(OATS_PAYLOAD))
    before = state_service.document
    saves_before = len(store.saves)

    with pytest.raises(DocumentShapeError, match=message):
        transfer_service.import_json(text)

    assert state_service.document is before
    assert len(catalog_service.list_ingredients()) == 1
    assert len(store.saves) == saves_before
