"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from kcal_tracker.api.app import create_app
from kcal_tracker.containers import AppContainer
from tests.conftest import OATS_PAYLOAD, TODAY


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _create_oats(client: TestClient) -> str:
    response = client.post("/ingredients", json=OATS_PAYLOAD)
    assert response.status_code == 201
    return response.json()["id"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ingredient_crud(client: TestClient) -> None:
    oats_id = _create_oats(client)

    listed = client.get("/ingredients", params={"q": "oat"}).json()["ingredients"]
    updated = client.put(
        f"/ingredients/{oats_id}", json={**OATS_PAYLOAD, "price": "0,25"}
    )
    deleted = client.delete(f"/ingredients/{oats_id}")
    missing = client.get(f"/ingredients/{oats_id}")

    assert [item["id"] for item in listed] == [oats_id]
    assert listed[0]["basis"] == "100g"
    assert updated.json()["price"] == 0.25
    assert deleted.json() == {"status": "deleted"}
    assert missing.status_code == 404


def test_invalid_ingredient_is_rejected(client: TestClient) -> None:
    response = client.post("/ingredients", json={**OATS_PAYLOAD, "name": " "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Name is missing."
    assert client.get("/ingredients").json() == {"ingredients": []}


def test_recipe_with_totals_and_delete_guard(client: TestClient) -> None:
    oats_id = _create_oats(client)

    created = client.post(
        "/recipes",
        json={"name": "Porridge", "lines": [{"ingredient_id": oats_id, "amount": 80}]},
    )
    recipe = created.json()
    conflict = client.delete(f"/ingredients/{oats_id}")

    assert created.status_code == 201
    assert recipe["totals"]["kcal"] == pytest.approx(311.2)
    assert conflict.status_code == 409
    assert conflict.json()["recipe_ids"] == [recipe["id"]]
    assert client.get(f"/ingredients/{oats_id}").status_code == 200


def test_empty_recipe_is_rejected(client: TestClient) -> None:
    response = client.post("/recipes", json={"name": "Nothing", "lines": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "Add at least one ingredient."


def test_day_report(client: TestClient) -> None:
    oats_id = _create_oats(client)
    logged = client.post(
        f"/days/{TODAY}/entries",
        json={"type": "ingredient", "ref_id": oats_id, "amount": 80,
              "meal": "breakfast"},
    )

    report = client.get("/days/today").json()

    assert logged.status_code == 201
    assert logged.json()["meal"] == "breakfast"
    assert report["day_key"] == TODAY
    assert report["is_today"] is True
    assert report["previous"] is None
    assert report["next"] is None
    assert report["totals"]["kcal"] == pytest.approx(311.2)
    assert report["percents"]["kcal"] == 12
    assert [meal["meal"] for meal in report["meals"]] == [
        "breakfast",
        "lunch",
        "snacks",
        "dinner",
    ]
    breakfast, _, snacks, _ = report["meals"]
    assert breakfast["entries"][0]["name"] == "Oats"
    assert breakfast["protein_ratio_color"] == "rgb(60,185,120)"
    assert snacks["price_per_100_protein"] is None
    assert snacks["protein_ratio_color"] == "rgb(242,244,248)"


def test_entry_validation_and_removal(client: TestClient) -> None:
    oats_id = _create_oats(client)

    rejected = client.post(
        f"/days/{TODAY}/entries",
        json={"type": "ingredient", "ref_id": oats_id, "amount": 0},
    )
    entry = client.post(
        f"/days/{TODAY}/entries",
        json={"type": "ingredient", "ref_id": oats_id, "amount": "50"},
    ).json()
    removed = client.delete(f"/days/{TODAY}/entries/{entry['id']}")
    removed_again = client.delete(f"/days/{TODAY}/entries/{entry['id']}")

    assert rejected.status_code == 400
    assert entry["meal"] == "snacks"
    assert removed.json() == {"removed": True}
    assert removed_again.json() == {"removed": False}


def test_malformed_day_key_is_rejected(client: TestClient) -> None:
    assert client.get("/days/2024-13-01").status_code == 400
    assert client.get("/days/yesterday/navigation").status_code == 400


def test_selection_navigation(client: TestClient) -> None:
    oats_id = _create_oats(client)
    client.post(
        "/days/2024-05-31/entries",
        json={"type": "ingredient", "ref_id": oats_id, "amount": 10},
    )

    current = client.get("/selection").json()
    back = client.post("/selection", json={"action": "previous"}).json()
    back_again = client.post("/selection", json={"action": "previous"}).json()
    future = client.post(
        "/selection", json={"action": "select", "day_key": "2030-01-01"}
    ).json()

    assert current["day_key"] == TODAY
    assert back["day_key"] == "2024-06-01"
    assert back["next"] == TODAY
    assert back_again["day_key"] == "2024-05-31"
    assert back_again["previous"] is None
    assert future["day_key"] == TODAY


def test_goals_endpoints(client: TestClient) -> None:
    defaults = client.get("/goals").json()
    updated = client.put(
        "/goals",
        json={"kcal": 2000, "protein": 150, "price": 10, "carbs": 220, "fat": 60},
    )
    rejected = client.put(
        "/goals",
        json={"kcal": 2000, "protein": 150, "price": 0, "carbs": 220, "fat": 60},
    )

    assert defaults["kcal"] == 2500
    assert updated.json()["price"] == 10
    assert rejected.status_code == 400
    assert client.get("/goals").json()["price"] == 10


def test_export_and_import(client: TestClient) -> None:
    _create_oats(client)

    exported = client.get("/export")
    client.delete(f"/ingredients/{exported.json()['ingredients'][0]['id']}")
    imported = client.post("/import", content=exported.content)

    assert exported.headers["content-disposition"] == (
        f'attachment; filename="tracker-export-{TODAY}.json"'
    )
    assert exported.json()["schemaVersion"] == 2
    assert imported.json() == {"status": "imported"}
    assert len(client.get("/ingredients").json()["ingredients"]) == 1


def test_invalid_import_is_rejected(client: TestClient) -> None:
    _create_oats(client)

    response = client.post("/import", content=b'{"ingredients": []}')

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing recipes"
    assert len(client.get("/ingredients").json()["ingredients"]) == 1


def test_tiny_goal_does_not_break_day_report(client: TestClient) -> None:
    oats_id = _create_oats(client)
    client.post(
        f"/days/{TODAY}/entries",
        json={"type": "ingredient", "ref_id": oats_id, "amount": 80},
    )
    client.put(
        "/goals",
        json={"kcal": 1e-306, "protein": 150, "price": 10, "carbs": 220, "fat": 60},
    )

    response = client.get(f"/days/{TODAY}")

    assert response.status_code == 200
    assert response.json()["percents"]["kcal"] == 0
