"""FastAPI application factory."""

import logging
import math
from typing import assert_never

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from kcal_tracker.api.models import (
    EntryPayload,
    GoalsPayload,
    IngredientPayload,
    RecipePayload,
    SelectionPayload,
)
from kcal_tracker.app_logging import configure_logging
from kcal_tracker.containers import AppContainer
from kcal_tracker.domain.calendar import parse_day_key
from kcal_tracker.domain.errors import (
    DocumentShapeError,
    InvalidInputError,
    NotFoundError,
    ReferencedByRecipeError,
    TrackerError,
)
from kcal_tracker.domain.models import (
    Entry,
    EntryView,
    Goals,
    Ingredient,
    IngredientEntry,
    Recipe,
    RecipeEntry,
    Totals,
)
from kcal_tracker.services.reports import DayReport, GoalPercents, MealReport

_ERROR_STATUS: dict[type[TrackerError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    DocumentShapeError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ReferencedByRecipeError: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="kcal tracker")
    app.state.container = container

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(
        request: Request, exc: TrackerError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        body: dict[str, object] = {"detail": str(exc)}
        if isinstance(exc, ReferencedByRecipeError):
            body["recipe_ids"] = exc.recipe_ids
        return JSONResponse(status_code=status_code, content=body)

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/ingredients")
    async def list_ingredients(
        request: Request, q: str | None = None
    ) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return {
            "ingredients": [
                _serialize_ingredient(item) for item in catalog.list_ingredients(q)
            ]
        }

    @app.post("/ingredients", status_code=status.HTTP_201_CREATED)
    async def create_ingredient(
        payload: IngredientPayload, request: Request
    ) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return _serialize_ingredient(catalog.create_ingredient(payload.model_dump()))

    @app.get("/ingredients/{ingredient_id}")
    async def get_ingredient(ingredient_id: str, request: Request) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return _serialize_ingredient(catalog.get_ingredient(ingredient_id))

    @app.put("/ingredients/{ingredient_id}")
    async def update_ingredient(
        ingredient_id: str, payload: IngredientPayload, request: Request
    ) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return _serialize_ingredient(
            catalog.update_ingredient(ingredient_id, payload.model_dump())
        )

    @app.delete("/ingredients/{ingredient_id}")
    async def delete_ingredient(ingredient_id: str, request: Request) -> dict[str, str]:
        _container(request).catalog_service.delete_ingredient(ingredient_id)
        return {"status": "deleted"}

    @app.get("/recipes")
    async def list_recipes(request: Request, q: str | None = None) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return {
            "recipes": [
                _serialize_recipe(recipe, catalog.recipe_totals(recipe.id))
                for recipe in catalog.list_recipes(q)
            ]
        }

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def create_recipe(
        payload: RecipePayload, request: Request
    ) -> dict[str, object]:
        catalog = _container(request).catalog_service
        recipe = catalog.create_recipe(payload.model_dump())
        return _serialize_recipe(recipe, catalog.recipe_totals(recipe.id))

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: str, request: Request) -> dict[str, object]:
        catalog = _container(request).catalog_service
        return _serialize_recipe(
            catalog.get_recipe(recipe_id), catalog.recipe_totals(recipe_id)
        )

    @app.put("/recipes/{recipe_id}")
    async def update_recipe(
        recipe_id: str, payload: RecipePayload, request: Request
    ) -> dict[str, object]:
        catalog = _container(request).catalog_service
        recipe = catalog.update_recipe(recipe_id, payload.model_dump())
        return _serialize_recipe(recipe, catalog.recipe_totals(recipe.id))

    @app.delete("/recipes/{recipe_id}")
    async def delete_recipe(recipe_id: str, request: Request) -> dict[str, str]:
        _container(request).catalog_service.delete_recipe(recipe_id)
        return {"status": "deleted"}

    @app.get("/days/today")
    async def today_report(request: Request) -> dict[str, object]:
        state_container = _container(request)
        day_key = state_container.navigator.today()
        return _serialize_day(state_container, day_key)

    @app.get("/days/{day_key}")
    async def day_report(day_key: str, request: Request) -> dict[str, object]:
        return _serialize_day(_container(request), day_key)

    @app.get("/days/{day_key}/navigation")
    async def day_navigation(day_key: str, request: Request) -> dict[str, object]:
        state_container = _container(request)
        return _serialize_navigation(state_container, day_key)

    @app.post("/days/{day_key}/entries", status_code=status.HTTP_201_CREATED)
    async def log_entry(
        day_key: str, payload: EntryPayload, request: Request
    ) -> dict[str, object]:
        ledger = _container(request).ledger_service
        if payload.type == "ingredient":
            entry = ledger.log_ingredient(
                day_key, payload.ref_id, payload.amount, payload.meal
            )
        else:
            entry = ledger.log_recipe(
                day_key, payload.ref_id, payload.amount, payload.meal
            )
        return _serialize_entry(entry)

    @app.delete("/days/{day_key}/entries/{entry_id}")
    async def delete_entry(
        day_key: str, entry_id: str, request: Request
    ) -> dict[str, object]:
        removed = _container(request).ledger_service.remove(day_key, entry_id)
        return {"removed": removed}

    @app.get("/selection")
    async def get_selection(request: Request) -> dict[str, object]:
        state_container = _container(request)
        selected = state_container.cursor.refresh()
        return _serialize_navigation(state_container, selected)

    @app.post("/selection")
    async def change_selection(
        payload: SelectionPayload, request: Request
    ) -> dict[str, object]:
        state_container = _container(request)
        cursor = state_container.cursor
        if payload.action == "previous":
            selected = cursor.go_previous()
        elif payload.action == "next":
            selected = cursor.go_next()
        elif payload.action == "today":
            selected = cursor.go_today()
        else:
            selected = cursor.select(payload.day_key or "")
        return _serialize_navigation(state_container, selected)

    @app.get("/goals")
    async def get_goals(request: Request) -> dict[str, object]:
        return _serialize_goals(_container(request).goals_service.get_goals())

    @app.put("/goals")
    async def set_goals(payload: GoalsPayload, request: Request) -> dict[str, object]:
        goals_service = _container(request).goals_service
        return _serialize_goals(goals_service.set_goals(payload.model_dump()))

    @app.get("/export")
    async def export_document(request: Request) -> JSONResponse:
        transfer = _container(request).transfer_service
        return JSONResponse(
            content=transfer.export_document(),
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{transfer.export_filename()}"'
                )
            },
        )

    @app.post("/import")
    async def import_document(request: Request) -> dict[str, str]:
        state_container = _container(request)
        body = await request.body()
        state_container.transfer_service.import_json(body.decode("utf-8", "replace"))
        state_container.cursor.clamp()
        return {"status": "imported"}

    return app


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _serialize_totals(totals: Totals) -> dict[str, float]:
    return {
        "kcal": totals.kcal,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
        "price": totals.price,
    }


def _serialize_percents(percents: GoalPercents) -> dict[str, int]:
    return {
        "kcal": percents.kcal,
        "protein": percents.protein,
        "carbs": percents.carbs,
        "fat": percents.fat,
        "price": percents.price,
    }


def _serialize_goals(goals: Goals) -> dict[str, object]:
    return {
        "kcal": goals.kcal,
        "protein": goals.protein,
        "price": goals.price,
        "carbs": goals.carbs,
        "fat": goals.fat,
    }


def _serialize_ingredient(ingredient: Ingredient) -> dict[str, object]:
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "brand": ingredient.brand,
        "basis": ingredient.basis.value,
        "kcal": ingredient.kcal,
        "protein": ingredient.protein,
        "carbs": ingredient.carbs,
        "fat": ingredient.fat,
        "price": ingredient.price,
    }


def _serialize_recipe(recipe: Recipe, totals: Totals) -> dict[str, object]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "lines": [
            {"ingredient_id": line.ingredient_id, "amount": line.amount}
            for line in recipe.lines
        ],
        "totals": _serialize_totals(totals),
    }


def _serialize_entry(entry: Entry) -> dict[str, object]:
    match entry:
        case IngredientEntry():
            return {
                "id": entry.id,
                "type": "ingredient",
                "ref_id": entry.ref_id,
                "amount": entry.amount,
                "meal": entry.meal_slot.value,
            }
        case RecipeEntry():
            return {
                "id": entry.id,
                "type": "recipe",
                "ref_id": entry.ref_id,
                "factor": entry.factor,
                "meal": entry.meal_slot.value,
            }
        case _:
            assert_never(entry)


def _serialize_entry_view(view: EntryView) -> dict[str, object]:
    return {
        **_serialize_entry(view.entry),
        "name": view.name,
        "basis": view.basis.value if view.basis else None,
        "totals": _serialize_totals(view.totals),
    }


def _serialize_meal(report: MealReport) -> dict[str, object]:
    return {
        "meal": report.meal.value,
        "totals": _serialize_totals(report.totals),
        "percents": _serialize_percents(report.percents),
        "price_per_100_protein": _finite_or_none(report.price_per_100_protein),
        "price_per_100_kcal": _finite_or_none(report.price_per_100_kcal),
        "protein_per_100_kcal": _finite_or_none(report.protein_per_100_kcal),
        "protein_ratio_color": report.protein_ratio_color.css(),
        "kcal_ratio_color": report.kcal_ratio_color.css(),
        "entries": [_serialize_entry_view(view) for view in report.entries],
    }


def _serialize_report(report: DayReport) -> dict[str, object]:
    return {
        "day_key": report.day_key,
        "goals": _serialize_goals(report.goals),
        "totals": _serialize_totals(report.totals),
        "percents": _serialize_percents(report.percents),
        "reference_price_per_100_protein": _finite_or_none(
            report.reference_price_per_100_protein
        ),
        "reference_price_per_100_kcal": _finite_or_none(
            report.reference_price_per_100_kcal
        ),
        "meals": [_serialize_meal(meal) for meal in report.meals],
    }


def _serialize_day(container: AppContainer, day_key: str) -> dict[str, object]:
    return {
        **_serialize_report(container.report_service.day_report(day_key)),
        **_serialize_navigation(container, day_key),
    }


def _serialize_navigation(container: AppContainer, day_key: str) -> dict[str, object]:
    parse_day_key(day_key)
    navigator = container.navigator
    today = navigator.today()
    return {
        "day_key": day_key,
        "is_today": day_key == today,
        "today": today,
        "previous": navigator.previous(day_key),
        "next": navigator.next(day_key),
    }
