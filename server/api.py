"""FastAPI server exposing the FitFX services."""

import random
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Path, Query, Response
from pydantic import ValidationError

from fitfx_app.app import FitFXApp
from logic.entitlements import FeatureAccess, WardrobeStatus, accessible_items, wardrobe_limit_message
from logic.validation import (
    CalendarSuggestionPayload,
    GarmentPayload,
    GarmentUpdate,
    SubscriptionChange,
    validation_failure,
)
from models.color_names import hex_for_name, name_for_hex
from models.plans import limit_to_json
from models.subscription import SubscriptionRecord
from tools.calendar_overrides import SaveFailed
from tools.wardrobe_tools import WardrobeLimitReached


def _status_payload(status: WardrobeStatus) -> Dict[str, Any]:
    return {
        "accessible": status.accessible,
        "total": status.total,
        "limit": limit_to_json(status.limit),
        "is_unlimited": status.is_unlimited,
        "is_expired": status.is_expired,
        "hidden_count": status.hidden_count,
        "tier": status.tier.value,
        "stored_tier": status.stored_tier.value,
        "message": wardrobe_limit_message(status.tier, status.limit),
    }


def _access_payload(access: FeatureAccess) -> Dict[str, Any]:
    return {
        "accessible": access.accessible,
        "required_tier": access.required_tier.value,
        "tier_name": access.tier_name,
    }


def _subscription_payload(record: Optional[SubscriptionRecord]) -> Dict[str, Any]:
    return (record or SubscriptionRecord(status="none")).to_document()


def create_app(fitfx: FitFXApp | None = None) -> FastAPI:
    """Build the API around an existing service container."""

    services = fitfx or FitFXApp()
    app = FastAPI(title="FitFX", version="0.1.0")

    @app.get("/healthz")
    async def healthcheck() -> dict:
        return {
            "status": "ok",
            "service": "fitfx",
            "environment": services.config.environment or "local",
        }

    @app.get("/users/{user_id}/wardrobe")
    def list_wardrobe(user_id: str) -> dict:
        """Visible items plus the counts needed to render an upgrade prompt."""

        items, status = services.wardrobe.load_with_status(user_id)
        return {
            "items": [item.to_document() for item in accessible_items(status, items)],
            "status": _status_payload(status),
        }

    @app.get("/users/{user_id}/wardrobe/status")
    def wardrobe_status(user_id: str) -> dict:
        return _status_payload(services.wardrobe.get_status(user_id))

    @app.post("/users/{user_id}/wardrobe", status_code=201)
    def add_wardrobe_item(user_id: str, payload: GarmentPayload) -> dict:
        try:
            item = services.wardrobe.add_item(user_id, payload.model_dump(exclude_none=True))
        except WardrobeLimitReached as exc:
            raise HTTPException(
                status_code=403,
                detail={"message": str(exc), "status": _status_payload(exc.status)},
            ) from exc
        return item.to_document()

    @app.patch("/users/{user_id}/wardrobe/{item_id}")
    def update_wardrobe_item(user_id: str, item_id: str, payload: GarmentUpdate) -> dict:
        item = services.wardrobe.update_item(user_id, item_id, payload.changes())
        if item is None:
            raise HTTPException(status_code=404, detail="Wardrobe item not found")
        return item.to_document()

    @app.delete("/users/{user_id}/wardrobe/{item_id}", status_code=204)
    def delete_wardrobe_item(user_id: str, item_id: str) -> Response:
        if not services.wardrobe.delete_item(user_id, item_id):
            raise HTTPException(status_code=404, detail="Wardrobe item not found")
        return Response(status_code=204)

    @app.get("/users/{user_id}/features")
    def features(user_id: str) -> dict:
        status = services.subscriptions.features_status(user_id)
        current_tier = status.pop("current_tier")
        return {
            "current_tier": current_tier.value,
            "features": {name: _access_payload(access) for name, access in status.items()},
        }

    @app.get("/users/{user_id}/features/{feature}")
    def feature(user_id: str, feature: str) -> dict:
        try:
            access = services.subscriptions.can_access_feature(user_id, feature)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _access_payload(access)

    @app.get("/users/{user_id}/subscription")
    def subscription(user_id: str) -> dict:
        return _subscription_payload(services.subscriptions.get_subscription(user_id))

    @app.post("/users/{user_id}/subscription")
    def upgrade_subscription(user_id: str, payload: SubscriptionChange) -> dict:
        record = services.subscriptions.update_subscription_tier(
            user_id,
            payload.tier,
            end_date=payload.end_date,
            payment_id=payload.payment_id,
            order_id=payload.order_id,
        )
        return _subscription_payload(record)

    @app.delete("/users/{user_id}/subscription")
    def cancel_subscription(user_id: str) -> dict:
        try:
            record = services.subscriptions.cancel_subscription(user_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="User not found") from exc
        return _subscription_payload(record)

    @app.get("/users/{user_id}/calendar/{year}/{month}")
    def calendar_month(
        user_id: str,
        year: int = Path(..., ge=1, le=9999),
        month: int = Path(..., ge=1, le=12),
        seed: Optional[int] = Query(None),
    ) -> dict:
        rng = random.Random(seed) if seed is not None else None
        plan = services.calendar.month_plan(user_id, year, month, rng=rng)
        return {"days": {key: suggestion.to_document() for key, suggestion in plan.items()}}

    @app.put("/users/{user_id}/calendar/{date_string}")
    def save_calendar_day(user_id: str, date_string: str, body: Dict[str, Any] = Body(...)) -> dict:
        try:
            payload = CalendarSuggestionPayload.model_validate({**body, "dateString": date_string})
        except ValidationError as exc:
            raise HTTPException(
                status_code=422, detail=validation_failure("Invalid calendar day", exc)
            ) from exc
        try:
            services.calendar.save_day(user_id, payload.to_suggestion())
        except SaveFailed as exc:
            raise HTTPException(status_code=503, detail="Your changes could not be saved") from exc
        return payload.to_suggestion().to_document()

    @app.get("/colors/hex")
    def color_hex(name: str = Query(...)) -> dict:
        return {"name": name, "hex": hex_for_name(name)}

    @app.get("/colors/name")
    def color_name(hex: str = Query(...)) -> dict:
        return {"hex": hex, "name": name_for_hex(hex)}

    return app


@lru_cache(maxsize=1)
def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
