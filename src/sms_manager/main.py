from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .context import AppContext, create_context
from .errors import OrderNotFound
from .logging_config import setup_logging
from .notifications import NotificationDispatcher
from .schemas import Notice, SmsSettingsIn, StatusChange

SECRET_MASK = "********"


def create_app(context: AppContext | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: build the context once unless one was injected
        if getattr(app.state, "context", None) is None:
            config = get_settings()
            setup_logging(config.log_level)
            app.state.context = create_context(config)
            owns_context = True
        else:
            owns_context = False
        yield
        # Shutdown: release the engine of a context built here
        if owns_context:
            app.state.context.engine.dispose()

    app = FastAPI(title="sms-manager", version="1.0.0", lifespan=lifespan)
    app.state.context = context

    @app.exception_handler(OrderNotFound)
    async def order_not_found_handler(request: Request, exc: OrderNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    _add_routes(app)
    return app


def get_context(request: Request) -> AppContext:
    return request.app.state.context


# --- Admin protection ---


def verify_admin(request: Request, ctx: AppContext = Depends(get_context)) -> None:
    """Require an X-Admin-Token header that matches the configured admin token."""
    admin_token = ctx.config.admin_token
    if not admin_token:
        # Misconfiguration; safer to refuse access than to expose settings.
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN not configured")

    if request.headers.get("X-Admin-Token") != admin_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")


# --- Routes ---


def _masked_settings(ctx: AppContext) -> dict[str, Any]:
    payload = ctx.settings.all()
    if payload.get("provider_auth_secret"):
        payload["provider_auth_secret"] = SECRET_MASK
    return payload


def _add_routes(app: FastAPI) -> None:
    admin = [Depends(verify_admin)]

    @app.get("/admin/settings", dependencies=admin)
    def read_settings(ctx: AppContext = Depends(get_context)) -> dict[str, Any]:
        return _masked_settings(ctx)

    @app.put("/admin/settings", dependencies=admin)
    def update_settings(
        payload: SmsSettingsIn, ctx: AppContext = Depends(get_context)
    ) -> dict[str, Any]:
        bag = payload.model_dump()
        # Saving the form with the masked secret keeps the stored one
        if bag["provider_auth_secret"] == SECRET_MASK:
            bag["provider_auth_secret"] = ctx.settings.get("provider_auth_secret", "")
        ctx.settings.set(bag)
        return _masked_settings(ctx)

    @app.get("/admin/notices", dependencies=admin)
    def pop_notices(ctx: AppContext = Depends(get_context)) -> list[Notice]:
        """Notices are shown once: reading them clears them."""
        return [Notice(**notice) for notice in ctx.notices.pop_all()]

    @app.get("/orders/{order_id}/actions", dependencies=admin)
    def order_actions(order_id: int, ctx: AppContext = Depends(get_context)) -> dict[str, str]:
        if ctx.orders.get(order_id) is None:
            raise OrderNotFound(order_id)
        return NotificationDispatcher.order_actions()

    @app.post("/orders/{order_id}/actions/{action}", dependencies=admin)
    def run_order_action(
        order_id: int, action: str, ctx: AppContext = Depends(get_context)
    ) -> dict[str, Any]:
        if action not in NotificationDispatcher.order_actions():
            raise HTTPException(status_code=404, detail=f"Unknown order action: {action}")
        ctx.request_action(order_id, action)
        return {"status": "ok", "notes": ctx.orders.notes(order_id)}

    @app.post("/orders/{order_id}/status", dependencies=admin)
    def change_status(
        order_id: int, payload: StatusChange, ctx: AppContext = Depends(get_context)
    ) -> dict[str, Any]:
        changed = ctx.change_order_status(order_id, payload.status)
        return {"status": payload.status, "changed": changed}

    @app.get("/orders/{order_id}/notes", dependencies=admin)
    def order_notes(order_id: int, ctx: AppContext = Depends(get_context)) -> list[str]:
        if ctx.orders.get(order_id) is None:
            raise OrderNotFound(order_id)
        return ctx.orders.notes(order_id)


app = create_app()
