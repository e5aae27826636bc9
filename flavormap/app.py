from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .countries.resolver import NameResolver, get_resolver
from .errors import FlavorMapError, StoreFailure, ValidationError, ViewConfigurationError
from .store.data_store import RestaurantStore, get_store
from .views.models import ErrorResponse, ViewRequest
from .views.service import run_view

logger = logging.getLogger(__name__)

app = FastAPI(title="Flavor Map API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def current_store() -> RestaurantStore:
    return get_store()


def current_resolver() -> NameResolver:
    return get_resolver()


# ── Error handling ───────────────────────────────────────────────────────


def _error_body(exc: FlavorMapError) -> dict[str, str]:
    body = {"error": exc.message}
    if exc.detail:
        body["detail"] = exc.detail
    return body


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(ViewConfigurationError)
async def view_configuration_error_handler(
    request: Request, exc: ViewConfigurationError
) -> JSONResponse:
    return JSONResponse(status_code=422, content=_error_body(exc))


@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    logger.error("Store failure on %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=500, content=_error_body(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Flavor Map API running"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/country-aliases")
def country_aliases(resolver: NameResolver = Depends(current_resolver)) -> dict[str, list[str]]:
    return resolver.aliases()


@app.get("/api/country-aliases/resolve", responses={400: {"model": ErrorResponse}})
def resolve_country(
    country: str | None = Query(default=None),
    resolver: NameResolver = Depends(current_resolver),
) -> dict[str, Any]:
    country = (country or "").strip()
    if not country:
        raise ValidationError("Country is required")
    return {
        "country": country,
        "variants": list(resolver.resolve(country)),
        "canonical": resolver.canonical_name(country),
    }


# ── Views ────────────────────────────────────────────────────────────────

_VIEW_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing country or unknown view kind"},
    422: {"model": ErrorResponse, "description": "Country resolves to several variants"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


@app.post("/api/views", responses=_VIEW_ERRORS)
def view_from_body(
    body: ViewRequest,
    store: RestaurantStore = Depends(current_store),
    resolver: NameResolver = Depends(current_resolver),
):
    return run_view(body.view_kind, body.country, store, resolver)


@app.get("/api/{view_kind}", responses=_VIEW_ERRORS)
def view(
    view_kind: str,
    country: str | None = Query(default=None),
    store: RestaurantStore = Depends(current_store),
    resolver: NameResolver = Depends(current_resolver),
):
    return run_view(view_kind, country, store, resolver)
