from __future__ import annotations

"""
FastAPI application for the theme team recommender.

- POST /api/teams/generate: validate -> interpret -> filter/score/select
- GET /health
- The catalog is loaded once at startup; a missing or malformed data file
  aborts startup instead of serving from a partial vocabulary
- Validation problems are answered with 400 and a list of {field, message};
  anything unexpected with a 500 ErrorResponse
"""

from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .catalog import get_catalog
from .config import (
    CORS_ORIGINS,
    ErrorResponse,
    GenerateTeamRequest,
    GenerateTeamResponse,
    HealthResponse,
    ValidationErrorItem,
)
from .exceptions import QueryValidationError
from .generator import generate
from .interpret import interpret
from .logging_setup import configure_logging
from .mapping import map_result_to_response
from .models import Catalog
from .validation import to_query

# =============================================================================
# FastAPI app + startup
# =============================================================================

app = FastAPI(title="Theme Team Recommender")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

_catalog: Optional[Catalog] = None


@app.on_event("startup")
def startup_event() -> None:
    global _catalog
    configure_logging()
    logger.info("Starting app warmup...")
    if _catalog is None:
        _catalog = get_catalog()
    # Build the vocabulary now rather than on the first request
    logger.info("Catalog vocabulary holds {} tokens", len(_catalog.vocabulary))
    logger.info("Warmup complete.")


def _require_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        _catalog = get_catalog()
    return _catalog


# =============================================================================
# Error handlers
# =============================================================================

def _bad_request(items: List[ValidationErrorItem]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=[i.model_dump(by_alias=True) for i in items],
    )


@app.exception_handler(QueryValidationError)
def query_validation_handler(request: Request, exc: QueryValidationError) -> JSONResponse:
    logger.info("Rejected request: {}", exc)
    return _bad_request([ValidationErrorItem(field=i.field, message=i.message) for i in exc.issues])


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    items = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        items.append(ValidationErrorItem(field=".".join(loc) or "body", message=str(err.get("msg", ""))))
    logger.info("Rejected malformed request body: {}", items)
    return _bad_request(items)


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on {}: {}", request.url.path, exc)
    error = ErrorResponse(error="An unexpected error occurred.", details=str(exc), status_code=500)
    return JSONResponse(status_code=500, content=error.model_dump(by_alias=True))


# =============================================================================
# Routes
# =============================================================================

@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post(
    "/api/teams/generate",
    response_model=GenerateTeamResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
def generate_team(req: GenerateTeamRequest) -> GenerateTeamResponse:
    query = to_query(req)
    catalog = _require_catalog()
    # Interpret first so the response can explain an empty team
    interpreted = interpret(query.theme_text, catalog)
    result = generate(query, interpreted, catalog)
    return map_result_to_response(result, debug=req.debug)
