"""HTTP routes for the search API."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from property_search.config import Settings
from property_search.logging import get_logger
from property_search.models import CriteriaValidationError, SearchCriteria
from property_search.parsing import parse_form_data, parse_query_params
from property_search.repository import PropertyRepository
from property_search.search import SearchFailureError, search_properties

logger = get_logger(__name__)

router = APIRouter()


def _get_repository(request: Request) -> PropertyRepository:
    return request.app.state.repository  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def _validation_response(exc: CriteriaValidationError) -> JSONResponse:
    return JSONResponse({"error": exc.message, "fields": list(exc.fields)}, status_code=400)


async def _run_search(request: Request, criteria: SearchCriteria) -> JSONResponse:
    settings = _get_settings(request)
    try:
        result = await search_properties(
            criteria,
            _get_repository(request),
            facet_sample_size=settings.facet_sample_size,
        )
    except CriteriaValidationError as e:
        return _validation_response(e)
    except SearchFailureError as e:
        logger.warning("search_unavailable", error=str(e))
        return JSONResponse({"error": SearchFailureError.public_message}, status_code=503)
    return JSONResponse(result.to_dict())


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})


@router.get("/api/properties/search")
async def search_get(request: Request) -> JSONResponse:
    """Search listings with filters taken from the query string."""
    settings = _get_settings(request)
    try:
        criteria = parse_query_params(
            request.query_params, default_limit=settings.default_page_size
        )
    except CriteriaValidationError as e:
        return _validation_response(e)
    return await _run_search(request, criteria)


@router.post("/api/properties/search")
async def search_post(request: Request) -> JSONResponse:
    """Search listings with filters submitted as a JSON object of form fields."""
    settings = _get_settings(request)
    try:
        body: Any = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return JSONResponse(
            {"error": "Request body must be a JSON object", "fields": []}, status_code=400
        )

    form = {key: _form_value(value) for key, value in body.items()}
    try:
        criteria = parse_form_data(form, default_limit=settings.default_page_size)
    except CriteriaValidationError as e:
        return _validation_response(e)
    return await _run_search(request, criteria)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


def _form_value(value: Any) -> str | list[str]:
    """Render a JSON value the way a form field would carry it."""
    if isinstance(value, list):
        return [_scalar(v) for v in value]
    return _scalar(value)
