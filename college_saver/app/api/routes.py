"""HTTP routes for the Flask API."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from college_saver import __version__
from college_saver.config import Settings
from college_saver.core.errors import HorizonExpiredError, ProjectionError
from college_saver.core.horizon import compute_horizon
from college_saver.core.projection import ProjectionInput, ProjectionResult, project_goal
from college_saver.domain.export import export_projection_csv
from college_saver.domain.pricing import (
    FallbackTableQuoteSource,
    QuoteUnavailable,
    current_value_from_shares,
    resolve_unit_price,
)
from college_saver.domain.session import SessionContext
from college_saver.schemas.ping import PingResponse
from college_saver.schemas.projection import (
    HorizonRequest,
    HorizonResponse,
    ProjectionRequest,
    ProjectionResponse,
)
from college_saver.utils.logging import get_logger

api_bp = Blueprint("api", __name__)
logger = get_logger("api")


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": json.loads(exc.json(include_url=False))}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(ProjectionError)
def _handle_projection_error(exc: ProjectionError):
    status = HTTPStatus.UNPROCESSABLE_ENTITY if isinstance(exc, HorizonExpiredError) else HTTPStatus.BAD_REQUEST
    return jsonify({"error": exc.code, "detail": str(exc)}), status


@api_bp.errorhandler(QuoteUnavailable)
def _handle_quote_unavailable(exc: QuoteUnavailable):
    return jsonify({"error": "price_unavailable", "detail": str(exc)}), HTTPStatus.BAD_REQUEST


def _settings() -> Settings:
    return current_app.config["SETTINGS"]


def _now(override: Optional[datetime]) -> datetime:
    return override or datetime.now(timezone.utc)


def _current_value(
    payload: ProjectionRequest, session: SessionContext
) -> Tuple[float, Optional[float], Optional[str]]:
    """Return (current_value, unit_price, price_source) for the request."""
    if payload.shares is None:
        return payload.currentValue or 0.0, None, None

    if payload.unitPrice is not None:
        price, origin = payload.unitPrice, "request"
    else:
        fallback = FallbackTableQuoteSource(_settings().fallback_prices)
        price, origin = resolve_unit_price(
            payload.ticker,
            current_app.config.get("QUOTE_SOURCE"),
            fallback,
            session,
        )
    return current_value_from_shares(payload.shares, price), price, origin


def _run_projection(payload: ProjectionRequest) -> Tuple[ProjectionResult, ProjectionResponse]:
    now = _now(payload.now)
    session = SessionContext()

    horizon = compute_horizon(payload.birthDate, now)
    current_value, unit_price, price_source = _current_value(payload, session)

    projection_input = ProjectionInput(
        goal_amount=payload.goalAmount,
        current_value=current_value,
        annual_return_rate=payload.annualReturnRate,
        horizon_months=horizon.total_months,
    )
    result = project_goal(projection_input)

    logger.info(
        f"projection months={horizon.total_months} goal={payload.goalAmount} "
        f"current={current_value} rate={payload.annualReturnRate} "
        f"monthly={result.monthly_contribution:.2f} price_source={price_source or '-'}"
    )

    response = ProjectionResponse.model_validate(
        {
            **result.model_dump(),
            "horizon": horizon.model_dump(),
            "current_value": current_value,
            "unit_price": unit_price,
            "price_source": price_source,
        }
    )
    return result, response


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong", version=__version__)
    return jsonify(response.model_dump())


@api_bp.post("/horizon")
def horizon() -> Any:
    """Years and months left until the child turns 18."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = HorizonRequest.model_validate(raw_payload)
    result = compute_horizon(payload.birthDate, _now(payload.now))
    response = HorizonResponse.model_validate(result.model_dump())
    return jsonify(response.model_dump(by_alias=True))


@api_bp.post("/projection")
def projection() -> Any:
    """Required monthly contribution plus the month-by-month projection."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    _, response = _run_projection(payload)
    return jsonify(response.model_dump(by_alias=True))


@api_bp.post("/projection/export")
def export_projection() -> Response:
    """Same projection, returned as a CSV download."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result, _ = _run_projection(payload)
    body = export_projection_csv(result.points)
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=529-projection.csv"},
    )
