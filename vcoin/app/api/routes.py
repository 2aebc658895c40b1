"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from vcoin.core.health import get_health
from vcoin.core.storage import UnknownRecord
from vcoin.core.summary import build_student_summary, current_amount, summarize_request
from vcoin.domain.accrual import ArithmeticOverflow, NoRateDefined, StorageUnavailable
from vcoin.schemas.accrual import AccrualRequest, CurrentAmountResponse

api_bp = Blueprint("api", __name__)


def _storage():
    return current_app.config["VCOIN_STORAGE"]


def _clock():
    return current_app.config["VCOIN_CLOCK"]


def _settings():
    return current_app.config["VCOIN_SETTINGS"]


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    detail = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(NoRateDefined)
def _handle_no_rate(exc: NoRateDefined):
    current_app.logger.warning("rate schedule misconfigured: %s", exc)
    return (
        jsonify({"error": str(exc), "code": "no_rate_defined", "date": exc.date.isoformat()}),
        HTTPStatus.CONFLICT,
    )


@api_bp.errorhandler(ArithmeticOverflow)
def _handle_overflow(exc: ArithmeticOverflow):
    current_app.logger.error("accrual overflow: %s", exc)
    return jsonify({"error": str(exc), "code": "arithmetic_overflow"}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(UnknownRecord)
def _handle_not_found(exc: UnknownRecord):
    return jsonify({"error": str(exc), "code": "not_found"}), HTTPStatus.NOT_FOUND


@api_bp.errorhandler(StorageUnavailable)
def _handle_storage_unavailable(exc: StorageUnavailable):
    current_app.logger.error("storage unavailable: %s", exc)
    return jsonify({"error": str(exc), "code": "storage_unavailable"}), HTTPStatus.SERVICE_UNAVAILABLE


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    response = get_health(
        version=_settings().version,
        data_source=current_app.config["VCOIN_DATA_SOURCE"],
        now=_clock().now(),
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/students/<int:student_id>/summary")
def student_summary(student_id: int) -> Any:
    """Balances, projection and chart series for one student."""
    summary = build_student_summary(
        _storage(), _clock(), student_id, max_window_days=_settings().max_window_days
    )
    return jsonify(summary.model_dump(mode="json"))


@api_bp.get("/students/<int:student_id>/current-amount")
def student_current_amount(student_id: int) -> Any:
    """Lightweight balance poll used by the live counter."""
    now = _clock().now()
    response = CurrentAmountResponse(
        current_amount=current_amount(
            _storage(), now, student_id, max_window_days=_settings().max_window_days
        ),
        timestamp=now,
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/calc/accrual")
def accrual() -> Any:
    """Stateless accrual calculation from deposits and rate periods in the body."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = AccrualRequest.model_validate(raw_payload)
    summary = summarize_request(
        payload,
        now=_clock().now(),
        default_timezone=_settings().default_timezone,
        max_window_days=_settings().max_window_days,
    )
    return jsonify(summary.model_dump(mode="json"))
