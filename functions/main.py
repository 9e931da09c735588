"""Cloud Function entry points for RenoQuote.

Provides HTTP endpoints for:
- Listing project templates
- Calculating estimates and per-contractor pricing
- Technician payout splits
- Submitting and listing projects
- Simulated contractor quote requests

All responses use the envelope {"success": bool, "data" | "error": ...}.
"""

import asyncio
import json
from typing import Dict, Any, Optional
from uuid import uuid4
from datetime import datetime, date

import numpy as np
import structlog
from firebase_functions import https_fn, options
from firebase_admin import initialize_app

from config.errors import RenoQuoteError, ErrorCode, ValidationError
from config.settings import settings
from services.activity_sink import FirestoreActivitySink
from services.contractor_directory import list_contractors
from services.estimate_calculator import EstimateCalculator
from services.fee_service import calculate_contractor_total, calculate_technician_payout
from services.firestore_service import FirestoreService
from services.local_project_store import LocalProjectStore
from services.project_service import ProjectService
from services.quote_simulation import QuoteSession
from services.technician_service import commission_rate_for_tier
from services.template_registry import registry
from utils.logging_config import configure_logging
from validators.form_validator import validate_form_data

# Initialize Firebase Admin SDK
try:
    initialize_app()
except ValueError:
    # Already initialized
    pass

configure_logging(json_output=not settings.is_emulator_mode)
logger = structlog.get_logger()

# Fallback store for submissions made while Firestore is unreachable
_local_store = LocalProjectStore()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# ============================================================================
# Helper Functions
# ============================================================================


def success_response(data: Any) -> Dict[str, Any]:
    """Build success response."""
    return {"success": True, "data": data}


def error_response(code: str, message: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    """Build error response."""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {}
        }
    }


def get_request_json(req: https_fn.Request) -> Dict[str, Any]:
    """Extract JSON from request body.

    Raises:
        ValidationError: If JSON is invalid.
    """
    try:
        return req.get_json(force=True, silent=False) or {}
    except Exception as e:
        raise ValidationError(
            message=f"Invalid JSON in request body: {str(e)}"
        )


def require_field(data: Dict[str, Any], field: str) -> Any:
    """Return a required request field.

    Raises:
        ValidationError: MISSING_FIELD if absent or empty.
    """
    value = data.get(field)
    if value is None or value == "":
        raise ValidationError(
            message=f"Missing {field} in request",
            field=field,
            code=ErrorCode.MISSING_FIELD
        )
    return value


def require_number(data: Dict[str, Any], field: str) -> float:
    value = require_field(data, field)
    if isinstance(value, bool):
        raise ValidationError(message=f"{field} must be a number", field=field, code=ErrorCode.INVALID_FIELD)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(message=f"{field} must be a number", field=field, code=ErrorCode.INVALID_FIELD)


def _activity_sink() -> FirestoreActivitySink:
    return FirestoreActivitySink()


def _project_service() -> ProjectService:
    sink = _activity_sink()
    return ProjectService(
        remote_store=FirestoreService(),
        local_store=_local_store,
        activity_sink=sink,
    )


def _validated_estimate(data: Dict[str, Any], calculator: EstimateCalculator):
    """Validate templateId/formData from a request body and calculate the estimate.

    Raises:
        ValidationError: On a missing field or invalid form data.
        TemplateNotFoundError: If the template id is unknown.
    """
    template_id = require_field(data, "templateId")
    form_data = data.get("formData") or {}
    template = registry.get_template(template_id)

    result = validate_form_data(template, form_data)
    if not result.is_valid:
        raise ValidationError(
            message="Invalid form data",
            details={"errors": result.errors, "fields": result.field_errors},
            code=ErrorCode.INVALID_FIELD
        )
    return calculator.calculate(template_id, result.cleaned, data.get("userId"))


def _handle(name: str, req: https_fn.Request, handler) -> https_fn.Response:
    """Run an endpoint handler and map errors to the response envelope."""
    if req.method == "OPTIONS":
        return _cors_response()

    try:
        data = get_request_json(req) if req.method == "POST" else dict(req.args or {})
        return _json_response(success_response(handler(data)))

    except ValidationError as e:
        return _json_response(error_response(e.code, e.message, e.details), status=400)
    except RenoQuoteError as e:
        status = 404 if e.code in (
            ErrorCode.TEMPLATE_NOT_FOUND, ErrorCode.CONTRACTOR_NOT_FOUND, ErrorCode.PROJECT_NOT_FOUND
        ) else 409 if e.code.startswith("QUOTE_") else 500
        logger.error(f"{name}_error", error=e.message, code=e.code)
        return _json_response(error_response(e.code, e.message, e.details), status=status)
    except Exception as e:
        logger.exception(f"{name}_exception", error=str(e))
        return _json_response(
            error_response(ErrorCode.INTERNAL_ERROR, f"{name} failed: {str(e)}"),
            status=500
        )


# ============================================================================
# Templates & Estimates
# ============================================================================


@https_fn.on_request(region="us-central1")
def list_templates(req: https_fn.Request) -> https_fn.Response:
    """List template summaries, or return one full template.

    Request (GET query or POST body):
    {
        "templateId": "deck-refresh"  // Optional
    }
    """
    def handler(data: Dict[str, Any]) -> Any:
        template_id = data.get("templateId")
        if template_id:
            return registry.get_template(template_id).model_dump(by_alias=True, exclude={"priced_fields"})
        return {"templates": [t.to_summary() for t in registry.list_templates()]}

    return _handle("list_templates", req, handler)


@https_fn.on_request(region="us-central1")
def calculate_estimate(req: https_fn.Request) -> https_fn.Response:
    """Calculate the base estimate for a template and form data.

    Request body:
    {
        "templateId": "deck-refresh",
        "formData": {"deckLength": 20, ...},
        "userId": "user-123"  // Optional
    }

    Response data: Estimate (camelCase)
    """
    def handler(data: Dict[str, Any]) -> Any:
        calculator = EstimateCalculator(activity_sink=_activity_sink())
        return _validated_estimate(data, calculator).to_dict()

    return _handle("calculate_estimate", req, handler)


@https_fn.on_request(region="us-central1")
def contractor_pricing(req: https_fn.Request) -> https_fn.Response:
    """Estimate plus per-contractor pricing (labor, platform fee, GST, total).

    Request body: same as calculate_estimate.
    """
    def handler(data: Dict[str, Any]) -> Any:
        calculator = EstimateCalculator(activity_sink=_activity_sink())
        estimate = _validated_estimate(data, calculator)
        return {
            "estimate": estimate.to_dict(),
            "contractors": [
                {
                    "contractor": contractor.public_dict(),
                    "pricing": calculate_contractor_total(estimate, contractor.hourly_rate).to_dict(),
                }
                for contractor in list_contractors()
            ],
        }

    return _handle("contractor_pricing", req, handler)


@https_fn.on_request(region="us-central1")
def technician_payout(req: https_fn.Request) -> https_fn.Response:
    """Split a project total between platform commission and technician payout.

    Request body:
    {
        "projectTotal": 1000,
        "commissionRate": 25   // or "tier": "bronze"
    }
    """
    def handler(data: Dict[str, Any]) -> Any:
        project_total = require_number(data, "projectTotal")
        if data.get("tier") and data.get("commissionRate") is None:
            rate = commission_rate_for_tier(data["tier"])
        else:
            rate = require_number(data, "commissionRate")
        payout = calculate_technician_payout(project_total, rate)
        return {"commissionRate": rate, **payout.model_dump(by_alias=True)}

    return _handle("technician_payout", req, handler)


# ============================================================================
# Projects
# ============================================================================


@https_fn.on_request(region="us-central1")
def submit_project(req: https_fn.Request) -> https_fn.Response:
    """Submit a project with status `pending`.

    Request body:
    {
        "templateId": "firepit",
        "formData": {...},
        "files": [{"name": "yard.jpg", "size": 123, "fieldId": "images"}],
        "userId": "user-123"
    }

    The project is stored locally if Firestore is unavailable; the response
    is a success either way.
    """
    def handler(data: Dict[str, Any]) -> Any:
        service = _project_service()
        estimate = _validated_estimate(data, service.calculator)
        record = asyncio.run(service.submit_project(
            template_id=data["templateId"],
            form_data=data.get("formData") or {},
            estimate=estimate,
            files=data.get("files") or [],
            user_id=data.get("userId"),
        ))
        return {"id": record.id, **record.to_firestore_dict()}

    return _handle("submit_project", req, handler)


@https_fn.on_request(region="us-central1")
def list_projects(req: https_fn.Request) -> https_fn.Response:
    """List a user's projects, newest first.

    Request body:
    {
        "userId": "user-123"
    }
    """
    def handler(data: Dict[str, Any]) -> Any:
        user_id = require_field(data, "userId")
        projects = asyncio.run(_project_service().list_projects(user_id))
        return {"projects": [{"id": p.id, **p.to_firestore_dict()} for p in projects]}

    return _handle("list_projects", req, handler)


@https_fn.on_request(
    timeout_sec=60,
    memory=options.MemoryOption.MB_256,
    region="us-central1"
)
def request_quotes(req: https_fn.Request) -> https_fn.Response:
    """Simulate quote requests to selected contractors and wait for responses.

    Request body:
    {
        "templateId": "deck-refresh",
        "formData": {...},
        "contractorIds": ["contractor-1", "contractor-3"],
        "projectId": "proj-xxx",   // Optional
        "userId": "user-123",      // Optional
        "seed": 42                 // Optional, reproducible quotes
    }
    """
    def handler(data: Dict[str, Any]) -> Any:
        sink = _activity_sink()
        estimate = _validated_estimate(data, EstimateCalculator(activity_sink=sink))
        seed: Optional[int] = data.get("seed")
        session = QuoteSession(
            project_id=data.get("projectId") or f"proj-{uuid4().hex[:12]}",
            estimate=estimate,
            activity_sink=sink,
            rng=np.random.default_rng(seed),
            user_id=data.get("userId"),
        )
        return asyncio.run(_run_quote_request(session, data.get("contractorIds") or []))

    return _handle("request_quotes", req, handler)


async def _run_quote_request(session: QuoteSession, contractor_ids) -> Dict[str, Any]:
    result = await session.request_quotes(contractor_ids)
    if not result.accepted:
        raise ValidationError(
            message=result.message,
            field="contractorIds",
            code=result.error_code or ErrorCode.NO_CONTRACTORS_SELECTED
        )
    quotes = await session.wait_for_quotes()
    return {
        "projectId": session.project_id,
        "state": result.state,
        "quotes": {cid: q.to_dict() for cid, q in quotes.items()},
        "lowestQuote": session.lowest_quote(),
        "highestQuote": session.highest_quote(),
    }


# ============================================================================
# Response helpers
# ============================================================================


def _cors_response() -> https_fn.Response:
    """Return CORS preflight response."""
    return https_fn.Response(
        "",
        status=204,
        headers=CORS_HEADERS
    )


def _json_response(data: dict, status: int = 200) -> https_fn.Response:
    """Return JSON response with CORS headers."""

    def _json_default(o: Any):
        """JSON serializer for objects not serializable by default.

        Firestore returns timestamp types like `DatetimeWithNanoseconds` which
        behave like datetime objects but are not JSON serializable.
        """
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return str(o)

    return https_fn.Response(
        json.dumps(data, default=_json_default),
        status=status,
        mimetype="application/json",
        headers=CORS_HEADERS
    )
