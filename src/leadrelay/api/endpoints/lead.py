"""
Lead submission endpoint
"""
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from rich.markup import escape

from leadrelay.core.dependencies import get_lead_relay
from leadrelay.schemas.outcomes import (
    ServerErrorOutcome,
    UpstreamErrorOutcome,
    ValidationErrorOutcome,
)
from leadrelay.services.lead_service import LeadRelay
from leadrelay.utils.exceptions import LeadValidationError, UpstreamError
from leadrelay.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With",
    "Access-Control-Max-Age": "86400",
}

BODYLESS_STATUSES = {204, 205, 304}


def _json(content: dict, status_code: int) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def echo_status(upstream_status: int) -> int:
    """Buyer status to answer with; statuses that forbid a body become 502"""
    if upstream_status < 200 or upstream_status in BODYLESS_STATUSES:
        return status.HTTP_502_BAD_GATEWAY
    return upstream_status


@router.options("/lead")
async def lead_preflight():
    """Cross-origin preflight for the lead form"""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.post("/lead")
async def submit_lead(
    request: Request,
    relay: LeadRelay = Depends(get_lead_relay)
):
    """
    Validate a lead and relay it to the buyer.

    The body is read raw so schema failures come back in the relay's own
    ``validation_error`` shape rather than FastAPI's.

    Returns:
        200 accepted/rejected, 422 validation_error, the buyer's status for
        unrecognised buyer answers, 500 for anything else
    """
    try:
        try:
            payload = await request.json()
        except ValueError:
            raise LeadValidationError([
                {"field": "body", "message": "Body must be valid JSON", "type": "json_invalid"}
            ])

        outcome = await relay.relay(payload)
        return _json(outcome.model_dump(), status.HTTP_200_OK)

    except LeadValidationError as e:
        logger.info(
            f"[yellow]Lead failed validation:[/yellow] "
            f"{escape(str([err['field'] for err in e.errors]))}"
        )
        return _json(
            ValidationErrorOutcome(errors=e.errors).model_dump(),
            LeadValidationError.status_code,
        )
    except UpstreamError as e:
        return _json(
            UpstreamErrorOutcome(upstreamStatus=e.upstream_status, upstream=e.upstream).model_dump(),
            echo_status(e.upstream_status),
        )
    except Exception:
        logger.exception("[red]❌ Unexpected error relaying lead[/red]")
        return _json(ServerErrorOutcome().model_dump(), status.HTTP_500_INTERNAL_SERVER_ERROR)
