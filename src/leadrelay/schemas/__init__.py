"""
Pydantic schemas for request/response validation
"""
from leadrelay.schemas.base import BaseSchema
from leadrelay.schemas.lead import (
    LeadSubmission,
    validate_lead,
    normalize_lead,
    format_validation_errors
)
from leadrelay.schemas.outcomes import (
    AcceptedOutcome,
    RejectedOutcome,
    UpstreamErrorOutcome,
    ValidationErrorOutcome,
    ServerErrorOutcome,
    TokenResponse
)

__all__ = [
    # Base schemas
    "BaseSchema",
    # Lead schemas
    "LeadSubmission",
    "validate_lead",
    "normalize_lead",
    "format_validation_errors",
    # Outcome schemas
    "AcceptedOutcome",
    "RejectedOutcome",
    "UpstreamErrorOutcome",
    "ValidationErrorOutcome",
    "ServerErrorOutcome",
    "TokenResponse",
]
