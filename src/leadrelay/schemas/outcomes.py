"""
Relay outcome and token response schemas
"""
from typing import Any, Dict, List, Literal, Optional
from leadrelay.schemas.base import BaseSchema


class AcceptedOutcome(BaseSchema):
    """The buyer took the lead"""
    status: Literal["accepted"] = "accepted"
    redirectUrl: Optional[Any] = None
    price: Optional[Any] = None


class RejectedOutcome(BaseSchema):
    """The buyer declined the lead"""
    status: Literal["rejected"] = "rejected"
    message: Any = "rejected"


class UpstreamErrorOutcome(BaseSchema):
    status: Literal["error"] = "error"
    upstreamStatus: int
    upstream: Any


class ValidationErrorOutcome(BaseSchema):
    status: Literal["validation_error"] = "validation_error"
    errors: List[Dict[str, Any]]


class ServerErrorOutcome(BaseSchema):
    status: Literal["error"] = "error"
    message: str = "Unexpected server error"


class TokenResponse(BaseSchema):
    """Response for the token endpoint"""
    token: str
    redirectUrl: str
