"""
Custom exception classes
"""
from typing import Any, Dict, List, Optional
from fastapi import status


class LeadValidationError(Exception):
    """Raised when a lead submission violates the partner field schema"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


class UpstreamError(Exception):
    """Raised when the lead buyer answers with anything but a recognised decision"""

    def __init__(self, upstream_status: int, upstream: Any):
        super().__init__(f"Upstream returned {upstream_status}")
        self.upstream_status = upstream_status
        self.upstream = upstream


class MissingTokenError(Exception):
    """Raised when a redirect request carries no token"""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Missing token"


class DecryptionFailure(Exception):
    """Raised when a token cannot be decoded, authenticated or decrypted"""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid token"

    def __init__(self, reason: Optional[str] = None):
        super().__init__(reason or self.message)
        self.reason = reason
