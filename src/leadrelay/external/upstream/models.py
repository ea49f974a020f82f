"""
Models for lead buyer API responses
"""
from typing import Any
from pydantic import BaseModel


class UpstreamResult(BaseModel):
    """Raw status and best-effort JSON body of a lead buyer response"""
    status_code: int
    body: Any = None

    @property
    def decision(self) -> Any:
        """The buyer's ``status`` field, if the body is an object"""
        if isinstance(self.body, dict):
            return self.body.get("status")
        return None
