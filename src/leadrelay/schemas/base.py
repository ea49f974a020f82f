"""
Base schema classes
"""
from pydantic import BaseModel as PydanticBaseModel


class BaseSchema(PydanticBaseModel):
    """Base schema with common configuration"""

    class Config:
        populate_by_name = True
