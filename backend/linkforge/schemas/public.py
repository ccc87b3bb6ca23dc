"""
Pydantic schemas for the unauthenticated public page endpoints.
"""
from typing import Optional

from pydantic import BaseModel, Field

__all__ = ["VisitIn"]

class VisitIn(BaseModel):
    """
    Optional body for recording a page view.
    Clients that cannot keep cookies may echo back the visitorId they were given.
    """
    visitorId: Optional[str] = Field(default=None, max_length=64)
