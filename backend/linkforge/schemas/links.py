"""
Pydantic schemas for link management endpoints.
"""
from typing import Annotated, List, Literal, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, HttpUrl

__all__ = ["LinkIn", "LinkUpdateIn", "MoveLinkIn", "ReorderIn", "bounded_url", "LINK_URL_MAX_LENGTH"]

# Link.url column width
LINK_URL_MAX_LENGTH = 2048

def bounded_url(max_length: int):
    """
    HttpUrl that also fits a column of `max_length` characters.
    The length is checked on the normalized form, which is what gets stored.
    """
    def _check(value: HttpUrl) -> HttpUrl:
        if len(str(value)) > max_length:
            raise ValueError(f"URL must be at most {max_length} characters")
        return value
    return Annotated[HttpUrl, AfterValidator(_check)]

LinkUrl = bounded_url(LINK_URL_MAX_LENGTH)

class LinkIn(BaseModel):
    """
    Request model for creating a link.
    The position is assigned by the server (after the current last link).
    """
    title: str = Field(min_length=1, max_length=100)
    url: LinkUrl
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)

class LinkUpdateIn(BaseModel):
    """
    Request model for editing a link. Position changes go through move/reorder.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    url: Optional[LinkUrl] = None
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    isActive: Optional[bool] = None

class MoveLinkIn(BaseModel):
    direction: Literal["up", "down"]

class ReorderIn(BaseModel):
    """Link ids in the desired display order."""
    ids: List[UUID]
