"""
Shared response schemas
"""
import math
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain success/message response"""
    success: bool = True
    message: str


class PaginationOut(BaseModel):
    """Pagination metadata included in paginated responses"""
    page: int = Field(..., description="Current page number (1-based)")
    limit: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of matching items")
    pages: int = Field(..., description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationOut":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)
