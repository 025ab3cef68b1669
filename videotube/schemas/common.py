# ============================================================================
# FILE: videotube/schemas/common.py
# ============================================================================
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class ApiResponse(CamelModel, Generic[T]):
    """Envelope shared by every successful response"""
    status_code: int = 200
    success: bool = True
    message: str = "Success"
    data: Optional[T] = None

def respond(data=None, message: str = "Success", status_code: int = 200) -> ApiResponse:
    return ApiResponse(
        status_code=status_code,
        success=200 <= status_code < 300,
        message=message,
        data=data,
    )

class Page(CamelModel, Generic[T]):
    """One page of a list endpoint; pages past the end carry no docs"""
    docs: List[T] = []
    total_docs: int
    limit: int
    page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, docs: List[T], total: int, page: int, limit: int) -> "Page[T]":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            docs=docs,
            total_docs=total,
            limit=limit,
            page=page,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

class PageParams(BaseModel):
    """Pagination query parameters"""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

class OwnerSummary(CamelModel):
    """Owner profile subset embedded in projections"""
    id: str
    username: str
    full_name: Optional[str] = None
    avatar: Optional[str] = None
