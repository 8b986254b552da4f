"""Request schemas reused across features."""

from pydantic import BaseModel, Field


class PaginationParams(BaseModel):
    """1-indexed offset pagination."""

    page: int = Field(1, ge=1, description="Page number, starting at 1")
    page_size: int = Field(10, ge=1, le=100, description="Rows per page (max 100)")

    @property
    def offset(self) -> int:
        return self.page_size * (self.page - 1)

    @property
    def limit(self) -> int:
        return self.page_size
