# backend/investment_tracker/schemas/pagination.py
"""
Offset pagination metadata returned next to list items.

Pages are 1-indexed and derived from skip/limit; an empty result still
reports one page.
"""

from pydantic import BaseModel, Field, computed_field


class PaginationMeta(BaseModel):
    total: int = Field(..., ge=0, description="Items matching the filters, ignoring skip/limit")
    skip: int = Field(..., ge=0, description="Offset of the first returned item")
    limit: int = Field(..., ge=1, description="Page size")

    @computed_field
    @property
    def page(self) -> int:
        return self.skip // self.limit + 1

    @computed_field
    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.limit))

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.skip + self.limit < self.total

    @classmethod
    def create(cls, total: int, skip: int, limit: int) -> "PaginationMeta":
        return cls(total=total, skip=skip, limit=limit)
