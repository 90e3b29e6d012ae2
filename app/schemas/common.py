"""Common schemas used across multiple modules"""
from pydantic import BaseModel


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    total: int
    page: int
    limit: int
    total_pages: int


def count_pages(total: int, limit: int) -> int:
    """Number of pages needed to show `total` items, `limit` per page"""
    return (total + limit - 1) // limit if total > 0 else 0
