"""
Pagination metadata for listing results.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """
    Page metadata computed for a single get_all call.

    An empty instance (every field None) is returned when the caller asks
    for page <= 0, meaning no windowing was applied.

    Attributes:
        page: Requested page number (1-indexed)
        page_size: Records per page
        total: Records matching the filter, independent of the window
        total_pages: ceil(total / page_size)
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: Optional[int] = None
    page_size: Optional[int] = Field(default=None, alias="pageSize")
    total: Optional[int] = None
    total_pages: Optional[int] = Field(default=None, alias="totalPages")

    @property
    def is_empty(self) -> bool:
        """True when no pagination was computed."""
        return self.page is None

    def to_response(self) -> dict:
        """Serialize with wire-style keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


def paginate(page: int, page_size: int, total: int) -> Pagination:
    """
    Compute pagination metadata.

    The page is returned verbatim; a page past the last one is accepted
    and simply yields an empty window upstream.

    Args:
        page: Current page number
        page_size: Number of items per page (must be >= 1)
        total: Total number of matching items (must be >= 0)

    Returns:
        Pagination with total_pages = ceil(total / page_size)

    Raises:
        ValueError: If page_size < 1 or total < 0

    Example:
        >>> paginate(1, 10, 25)
        Pagination(page=1, page_size=10, total=25, total_pages=3)
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")

    return Pagination(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=math.ceil(total / page_size),
    )
