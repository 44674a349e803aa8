"""Common schemas."""
from pydantic import BaseModel, Field


class PageRequest(BaseModel):
    """Pagination and sort parameters.

    ``page`` is zero-based. ``sort_by`` and ``sort_dir`` are checked against
    the sortable columns by the store, not here.
    """

    page: int = Field(default=0, ge=0)
    size: int = Field(default=10, ge=1)
    sort_by: str = "created_at"
    sort_dir: str = "desc"
