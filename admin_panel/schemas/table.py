"""Listing request/response schemas - the datatable contract."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from admin_panel.config import get_settings

settings = get_settings()


class TableParams(BaseModel):
    search: str = ""
    offset: int = Field(0, ge=0)
    # -1 disables pagination
    limit: int = settings.default_page_size
    order_by: str | None = None
    order_dest: Literal["asc", "desc"] = "asc"

    @field_validator("limit")
    @classmethod
    def check_limit(cls, value: int) -> int:
        if value == -1 or 1 <= value <= settings.max_page_size:
            return value
        raise ValueError(f"limit must be -1 or between 1 and {settings.max_page_size}")


class TableDataResponse(BaseModel):
    rows: list[dict[str, Any]]
    total_count: int
    subtitle: str | None = None
