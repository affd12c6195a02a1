"""
Admin model endpoints - generic REST resource per registered model.
Design: Thin controller; ModelRepository holds the query logic. Domain errors
(not found, validation, bad sort column) are mapped to HTTP codes in main.
"""

from typing import Any, Literal

from fastapi import APIRouter, Body, HTTPException, Query, Request, Response, status
from pydantic import ValidationError

from admin_panel.admin.model_item import ModelItem
from admin_panel.admin.registry import admin
from admin_panel.config import get_settings
from admin_panel.db import ordering
from admin_panel.db.repositories.model_repository import ModelRepository
from admin_panel.db.session import DbSession
from admin_panel.schemas.admin import ColumnInfo, FormFieldResponse, ModelInfo
from admin_panel.schemas.table import TableDataResponse, TableParams

router = APIRouter()
settings = get_settings()

# Query parameters consumed by the table itself; everything else feeds filters
TABLE_KEYS = {"search", "offset", "limit", "order_by", "order_dest"}


def _get_repository(alias: str, session: DbSession, request: Request) -> tuple[ModelItem, ModelRepository]:
    """Factory for the repository of one registered model."""
    item = admin.get(alias)
    query = {k: v for k, v in request.query_params.items() if k not in TABLE_KEYS}
    return item, ModelRepository(item, session, query)


@router.get("", response_model=list[ModelInfo])
async def list_models():
    """Registered models with their listing columns."""
    return [
        ModelInfo(
            alias=item.alias,
            title=item.title,
            columns=[
                ColumnInfo(**column.header(), searchable=item.is_searchable(column)) for column in item.get_columns()
            ],
            orderable=ordering.order_field(item.model) is not None,
        )
        for item in admin.all()
    ]


@router.get("/{alias}", response_model=TableDataResponse)
async def table_data(
    session: DbSession,
    request: Request,
    alias: str,
    search: str = Query(""),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=-1, le=settings.max_page_size),
    order_by: str | None = Query(None),
    order_dest: Literal["asc", "desc"] = Query("asc"),
):
    """Listing: GET /models/products?search=tea&offset=0&limit=20&order_by=title&category=3."""
    item, repo = _get_repository(alias, session, request)
    try:
        params = TableParams(search=search, offset=offset, limit=limit, order_by=order_by, order_dest=order_dest)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )
    data = await repo.table_data(params)
    return TableDataResponse(
        rows=[item.render_row(row) for row in data.rows],
        total_count=data.total_count,
        subtitle=repo.get_subtitle(),
    )


@router.get("/{alias}/create", response_model=list[FormFieldResponse])
async def create_form(session: DbSession, request: Request, alias: str):
    """Form fields with default values for a new row."""
    item, repo = _get_repository(alias, session, request)
    return await item.get_form().describe(session, await repo.get_instance())


@router.get("/{alias}/{id}/edit", response_model=list[FormFieldResponse])
async def edit_form(session: DbSession, request: Request, alias: str, id: str):
    """Form fields with current values (multi-selects as primary key lists)."""
    item, repo = _get_repository(alias, session, request)
    return await item.get_form().describe(session, await repo.get_instance(id))


@router.get("/{alias}/{id}")
async def get_row(session: DbSession, request: Request, alias: str, id: str) -> dict[str, Any]:
    item, repo = _get_repository(alias, session, request)
    return item.render_row(await repo.find(id))


@router.post("/{alias}", status_code=status.HTTP_201_CREATED)
async def store(session: DbSession, request: Request, alias: str, data: dict[str, Any] = Body(...)) -> dict[str, Any]:
    item, repo = _get_repository(alias, session, request)
    return item.render_row(await repo.store(data))


@router.put("/{alias}/{id}")
async def update(
    session: DbSession, request: Request, alias: str, id: str, data: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    item, repo = _get_repository(alias, session, request)
    return item.render_row(await repo.update(id, data))


@router.delete("/{alias}/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy(session: DbSession, request: Request, alias: str, id: str):
    _, repo = _get_repository(alias, session, request)
    await repo.destroy(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{alias}/{id}/up")
async def move_up(session: DbSession, request: Request, alias: str, id: str):
    """Swap with the previous row in manual order."""
    _, repo = _get_repository(alias, session, request)
    return {"moved": await repo.move_up(id)}


@router.post("/{alias}/{id}/down")
async def move_down(session: DbSession, request: Request, alias: str, id: str):
    """Swap with the next row in manual order."""
    _, repo = _get_repository(alias, session, request)
    return {"moved": await repo.move_down(id)}
