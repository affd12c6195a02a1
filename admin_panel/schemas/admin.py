"""Admin metadata schemas - registered models and their form fields."""

from typing import Any

from pydantic import BaseModel


class ColumnInfo(BaseModel):
    name: str
    label: str
    searchable: bool


class ModelInfo(BaseModel):
    alias: str
    title: str
    columns: list[ColumnInfo]
    orderable: bool


class FormOption(BaseModel):
    value: Any
    label: str | None


class FormFieldResponse(BaseModel):
    name: str
    label: str
    type: str
    required: bool
    value: Any = None
    options: list[FormOption] | None = None
