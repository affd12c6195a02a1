"""
Form items - field definitions for admin create/edit forms.
Each item knows its current value on an instance and contributes one field
to the pydantic validation schema. Rendering them is the UI's job.
"""

from collections.abc import Iterable, Mapping
from datetime import date, time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from admin_panel.core.exceptions import FormValidationError
from admin_panel.db.inspection import primary_key_name, read_attribute


class FormItem:
    """Base form item: one model attribute, one schema field."""

    field_type = "text"
    python_type: Any = str

    def __init__(self, name: str, label: str | None = None, *, required: bool = False, default: Any = None):
        self.name = name
        self.label = label or name.replace("_", " ").capitalize()
        self.required = required
        self.default = default

    def value(self, instance: Any) -> Any:
        """Stored value; the default only fills in for a row that is not persisted yet."""
        value = read_attribute(instance, self.name)
        if value is None and not _is_persistent(instance):
            return self.default
        return value

    def field_definition(self, partial: bool = False) -> tuple[Any, Any]:
        """(annotation, default) pair for pydantic.create_model.

        Partial schemas make every field omittable, but a required field
        still rejects an explicit null.
        """
        if self.required:
            return self.python_type, None if partial else ...
        return Optional[self.python_type], None if partial else self.default

    async def describe(self, session: AsyncSession, instance: Any) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "type": self.field_type,
            "required": self.required,
            "value": self.value(instance),
        }


class Text(FormItem):
    pass


class Textarea(FormItem):
    field_type = "textarea"


class Number(FormItem):
    field_type = "number"
    python_type = int


class Checkbox(FormItem):
    field_type = "checkbox"
    python_type = bool

    def __init__(self, name: str, label: str | None = None, *, required: bool = False, default: Any = False):
        super().__init__(name, label, required=required, default=default)


class Date(FormItem):
    field_type = "date"
    python_type = date


class Time(FormItem):
    field_type = "time"
    python_type = time


class Select(FormItem):
    """Single choice from a static mapping or from the rows of a related model."""

    field_type = "select"
    python_type = int

    def __init__(
        self,
        name: str,
        label: str | None = None,
        *,
        options: Mapping[Any, str] | None = None,
        model: type | None = None,
        display: str = "name",
        required: bool = False,
        default: Any = None,
    ):
        super().__init__(name, label, required=required, default=default)
        if options is not None and model is not None:
            raise ValueError("Select takes either options or model, not both")
        self.options = dict(options) if options is not None else None
        self.model = model
        self.display = display
        if self.options and all(isinstance(key, str) for key in self.options):
            self.python_type = str

    async def load_options(self, session: AsyncSession) -> dict[Any, str]:
        if self.options is not None:
            return dict(self.options)
        if self.model is None:
            return {}
        pk = primary_key_name(self.model)
        result = await session.execute(select(self.model).order_by(getattr(self.model, self.display)))
        return {getattr(row, pk): read_attribute(row, self.display) for row in result.scalars().all()}

    async def describe(self, session: AsyncSession, instance: Any) -> dict[str, Any]:
        data = await super().describe(session, instance)
        data["options"] = [{"value": k, "label": v} for k, v in (await self.load_options(session)).items()]
        return data


class MultiSelect(Select):
    """Multiple choice bound to a relation collection."""

    field_type = "multiselect"

    def __init__(self, name: str, label: str | None = None, **kwargs: Any):
        kwargs.setdefault("default", [])
        super().__init__(name, label, **kwargs)
        self.python_type = list[self.python_type]

    def value(self, instance: Any) -> Any:
        value = super().value(instance)
        if not _is_collection(value):
            return value
        members = list(value)
        if members and sa_inspect(members[0], raiseerr=False) is not None:
            key = primary_key_name(type(members[0]))
            return [getattr(member, key) for member in members]
        return members


def _is_persistent(instance: Any) -> bool:
    state = sa_inspect(instance, raiseerr=False) if instance is not None else None
    return state is not None and state.has_identity


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


class Form:
    """Ordered set of form items plus the validation schema derived from them."""

    def __init__(self, items: Iterable[FormItem] = ()):
        self.items = list(items)

    def __iter__(self):
        return iter(self.items)

    def get(self, name: str) -> FormItem | None:
        return next((item for item in self.items if item.name == name), None)

    def validation_schema(self, partial: bool = False) -> type[BaseModel]:
        fields = {item.name: item.field_definition(partial) for item in self.items}
        return create_model(
            "PartialFormData" if partial else "FormData",
            __config__=ConfigDict(extra="ignore"),
            **fields,
        )

    def validate(self, data: Mapping[str, Any], *, partial: bool = False) -> dict[str, Any]:
        """Validate submitted data. Partial validation keeps only submitted keys."""
        schema = self.validation_schema(partial)
        try:
            cleaned = schema.model_validate(dict(data))
        except ValidationError as e:
            raise FormValidationError(e) from e
        return cleaned.model_dump(exclude_unset=partial)

    def values(self, instance: Any) -> dict[str, Any]:
        return {item.name: item.value(instance) for item in self.items}

    async def describe(self, session: AsyncSession, instance: Any) -> list[dict[str, Any]]:
        return [await item.describe(session, instance) for item in self.items]
