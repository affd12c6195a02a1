"""
Mapper introspection helpers shared by columns, form items and the repository.
Reads only already-loaded state so nothing triggers a lazy load under asyncio.
"""

from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import RelationshipProperty

from admin_panel.core.exceptions import InvalidQueryError

TRUE_STRINGS = {"1", "true", "yes", "on"}


def read_attribute(instance: Any, name: str) -> Any:
    """Attribute value from loaded state; plain Python attributes fall back to getattr."""
    if instance is None:
        return None
    state = sa_inspect(instance, raiseerr=False)
    if state is not None and name in state.mapper.attrs:
        return state.dict.get(name)
    return getattr(instance, name, None)


def resolve_path(instance: Any, path: str) -> Any:
    """Walk a dotted attribute path. Collections fan out into lists."""
    head, _, rest = path.partition(".")
    value = read_attribute(instance, head)
    if not rest or value is None:
        return value
    if isinstance(value, (list, set, tuple)):
        return [resolve_path(member, rest) for member in value]
    return resolve_path(value, rest)


def primary_key_name(model: type) -> str:
    mapper = sa_inspect(model)
    return mapper.get_property_by_column(mapper.primary_key[0]).key


def primary_key_value(instance: Any) -> Any:
    identity = sa_inspect(instance).identity
    return identity[0] if identity else None


def relationship_of(model: type, name: str) -> RelationshipProperty | None:
    return sa_inspect(model).relationships.get(name)


def coerce_value(attribute: Any, value: Any) -> Any:
    """Convert a query-string value to the Python type of a mapped column."""
    if not isinstance(value, str):
        return value
    try:
        python_type = attribute.type.python_type
    except (AttributeError, NotImplementedError):
        return value
    if python_type is bool:
        return value.lower() in TRUE_STRINGS
    if python_type is str:
        return value
    try:
        return python_type(value)
    except (TypeError, ValueError) as e:
        raise InvalidQueryError(f"Invalid value {value!r} for {attribute}") from e


def is_scalar_relation(prop: RelationshipProperty | None) -> bool:
    """Many-to-one or one-to-one: joining it never multiplies rows."""
    return prop is not None and not prop.uselist
