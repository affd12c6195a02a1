"""
Domain errors raised by the repository and registry.
Endpoints translate them into HTTP status codes; nothing here knows about HTTP.
"""

from typing import Any

from pydantic import ValidationError


class ModelNotFoundError(LookupError):
    """No row with the given primary key."""

    def __init__(self, model: type, id: Any):
        self.model = model
        self.id = id
        super().__init__(f"{model.__name__} with id={id!r} not found")


class UnknownModelError(LookupError):
    """No model item registered under the alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No admin model registered as {alias!r}")


class FormValidationError(ValueError):
    """Submitted data failed the form's validation schema."""

    def __init__(self, error: ValidationError):
        self.error = error
        super().__init__(str(error))

    def errors(self) -> list[dict[str, Any]]:
        return self.error.errors(include_url=False, include_context=False, include_input=False)


class InvalidQueryError(ValueError):
    """Listing parameters reference something the model does not have."""


class NotOrderableError(TypeError):
    """Reorder requested on a model without an order field."""

    def __init__(self, model: type):
        self.model = model
        super().__init__(f"{model.__name__} has no order field")
