"""Schema validation for form values.

Forms bind loosely-typed user input (strings from text inputs, values
from selects) to a pydantic schema. ``validate`` turns that input into
either the typed value object or a list of field-scoped errors, never
raising for bad input.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from pmdesk.domain.shared.result import Err, Ok, Result

FormT = TypeVar("FormT", bound="FormSchema")


@dataclass(frozen=True, slots=True)
class FieldError:
    """A validation failure attached to a single form field."""

    field: str
    message: str


class FormSchema(BaseModel):
    """Base class for form value objects.

    Fields are declared in snake_case and serialized to the camelCase keys
    the API expects. Subclasses may override pydantic's default messages
    through ``error_messages``, keyed by ``(field, error_type)``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
        use_enum_values=False,
    )

    error_messages: ClassVar[dict[tuple[str, str], str]] = {}

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body sent to the API."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _field_errors(schema: type[FormSchema], exc: ValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        field = str(loc[0])
        message = schema.error_messages.get((field, error["type"]), error["msg"])
        errors.append(FieldError(field=field, message=message))
    return errors


def validate(schema: type[FormT], data: Mapping[str, Any]) -> Result[FormT, list[FieldError]]:
    """Validate raw form data against a schema.

    Args:
        schema: The FormSchema subclass describing the form.
        data: Field values keyed by field name.

    Returns:
        Ok(instance) when every field is valid, otherwise Err with one
        FieldError per failing field.
    """
    try:
        return Ok(schema.model_validate(dict(data)))
    except ValidationError as exc:
        return Err(_field_errors(schema, exc))


def errors_by_field(errors: list[FieldError]) -> dict[str, str]:
    """Collapse a list of errors to the first message per field."""
    by_field: dict[str, str] = {}
    for error in errors:
        by_field.setdefault(error.field, error.message)
    return by_field
