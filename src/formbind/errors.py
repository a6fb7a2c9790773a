"""formbind exception hierarchy.

Lookups, conversions, and binding raise these fail-fast. Validation never
raises: ``ValidationError`` values are appended to ``Form.errors`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from formbind.input import Input


class FormError(Exception):
    """Base for all formbind errors."""


class InputNotFound(FormError, LookupError):  # noqa: N818
    """No input with the requested name exists in the form."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"could not find input with name = {name}")


class ConversionError(FormError, ValueError):
    """An input's raw text does not parse as the requested type."""

    def __init__(self, name: str, raw_value: str, target: str, reason: str = "") -> None:
        self.name = name
        self.raw_value = raw_value
        self.target = target
        detail = f": {reason}" if reason else ""
        super().__init__(f"error parsing {name}: cannot convert {raw_value!r} to {target}{detail}")


class DestinationTypeError(FormError, TypeError):
    """``bind`` was given something other than a mutable record instance."""


class UnsupportedTypeError(FormError, TypeError):
    """No conversion is known for a destination field's type."""

    def __init__(self, field: str, field_type: Any, kind: str, raw_value: str) -> None:
        self.field = field
        self.field_type = field_type
        self.kind = kind
        self.raw_value = raw_value
        super().__init__(
            f"don't know how to bind input of type {kind or 'default'} and value "
            f"{raw_value!r} to field {field!r} of type {_type_name(field_type)}"
        )


class CustomBinderError(FormError):
    """Convenience base for errors raised from ``bind_form`` / ``bind_input``.

    The binder propagates override exceptions verbatim, whatever their type.
    """


class FormParseError(FormError, ValueError):
    """Markup or a request body could not be turned into a Form."""


@dataclass(frozen=True, slots=True)
class ValidationError(FormError):
    """A failed predicate recorded by a validation chain.

    ``input`` is ``None`` when the validated field was absent from the form.
    """

    name: str
    message: str
    input: Input | None = None

    def __str__(self) -> str:
        return self.message


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
