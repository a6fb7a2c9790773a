"""Form container — named inputs plus accumulated validation errors.

A Form is built once (usually by a parser in ``formbind.parsing``), then
validated and bound sequentially, then discarded. It is not safe to share
across concurrent sessions.

Usage::

    form = parse_html(markup)
    form.validate("age").required().greater_or_equal(18)
    if form.has_errors():
        return render(errors=form.errors)

    signup = Signup()
    form.bind(signup)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from formbind.config import DEFAULT_CONFIG, FormConfig
from formbind.errors import FormError, InputNotFound, ValidationError
from formbind.input import Input

if TYPE_CHECKING:
    from formbind.binding import Binder
    from formbind.validation import ValidationChain


class Form:
    """Inputs keyed by name, in insertion order, and an error list.

    ``errors`` only ever grows. ``add_error`` is the single place it is
    appended to.
    """

    __slots__ = ("config", "errors", "inputs")

    def __init__(
        self,
        inputs: Mapping[str, Input] | Iterable[Input] = (),
        *,
        config: FormConfig | None = None,
    ) -> None:
        if isinstance(inputs, Mapping):
            self.inputs: dict[str, Input] = dict(inputs)
        else:
            # Later inputs with the same name replace earlier ones
            self.inputs = {inp.name: inp for inp in inputs}
        self.errors: list[FormError] = []
        self.config = config or DEFAULT_CONFIG

    def __contains__(self, name: object) -> bool:
        return name in self.inputs

    def __iter__(self) -> Iterator[Input]:
        return iter(self.inputs.values())

    def __len__(self) -> int:
        return len(self.inputs)

    def __repr__(self) -> str:
        names = ", ".join(repr(n) for n in self.inputs)
        return f"Form([{names}], errors={len(self.errors)})"

    # -- Lookup --

    def get(self, name: str) -> Input | None:
        """Return the input called *name*, or ``None``."""
        return self.inputs.get(name)

    def input(self, name: str) -> Input:
        """Return the input called *name*, raising ``InputNotFound``."""
        try:
            return self.inputs[name]
        except KeyError:
            raise InputNotFound(name) from None

    def get_string(self, name: str) -> str:
        return self.input(name).as_string()

    def get_int(self, name: str) -> int:
        return self.input(name).as_int()

    def get_uint(self, name: str) -> int:
        return self.input(name).as_uint()

    def get_float(self, name: str) -> float:
        return self.input(name).as_float()

    def get_bool(self, name: str) -> bool:
        return self.input(name).as_bool()

    def get_time(self, name: str) -> datetime:
        """Timestamp for *name*; zone-less kinds use ``config.timezone``."""
        return self.input(name).as_time(self.config.timezone)

    # -- Errors --

    def has_errors(self) -> bool:
        """True if at least one validation error has been recorded."""
        return len(self.errors) > 0

    def add_error(self, error: FormError) -> None:
        self.errors.append(error)

    def errors_for(self, name: str) -> list[ValidationError]:
        """Validation errors recorded for one field, oldest first."""
        return [e for e in self.errors if isinstance(e, ValidationError) and e.name == name]

    # -- Binding & validation --

    def bind(self, dest: Any, *, binder: Binder | None = None) -> None:
        """Copy input values onto the fields of *dest*.

        See ``formbind.binding.Binder.bind``.
        """
        from formbind.binding import default_binder

        (binder or default_binder).bind(self, dest)

    def validate(self, name: str) -> ValidationChain:
        """Start a validation chain for the field called *name*."""
        from formbind.validation import ValidationChain

        return ValidationChain(self, name)
