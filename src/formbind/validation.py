"""Validation chain — fluent, per-field checks that accumulate errors.

Usage::

    form.validate("title").required()
    form.validate("age").required().is_int().greater_or_equal(18)
    form.validate("price").is_float().less_float(1000)
    if form.has_errors():
        ...

Every check returns the chain. A failing check appends a
``ValidationError`` to ``form.errors`` and never raises.

Every check except ``required`` skips a field that is absent or empty:
presence is ``required``'s concern alone.

The ``...f`` variants take a printf-style format and arguments that
replace the default message. A type mismatch in a comparison always
reports the fixed "must be an integer." / "must be a number." message.
A format whose arguments do not fit is recorded verbatim.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable
from typing import Any

from formbind.errors import ConversionError, ValidationError
from formbind.form import Form
from formbind.input import Input

logger = logging.getLogger("formbind.validation")


class ValidationChain:
    """Checks for one field of a form.

    ``errors`` holds what this chain added; the same errors are also
    appended to ``form.errors``.
    """

    __slots__ = ("errors", "form", "input", "name")

    def __init__(self, form: Form, name: str) -> None:
        self.form = form
        self.name = name
        self.input: Input | None = form.get(name)
        self.errors: list[ValidationError] = []

    def __repr__(self) -> str:
        return f"ValidationChain({self.name!r}, errors={len(self.errors)})"

    @property
    def is_blank(self) -> bool:
        """True if the field is absent or its raw value is empty."""
        return self.input is None or self.input.raw_value == ""

    def add_error(self, format: str, *args: Any) -> ValidationChain:
        """Record a validation error rendered from *format* and *args*."""
        message = format
        if args:
            try:
                message = format % args
            except (TypeError, ValueError):
                logger.debug("Format %r does not match arguments %r", format, args)
        error = ValidationError(self.name, message, self.input)
        self.errors.append(error)
        self.form.add_error(error)
        return self

    # -- Presence --

    def required(self) -> ValidationChain:
        """Fail if the field is absent or empty."""
        return self.requiredf("%s is required.", self.name)

    def requiredf(self, format: str, *args: Any) -> ValidationChain:
        if self.is_blank:
            self.add_error(format, *args)
        return self

    # -- Integers --

    def less(self, limit: int) -> ValidationChain:
        return self.lessf(limit, "%s must be less than %d.", self.name, limit)

    def lessf(self, limit: int, format: str, *args: Any) -> ValidationChain:
        return self._check_int(operator.lt, limit, format, args)

    def less_or_equal(self, limit: int) -> ValidationChain:
        return self.less_or_equalf(limit, "%s must be less than or equal to %d.", self.name, limit)

    def less_or_equalf(self, limit: int, format: str, *args: Any) -> ValidationChain:
        return self._check_int(operator.le, limit, format, args)

    def greater(self, limit: int) -> ValidationChain:
        return self.greaterf(limit, "%s must be greater than %d.", self.name, limit)

    def greaterf(self, limit: int, format: str, *args: Any) -> ValidationChain:
        return self._check_int(operator.gt, limit, format, args)

    def greater_or_equal(self, limit: int) -> ValidationChain:
        return self.greater_or_equalf(
            limit, "%s must be greater than or equal to %d.", self.name, limit
        )

    def greater_or_equalf(self, limit: int, format: str, *args: Any) -> ValidationChain:
        return self._check_int(operator.ge, limit, format, args)

    def is_int(self) -> ValidationChain:
        """Fail if a present value does not parse as an integer."""
        return self.is_intf("%s must be an integer.", self.name)

    def is_intf(self, format: str, *args: Any) -> ValidationChain:
        return self._check_parses(Input.as_int, format, args)

    # -- Floats --

    def less_float(self, limit: float) -> ValidationChain:
        return self.less_floatf(limit, "%s must be less than %f.", self.name, limit)

    def less_floatf(self, limit: float, format: str, *args: Any) -> ValidationChain:
        return self._check_float(operator.lt, limit, format, args)

    def less_or_equal_float(self, limit: float) -> ValidationChain:
        return self.less_or_equal_floatf(
            limit, "%s must be less than or equal to %f.", self.name, limit
        )

    def less_or_equal_floatf(self, limit: float, format: str, *args: Any) -> ValidationChain:
        return self._check_float(operator.le, limit, format, args)

    def greater_float(self, limit: float) -> ValidationChain:
        return self.greater_floatf(limit, "%s must be greater than %f.", self.name, limit)

    def greater_floatf(self, limit: float, format: str, *args: Any) -> ValidationChain:
        return self._check_float(operator.gt, limit, format, args)

    def greater_or_equal_float(self, limit: float) -> ValidationChain:
        return self.greater_or_equal_floatf(
            limit, "%s must be greater than or equal to %f.", self.name, limit
        )

    def greater_or_equal_floatf(self, limit: float, format: str, *args: Any) -> ValidationChain:
        return self._check_float(operator.ge, limit, format, args)

    def is_float(self) -> ValidationChain:
        """Fail if a present value does not parse as a number."""
        return self.is_floatf("%s must be a number.", self.name)

    def is_floatf(self, format: str, *args: Any) -> ValidationChain:
        return self._check_parses(Input.as_float, format, args)

    # -- Booleans --

    def is_bool(self) -> ValidationChain:
        """Fail if a present value is not a boolean. Checkboxes always pass."""
        return self.is_boolf("%s must be either true or false.", self.name)

    def is_boolf(self, format: str, *args: Any) -> ValidationChain:
        return self._check_parses(Input.as_bool, format, args)

    # -- internals --

    def _present(self) -> Input | None:
        """The input, or ``None`` when a check should be skipped."""
        return None if self.is_blank else self.input

    def _check_parses(
        self, convert: Callable[[Input], Any], format: str, args: tuple[Any, ...]
    ) -> ValidationChain:
        inp = self._present()
        if inp is None:
            return self
        try:
            convert(inp)
        except ConversionError:
            self.add_error(format, *args)
        return self

    def _check_int(
        self,
        compare: Callable[[int, int], bool],
        limit: int,
        format: str,
        args: tuple[Any, ...],
    ) -> ValidationChain:
        inp = self._present()
        if inp is None:
            return self
        try:
            value = inp.as_int()
        except ConversionError:
            return self.add_error("%s must be an integer.", self.name)
        if not compare(value, limit):
            self.add_error(format, *args)
        return self

    def _check_float(
        self,
        compare: Callable[[float, float], bool],
        limit: float,
        format: str,
        args: tuple[Any, ...],
    ) -> ValidationChain:
        inp = self._present()
        if inp is None:
            return self
        try:
            value = inp.as_float()
        except ConversionError:
            return self.add_error("%s must be a number.", self.name)
        if not compare(value, limit):
            self.add_error(format, *args)
        return self
