"""Input model — one named form field and its typed conversions.

An ``Input`` is immutable. Conversions parse ``raw_value`` on every call
and raise ``ConversionError`` on failure; nothing is cached.

Parsing rules:

- **int**: base-10, optional leading sign, 64-bit signed range
- **uint**: base-10 digits only (no sign), range ``[0, 2**64 - 1]``
- **float**: base-10 with optional exponent, ``inf`` and ``nan``;
  values that overflow a double are rejected
- **bool**: checkbox and radio read ``checked`` and ignore the text;
  other kinds accept ``1 t T TRUE true True`` / ``0 f F FALSE false False``
- **time**: ``date`` → ``YYYY-MM-DD``; ``datetime-local`` →
  ``YYYY-MM-DDTHH:MM:SS[.fraction]``; anything else → RFC 3339 with a
  zone offset
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone, tzinfo

from formbind.errors import ConversionError
from formbind.kinds import CHECKABLE_KINDS, InputKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_DATETIME_LOCAL_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,9}))?"
)
_RFC3339_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,9}))?"
    r"(?:(Z)|([+-])([0-9]{2}):([0-9]{2}))"
)


@dataclass(frozen=True, slots=True)
class Input:
    """A single named form field.

    ``kind`` accepts an ``InputKind`` or its string value. ``checked``
    only matters for checkbox and radio inputs.
    """

    name: str
    raw_value: str = ""
    kind: InputKind = InputKind.TEXT
    checked: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.kind, InputKind):
            object.__setattr__(self, "kind", InputKind(self.kind))

    def as_string(self) -> str:
        return self.raw_value

    def as_int(self) -> int:
        """Parse the raw value as a 64-bit signed integer."""
        if not _INT_RE.fullmatch(self.raw_value):
            raise ConversionError(self.name, self.raw_value, "int", "invalid syntax")
        value = int(self.raw_value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise ConversionError(self.name, self.raw_value, "int", "value out of range")
        return value

    def as_uint(self) -> int:
        """Parse the raw value as an unsigned 64-bit integer."""
        if not _UINT_RE.fullmatch(self.raw_value):
            raise ConversionError(self.name, self.raw_value, "uint", "invalid syntax")
        value = int(self.raw_value)
        if value > UINT64_MAX:
            raise ConversionError(self.name, self.raw_value, "uint", "value out of range")
        return value

    def as_float(self) -> float:
        """Parse the raw value as a double."""
        if not _FLOAT_RE.fullmatch(self.raw_value):
            raise ConversionError(self.name, self.raw_value, "float", "invalid syntax")
        value = float(self.raw_value)
        if math.isinf(value) and "inf" not in self.raw_value.lower():
            raise ConversionError(self.name, self.raw_value, "float", "value out of range")
        return value

    def as_bool(self) -> bool:
        """Checked flag for checkbox/radio, else a strict boolean parse."""
        if self.kind in CHECKABLE_KINDS:
            return self.checked
        if self.raw_value in _TRUE:
            return True
        if self.raw_value in _FALSE:
            return False
        raise ConversionError(self.name, self.raw_value, "bool", "invalid syntax")

    def as_time(self, tz: tzinfo = UTC) -> datetime:
        """Parse the raw value as an aware datetime, layout chosen by kind.

        Zone-less layouts (``date``, ``datetime-local``) are placed in *tz*.
        """
        if self.kind is InputKind.DATE:
            match = _DATE_RE.fullmatch(self.raw_value)
            if match is None:
                raise ConversionError(self.name, self.raw_value, "date", "expected YYYY-MM-DD")
            return self._build_time(match.groups(), tz)

        if self.kind is InputKind.DATETIME_LOCAL:
            match = _DATETIME_LOCAL_RE.fullmatch(self.raw_value)
            if match is None:
                raise ConversionError(
                    self.name, self.raw_value, "datetime-local", "expected YYYY-MM-DDTHH:MM:SS"
                )
            return self._build_time(match.groups(), tz)

        match = _RFC3339_RE.fullmatch(self.raw_value)
        if match is None:
            raise ConversionError(self.name, self.raw_value, "datetime", "expected RFC 3339")
        groups = match.groups()
        zone: tzinfo = UTC
        if not groups[7]:
            offset = timedelta(hours=int(groups[9]), minutes=int(groups[10]))
            if int(groups[9]) > 23 or int(groups[10]) > 59:
                raise ConversionError(self.name, self.raw_value, "datetime", "zone offset out of range")
            zone = timezone(-offset if groups[8] == "-" else offset)
        return self._build_time(groups[:7], zone)

    def _build_time(self, parts: tuple[str | None, ...], tz: tzinfo) -> datetime:
        year, month, day, *clock = parts
        hour, minute, second, fraction = (clock + [None] * 4)[:4]
        micros = int((fraction or "0")[:6].ljust(6, "0"))
        try:
            return datetime(
                int(year),
                int(month),
                int(day),
                int(hour or 0),
                int(minute or 0),
                int(second or 0),
                micros,
                tzinfo=tz,
            )
        except ValueError as exc:
            raise ConversionError(self.name, self.raw_value, "datetime", str(exc)) from None
