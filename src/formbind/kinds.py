"""HTML input kinds.

The closed set of ``type`` attribute values an ``<input>`` element may
carry. Kind drives the boolean and timestamp conversions in
``formbind.input``.
"""

from __future__ import annotations

from enum import StrEnum


class InputKind(StrEnum):
    DEFAULT = ""
    BUTTON = "button"
    CHECKBOX = "checkbox"
    COLOR = "color"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME_LOCAL = "datetime-local"
    EMAIL = "email"
    FILE = "file"
    HIDDEN = "hidden"
    IMAGE = "image"
    MONTH = "month"
    NUMBER = "number"
    PASSWORD = "password"
    RADIO = "radio"
    RANGE = "range"
    RESET = "reset"
    SEARCH = "search"
    TEL = "tel"
    TEXT = "text"
    TIME = "time"
    URL = "url"
    WEEK = "week"

    @classmethod
    def from_attribute(cls, value: str | None) -> InputKind:
        """Kind for a raw ``type`` attribute, as a browser would report it.

        A missing or unrecognised attribute falls back to ``text``.
        """
        if not value:
            return cls.TEXT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.TEXT


# Kinds whose boolean value is the checked flag, not the text
CHECKABLE_KINDS = frozenset({InputKind.CHECKBOX, InputKind.RADIO})
