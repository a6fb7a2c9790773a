"""Struct binder — copy form input values onto a record's fields.

Binding is one-way and one-time: later changes to the form do not reach
the record, and changes to the record do not reach the form.

For each public annotated field of the destination, the first input
whose name matches case-insensitively is bound to it. Fields without a
matching input, and inputs without a matching field, are ignored.

Resolution order:

1. The destination implements ``FormBinder`` → ``dest.bind_form(form)``
   and nothing else.
2. The field's type implements ``InputBinder`` → the field's current
   value (or a fresh ``FieldType()`` when it is ``None``) gets
   ``bind_input(input)`` and is stored back.
3. The field's type has a converter in the binder's registry.
4. Otherwise ``UnsupportedTypeError``.

Exceptions raised by ``bind_form`` / ``bind_input`` propagate unchanged.
The first failing field stops the bind; fields bound before it keep
their new values (there is no rollback).
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import struct
import types
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import (
    Annotated,
    Any,
    ClassVar,
    Protocol,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

from formbind.errors import ConversionError, DestinationTypeError, UnsupportedTypeError
from formbind.form import Form
from formbind.input import Input
from formbind.types import FLOAT64, INT64, FloatWidth, IntWidth

logger = logging.getLogger("formbind.binding")


@runtime_checkable
class FormBinder(Protocol):
    """A destination that binds the whole form itself."""

    def bind_form(self, form: Form) -> None: ...


@runtime_checkable
class InputBinder(Protocol):
    """A field type that binds one input into itself.

    Implemented by the field's type, not the enclosing record::

        @dataclass
        class Name:
            first: str = ""
            last: str = ""

            def bind_input(self, input: Input) -> None:
                self.first, _, self.last = input.raw_value.partition(" ")
    """

    def bind_input(self, input: Input) -> None: ...


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A destination field with its annotation resolved.

    ``base`` is the concrete type with aliases, ``Annotated`` and
    ``| None`` layers stripped; ``metadata`` collects the ``Annotated``
    extras found along the way.
    """

    name: str
    annotation: Any
    base: Any
    optional: bool = False
    metadata: tuple[Any, ...] = ()

    def find(self, kind: type) -> Any:
        """First metadata item that is an instance of *kind*, or ``None``."""
        for item in self.metadata:
            if isinstance(item, kind):
                return item
        return None


type Converter = Callable[[Input, FieldSpec, Form], Any]


# ---------------------------------------------------------------------------
# Built-in converters
# ---------------------------------------------------------------------------


def _convert_str(inp: Input, field: FieldSpec, form: Form) -> str:
    return inp.raw_value


def _convert_bytes(inp: Input, field: FieldSpec, form: Form) -> bytes:
    return inp.raw_value.encode(form.config.encoding)


def _convert_int(inp: Input, field: FieldSpec, form: Form) -> int:
    width: IntWidth = field.find(IntWidth) or INT64
    value = inp.as_int() if width.signed else inp.as_uint()
    if value not in width:
        raise ConversionError(inp.name, inp.raw_value, width.label, "value out of range")
    return value


def _convert_float(inp: Input, field: FieldSpec, form: Form) -> float:
    width: FloatWidth = field.find(FloatWidth) or FLOAT64
    value = inp.as_float()
    if width.bits == 32:
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            raise ConversionError(
                inp.name, inp.raw_value, width.label, "value out of range"
            ) from None
    return value


def _convert_bool(inp: Input, field: FieldSpec, form: Form) -> bool:
    return inp.as_bool()


def _convert_datetime(inp: Input, field: FieldSpec, form: Form) -> datetime:
    return inp.as_time(form.config.timezone)


_BUILTIN_CONVERTERS: dict[Any, Converter] = {
    str: _convert_str,
    bytes: _convert_bytes,
    int: _convert_int,
    float: _convert_float,
    bool: _convert_bool,
    datetime: _convert_datetime,
}


# ---------------------------------------------------------------------------
# Annotation resolution
# ---------------------------------------------------------------------------


def resolve_field(name: str, annotation: Any) -> FieldSpec:
    """Strip aliases, ``Annotated`` and optional layers from *annotation*."""
    base = annotation
    optional = False
    metadata: list[Any] = []
    while True:
        if isinstance(base, TypeAliasType):
            base = base.__value__
            continue
        origin = get_origin(base)
        if origin is Annotated:
            metadata.extend(base.__metadata__)
            base = get_args(base)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(base) if a is not type(None)]
            if len(members) == 1 and len(members) < len(get_args(base)):
                optional = True
                base = members[0]
                continue
        break
    return FieldSpec(name, annotation, base, optional, tuple(metadata))


def record_fields(dest: Any) -> list[FieldSpec]:
    """Public, bindable fields of the record *dest*, in declaration order.

    Raises ``DestinationTypeError`` if *dest* is not a mutable record instance.
    """
    if dest is None or isinstance(dest, type):
        msg = f"bind expects a record instance, but got: {dest!r}"
        raise DestinationTypeError(msg)

    cls = type(dest)
    if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        msg = f"bind cannot mutate frozen dataclass {cls.__qualname__}"
        raise DestinationTypeError(msg)

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        msg = f"cannot resolve field annotations of {cls.__qualname__}: {exc}"
        raise DestinationTypeError(msg) from exc

    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    elif hints:
        names = list(hints)
    else:
        msg = f"bind expects a record with annotated fields, but got: {cls.__qualname__}"
        raise DestinationTypeError(msg)

    return [
        resolve_field(n, hints[n])
        for n in names
        if not n.startswith("_") and n in hints and get_origin(hints[n]) is not ClassVar
    ]


# ---------------------------------------------------------------------------
# Binder
# ---------------------------------------------------------------------------


class Binder:
    """Binds forms onto records using a per-type converter registry.

    The registry starts with ``str``, ``bytes``, ``int``, ``float``,
    ``bool`` and ``datetime``. Lookup is by exact type, so ``bool`` is
    never handled as ``int``::

        binder = Binder()
        binder.register(Decimal, lambda inp, field, form: Decimal(inp.raw_value))
        form.bind(order, binder=binder)
    """

    __slots__ = ("_converters",)

    _builtins: ClassVar[dict[Any, Converter]] = _BUILTIN_CONVERTERS

    def __init__(self, converters: dict[Any, Converter] | None = None) -> None:
        self._converters: dict[Any, Converter] = {**self._builtins, **(converters or {})}

    def register(self, tp: Any, converter: Converter) -> None:
        """Add or replace the converter used for fields of type *tp*."""
        self._converters[tp] = converter

    def converter_for(self, tp: Any) -> Converter | None:
        return self._converters.get(tp)

    def bind(self, form: Form, dest: Any) -> None:
        """Bind *form* onto *dest* in place.

        Raises:
            DestinationTypeError: *dest* is not a mutable record instance.
            ConversionError: An input's text does not fit its field's type.
            UnsupportedTypeError: A matched field has no known conversion.
        """
        if isinstance(dest, FormBinder) and not isinstance(dest, type):
            logger.debug("Binding %s via bind_form", type(dest).__qualname__)
            dest.bind_form(form)
            return

        for field in record_fields(dest):
            folded = field.name.casefold()
            for inp in form.inputs.values():
                if inp.name.casefold() == folded:
                    self._bind_field(form, dest, field, inp)
                    break

    def _bind_field(self, form: Form, dest: Any, field: FieldSpec, inp: Input) -> None:
        base = field.base
        if isinstance(base, type) and issubclass(base, InputBinder):
            target = getattr(dest, field.name, None)
            if target is None:
                target = base()
            elif target is getattr(type(dest), field.name, None):
                # Class-level default, shared by every instance
                target = copy.copy(target)
            logger.debug("Binding input %r via %s.bind_input", inp.name, base.__qualname__)
            target.bind_input(inp)
            setattr(dest, field.name, target)
            return

        converter = self._converters.get(base)
        if converter is None:
            raise UnsupportedTypeError(field.name, field.annotation, inp.kind.value, inp.raw_value)
        setattr(dest, field.name, converter(inp, field, form))
        logger.debug("Bound input %r to field %r", inp.name, field.name)


default_binder = Binder()


def bind(form: Form, dest: Any) -> None:
    """Bind *form* onto *dest* with the default binder."""
    default_binder.bind(form, dest)
