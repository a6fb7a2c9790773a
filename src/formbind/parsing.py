"""Form parsers — build a ``Form`` from HTML markup or a submitted body.

- ``parse_html``: ``<input>`` elements of a ``<form>`` (BeautifulSoup)
- ``parse_form_data``: ``application/x-www-form-urlencoded`` (stdlib) and
  ``multipart/form-data`` (``python-multipart``)
- ``parse_mapping``: any mapping of names to a value or list of values

Every parser produces at most one input per name: later same-named
fields replace earlier ones.

Submitted bodies carry no ``type`` attributes, so ``kinds`` tells the
parser which names are checkboxes, dates, and so on. A declared checkbox
or radio that was submitted is checked; a declared checkbox that is
missing from the body is added unchecked, so binding a ``bool`` field
still sees it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup

from formbind.config import DEFAULT_CONFIG, FormConfig
from formbind.errors import FormParseError
from formbind.form import Form
from formbind.input import Input
from formbind.kinds import CHECKABLE_KINDS, InputKind

logger = logging.getLogger("formbind.parsing")

type Kinds = Mapping[str, InputKind | str]


# ---------------------------------------------------------------------------
# HTML markup
# ---------------------------------------------------------------------------


def parse_html(
    markup: str | bytes,
    *,
    form_id: str | None = None,
    config: FormConfig | None = None,
) -> Form:
    """Build a Form from the ``<input>`` elements of an HTML form.

    Args:
        markup: An HTML document or fragment.
        form_id: ``id`` of the form to read. Defaults to the first form.
        config: Configuration carried by the returned Form.

    Raises:
        FormParseError: No matching ``<form>`` element exists.
    """
    soup = BeautifulSoup(markup, "html.parser")
    element = soup.find("form", id=form_id) if form_id else soup.find("form")
    if element is None:
        target = f"<form id={form_id!r}>" if form_id else "<form>"
        msg = f"no {target} element found in markup"
        raise FormParseError(msg)

    inputs: dict[str, Input] = {}
    for el in element.find_all("input"):
        name = el.get("name")
        if not name:
            logger.debug("Skipping <input> without a name attribute")
            continue
        kind = InputKind.from_attribute(el.get("type"))
        value = el.get("value")
        if value is None:
            value = "on" if kind in CHECKABLE_KINDS else ""
        inputs[name] = Input(name, value, kind, checked=el.has_attr("checked"))
    return Form(inputs, config=config)


# ---------------------------------------------------------------------------
# Submitted values
# ---------------------------------------------------------------------------


def parse_mapping(
    data: Mapping[str, Any],
    *,
    kinds: Kinds | None = None,
    config: FormConfig | None = None,
) -> Form:
    """Build a Form from a mapping of names to a value or list of values.

    For lists the last value wins, as for repeated names in a body.
    """
    values: dict[str, str] = {}
    for name, value in data.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[-1]
        values[name] = value if isinstance(value, str) else str(value)
    return _build(values, {}, kinds, config)


def parse_form_data(
    body: bytes,
    content_type: str,
    *,
    kinds: Kinds | None = None,
    config: FormConfig | None = None,
) -> Form:
    """Build a Form from a request body.

    Args:
        body: Raw request body bytes.
        content_type: The Content-Type header value.
        kinds: Input kinds by field name; undeclared fields are ``text``.
        config: Limits and encoding; carried by the returned Form.

    Raises:
        FormParseError: The body is too large, malformed, or not a
            supported form encoding.
    """
    config = config or DEFAULT_CONFIG
    if len(body) > config.max_content_length:
        msg = f"Form body of {len(body)} bytes exceeds limit of {config.max_content_length}"
        raise FormParseError(msg)

    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        values = _parse_urlencoded(body, config.encoding)
        return _build(values, {}, kinds, config)

    if ct_lower == "multipart/form-data":
        values, files = _parse_multipart(body, content_type, config.encoding)
        return _build(values, files, kinds, config)

    msg = f"Unsupported form content type: {content_type!r}"
    raise FormParseError(msg)


def _build(
    values: dict[str, str],
    files: dict[str, str],
    kinds: Kinds | None,
    config: FormConfig | None,
) -> Form:
    declared = {name: InputKind(kind) for name, kind in (kinds or {}).items()}
    inputs: dict[str, Input] = {}

    for name, value in values.items():
        kind = declared.get(name, InputKind.TEXT)
        inputs[name] = Input(name, value, kind, checked=kind in CHECKABLE_KINDS)

    for name, filename in files.items():
        inputs[name] = Input(name, filename, InputKind.FILE)

    for name, kind in declared.items():
        if kind is InputKind.CHECKBOX and name not in inputs:
            inputs[name] = Input(name, "", kind, checked=False)

    return Form(inputs, config=config)


def _parse_urlencoded(body: bytes, encoding: str) -> dict[str, str]:
    """Parse URL-encoded form data using stdlib."""
    from urllib.parse import parse_qsl

    try:
        pairs = parse_qsl(body.decode(encoding), keep_blank_values=True)
    except UnicodeDecodeError as exc:
        msg = f"Form body is not valid {encoding}: {exc}"
        raise FormParseError(msg) from exc
    return dict(pairs)


def _parse_multipart(
    body: bytes, content_type: str, encoding: str
) -> tuple[dict[str, str], dict[str, str]]:
    """Parse multipart form data using python-multipart.

    Returns field values and uploaded filenames, both keyed by field name.
    """
    from python_multipart.exceptions import MultipartParseError
    from python_multipart.multipart import MultipartParser, parse_options_header

    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise FormParseError(msg)

    values: dict[str, str] = {}
    files: dict[str, str] = {}

    # Current part state
    header_field = bytearray()
    header_value = bytearray()
    part_data = bytearray()
    field_name: str | None = None
    filename: str | None = None

    def on_part_begin() -> None:
        nonlocal field_name, filename
        part_data.clear()
        field_name = None
        filename = None

    def on_part_data(data: bytes, start: int, end: int) -> None:
        part_data.extend(data[start:end])

    def on_part_end() -> None:
        if field_name is None:
            return
        if filename is not None:
            files[field_name] = filename
        else:
            values[field_name] = part_data.decode(encoding, errors="replace")

    def on_header_field(data: bytes, start: int, end: int) -> None:
        header_field.extend(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        header_value.extend(data[start:end])

    def on_header_end() -> None:
        nonlocal field_name, filename
        if bytes(header_field).lower() == b"content-disposition":
            _, params = parse_options_header(bytes(header_value))
            name = params.get(b"name")
            if name is not None:
                field_name = name.decode(encoding)
            fname = params.get(b"filename")
            if fname is not None:
                filename = fname.decode(encoding)
        header_field.clear()
        header_value.clear()

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        msg = f"Malformed multipart body: {exc}"
        raise FormParseError(msg) from exc

    return values, files
