"""Tests for formbind.parsing — HTML markup, request bodies, and mappings."""

from dataclasses import dataclass

import pytest

from formbind.config import FormConfig
from formbind.errors import FormParseError
from formbind.input import Input
from formbind.kinds import InputKind
from formbind.parsing import parse_form_data, parse_html, parse_mapping

SIGNUP_HTML = """
<html><body>
  <form id="search"><input name="q" value="ignored"></form>
  <form id="signup" action="/signup" method="post">
    <input type="text" name="username" value="ada">
    <input type="email" name="email" value="ada@example.com">
    <input type="number" name="age" value="36">
    <input type="date" name="born" value="1815-12-10">
    <input type="checkbox" name="newsletter" checked>
    <input type="checkbox" name="terms" value="yes">
    <input type="FANCY" name="mystery" value="?">
    <input name="plain" value="p">
    <input type="submit" value="Go">
    <select name="country"><option value="uk" selected>UK</option></select>
    <textarea name="bio">Hi</textarea>
  </form>
</body></html>
"""


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


class TestParseHtml:
    def test_selects_form_by_id(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert form.get_string("username") == "ada"
        assert "q" not in form

    def test_defaults_to_first_form(self) -> None:
        form = parse_html(SIGNUP_HTML)
        assert list(form.inputs) == ["q"]

    def test_kinds(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert form.input("email").kind is InputKind.EMAIL
        assert form.input("age").kind is InputKind.NUMBER
        assert form.input("born").kind is InputKind.DATE
        assert form.input("newsletter").kind is InputKind.CHECKBOX

    def test_missing_or_unknown_type_is_text(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert form.input("plain").kind is InputKind.TEXT
        assert form.input("mystery").kind is InputKind.TEXT

    def test_checked_flag(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert form.get_bool("newsletter") is True
        assert form.get_bool("terms") is False

    def test_checkbox_default_value(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert form.get_string("newsletter") == "on"
        assert form.get_string("terms") == "yes"

    def test_only_named_inputs(self) -> None:
        form = parse_html(SIGNUP_HTML, form_id="signup")
        assert "country" not in form
        assert "bio" not in form
        assert "" not in form
        assert len(form) == 8

    def test_later_same_name_wins(self) -> None:
        form = parse_html(
            '<form><input type="radio" name="size" value="s" checked>'
            '<input type="radio" name="size" value="m"></form>'
        )
        assert form.input("size") == Input("size", "m", InputKind.RADIO, checked=False)

    def test_no_form(self) -> None:
        with pytest.raises(FormParseError):
            parse_html("<p>nothing here</p>")

    def test_unknown_form_id(self) -> None:
        with pytest.raises(FormParseError, match="missing"):
            parse_html(SIGNUP_HTML, form_id="missing")

    def test_config_is_carried(self) -> None:
        config = FormConfig(encoding="latin-1")
        assert parse_html("<form></form>", config=config).config is config

    def test_parse_then_bind(self) -> None:
        @dataclass
        class Signup:
            username: str = ""
            age: int = 0
            newsletter: bool = False

        signup = Signup()
        parse_html(SIGNUP_HTML, form_id="signup").bind(signup)
        assert signup == Signup("ada", 36, True)


# ---------------------------------------------------------------------------
# URL-encoded bodies
# ---------------------------------------------------------------------------


class TestParseUrlEncoded:
    CT = "application/x-www-form-urlencoded"

    def test_basic(self) -> None:
        form = parse_form_data(b"name=alice&age=30", self.CT)
        assert form.get_string("name") == "alice"
        assert form.get_int("age") == 30

    def test_blank_values_kept(self) -> None:
        form = parse_form_data(b"name=&age=1", self.CT)
        assert form.get_string("name") == ""

    def test_last_value_wins(self) -> None:
        form = parse_form_data(b"tag=a&tag=b", self.CT)
        assert form.get_string("tag") == "b"

    def test_percent_decoding(self) -> None:
        form = parse_form_data(b"q=hello+world%21", self.CT)
        assert form.get_string("q") == "hello world!"

    def test_content_type_params_ignored(self) -> None:
        form = parse_form_data(b"a=1", "Application/X-WWW-Form-Urlencoded; charset=utf-8")
        assert form.get_string("a") == "1"

    def test_declared_kinds(self) -> None:
        form = parse_form_data(
            b"born=2000-01-31&agree=on",
            self.CT,
            kinds={"born": InputKind.DATE, "agree": "checkbox", "spam": "checkbox"},
        )
        assert form.get_time("born").year == 2000
        assert form.get_bool("agree") is True
        assert form.get_bool("spam") is False
        assert form.get_string("spam") == ""

    def test_too_large(self) -> None:
        with pytest.raises(FormParseError, match="exceeds"):
            parse_form_data(b"a=123456", self.CT, config=FormConfig(max_content_length=4))

    def test_invalid_encoding(self) -> None:
        with pytest.raises(FormParseError):
            parse_form_data(b"a=\xff", self.CT)

    def test_unsupported_content_type(self) -> None:
        with pytest.raises(FormParseError, match="Unsupported"):
            parse_form_data(b"{}", "application/json")


# ---------------------------------------------------------------------------
# Multipart bodies
# ---------------------------------------------------------------------------


def _multipart(boundary: str, parts: list[tuple[str, str, str | None]]) -> bytes:
    lines: list[str] = []
    for name, value, filename in parts:
        lines.append(f"--{boundary}")
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        lines.append(f"Content-Disposition: {disposition}")
        if filename is not None:
            lines.append("Content-Type: text/plain")
        lines.append("")
        lines.append(value)
    lines.append(f"--{boundary}--")
    lines.append("")
    return "\r\n".join(lines).encode()


class TestParseMultipart:
    BOUNDARY = "----formbindboundary"
    CT = f"multipart/form-data; boundary={BOUNDARY}"

    def test_fields(self) -> None:
        body = _multipart(self.BOUNDARY, [("name", "alice", None), ("age", "30", None)])
        form = parse_form_data(body, self.CT)
        assert form.get_string("name") == "alice"
        assert form.get_int("age") == 30

    def test_file_becomes_file_input(self) -> None:
        body = _multipart(
            self.BOUNDARY, [("title", "doc", None), ("upload", "contents", "notes.txt")]
        )
        form = parse_form_data(body, self.CT)
        assert form.input("upload") == Input("upload", "notes.txt", InputKind.FILE)
        assert form.get_string("title") == "doc"

    def test_declared_checkbox(self) -> None:
        body = _multipart(self.BOUNDARY, [("agree", "on", None)])
        form = parse_form_data(body, self.CT, kinds={"agree": InputKind.CHECKBOX})
        assert form.get_bool("agree") is True

    def test_missing_boundary(self) -> None:
        with pytest.raises(FormParseError, match="boundary"):
            parse_form_data(b"", "multipart/form-data")


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------


class TestParseMapping:
    def test_strings(self) -> None:
        form = parse_mapping({"a": "1", "b": "two"})
        assert form.get_int("a") == 1
        assert form.get_string("b") == "two"

    def test_lists_use_last_value(self) -> None:
        form = parse_mapping({"tags": ["x", "y"], "empty": []})
        assert form.get_string("tags") == "y"
        assert "empty" not in form

    def test_non_strings_are_stringified(self) -> None:
        assert parse_mapping({"n": 5}).get_string("n") == "5"

    def test_kinds(self) -> None:
        form = parse_mapping({"when": "2020-02-29T08:00:00"}, kinds={"when": "datetime-local"})
        assert form.get_time("when").hour == 8
