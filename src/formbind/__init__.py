"""formbind — typed binding and validation for HTML form inputs.

Turns form input values into typed Python values, binds them onto
records by case-insensitive field name, and collects per-field
validation errors through a chainable API.

Basic usage::

    from dataclasses import dataclass
    from formbind import parse_html

    @dataclass
    class Signup:
        email: str = ""
        age: int = 0
        newsletter: bool = False

    form = parse_html(markup)
    form.validate("email").required()
    form.validate("age").required().is_int().greater_or_equal(18)
    if not form.has_errors():
        signup = Signup()
        form.bind(signup)

Submitted bodies::

    form = parse_form_data(body, content_type, kinds={"newsletter": "checkbox"})
"""

__version__ = "0.1.0-dev"
__all__ = [
    "Binder",
    "ConversionError",
    "CustomBinderError",
    "DestinationTypeError",
    "Form",
    "FormBinder",
    "FormConfig",
    "FormError",
    "FormParseError",
    "Input",
    "InputBinder",
    "InputKind",
    "InputNotFound",
    "UnsupportedTypeError",
    "ValidationChain",
    "ValidationError",
    "bind",
    "parse_form_data",
    "parse_html",
    "parse_mapping",
]


# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "Binder": "formbind.binding",
    "FormBinder": "formbind.binding",
    "InputBinder": "formbind.binding",
    "bind": "formbind.binding",
    "FormConfig": "formbind.config",
    "ConversionError": "formbind.errors",
    "CustomBinderError": "formbind.errors",
    "DestinationTypeError": "formbind.errors",
    "FormError": "formbind.errors",
    "FormParseError": "formbind.errors",
    "InputNotFound": "formbind.errors",
    "UnsupportedTypeError": "formbind.errors",
    "ValidationError": "formbind.errors",
    "Form": "formbind.form",
    "Input": "formbind.input",
    "InputKind": "formbind.kinds",
    "parse_form_data": "formbind.parsing",
    "parse_html": "formbind.parsing",
    "parse_mapping": "formbind.parsing",
    "ValidationChain": "formbind.validation",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import formbind`` from importing the HTML and multipart parsers.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
