"""Form configuration.

FormConfig is a frozen dataclass: immutable after creation, shared by a
Form, its parsers, and the binder.
"""

from dataclasses import dataclass
from datetime import UTC, tzinfo


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Conversion and parsing settings. Immutable after creation.

    Override what you need::

        config = FormConfig(timezone=ZoneInfo("Europe/Paris"))
        form = parse_html(markup, config=config)
    """

    # Zone attached to zone-less values (date and datetime-local inputs)
    timezone: tzinfo = UTC

    # Text encoding for bytes fields and submitted bodies
    encoding: str = "utf-8"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB


DEFAULT_CONFIG = FormConfig()
