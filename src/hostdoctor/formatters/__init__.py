"""Built-in output formatters for result and listing rows."""

from __future__ import annotations

from hostdoctor.core.exceptions import FormatError
from hostdoctor.formatters.text import CountFormatter, CsvFormatter, JsonFormatter, YamlFormatter
from hostdoctor.formatters.table import TableFormatter

FORMATTERS = {
    "table": TableFormatter,
    "json": JsonFormatter,
    "csv": CsvFormatter,
    "yaml": YamlFormatter,
    "count": CountFormatter,
}


def get_formatter(name: str):
    """Get a formatter instance by format name."""
    if name not in FORMATTERS:
        raise FormatError(f"Unknown format: {name}. Available: {', '.join(FORMATTERS)}.")
    return FORMATTERS[name]()


def select_fields(requested: str | None, available: list[str], default: list[str] | None = None) -> list[str]:
    """Parse a comma-separated --fields value against the known fields."""
    if not requested:
        return list(default or available)
    fields = [f.strip() for f in requested.split(",") if f.strip()]
    unknown = [f for f in fields if f not in available]
    if unknown:
        raise FormatError(f"Invalid field(s): {', '.join(unknown)}. Available: {', '.join(available)}.")
    return fields


def render(fmt: str, items: list[dict], fields: list[str]) -> str:
    """Project items onto fields and render them in the given format."""
    rows = [{f: item.get(f, "") for f in fields} for item in items]
    return get_formatter(fmt).render(rows, fields)


__all__ = [
    "CountFormatter",
    "CsvFormatter",
    "FORMATTERS",
    "JsonFormatter",
    "TableFormatter",
    "YamlFormatter",
    "get_formatter",
    "render",
    "select_fields",
]
