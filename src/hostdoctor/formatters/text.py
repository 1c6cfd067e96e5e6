"""Machine-readable formatters: JSON, CSV, YAML and count."""

from __future__ import annotations

import csv
import io
import json

import yaml


class JsonFormatter:
    format_name: str = "json"

    def render(self, rows: list[dict], fields: list[str]) -> str:
        return json.dumps(rows)


class CsvFormatter:
    format_name: str = "csv"

    def render(self, rows: list[dict], fields: list[str]) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=fields, lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
        return buf.getvalue().rstrip("\n")


class YamlFormatter:
    format_name: str = "yaml"

    def render(self, rows: list[dict], fields: list[str]) -> str:
        return yaml.safe_dump(rows, sort_keys=False, default_flow_style=False).rstrip("\n")


class CountFormatter:
    """Only the number of rows."""

    format_name: str = "count"

    def render(self, rows: list[dict], fields: list[str]) -> str:
        return str(len(rows))
