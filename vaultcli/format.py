"""
Output formatting for -format and -field.

- table: a two-column rich table of keys and values.
- json: indented JSON with sorted keys.
- yaml: block-style YAML.
- field: the raw value of one key, without a trailing newline.
"""
import json

import yaml
from rich import box
from rich.table import Table
from rich.text import Text

FORMATS = ("table", "json", "yaml")


def _table(ui, data):
    table = Table("Key", "Value", box=box.SIMPLE_HEAD, show_edge=False)
    for key, value in data.items():
        if isinstance(value, dict | list):
            value = json.dumps(value, sort_keys=True)
        # cells are plain text, never markup
        table.add_row(Text(str(key)), Text("" if value is None else str(value)))
    ui.render(table)


def _json(ui, data):
    ui.output(json.dumps(data, indent=2, sort_keys=True))


def _yaml(ui, data):
    ui.output(yaml.safe_dump(data, default_flow_style=False, sort_keys=True).rstrip("\n"))


_FORMATTERS = {
    "table": _table,
    "json": _json,
    "yaml": _yaml,
}


def output_data(ui, data, format, /):
    """
    Print data in the given format; raise ValueError for unknown formats.
    """
    try:
        formatter = _FORMATTERS[format.strip().lower()]
    except KeyError:
        raise ValueError("invalid output format %r, expected one of %s" % (format, ", ".join(FORMATS))) from None
    formatter(ui, data)


def print_field(ui, data, field, /):
    """
    Print one field of data verbatim; raise KeyError when it is missing.
    """
    if field not in data:
        raise KeyError(field)
    value = data[field]
    if isinstance(value, dict | list):
        value = json.dumps(value, sort_keys=True)
    ui.write("" if value is None else str(value))


__all__ = (
    "FORMATS",
    "output_data",
    "print_field",
)
