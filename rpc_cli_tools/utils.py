import json
from pathlib import Path
from typing import Any

import yaml

VOID_TYPES = {"", "None", "none", "void"}


def open_description(filename: str) -> Any:
    """
    Open the specified API description file, and return the dictionary.
    """
    path = Path(filename)
    if not path.exists():
        raise FileNotFoundError(filename)

    with open(filename, "r", encoding="utf-8", newline="\n") as fp:
        if filename.endswith('json'):
            return json.load(fp)
        return yaml.safe_load(fp)


def split_type_arguments(text: str) -> list[str]:
    """Split the comma separated type arguments, ignoring commas inside nested brackets."""
    items = []
    depth = 0
    current = ""
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == "," and depth == 0:
            items.append(current.strip())
            current = ""
            continue
        current += char

    if current.strip():
        items.append(current.strip())
    return items


def parse_type_name(text: str) -> tuple[str, list[str]]:
    """
    Parse a declared type into the base name and the list of type arguments.

    Example
    =======
        "int"                 -> ("int", [])
        "list[str]"           -> ("list", ["str"])
        "dict[str, list[X]]"  -> ("dict", ["str", "list[X]"])
        "int[]"               -> ("int[]", [])
    """
    value = text.strip()
    start = value.find("[")
    if start <= 0 or not value.endswith("]"):
        return value, []

    inner = value[start + 1:-1]
    if not inner.strip():
        # this is array syntax (e.g. "int[]"), which has no type arguments
        return value, []

    return value[:start].strip(), split_type_arguments(inner)


def is_void(type_name: Any) -> bool:
    """Check whether the declared return type means "no result"."""
    return type_name is None or str(type_name).strip() in VOID_TYPES
