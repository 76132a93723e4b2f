import dataclasses
from enum import Enum
from typing import Any

from rich.markup import escape

from rpc_cli_tools.cli_gen._console import console_factory


def to_data(obj: Any) -> Any:
    """Convert a client/model object into plain dictionaries, lists and values.

    Objects are converted in order of preference: dataclasses, anything with a `to_dict()`,
    and finally the public attributes of the object.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return to_data(obj.value)
    if isinstance(obj, dict):
        return {str(k): to_data(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_data(item) for item in obj]
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_data(getattr(obj, f.name)) for f in dataclasses.fields(obj)}

    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_data(to_dict())

    attributes = getattr(obj, "__dict__", None)
    if attributes is not None:
        return {k: to_data(v) for k, v in attributes.items() if not k.startswith("_")}

    # dates, decimals, UUIDs and the like are best shown as text
    return str(obj)


def display(obj: Any, indent: int = 2) -> None:
    """
    This function handles display of the data provided in obj as JSON.
    """
    console = console_factory()
    data = to_data(obj)

    if isinstance(data, str):
        console.print(escape(data))
        return

    console.print_json(data=data, indent=indent, default=str)
    return
