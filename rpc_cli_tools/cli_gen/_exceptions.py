from requests import HTTPError
from rich.markup import escape

from rpc_cli_tools.cli_gen._console import console_factory


class MissingRequiredError(Exception):
    """Short wrapper to provide feedback about missing required options."""

    def __init__(self, names: list[str]):
        message = f"Missing required parameters, please provide: {', '.join(names)}"
        super().__init__(message)


class IdentifierCountError(Exception):
    """The number of positional identifiers does not match the operation."""

    def __init__(self, names: list[str], count: int):
        message = f"Expected {len(names)} identifiers ({', '.join(names)}), but got {count}"
        super().__init__(message)


def error_message(ex: Exception) -> str:
    """Get the concise message for the exception."""
    if isinstance(ex, HTTPError) and ex.args:
        return str(ex.args[0])
    return str(ex)


def report_error(ex: Exception) -> None:
    """Print the ERROR marker followed by the exception message."""
    console = console_factory()
    console.print(f"[red]ERROR:[/red] {escape(error_message(ex))}")
