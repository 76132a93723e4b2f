"""Declares the Generator class that holds the state for a single CLI generation run."""
import keyword

from rpc_cli_tools.cli_gen._logging import logger
from rpc_cli_tools.cli_gen.catalog import TypeCatalog
from rpc_cli_tools.cli_gen.classifier import TypeClassifier
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.model import CommandRegistry
from rpc_cli_tools.cli_gen.model import GeneratorConfig
from rpc_cli_tools.cli_gen.model import OperationDescriptor
from rpc_cli_tools.cli_gen.utils import capitalize
from rpc_cli_tools.cli_gen.utils import first_line
from rpc_cli_tools.cli_gen.utils import replace_special
from rpc_cli_tools.cli_gen.utils import to_camel_case
from rpc_cli_tools.cli_gen.utils import to_dash_case
from rpc_cli_tools.cli_gen.utils import to_snake_case

SHEBANG = """\
#!/usr/bin/env python3
"""

# This is an incomplete list of Python builtins that should avoided in variable names
RESERVED = {
    "all",
    "any",
    "bool",
    "breakpoint",
    "dict",
    "float",
    "format",
    "input",
    "int",
    "list",
    "max",
    "min",
    "print",
    "set",
    "type",
}
# names used by the generated command classes
RESERVED.update({
    "build_configuration",
    "client_configuration",
    "execute",
    "manage_configuration",
    "missing",
    "read_settings",
    "result",
    "run",
    "self",
    "update_settings",
})
RESERVED.update(keyword.kwlist)
CONFLICT_SUFFIX = "_"
COMMAND_SUFFIX = "Cmd"


class Generator:
    """Holds everything needed while generating the CLI for one API description.

    A single instance is created for each run, and passed to each of the generation passes. This
    was done in an object-oriented fashion so pieces can be overridden by consumers.
    """

    def __init__(self, config: GeneratorConfig, catalog: TypeCatalog):
        self.config = config
        self.package_name = config.package_name
        self.catalog = catalog
        self.classifier = TypeClassifier(catalog)
        self.registry = CommandRegistry()
        self.logger = logger(GENERATOR_LOG_CLASS)

    def shebang(self) -> str:
        """Get the shebang line that goes at the top of each file."""
        return SHEBANG

    def operations(self) -> list[OperationDescriptor]:
        """Get all the operations from the catalog, with parameter types classified."""
        return self.catalog.operations(self.classifier.resolve, self.config.resource_suffix)

    def class_name(self, s: str) -> str:
        """Get the class name for provided string."""
        value = to_camel_case(replace_special(s))
        return capitalize(value)

    def function_name(self, s: str) -> str:
        """Get the function name for the provided string."""
        vname = to_snake_case(replace_special(s))
        if vname in RESERVED:
            return f"{vname}{CONFLICT_SUFFIX}"

        return vname

    def variable_name(self, s: str) -> str:
        """Get the variable name for the provided string."""
        vname = to_snake_case(replace_special(s))
        if vname in RESERVED:
            return f"{vname}{CONFLICT_SUFFIX}"

        return vname

    def option_name(self, s: str) -> str:
        """Get the typer option name for the provided string."""
        value = to_snake_case(replace_special(s))
        return "--" + value.replace("_", "-")

    def command_class_name(self, operation: OperationDescriptor) -> str:
        """Get the command class name: <Group><Operation>Cmd."""
        return f"{self.class_name(operation.resource_group)}{self.class_name(operation.name)}{COMMAND_SUFFIX}"

    def command_module_name(self, operation: OperationDescriptor) -> str:
        return to_snake_case(self.command_class_name(operation))

    def command_name(self, operation: OperationDescriptor) -> str:
        """Get the dash-cased name the user types for the operation."""
        return to_dash_case(replace_special(operation.name))

    def group_command_name(self, group: str) -> str:
        return to_dash_case(replace_special(group))

    def group_variable(self, group: str) -> str:
        """Get the variable used for the group's Typer app in the main module."""
        return f"{self.variable_name(group)}_app"

    def short_help(self, operation: OperationDescriptor) -> str:
        """Get the short help for the operation."""
        if operation.summary:
            return first_line(operation.summary)

        words = to_snake_case(operation.name).replace("_", " ")
        return capitalize(words)

    def group_help(self, group: str) -> str:
        return f"Manage {to_snake_case(group).replace('_', ' ')}"

    def app_help(self) -> str:
        return f"Command line interface for the {self.config.client_name}"
