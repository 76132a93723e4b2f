"""Assemble the registered commands into the `main.py` entry point."""
from rpc_cli_tools.cli_gen.base_command import BASE_MODULE
from rpc_cli_tools.cli_gen.emitter import ImportSection
from rpc_cli_tools.cli_gen.emitter import Module
from rpc_cli_tools.cli_gen.emitter import Text
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import CommandRegistry
from rpc_cli_tools.cli_gen.utils import quoted

MAIN_MODULE = "main"

APP_DEFINITION = """\
app = typer.Typer(name={name}, help={help})
app.callback(invoke_without_command=True)(_b.default_help)
app.command("help", short_help="Show this message")(_b.show_help)"""

MAIN_FUNCTION = '''\
def main() -> None:
    """Run the command line, and report any failure as an ERROR with a non-zero exit."""
    try:
        app(prog_name=_b.CMD_LINE_NAME, standalone_mode=False)
    except Exception as ex:
        _e.report_error(ex)
        sys.exit(1)


if __name__ == "__main__":
    main()'''


def group_definition(generator: Generator, registry: CommandRegistry, group: str) -> str:
    """Get the sub-app declaration for the group, and the registration of its commands."""
    variable = generator.group_variable(group)
    lines = [
        f"{variable} = typer.Typer(help={quoted(generator.group_help(group))})",
        f"{variable}.callback(invoke_without_command=True)(_b.default_help)",
    ]
    for command in registry.commands(group):
        lines.append(
            f"{variable}.command({quoted(command.command_name)}, short_help={quoted(command.help)})"
            f"({command.module_name}.{command.function_name})"
        )
    name = quoted(generator.group_command_name(group))
    lines.append(f"app.add_typer({variable}, name={name}, help={quoted(generator.group_help(group))})")
    return "\n".join(lines)


def assemble(generator: Generator, registry: CommandRegistry) -> Module:
    """
    Get the entry point module with all the commands from the registry.

    Groups and the commands within them appear in the order they were registered.
    """
    package = generator.package_name
    module = Module()
    imports = module.imports
    imports.add_module("sys", section=ImportSection.STDLIB)
    imports.add_module("typer")
    imports.add_from(package, BASE_MODULE, alias="_b")
    imports.add_from(package, "_exceptions", alias="_e")
    for command in registry.all_commands():
        imports.add_from(package, command.module_name)

    app_text = APP_DEFINITION.format(
        name=quoted(generator.config.cmdline_name),
        help=quoted(generator.app_help()),
    )
    module.members.append(Text("\n" + app_text))
    for group in registry.groups():
        module.members.append(Text(group_definition(generator, registry, group)))
    module.members.append(Text("\n" + MAIN_FUNCTION))
    return module
