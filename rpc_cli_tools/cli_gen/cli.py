#!/usr/bin/env python3
import os
from pathlib import Path
from typing import Annotated
from typing import Optional

import typer
from rich.table import Table

from rpc_cli_tools._typer import DescriptionFilenameArgument
from rpc_cli_tools._typer import error_out
from rpc_cli_tools.cli_gen._console import console_factory
from rpc_cli_tools.cli_gen._logging import LogLevel
from rpc_cli_tools.cli_gen._logging import init_logging
from rpc_cli_tools.cli_gen.catalog import MissingArtifactError
from rpc_cli_tools.cli_gen.catalog import TypeCatalog
from rpc_cli_tools.cli_gen.catalog import open_catalog
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.files import check_for_unresolved
from rpc_cli_tools.cli_gen.files import generate
from rpc_cli_tools.cli_gen.files import set_copyright
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.synthesizer import CommandSynthesizer
from rpc_cli_tools.types import AuthMode

SEP = "\n    "

LogLevelOption = Annotated[
    LogLevel,
    typer.Option("--log", case_sensitive=False, envvar="LOG_LEVEL", help="Log level"),
]


#################################################
# Utilities
def open_catalog_with_error_handling(filename: str) -> TypeCatalog:
    """
    Performs error handling around opening an API description, and avoids the standard Typer
    error handling that is quite verbose.
    """
    try:
        return open_catalog(filename)
    except FileNotFoundError:
        message = f"failed to find {filename}"
    except Exception as ex:
        message = f"unable to parse {filename}: {ex}"

    error_out(message)


def generator_with_error_handling(
    filename: str,
    package_name: str,
    cmdline_name: Optional[str] = None,
    auth: Optional[AuthMode] = None,
) -> Generator:
    """Creates the generator, reporting missing parts of the API description as errors."""
    catalog = open_catalog_with_error_handling(filename)
    try:
        config = catalog.config(package_name, cmdline_name=cmdline_name, auth=auth)
        catalog.resources()
    except MissingArtifactError as ex:
        error_out(f"{filename} {ex}")
    except ValueError as ex:
        error_out(f"invalid setting in {filename}: {ex}")

    return Generator(config, catalog)


#################################################
# Top-level stuff
app = typer.Typer(
    no_args_is_help=True,
    help="Various operations for generating command line programs from client API descriptions."
)


@app.command("generate", short_help="Generate CLI code")
def generate_cli(
    description_file: DescriptionFilenameArgument,
    package_name: Annotated[str, typer.Argument(show_default=False, help="Base package name")],
    project_dir: Annotated[
        Optional[str],
        typer.Option(show_default=False, help="Project directory name")
    ] = None,
    code_dir: Annotated[
        Optional[str],
        typer.Option(show_default=False, help="Directory for code -- overrides default")
    ] = None,
    cmdline_name: Annotated[
        Optional[str],
        typer.Option(show_default=False, help="Name of the generated command line program")
    ] = None,
    auth: Annotated[
        Optional[AuthMode],
        typer.Option(case_sensitive=False, show_default=False, help="Authentication mode for the global options"),
    ] = None,
    copyright_file: Annotated[
        Optional[str],
        typer.Option(show_default=False, help="File name containing copyright message (for non-default)"),
    ] = None,
    log_level: LogLevelOption = LogLevel.INFO,
) -> None:
    """
    Generates CLI code based on the provided parameters.

    Use either `--project-dir` to put the code in the package sub-directory, or set the path
    specifically using `--code-dir`.
    """
    init_logging(log_level, GENERATOR_LOG_CLASS)

    if not code_dir:
        if not project_dir:
            error_out("Must provide code directory using either `--project-dir` (which uses package name), or `--code-dir`")
        code_dir = os.path.join(project_dir, package_name)

    generator = generator_with_error_handling(description_file, package_name, cmdline_name, auth)

    if copyright_file:
        text = Path(copyright_file).read_text()
        set_copyright(text)

    generate(generator, code_dir)
    typer.echo(f"Generated {len(generator.registry)} commands in {code_dir}")


@app.command("check", help="Check all parameters and fields can be used from the command line")
def generate_check(
    description_file: DescriptionFilenameArgument,
) -> None:
    generator = generator_with_error_handling(description_file, "cli")
    problems = check_for_unresolved(generator)
    if problems:
        typer.echo(f"Unusable parameters and fields:{SEP}{SEP.join(problems)}")
        raise typer.Exit(1)

    typer.echo(f"All parameters and fields in {description_file} can be used")


@app.command("commands", short_help="Display the commands that would be generated")
def show_commands(
    description_file: DescriptionFilenameArgument,
    cmdline_name: Annotated[
        Optional[str],
        typer.Option(show_default=False, help="Name of the generated command line program")
    ] = None,
) -> None:
    generator = generator_with_error_handling(description_file, "cli", cmdline_name)
    commands = CommandSynthesizer(generator).synthesize_all()

    table = Table(
        highlight=True,
        expand=False,
        leading=0,
        show_header=True,
        show_edge=True,
    )
    headers = ["Group", "Command", "Arguments", "Options"]
    for name in headers:
        table.add_column(name, justify="left", no_wrap=True, overflow="ignore")

    for command in commands:
        arguments = " ".join(f.variable.upper() for f in command.flags if f.positional)
        options = " ".join(f.option for f in command.flags if not f.positional)
        table.add_row(
            generator.group_command_name(command.resource_group),
            command.command_name,
            arguments,
            options,
        )

    console = console_factory()
    console.print(table)
    return


if __name__ == "__main__":
    app()
