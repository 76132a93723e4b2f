"""Write the generated modules (and the copied infrastructure) to the code directory."""
import os
from datetime import datetime
from pathlib import Path
from typing import Any
from typing import Optional

import yaml

from rpc_cli_tools.cli_gen._logging import logger
from rpc_cli_tools.cli_gen.assembler import MAIN_MODULE
from rpc_cli_tools.cli_gen.assembler import assemble
from rpc_cli_tools.cli_gen.base_command import BASE_MODULE
from rpc_cli_tools.cli_gen.base_command import materialize_base
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.emitter import Module
from rpc_cli_tools.cli_gen.generator import SHEBANG
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import FlattenedFlag
from rpc_cli_tools.cli_gen.model import GeneratedCommand
from rpc_cli_tools.cli_gen.synthesizer import CommandSynthesizer
from rpc_cli_tools.types import ManifestField
from rpc_cli_tools.types import TypeKind

DEFAULT_COPYRIGHT = f"""\
# Copyright {datetime.now().year}
#
# Generated by rpc-cli-tools, and any changes may be overwritten.
"""
COPYRIGHT = DEFAULT_COPYRIGHT
MANIFEST_FILE = "commands.yaml"

# Maps the source to destination (currently all the same).
INFRASTRUCTURE_FILES = {
    "_console.py": "_console.py",
    "_display.py": "_display.py",
    "_exceptions.py": "_exceptions.py",
    "_logging.py": "_logging.py",
}

log = logger(GENERATOR_LOG_CLASS)


def set_copyright(text: Optional[str] = None) -> None:
    """Set the copyright banner for the generated files (None restores the default)."""
    global COPYRIGHT
    COPYRIGHT = text or DEFAULT_COPYRIGHT


def copyright() -> str:
    return COPYRIGHT


def file_header() -> str:
    """Get the text that starts every generated Python file."""
    text = SHEBANG + copyright()
    if not text.endswith("\n"):
        text += "\n"
    return text


def write_module(directory: str, module_name: str, module: Module) -> Path:
    """Render the module into `<directory>/<module_name>.py`, and make it executable."""
    module.header = file_header()
    filename = Path(directory) / f"{module_name}.py"
    log.info(f"Generating {module_name} module")
    with open(filename, "w", encoding="utf-8", newline="\n") as fp:
        fp.write(module.render())
    os.chmod(filename, 0o755)
    return filename


def copy_and_update(src_filename: str, dst_filename: str, replacements: dict[str, str]) -> None:
    """Copies text from src to dst with the replacements (e.g. package names) applied."""
    with (
        open(src_filename, "r", encoding="utf-8") as src_fp,
        open(dst_filename, "w", encoding="utf-8", newline="\n") as dst_fp,
    ):
        dst_fp.write(file_header())
        for line in src_fp.readlines():
            for old, new in replacements.items():
                line = line.replace(old, new)
            dst_fp.write(line)


def copy_infrastructure(dst_dir: str, package_name: str) -> None:
    """Iterates over the INFRASTRUCTURE_FILES, and copies from local to dst."""
    spath = Path(__file__).parent
    dpath = Path(dst_dir)
    replacements = {__package__: package_name}
    for src, dst in INFRASTRUCTURE_FILES.items():
        sfile = spath / src
        dfile = dpath / dst
        copy_and_update(sfile.as_posix(), dfile.as_posix(), replacements)


def flag_data(flag: FlattenedFlag) -> dict[str, Any]:
    source_type = flag.source_type
    data = {
        ManifestField.NAME.value: flag.name,
        ManifestField.OPTION.value: flag.option,
        ManifestField.TYPE.value: source_type.qualified_name,
        ManifestField.REQUIRED.value: flag.required,
        ManifestField.POSITIONAL.value: flag.positional,
        ManifestField.PATH.value: list(flag.declaration_path),
    }
    element = source_type.element or source_type
    if element.kind == TypeKind.ENUM:
        data[ManifestField.ENUM.value] = element.qualified_name
    return data


def command_data(command: GeneratedCommand) -> dict[str, Any]:
    return {
        ManifestField.NAME.value: command.command_name,
        ManifestField.CLASS.value: command.class_name,
        ManifestField.MODULE.value: command.module_name,
        ManifestField.FUNCTION.value: command.function_name,
        ManifestField.HELP.value: command.help,
        ManifestField.FLAGS.value: [flag_data(f) for f in command.flags],
    }


def manifest_data(generator: Generator) -> dict[str, Any]:
    """Get the manifest of every group, command and flag in the registry."""
    registry = generator.registry
    result = {}
    for group in registry.groups():
        result[generator.group_command_name(group)] = {
            ManifestField.NAME.value: group,
            ManifestField.HELP.value: generator.group_help(group),
            ManifestField.COMMANDS.value: [command_data(c) for c in registry.commands(group)],
        }
    return result


def generate_manifest(generator: Generator, directory: str) -> Path:
    filename = Path(directory) / MANIFEST_FILE
    with open(filename, "w", encoding="utf-8", newline="\n") as fp:
        yaml.dump(manifest_data(generator), fp, indent=2, sort_keys=False)
    return filename


def generate_commands(generator: Generator, directory: str) -> list[GeneratedCommand]:
    """Synthesize and write a module for every operation."""
    synthesizer = CommandSynthesizer(generator)
    commands = synthesizer.synthesize_all()
    for command in commands:
        write_module(directory, command.module_name, synthesizer.render_module(command))
    return commands


def generate(generator: Generator, directory: str) -> None:
    """Write the complete CLI package into the directory."""
    os.makedirs(directory, exist_ok=True)

    # create the init file
    init_file = os.path.join(directory, '__init__.py')
    with open(init_file, "w", encoding="utf-8", newline="\n"):
        # do not bother writing anything to init file
        pass

    # copy over the basic infrastructure
    copy_infrastructure(directory, generator.package_name)

    write_module(directory, BASE_MODULE, materialize_base(generator))
    generate_commands(generator, directory)
    write_module(directory, MAIN_MODULE, assemble(generator, generator.registry))
    generate_manifest(generator, directory)


def check_for_unresolved(generator: Generator) -> list[str]:
    """Get descriptions of the parameters and fields that cannot be set from the command line."""
    problems = []
    for operation in generator.operations():
        for param in operation.parameters:
            if param.type is None:
                problems.append(f"{operation.resource_group}.{operation.name}: {param.name} ({param.declared_type})")

    # fields are checked while classifying the parameter types above
    problems.extend(generator.classifier.problems)
    return problems
