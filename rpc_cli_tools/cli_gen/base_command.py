"""Materialize the `_base.py` module with the global options and the DefaultCommand class."""
import dataclasses
from typing import Optional

from rpc_cli_tools.cli_gen.emitter import Assign
from rpc_cli_tools.cli_gen.emitter import Attribute
from rpc_cli_tools.cli_gen.emitter import BoolOp
from rpc_cli_tools.cli_gen.emitter import Call
from rpc_cli_tools.cli_gen.emitter import ClassDef
from rpc_cli_tools.cli_gen.emitter import Compare
from rpc_cli_tools.cli_gen.emitter import Expr
from rpc_cli_tools.cli_gen.emitter import ExprStatement
from rpc_cli_tools.cli_gen.emitter import FormattedString
from rpc_cli_tools.cli_gen.emitter import FunctionDef
from rpc_cli_tools.cli_gen.emitter import If
from rpc_cli_tools.cli_gen.emitter import ImportSection
from rpc_cli_tools.cli_gen.emitter import Literal
from rpc_cli_tools.cli_gen.emitter import Module
from rpc_cli_tools.cli_gen.emitter import Name
from rpc_cli_tools.cli_gen.emitter import Return
from rpc_cli_tools.cli_gen.emitter import Stmt
from rpc_cli_tools.cli_gen.emitter import Subscript
from rpc_cli_tools.cli_gen.emitter import Text
from rpc_cli_tools.cli_gen.emitter import Try
from rpc_cli_tools.cli_gen.emitter import dotted
from rpc_cli_tools.cli_gen.emitter import is_none
from rpc_cli_tools.cli_gen.emitter import is_not_none
from rpc_cli_tools.cli_gen.emitter import method_call
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.utils import quoted
from rpc_cli_tools.types import AuthMode

BASE_MODULE = "_base"
AUTH_HEADER = "Authorization"
CONFIG_CLASS = "ClientConfiguration"
SELF = Name("self")
SETTINGS = Name("settings")


@dataclasses.dataclass(frozen=True)
class GlobalOption:
    """An option available on every generated command."""

    field: str
    alias: str
    names: tuple[str, ...]
    help: str
    is_flag: bool = False
    # key in the settings file (when persisted)
    setting: Optional[str] = None
    encoded: bool = False

    @property
    def parameter(self) -> str:
        """Name of the Typer function parameter, which cannot collide with command flags."""
        return f"_{self.field}"

    @property
    def key_constant(self) -> str:
        return f"{self.field.upper()}_KEY"


COMMON_OPTIONS = [
    GlobalOption("url", "UrlOption", ("-l", "--url"), "Service URL (remembered for later commands)", setting="general.url"),
    GlobalOption("verbose", "VerboseOption", ("-v", "--verbose"), "Show debug logging", is_flag=True),
]
AUTH_OPTIONS = {
    AuthMode.NONE: [],
    AuthMode.BASIC: [
        GlobalOption("username", "UsernameOption", ("-u", "--username"), "User name", setting="basic.username"),
        GlobalOption(
            "password", "PasswordOption", ("-p", "--password"), "User password", setting="basic.password", encoded=True,
        ),
    ],
    AuthMode.SIGNATURE: [
        GlobalOption("key_id", "KeyIdOption", ("-k", "--key-id"), "Signing key identifier", setting="signature.key-id"),
        GlobalOption(
            "key_location",
            "KeyLocationOption",
            ("-n", "--key-location"),
            "Signing key file location",
            setting="signature.key-location",
        ),
        GlobalOption("signature_details", "SignatureDetailsOption", ("-s", "--signature-details"), "Signature details"),
    ],
}
# configuration class, prefix and the options needed to create it
AUTH_CONFIGURATION = {
    AuthMode.BASIC: ("basic", "BasicConfiguration", "Basic", ("username", "password")),
    AuthMode.SIGNATURE: ("signature", "SignatureConfiguration", "Signature", ("key_id", "key_location")),
}

HELPERS = '''\
def config_file() -> Path:
    """Get the per-user settings file."""
    return Path.home() / f".{CMD_LINE_NAME}" / f".{CMD_LINE_NAME}config"


def load_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    with open(path, "r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp)
    return data if isinstance(data, dict) else {}


def save_settings(path: Path, settings: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fp:
        yaml.safe_dump(settings, fp, sort_keys=True)


def default_help(ctx: typer.Context) -> None:
    """Show the help when no sub-command is given."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def show_help(ctx: typer.Context) -> None:
    """Show the command line help."""
    typer.echo(ctx.parent.get_help())
'''


def global_options(auth: AuthMode) -> list[GlobalOption]:
    """Get the global options for the authentication mode."""
    return COMMON_OPTIONS + AUTH_OPTIONS[AuthMode(auth)]


def option_alias(option: GlobalOption) -> str:
    """Get the Annotated alias declaration for the option."""
    names = ", ".join(quoted(n) for n in option.names)
    if option.is_flag:
        return f'{option.alias} = Annotated[bool, typer.Option({names}, help="{option.help}")]'

    return (
        f"{option.alias} = Annotated[\n"
        f"    Optional[str],\n"
        f'    typer.Option({names}, show_default=False, help="{option.help}"),\n'
        f"]"
    )


def _self(field: str) -> Expr:
    return Attribute(SELF, field)


def _setting(option: GlobalOption) -> Expr:
    return Subscript(SETTINGS, Name(option.key_constant))


def _run_method() -> FunctionDef:
    message = "Unable to manage configuration file: {ex}"
    body = (
        If(_self("verbose"), (
            ExprStatement(Call(dotted("_l.init_logging"), (dotted("_l.LogLevel.DEBUG"),))),
        )),
        Try(
            (ExprStatement(method_call(SELF, "manage_configuration")),),
            "Exception",
            "ex",
            (
                ExprStatement(method_call(Call(dotted("_l.logger")), "warning", FormattedString(message))),
                ExprStatement(Call(dotted("typer.echo"), (FormattedString(message),))),
            ),
        ),
        ExprStatement(method_call(SELF, "execute", method_call(SELF, "build_configuration"))),
    )
    return FunctionDef(
        "run",
        params=("self",),
        body=body,
        docstring="Update the settings file, then execute the command with the client configuration.",
    )


def _manage_method() -> FunctionDef:
    body = (
        Assign(Name("path"), Call(Name("config_file"))),
        Assign(SETTINGS, Call(Name("load_settings"), (Name("path"),))),
        ExprStatement(method_call(SELF, "update_settings", SETTINGS)),
        ExprStatement(method_call(SELF, "read_settings", SETTINGS)),
        ExprStatement(Call(Name("save_settings"), (Name("path"), SETTINGS))),
    )
    return FunctionDef("manage_configuration", params=("self",), body=body)


def _update_method(options: list[GlobalOption]) -> FunctionDef:
    body: list[Stmt] = []
    for option in options:
        if not option.setting:
            continue
        value = _self(option.field)
        if option.encoded:
            encoded = Call(dotted("base64.b64encode"), (method_call(value, "encode"),))
            value = method_call(encoded, "decode")
        body.append(If(is_not_none(_self(option.field)), (Assign(_setting(option), value),)))

    return FunctionDef(
        "update_settings",
        params=("self", "settings: dict[str, Any]"),
        body=tuple(body),
        docstring="Store the values provided on the command line.",
    )


def _read_method(options: list[GlobalOption]) -> FunctionDef:
    body: list[Stmt] = []
    for option in options:
        if not option.setting:
            continue
        value = _setting(option)
        if option.encoded:
            value = method_call(Call(dotted("base64.b64decode"), (value,)), "decode")
        test = BoolOp("and", (is_none(_self(option.field)), Compare(Name(option.key_constant), "in", SETTINGS)))
        body.append(If(test, (Assign(_self(option.field), value),)))

    return FunctionDef(
        "read_settings",
        params=("self", "settings: dict[str, Any]"),
        body=tuple(body),
        docstring="Use the stored values for anything not provided on the command line.",
    )


def _build_method(auth: AuthMode) -> FunctionDef:
    configuration = Name("configuration")
    keywords = (("url", _self("url")), ("verbose", _self("verbose")))
    body: list[Stmt] = [Assign(configuration, Call(Name(CONFIG_CLASS), keywords=keywords))]

    auth_config = AUTH_CONFIGURATION.get(auth)
    if auth_config:
        attribute, class_name, prefix, needed = auth_config
        fields = [o.field for o in AUTH_OPTIONS[auth]]
        keywords = tuple((f, _self(f)) for f in fields)
        keywords += (("header", Name("AUTH_HEADER")), ("prefix", Literal(prefix)))
        test = BoolOp("and", tuple(is_not_none(_self(f)) for f in needed))
        body.append(If(test, (Assign(Attribute(configuration, attribute), Call(Name(class_name), keywords=keywords)),)))

    body.append(Return(configuration))
    return FunctionDef("build_configuration", params=("self",), body=tuple(body), returns=CONFIG_CLASS)


def materialize_base(generator: Generator) -> Module:
    """
    Get the base module for the generated commands.

    The module declares the global options, the help callbacks, the settings file handling, and
    the abstract DefaultCommand class that every generated command derives from. Only the
    pieces needed by the configured authentication mode are included.
    """
    config = generator.config
    auth = AuthMode(config.auth)
    options = global_options(auth)

    module = Module()
    imports = module.imports
    for name in ("abc", "dataclasses"):
        imports.add_module(name, section=ImportSection.STDLIB)
    if any(o.encoded for o in options):
        imports.add_module("base64", section=ImportSection.STDLIB)
    imports.add_from("pathlib", "Path", section=ImportSection.STDLIB)
    for name in ("Annotated", "Any", "Optional"):
        imports.add_from("typing", name, section=ImportSection.STDLIB)
    imports.add_module("typer")
    imports.add_module("yaml")
    imports.add_from(config.client_module, CONFIG_CLASS, section=ImportSection.THIRD_PARTY)
    auth_config = AUTH_CONFIGURATION.get(auth)
    if auth_config:
        imports.add_from(config.client_module, auth_config[1], section=ImportSection.THIRD_PARTY)
    imports.add_from(generator.package_name, "_logging", alias="_l")

    constants = [f"CMD_LINE_NAME = {quoted(config.cmdline_name)}"]
    if auth_config:
        constants.append(f"AUTH_HEADER = {quoted(AUTH_HEADER)}")
    constants.extend(f"{o.key_constant} = {quoted(o.setting)}" for o in options if o.setting)
    module.members.append(Text("\n" + "\n".join(constants)))
    module.members.append(Text("\n".join(option_alias(o) for o in options)))
    module.members.append(Text("\n" + HELPERS.rstrip()))

    fields = []
    for option in options:
        if option.is_flag:
            fields.append(f"{option.field}: bool = False")
        else:
            fields.append(f"{option.field}: Optional[str] = None")

    execute = FunctionDef(
        "execute",
        params=("self", f"client_configuration: {CONFIG_CLASS}"),
        decorators=("abc.abstractmethod",),
        docstring="Run the client operation.",
    )
    module.members.append(ClassDef(
        "DefaultCommand",
        bases=("abc.ABC",),
        decorators=("dataclasses.dataclass",),
        docstring="Base for all commands: global options, settings file and client configuration.",
        body=(
            Text("\n".join(fields)),
            _run_method(),
            _manage_method(),
            _update_method(options),
            _read_method(options),
            _build_method(auth),
            execute,
        ),
    ))
    return module
