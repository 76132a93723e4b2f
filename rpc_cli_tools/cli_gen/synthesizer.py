"""Synthesize a command (class, Typer function and module) for each client operation."""
from rpc_cli_tools.cli_gen.base_command import BASE_MODULE
from rpc_cli_tools.cli_gen.base_command import global_options
from rpc_cli_tools.cli_gen.classifier import add_type_imports
from rpc_cli_tools.cli_gen.classifier import annotation
from rpc_cli_tools.cli_gen.emitter import Assign
from rpc_cli_tools.cli_gen.emitter import Attribute
from rpc_cli_tools.cli_gen.emitter import Blank
from rpc_cli_tools.cli_gen.emitter import Call
from rpc_cli_tools.cli_gen.emitter import ClassDef
from rpc_cli_tools.cli_gen.emitter import CollectionLiteral
from rpc_cli_tools.cli_gen.emitter import Compare
from rpc_cli_tools.cli_gen.emitter import Expr
from rpc_cli_tools.cli_gen.emitter import ExprStatement
from rpc_cli_tools.cli_gen.emitter import FunctionDef
from rpc_cli_tools.cli_gen.emitter import If
from rpc_cli_tools.cli_gen.emitter import ImportSection
from rpc_cli_tools.cli_gen.emitter import ImportSet
from rpc_cli_tools.cli_gen.emitter import Literal
from rpc_cli_tools.cli_gen.emitter import Module
from rpc_cli_tools.cli_gen.emitter import Name
from rpc_cli_tools.cli_gen.emitter import Raise
from rpc_cli_tools.cli_gen.emitter import Stmt
from rpc_cli_tools.cli_gen.emitter import Subscript
from rpc_cli_tools.cli_gen.emitter import Text
from rpc_cli_tools.cli_gen.emitter import dotted
from rpc_cli_tools.cli_gen.emitter import is_none
from rpc_cli_tools.cli_gen.emitter import is_not_none
from rpc_cli_tools.cli_gen.emitter import method_call
from rpc_cli_tools.cli_gen.flattener import flatten
from rpc_cli_tools.cli_gen.generator import CONFLICT_SUFFIX
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import FlattenedFlag
from rpc_cli_tools.cli_gen.model import GeneratedCommand
from rpc_cli_tools.cli_gen.model import OperationDescriptor
from rpc_cli_tools.cli_gen.model import ParameterDescriptor
from rpc_cli_tools.cli_gen.model import TypeDescriptor
from rpc_cli_tools.cli_gen.reconstruct import emit_construction
from rpc_cli_tools.cli_gen.utils import is_case_sensitive
from rpc_cli_tools.cli_gen.utils import quoted
from rpc_cli_tools.types import TypeKind

SELF = Name("self")
ARGUMENTS = "arguments"
CLIENT_CONFIG = "client_configuration"
RESULT = "result"
STRING = TypeDescriptor(kind=TypeKind.SCALAR, qualified_name="str", name="str")
STRINGS = TypeDescriptor(
    kind=TypeKind.SCALAR_COLLECTION,
    qualified_name="list[str]",
    name="list[str]",
    element=STRING,
    collection="list",
)


class CommandSynthesizer:
    """Creates the GeneratedCommand for each operation, and registers it with the generator."""

    def __init__(self, generator: Generator):
        self.generator = generator
        self.logger = generator.logger

    def positional_flags(self, operation: OperationDescriptor) -> tuple[list[FlattenedFlag], dict[str, Expr]]:
        """Get the positional argument flags, and the expression used for each path parameter."""
        gen = self.generator
        path_params = [p for p in operation.parameters if p.is_path_identifier]
        if not path_params:
            return [], {}

        if len(path_params) > 1:
            flag = FlattenedFlag(
                name=ARGUMENTS,
                variable=ARGUMENTS,
                option=ARGUMENTS,
                source_type=STRINGS,
                required=True,
                declaration_path=tuple(p.name for p in path_params),
                positional=True,
            )
            values = {
                p.name: Subscript(Attribute(SELF, ARGUMENTS), Literal(index))
                for index, p in enumerate(path_params)
            }
            return [flag], values

        param = path_params[0]
        source_type = param.type
        if source_type is None or source_type.kind not in (TypeKind.SCALAR, TypeKind.ENUM):
            self.logger.warning(
                f"Using a string for {operation.name} identifier {param.name} of type {param.declared_type}"
            )
            source_type = STRING
        variable = gen.variable_name(param.name)
        if variable in {o.field for o in global_options(gen.config.auth)}:
            # the global option keeps the plain name
            variable += CONFLICT_SUFFIX
        flag = FlattenedFlag(
            name=param.name,
            variable=variable,
            option=variable,
            source_type=source_type,
            required=True,
            declaration_path=(param.name,),
            positional=True,
        )
        return [flag], {param.name: Attribute(SELF, variable)}

    def parameter_flag(self, param: ParameterDescriptor) -> FlattenedFlag:
        gen = self.generator
        return FlattenedFlag(
            name=param.name,
            variable=gen.variable_name(param.name),
            option=gen.option_name(param.name),
            source_type=param.type,
            declaration_path=(param.name,),
        )

    def synthesize(self, operation: OperationDescriptor) -> GeneratedCommand:
        """
        Create the command for the operation.

        Path identifiers become positional arguments, scalar-like parameters become options, and
        composite parameters are flattened into options that get reconstructed in `execute()`. A
        flag that duplicates an earlier one (or a global option) is dropped.
        """
        gen = self.generator
        config = gen.config
        class_name = gen.command_class_name(operation)
        command = GeneratedCommand(
            class_name=class_name,
            command_name=gen.command_name(operation),
            resource_group=operation.resource_group,
            module_name=gen.command_module_name(operation),
            function_name=gen.function_name(operation.name),
            help=gen.short_help(operation),
        )
        imports = command.imports
        imports.add_from(config.client_module, config.client_name, section=ImportSection.THIRD_PARTY)

        seen = {o.field for o in global_options(config.auth)}
        used_locals = {CLIENT_CONFIG, RESULT, "self"}

        def add_flag(flag: FlattenedFlag) -> None:
            if flag.variable in seen:
                self.logger.debug(f"Dropping duplicate flag {flag.option} from {class_name}")
                return
            seen.add(flag.variable)
            command.flags.append(flag)
            add_type_imports(flag.source_type, imports)

        positionals, path_values = self.positional_flags(operation)
        for flag in positionals:
            add_flag(flag)

        arguments: list[Expr] = []
        for param in operation.parameters:
            if param.is_path_identifier:
                arguments.append(path_values[param.name])
                continue

            if param.type is None:
                self.logger.warning(
                    f"Passing None for {operation.name} parameter {param.name} with unusable type {param.declared_type}"
                )
                arguments.append(Literal(None))
                continue

            if param.type.is_scalar_like:
                flag = self.parameter_flag(param)
                add_flag(flag)
                arguments.append(Attribute(SELF, flag.variable))
                continue

            composite = param.type.composite()
            for flag in flatten(gen, composite, "", operation.kind):
                add_flag(flag)
            construction = emit_construction(gen, composite, "", param.name, operation.kind, used_locals)
            command.statements.extend(construction.statements)
            imports.update(construction.imports)
            value = construction.value
            if param.type.kind == TypeKind.COMPOSITE_COLLECTION:
                value = CollectionLiteral(param.type.collection, (value,))
            arguments.append(value)

        client = Call(Name(config.client_name), (Name(CLIENT_CONFIG),))
        resource = method_call(client, operation.accessor or operation.resource_group.lower())
        command.invocation = method_call(resource, operation.name, *arguments)
        command.statements.extend(self.result_handling(operation, command.invocation))
        self.logger.debug(f"{class_name}({len(positionals)} positional, {len(command.flags)} total flags)")
        return command

    def result_handling(self, operation: OperationDescriptor, invocation: Expr) -> list[Stmt]:
        if operation.return_type is None:
            return [ExprStatement(invocation)]

        result = Name(RESULT)
        return [
            Assign(result, invocation),
            If(is_not_none(result), (ExprStatement(Call(dotted("_d.display"), (result,))),)),
        ]

    def flag_field(self, flag: FlattenedFlag) -> str:
        """Get the dataclass field declaration for the flag."""
        return f"{flag.variable}: Optional[{annotation(flag.source_type)}] = None"

    def flag_help(self, flag: FlattenedFlag) -> str:
        if flag.positional and flag.variable == ARGUMENTS:
            return "Identifiers in order"
        path = ".".join(flag.declaration_path)
        if flag.positional:
            return f"The {path} identifier"
        return f"Value for {path}"

    def flag_parameter(self, flag: FlattenedFlag) -> str:
        """Get the Typer function parameter declaration for the flag."""
        source_type = flag.source_type
        element = source_type.element or source_type
        py_type = annotation(source_type)
        args = []
        if flag.positional:
            args.append("show_default=False")
        elif element.name == "bool" and source_type.element is None:
            args.append(quoted(f"{flag.option}/--no-{flag.option[2:]}"))
            args.append("show_default=False")
        else:
            args.append(quoted(flag.option))
            args.append("show_default=False")
        if element.kind == TypeKind.ENUM and not is_case_sensitive(list(element.values)):
            args.append("case_sensitive=False")
        if element.parser:
            args.append(f"parser={element.parser}")
        args.append(f"help={quoted(self.flag_help(flag))}")

        if flag.positional:
            return f"{flag.variable}: Annotated[{py_type}, typer.Argument({', '.join(args)})]"
        return f"{flag.variable}: Annotated[Optional[{py_type}], typer.Option({', '.join(args)})] = None"

    def count_check(self, command: GeneratedCommand) -> list[Stmt]:
        """Get the statements that raise when the identifiers do not match the path parameters."""
        for flag in command.flags:
            if not flag.positional or flag.variable != ARGUMENTS:
                continue
            names = CollectionLiteral("list", tuple(Literal(n) for n in flag.declaration_path))
            count = Call(Name("len"), (Name(ARGUMENTS),))
            raise_count = Raise(Call(dotted("_e.IdentifierCountError"), (names, count)))
            return [If(Compare(count, "!=", Literal(len(flag.declaration_path))), (raise_count,))]

        return []

    def missing_check(self, command: GeneratedCommand) -> list[Stmt]:
        """Get the statements that raise when any of the required options are not provided."""
        missing = Name("missing")
        checks: list[Stmt] = []
        for flag in command.flags:
            if flag.positional or not flag.required:
                continue
            append = ExprStatement(method_call(missing, "append", Literal(flag.option)))
            checks.append(If(is_none(Name(flag.variable)), (append,)))

        counts = self.count_check(command)
        if not checks:
            return counts + [Blank()] if counts else []

        raise_missing = Raise(Call(dotted("_e.MissingRequiredError"), (missing,)))
        return [*counts, Assign(missing, CollectionLiteral("list")), *checks, If(missing, (raise_missing,)), Blank()]

    def render_module(self, command: GeneratedCommand) -> Module:
        """Create the module for the command: the command class and the Typer function."""
        gen = self.generator
        package = gen.package_name
        options = global_options(gen.config.auth)

        imports = ImportSet()
        imports.add_module("dataclasses", section=ImportSection.STDLIB)
        imports.add_from("typing", "Annotated", section=ImportSection.STDLIB, noqa=True)
        imports.add_from("typing", "Optional", section=ImportSection.STDLIB, noqa=True)
        imports.add_module("typer")
        imports.update(command.imports)
        imports.add_from(package, BASE_MODULE, alias="_b")
        imports.add_from(package, "_display", alias="_d", noqa=True)
        imports.add_from(package, "_exceptions", alias="_e", noqa=True)

        body = []
        if command.flags:
            body.append(Text("\n".join(self.flag_field(f) for f in command.flags)))
        body.append(FunctionDef(
            "execute",
            params=("self", CLIENT_CONFIG),
            body=tuple(command.statements),
        ))
        command_class = ClassDef(
            command.class_name,
            bases=("_b.DefaultCommand",),
            decorators=("dataclasses.dataclass",),
            docstring=command.help or None,
            body=tuple(body),
        )

        params = [self.flag_parameter(f) for f in command.flags]
        params.extend(f"{o.parameter}: _b.{o.alias} = {'False' if o.is_flag else 'None'}" for o in options)
        keywords = tuple((f.variable, Name(f.variable)) for f in command.flags)
        keywords += tuple((o.field, Name(o.parameter)) for o in options)
        run = ExprStatement(method_call(Call(Name(command.class_name), keywords=keywords), "run"))
        function = FunctionDef(
            command.function_name,
            params=tuple(params),
            body=tuple(self.missing_check(command) + [run]),
            docstring=command.help or None,
        )

        return Module(imports=imports, members=[command_class, function])

    def synthesize_all(self) -> list[GeneratedCommand]:
        """Synthesize every operation in the catalog, and register the commands."""
        result = []
        for operation in self.generator.operations():
            command = self.synthesize(operation)
            self.generator.registry.register(command)
            result.append(command)
        return result
