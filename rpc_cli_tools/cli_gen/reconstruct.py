"""Generate the statements that rebuild a composite value from its flattened flags.

The traversal mirrors the flattener (same fields, same order, same flag names), so every field
set here reads the flag that was declared for it.
"""
import dataclasses
from typing import Optional

from rpc_cli_tools.cli_gen.emitter import Assign
from rpc_cli_tools.cli_gen.emitter import Attribute
from rpc_cli_tools.cli_gen.emitter import Call
from rpc_cli_tools.cli_gen.emitter import CollectionLiteral
from rpc_cli_tools.cli_gen.emitter import Expr
from rpc_cli_tools.cli_gen.emitter import ImportSection
from rpc_cli_tools.cli_gen.emitter import ImportSet
from rpc_cli_tools.cli_gen.emitter import Name
from rpc_cli_tools.cli_gen.emitter import Stmt
from rpc_cli_tools.cli_gen.emitter import method_call
from rpc_cli_tools.cli_gen.flattener import child_prefix
from rpc_cli_tools.cli_gen.flattener import flag_name
from rpc_cli_tools.cli_gen.flattener import has_flags
from rpc_cli_tools.cli_gen.flattener import visible_fields
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import TypeDescriptor
from rpc_cli_tools.cli_gen.utils import capitalize
from rpc_cli_tools.types import ConstructionStyle
from rpc_cli_tools.types import OperationKind
from rpc_cli_tools.types import TypeKind

SELF = Name("self")


@dataclasses.dataclass
class Construction:
    """Statements to run first, and the expression that evaluates to the built object."""

    statements: list[Stmt]
    value: Expr
    imports: ImportSet


def constructed_class(generator: Generator, composite: TypeDescriptor, kind: OperationKind) -> str:
    """Get the class to instantiate, which is Create<Base>/Update<Base> for model-suffixed types."""
    suffix = generator.config.model_suffix
    name = composite.name
    if suffix and name.endswith(suffix) and name != suffix:
        return f"{capitalize(kind.value)}{name[:-len(suffix)]}"
    return name


class _Locals:
    """Hands out unique local variable names within one generated method."""

    def __init__(self, generator: Generator, used: Optional[set[str]] = None):
        self.generator = generator
        # shared with the caller, so names stay unique across constructions
        self.used = used if used is not None else set()

    def claim(self, text: str) -> str:
        base = self.generator.variable_name(text)
        name = base
        index = 1
        while name in self.used:
            index += 1
            name = f"{base}{index}"
        self.used.add(name)
        return name


def _build(
    generator: Generator,
    composite: TypeDescriptor,
    prefix: str,
    target: str,
    kind: OperationKind,
    statements: list[Stmt],
    imports: ImportSet,
    local_names: _Locals,
) -> Expr:
    class_name = constructed_class(generator, composite, kind)
    if composite.module:
        imports.add_from(composite.module, class_name, section=ImportSection.THIRD_PARTY)

    values: list[tuple[str, Expr]] = []
    for field in visible_fields(composite, kind):
        field_type = field.type
        if field_type.is_scalar_like:
            flag = generator.variable_name(flag_name(prefix, field.name))
            values.append((field.name, Attribute(SELF, flag)))
            continue

        element = field_type.composite()
        if not has_flags(element, kind):
            continue

        local = ""
        if element.construction == ConstructionStyle.SETTER:
            if field_type.kind == TypeKind.COMPOSITE:
                local = local_names.claim(field.name)
            else:
                local = local_names.claim(element.name.lower())
        child = _build(generator, element, child_prefix(field), local, kind, statements, imports, local_names)
        if field_type.kind == TypeKind.COMPOSITE_COLLECTION:
            # the flags describe exactly one element
            child = CollectionLiteral(field_type.collection, (child,))
        values.append((field.name, child))

    if composite.construction == ConstructionStyle.BUILDER:
        chain = method_call(Name(class_name), "builder")
        for name, value in values:
            chain = method_call(chain, name, value)
        return method_call(chain, "build")

    variable = Name(target)
    statements.append(Assign(variable, Call(Name(class_name))))
    for name, value in values:
        statements.append(Assign(Attribute(variable, name), value))
    return variable


def emit_construction(
    generator: Generator,
    composite: TypeDescriptor,
    prefix: str,
    target: str,
    kind: OperationKind,
    used: Optional[set[str]] = None,
) -> Construction:
    """
    Get the construction of the composite from the flag values on the command (`self.<flag>`).

    Builder-style types become a single chained expression, while setter-style types assign the
    fields of a local variable named by `target`. Nested setter-style objects get their own
    locals, which are built before the object that references them. The `used` names are
    avoided when creating those locals, and the new locals are added to it.
    """
    statements: list[Stmt] = []
    imports = ImportSet()
    local_names = _Locals(generator, used)
    if composite.construction == ConstructionStyle.SETTER:
        target = local_names.claim(target)
    value = _build(generator, composite, prefix, target, kind, statements, imports, local_names)
    return Construction(statements=statements, value=value, imports=imports)
