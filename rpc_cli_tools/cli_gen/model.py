"""Descriptors and records shared by the generation passes."""
import dataclasses
from typing import Any
from typing import Optional

from rpc_cli_tools.cli_gen.emitter import Expr
from rpc_cli_tools.cli_gen.emitter import ImportSet
from rpc_cli_tools.cli_gen.emitter import Stmt
from rpc_cli_tools.types import AuthMode
from rpc_cli_tools.types import ConstructionStyle
from rpc_cli_tools.types import OperationKind
from rpc_cli_tools.types import TypeKind

SCALAR_KINDS = (TypeKind.SCALAR, TypeKind.ENUM, TypeKind.SCALAR_COLLECTION)


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """One declared field of a composite type."""

    name: str
    type: "TypeDescriptor"
    is_static: bool = False
    is_identifier: bool = False
    is_required: bool = False
    # empty means the field is allowed for all operations
    allowed_operations: frozenset[OperationKind] = frozenset()
    construction: ConstructionStyle = ConstructionStyle.SETTER


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """A resolved type handle produced by the classifier."""

    kind: TypeKind
    qualified_name: str
    name: str
    module: Optional[str] = None
    fields: tuple[FieldDescriptor, ...] = ()
    element: Optional["TypeDescriptor"] = None
    collection: Optional[str] = None
    construction: ConstructionStyle = ConstructionStyle.SETTER
    parser: Optional[str] = None
    values: tuple[Any, ...] = ()

    @property
    def is_scalar_like(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_composite(self) -> bool:
        return self.kind in (TypeKind.COMPOSITE, TypeKind.COMPOSITE_COLLECTION)

    def composite(self) -> "TypeDescriptor":
        """Get the composite type, which is the element type for a composite collection."""
        if self.kind == TypeKind.COMPOSITE_COLLECTION:
            return self.element
        return self


@dataclasses.dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    declared_type: str
    # None when the declared type could not be resolved
    type: Optional[TypeDescriptor] = None
    is_path_identifier: bool = False


@dataclasses.dataclass(frozen=True)
class OperationDescriptor:
    name: str
    resource_group: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    # None when the operation does not return anything
    return_type: Optional[str] = None
    kind: OperationKind = OperationKind.CREATE
    summary: str = ""
    # method on the client that returns the resource client
    accessor: str = ""


@dataclasses.dataclass(frozen=True)
class FlattenedFlag:
    """A single leaf command-line flag."""

    name: str
    variable: str
    option: str
    source_type: TypeDescriptor
    required: bool = False
    declaration_path: tuple[str, ...] = ()
    positional: bool = False


@dataclasses.dataclass
class GeneratedCommand:
    """Everything synthesized for one client operation."""

    class_name: str
    command_name: str
    resource_group: str
    module_name: str
    function_name: str
    flags: list[FlattenedFlag] = dataclasses.field(default_factory=list)
    invocation: Optional[Expr] = None
    statements: list[Stmt] = dataclasses.field(default_factory=list)
    imports: ImportSet = dataclasses.field(default_factory=ImportSet)
    help: str = ""


class CommandRegistry:
    """Commands by resource group, with groups and commands kept in encounter order."""

    def __init__(self):
        self._groups: dict[str, list[GeneratedCommand]] = {}

    def register(self, command: GeneratedCommand) -> None:
        self._groups.setdefault(command.resource_group, []).append(command)

    def groups(self) -> list[str]:
        return list(self._groups.keys())

    def commands(self, group: str) -> list[GeneratedCommand]:
        return list(self._groups.get(group, []))

    def names(self, group: str) -> list[str]:
        return [c.class_name for c in self._groups.get(group, [])]

    def all_commands(self) -> list[GeneratedCommand]:
        return [c for commands in self._groups.values() for c in commands]

    def __len__(self) -> int:
        return sum(len(commands) for commands in self._groups.values())


@dataclasses.dataclass
class GeneratorConfig:
    """Settings for a single generation run."""

    package_name: str
    client_module: str
    client_name: str
    cmdline_name: str = "cli"
    auth: AuthMode = AuthMode.NONE
    model_module: Optional[str] = None
    model_suffix: Optional[str] = "Model"
    resource_suffix: Optional[str] = None
