"""Classify declared types as scalar-like (usable as a single flag) or composite."""
from typing import Any
from typing import Optional

from rpc_cli_tools.cli_gen._logging import logger
from rpc_cli_tools.cli_gen.catalog import TypeCatalog
from rpc_cli_tools.cli_gen.catalog import UnresolvedTypeError
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.emitter import ImportSection
from rpc_cli_tools.cli_gen.emitter import ImportSet
from rpc_cli_tools.cli_gen.model import FieldDescriptor
from rpc_cli_tools.cli_gen.model import TypeDescriptor
from rpc_cli_tools.types import ConstructionStyle
from rpc_cli_tools.types import DescField
from rpc_cli_tools.types import OperationKind
from rpc_cli_tools.types import TypeKind
from rpc_cli_tools.utils import parse_type_name

# primitive names mapped to the Python type used for the flag
PRIMITIVES = {
    "int": "int",
    "float": "float",
    "bool": "bool",
    "complex": "complex",
    "str": "str",
    "char": "str",
}
# types that are built from the flag text: name -> (module, parser)
STRING_CONSTRUCTIBLE = {
    "date": ("datetime", "date.fromisoformat"),
    "datetime": ("datetime", "datetime.fromisoformat"),
    "time": ("datetime", "time.fromisoformat"),
    "Decimal": ("decimal", "Decimal"),
    "UUID": ("uuid", "UUID"),
    "Path": ("pathlib", "Path"),
}
# supported single argument collections mapped to the collection that gets built
COLLECTIONS = {
    "list": "list",
    "List": "list",
    "Sequence": "list",
    "Collection": "list",
    "Iterable": "list",
    "set": "set",
    "Set": "set",
    "frozenset": "set",
    "FrozenSet": "set",
    "tuple": "tuple",
    "Tuple": "tuple",
}


class TypeClassifier:
    """Turns the declared type names into (cached) TypeDescriptors.

    The names of composites currently being described are tracked, so a field that refers back
    to one of them is reported as unresolved instead of recursing forever.
    """

    def __init__(self, catalog: TypeCatalog):
        self.catalog = catalog
        self.cache: dict[str, TypeDescriptor] = {}
        self.pending: set[str] = set()
        # descriptions of the fields that were skipped
        self.problems: list[str] = []
        self.logger = logger(GENERATOR_LOG_CLASS)

    def classify(self, type_name: str) -> TypeDescriptor:
        """Get the descriptor for the declared type, or raise UnresolvedTypeError."""
        key = type_name.strip()
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        descriptor = self._classify(key)
        # a composite described while another one is pending lacks its references back to that one
        if not self.pending or not descriptor.is_composite:
            self.cache[key] = descriptor
        return descriptor

    def resolve(self, type_name: str) -> Optional[TypeDescriptor]:
        """Get the descriptor for the declared type, or None (with a warning) when unusable."""
        try:
            return self.classify(type_name)
        except UnresolvedTypeError as ex:
            self.logger.warning(f"Unable to use type {type_name}: {ex.reason}")
            return None

    def _classify(self, type_name: str) -> TypeDescriptor:
        if not type_name:
            raise UnresolvedTypeError(type_name, "no type declared")

        base, args = parse_type_name(type_name)
        if args:
            return self._collection(type_name, base, args)

        primitive = PRIMITIVES.get(base)
        if primitive:
            # Typer has no native support for complex numbers
            parser = "complex" if primitive == "complex" else None
            return TypeDescriptor(kind=TypeKind.SCALAR, qualified_name=primitive, name=primitive, parser=parser)

        data = self.catalog.type_data(base)
        if data is not None:
            return self._catalog_type(base, data)

        builtin = STRING_CONSTRUCTIBLE.get(base)
        if builtin:
            module, parser = builtin
            return TypeDescriptor(
                kind=TypeKind.SCALAR,
                qualified_name=f"{module}.{base}",
                name=base,
                module=module,
                parser=parser,
            )

        if base.endswith("[]"):
            raise UnresolvedTypeError(type_name, "array types are not supported")
        raise UnresolvedTypeError(type_name)

    def _collection(self, type_name: str, base: str, args: list[str]) -> TypeDescriptor:
        collection = COLLECTIONS.get(base)
        if not collection:
            raise UnresolvedTypeError(type_name, f"{base} is not a supported collection")
        if len(args) != 1:
            raise UnresolvedTypeError(type_name, "collections need exactly one type argument")
        _, element_args = parse_type_name(args[0])
        if element_args:
            raise UnresolvedTypeError(type_name, "nested collections are not supported")

        element = self.classify(args[0])
        if element.kind in (TypeKind.SCALAR, TypeKind.ENUM):
            kind = TypeKind.SCALAR_COLLECTION
        elif element.kind == TypeKind.COMPOSITE:
            kind = TypeKind.COMPOSITE_COLLECTION
        else:
            raise UnresolvedTypeError(type_name, "unsupported collection element")

        return TypeDescriptor(
            kind=kind,
            qualified_name=f"{collection}[{element.qualified_name}]",
            name=f"{collection}[{element.name}]",
            element=element,
            collection=collection,
        )

    def _catalog_type(self, name: str, data: dict[str, Any]) -> TypeDescriptor:
        module = self.catalog.type_module(name)
        qualified = f"{module}.{name}" if module else name

        values = data.get(DescField.ENUM)
        if values:
            return TypeDescriptor(
                kind=TypeKind.ENUM,
                qualified_name=qualified,
                name=name,
                module=module,
                values=tuple(values),
            )

        from_string = data.get(DescField.FROM_STRING)
        if from_string:
            parser = name if from_string is True else f"{name}.{from_string}"
            return TypeDescriptor(
                kind=TypeKind.SCALAR,
                qualified_name=qualified,
                name=name,
                module=module,
                parser=parser,
            )

        if DescField.FIELDS.value not in data:
            raise UnresolvedTypeError(name, "declaration has no enum, from_string or fields")

        if name in self.pending:
            raise UnresolvedTypeError(name, "recursive reference")

        construction = ConstructionStyle(data.get(DescField.CONSTRUCTION) or ConstructionStyle.SETTER)
        self.pending.add(name)
        try:
            fields = self._fields(name, data.get(DescField.FIELDS) or [], construction)
        finally:
            self.pending.discard(name)

        return TypeDescriptor(
            kind=TypeKind.COMPOSITE,
            qualified_name=qualified,
            name=name,
            module=module,
            fields=tuple(fields),
            construction=construction,
        )

    def _fields(
        self,
        owner: str,
        declarations: list[dict[str, Any]],
        construction: ConstructionStyle,
    ) -> list[FieldDescriptor]:
        fields = []
        for item in declarations:
            field_name = item.get(DescField.NAME)
            declared = str(item.get(DescField.TYPE, ""))
            try:
                field_type = self.classify(declared)
            except UnresolvedTypeError as ex:
                message = f"{owner}.{field_name} ({declared}): {ex.reason}"
                if message not in self.problems:
                    self.logger.warning(f"Skipping field {message}")
                    self.problems.append(message)
                continue

            operations = item.get(DescField.OPERATIONS) or []
            fields.append(FieldDescriptor(
                name=field_name,
                type=field_type,
                is_static=bool(item.get(DescField.STATIC, False)),
                is_identifier=bool(item.get(DescField.IDENTIFIER, False)),
                is_required=bool(item.get(DescField.REQUIRED, False)),
                allowed_operations=frozenset(OperationKind(str(o).lower()) for o in operations),
                construction=construction,
            ))

        return fields


def annotation(descriptor: TypeDescriptor) -> str:
    """Get the Python annotation text for a scalar-like flag of the descriptor type."""
    if descriptor.element is not None:
        return f"list[{descriptor.element.name}]"
    return descriptor.name


def add_type_imports(descriptor: TypeDescriptor, imports: ImportSet) -> None:
    """Add the imports needed to reference the descriptor type in generated code."""
    if descriptor.element is not None:
        add_type_imports(descriptor.element, imports)
        return

    if not descriptor.module:
        return

    stdlib = {module for module, _ in STRING_CONSTRUCTIBLE.values()}
    section = ImportSection.STDLIB if descriptor.module in stdlib else ImportSection.THIRD_PARTY
    imports.add_from(descriptor.module, descriptor.name, section=section)
