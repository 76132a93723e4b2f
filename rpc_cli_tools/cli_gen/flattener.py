"""Flatten composite types into the leaf flags that are set on the command line."""
from typing import Iterator

from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import FieldDescriptor
from rpc_cli_tools.cli_gen.model import FlattenedFlag
from rpc_cli_tools.cli_gen.model import TypeDescriptor
from rpc_cli_tools.cli_gen.utils import capitalize
from rpc_cli_tools.types import OperationKind
from rpc_cli_tools.types import TypeKind


def visible_fields(composite: TypeDescriptor, kind: OperationKind) -> list[FieldDescriptor]:
    """Get the fields of the composite that can be set for the operation kind (in declaration order).

    Static fields are never included. Identifier fields are only included for updates, and other
    fields only when they are allowed for the operation kind.
    """
    result = []
    for field in composite.fields:
        if field.is_static:
            continue
        if field.is_identifier:
            if kind != OperationKind.UPDATE:
                continue
        elif field.allowed_operations and kind not in field.allowed_operations:
            continue
        result.append(field)

    return result


def has_flags(composite: TypeDescriptor, kind: OperationKind) -> bool:
    """Check whether flattening the composite produces any flags."""
    for field in visible_fields(composite, kind):
        if field.type.is_scalar_like:
            return True
        if has_flags(field.type.composite(), kind):
            return True

    return False


def flag_name(prefix: str, field_name: str) -> str:
    if not prefix:
        return field_name
    return prefix + capitalize(field_name)


def child_prefix(field: FieldDescriptor) -> str:
    """Get the prefix for the fields of a nested composite (or of a composite collection element)."""
    if field.type.kind == TypeKind.COMPOSITE_COLLECTION:
        return field.type.element.name.lower()
    return field.name


def leaf_flag(generator: Generator, name: str, field: FieldDescriptor, path: tuple[str, ...]) -> FlattenedFlag:
    return FlattenedFlag(
        name=name,
        variable=generator.variable_name(name),
        option=generator.option_name(name),
        source_type=field.type,
        # only updates see identifiers, and they are always needed there
        required=field.is_required or field.is_identifier,
        declaration_path=path,
    )


def _flatten(
    generator: Generator,
    composite: TypeDescriptor,
    prefix: str,
    kind: OperationKind,
    path: tuple[str, ...],
) -> Iterator[FlattenedFlag]:
    for field in visible_fields(composite, kind):
        field_path = path + (field.name,)
        if field.type.is_scalar_like:
            yield leaf_flag(generator, flag_name(prefix, field.name), field, field_path)
        else:
            yield from _flatten(generator, field.type.composite(), child_prefix(field), kind, field_path)


def flatten(
    generator: Generator,
    composite: TypeDescriptor,
    prefix: str,
    kind: OperationKind,
) -> list[FlattenedFlag]:
    """
    Get the ordered leaf flags for the composite.

    When more than one field maps to the same flag, only the first one is kept.
    """
    flags = []
    seen = set()
    for flag in _flatten(generator, composite, prefix, kind, ()):
        if flag.variable in seen:
            generator.logger.debug(f"Dropping duplicate flag {flag.option} for {'.'.join(flag.declaration_path)}")
            continue
        seen.add(flag.variable)
        flags.append(flag)

    return flags
