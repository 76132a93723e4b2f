"""A small intermediate representation for the generated Python source.

Expressions and statements are immutable values composed programmatically, and modules are
rendered to text in one final pass. Nothing is ever parsed back from text.
"""
import dataclasses
from enum import Enum
from typing import Any
from typing import Optional
from typing import Union

from rpc_cli_tools.cli_gen.utils import maybe_quoted
from rpc_cli_tools.cli_gen.utils import simple_escape

INDENT = "    "
NL = "\n"
# longer parameter lists get one parameter per line
MAX_INLINE_PARAMS = 60


class Expr:
    """Base class for expressions."""

    def render(self) -> str:
        raise NotImplementedError


class Stmt:
    """Base class for statements."""

    def lines(self) -> list[str]:
        raise NotImplementedError


@dataclasses.dataclass(frozen=True)
class Name(Expr):
    id: str

    def render(self) -> str:
        return self.id


@dataclasses.dataclass(frozen=True)
class Attribute(Expr):
    value: Expr
    attr: str

    def render(self) -> str:
        return f"{self.value.render()}.{self.attr}"


@dataclasses.dataclass(frozen=True)
class Subscript(Expr):
    value: Expr
    index: Expr

    def render(self) -> str:
        return f"{self.value.render()}[{self.index.render()}]"


@dataclasses.dataclass(frozen=True)
class Literal(Expr):
    value: Any

    def render(self) -> str:
        return maybe_quoted(self.value)


@dataclasses.dataclass(frozen=True)
class Call(Expr):
    func: Expr
    args: tuple[Expr, ...] = ()
    keywords: tuple[tuple[str, Expr], ...] = ()

    def render(self) -> str:
        items = [a.render() for a in self.args]
        items.extend(f"{k}={v.render()}" for k, v in self.keywords)
        return f"{self.func.render()}({', '.join(items)})"


@dataclasses.dataclass(frozen=True)
class CollectionLiteral(Expr):
    """A list, set or tuple display."""

    kind: str
    items: tuple[Expr, ...] = ()

    def render(self) -> str:
        inner = ", ".join(i.render() for i in self.items)
        if self.kind == "set":
            return f"{{{inner}}}" if self.items else "set()"
        if self.kind == "tuple":
            return f"({inner},)" if len(self.items) == 1 else f"({inner})"
        return f"[{inner}]"


@dataclasses.dataclass(frozen=True)
class Compare(Expr):
    left: Expr
    op: str
    right: Expr

    def render(self) -> str:
        return f"{self.left.render()} {self.op} {self.right.render()}"


@dataclasses.dataclass(frozen=True)
class BoolOp(Expr):
    op: str
    values: tuple[Expr, ...]

    def render(self) -> str:
        return f" {self.op} ".join(v.render() for v in self.values)


@dataclasses.dataclass(frozen=True)
class FormattedString(Expr):
    """An f-string, where the template holds the `{placeholders}`."""

    template: str

    def render(self) -> str:
        return f'f"{self.template}"'


def dotted(text: str) -> Expr:
    """Create the Name/Attribute chain for a dotted name like `self.movie.title`."""
    parts = text.split(".")
    expr: Expr = Name(parts[0])
    for p in parts[1:]:
        expr = Attribute(expr, p)
    return expr


def method_call(target: Expr, method: str, *args: Expr) -> Call:
    """Create a `target.method(args)` call."""
    return Call(Attribute(target, method), tuple(args))


def is_none(value: Expr) -> Compare:
    return Compare(value, "is", Literal(None))


def is_not_none(value: Expr) -> Compare:
    return Compare(value, "is not", Literal(None))


@dataclasses.dataclass(frozen=True)
class Assign(Stmt):
    target: Expr
    value: Expr

    def lines(self) -> list[str]:
        return [f"{self.target.render()} = {self.value.render()}"]


@dataclasses.dataclass(frozen=True)
class ExprStatement(Stmt):
    value: Expr

    def lines(self) -> list[str]:
        return [self.value.render()]


@dataclasses.dataclass(frozen=True)
class If(Stmt):
    test: Expr
    body: tuple[Stmt, ...]

    def lines(self) -> list[str]:
        result = [f"if {self.test.render()}:"]
        for stmt in self.body or (Pass(),):
            result.extend(INDENT + line if line else "" for line in stmt.lines())
        return result


@dataclasses.dataclass(frozen=True)
class Try(Stmt):
    """A try block with a single `except <exception> as <name>` handler."""

    body: tuple[Stmt, ...]
    exception: str
    name: str
    handler: tuple[Stmt, ...]

    def lines(self) -> list[str]:
        result = ["try:"]
        for stmt in self.body or (Pass(),):
            result.extend(INDENT + line if line else "" for line in stmt.lines())
        result.append(f"except {self.exception} as {self.name}:")
        for stmt in self.handler or (Pass(),):
            result.extend(INDENT + line if line else "" for line in stmt.lines())
        return result


@dataclasses.dataclass(frozen=True)
class Return(Stmt):
    value: Optional[Expr] = None

    def lines(self) -> list[str]:
        if self.value is None:
            return ["return"]
        return [f"return {self.value.render()}"]


@dataclasses.dataclass(frozen=True)
class Raise(Stmt):
    exc: Expr

    def lines(self) -> list[str]:
        return [f"raise {self.exc.render()}"]


@dataclasses.dataclass(frozen=True)
class Pass(Stmt):
    def lines(self) -> list[str]:
        return ["pass"]


@dataclasses.dataclass(frozen=True)
class Blank(Stmt):
    """An empty line to separate blocks of statements."""

    def lines(self) -> list[str]:
        return [""]


def render_statements(statements: list[Stmt], level: int = 0) -> str:
    """Render the statements at the given indentation level (blank lines stay empty)."""
    prefix = INDENT * level
    lines = []
    for stmt in statements:
        lines.extend(prefix + line if line else "" for line in stmt.lines())
    return NL.join(lines)


class ImportSection(int, Enum):
    STDLIB = 0
    THIRD_PARTY = 1
    LOCAL = 2


class ImportSet:
    """Collects imports, removes duplicates and renders them in isort-like sections."""

    def __init__(self):
        # (section, module, name, alias) -> noqa
        self._items: dict[tuple[ImportSection, str, Optional[str], Optional[str]], bool] = {}

    def add_module(self, module: str, section: ImportSection = ImportSection.THIRD_PARTY) -> None:
        """Add an `import module` line."""
        key = (section, module, None, None)
        self._items[key] = self._items.get(key, False)

    def add_from(
        self,
        module: str,
        name: str,
        section: ImportSection = ImportSection.LOCAL,
        alias: Optional[str] = None,
        noqa: bool = False,
    ) -> None:
        """Add a `from module import name` line."""
        key = (section, module, name, alias)
        self._items[key] = self._items.get(key, False) or noqa

    def update(self, other: "ImportSet") -> None:
        for key, noqa in other._items.items():
            self._items[key] = self._items.get(key, False) or noqa

    def __contains__(self, module_name: tuple[str, Optional[str]]) -> bool:
        module, name = module_name
        return any(k[1] == module and k[2] == name for k in self._items)

    def render(self) -> str:
        sections = []
        for section in ImportSection:
            keys = [k for k in self._items if k[0] == section]
            plain = sorted(k for k in keys if k[2] is None)
            froms = sorted((k for k in keys if k[2] is not None), key=lambda k: (k[1], k[2], k[3] or ""))
            lines = [f"import {k[1]}" for k in plain]
            for k in froms:
                line = f"from {k[1]} import {k[2]}"
                if k[3]:
                    line += f" as {k[3]}"
                if self._items[k]:
                    line += "  # noqa: F401"
                lines.append(line)
            if lines:
                sections.append(NL.join(lines))

        return (NL * 2).join(sections)


@dataclasses.dataclass(frozen=True)
class Text:
    """Declaration text that is emitted verbatim (e.g. Typer option aliases)."""

    text: str

    def render(self, level: int = 0) -> str:
        prefix = INDENT * level
        return NL.join(prefix + line if line else "" for line in self.text.splitlines())


def _docstring(text: Optional[str], prefix: str) -> list[str]:
    if not text:
        return []
    return [f'{prefix}"""{simple_escape(text)}"""']


@dataclasses.dataclass(frozen=True)
class FunctionDef:
    name: str
    params: tuple[str, ...] = ()
    body: tuple[Stmt, ...] = ()
    returns: Optional[str] = "None"
    docstring: Optional[str] = None
    decorators: tuple[str, ...] = ()

    def render(self, level: int = 0) -> str:
        prefix = INDENT * level
        lines = [f"{prefix}@{d}" for d in self.decorators]
        returns = f" -> {self.returns}" if self.returns else ""
        if len(", ".join(self.params)) > MAX_INLINE_PARAMS:
            lines.append(f"{prefix}def {self.name}(")
            lines.extend(f"{prefix}{INDENT}{p}," for p in self.params)
            lines.append(f"{prefix}){returns}:")
        else:
            lines.append(f"{prefix}def {self.name}({', '.join(self.params)}){returns}:")
        lines.extend(_docstring(self.docstring, prefix + INDENT))
        body = list(self.body) or [Pass()]
        if self.docstring and not self.body:
            body = []
        if body:
            lines.append(render_statements(body, level + 1))
        return NL.join(lines)


@dataclasses.dataclass(frozen=True)
class ClassDef:
    name: str
    bases: tuple[str, ...] = ()
    body: tuple[Union[Text, FunctionDef], ...] = ()
    docstring: Optional[str] = None
    decorators: tuple[str, ...] = ()

    def render(self, level: int = 0) -> str:
        prefix = INDENT * level
        lines = [f"{prefix}@{d}" for d in self.decorators]
        bases = f"({', '.join(self.bases)})" if self.bases else ""
        lines.append(f"{prefix}class {self.name}{bases}:")
        lines.extend(_docstring(self.docstring, prefix + INDENT))
        members = [m.render(level + 1) for m in self.body]
        if not members and not self.docstring:
            members = [f"{prefix}{INDENT}pass"]
        if members and self.docstring:
            lines.append("")
        lines.append((NL * 2).join(members))
        return NL.join(lines)


@dataclasses.dataclass
class Module:
    """A generated module: header text, imports and top-level members."""

    header: str = ""
    imports: ImportSet = dataclasses.field(default_factory=ImportSet)
    members: list[Union[Text, FunctionDef, ClassDef]] = dataclasses.field(default_factory=list)

    def render(self) -> str:
        text = self.header
        imports = self.imports.render()
        if imports:
            text += imports + NL
        for member in self.members:
            spacing = NL if isinstance(member, Text) else NL * 2
            text += spacing + member.render() + NL
        return text
