"""Type definitions for introspection and code generation."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from dataclasses_json import DataClassJsonMixin

# Pseudo-type names resolved against the declaring class
SELF = "self"
PARENT = "parent"
STATIC = "static"
RELATIVE_TYPES = frozenset([SELF, PARENT, STATIC])

ANY = "Any"

# Return types that never carry a value back
NOTHING_TYPES = frozenset(["None", "NoReturn", "Never"])

# Names usable unqualified in generated modules besides the builtins module
TYPING_BUILTINS = frozenset([ANY, "None", "NoReturn", "Never", "..."])


@dataclass(frozen=True)
class NamedType(DataClassJsonMixin):
    """A single named type.

    - module=None and builtin=False: the name could not be resolved
    - name in RELATIVE_TYPES: resolved against the declaring class at render time
    """

    name: str
    module: str | None = None
    builtin: bool = False
    nullable: bool = False

    @property
    def qualified_name(self) -> str:
        if self.module is None:
            return self.name
        return f"{self.module}.{self.name}"


@dataclass(frozen=True)
class UnionType(DataClassJsonMixin):
    """Represents `A | B | ...`."""

    members: tuple["TypeExpression", ...]


@dataclass(frozen=True)
class IntersectionType(DataClassJsonMixin):
    """Represents `A & B & ...`."""

    members: tuple["TypeExpression", ...]


@dataclass(frozen=True)
class GenericType(DataClassJsonMixin):
    """Represents a subscripted type such as `list[int]`."""

    origin: NamedType
    arguments: tuple["TypeExpression", ...]
    nullable: bool = False


@dataclass(frozen=True)
class TypeList(DataClassJsonMixin):
    """Represents the bracketed argument list of `Callable[[...], R]`."""

    items: tuple["TypeExpression", ...]


@dataclass(frozen=True)
class LiteralType(DataClassJsonMixin):
    """Represents a literal value used as a type argument."""

    value: Any


TypeExpression = NamedType | UnionType | IntersectionType | GenericType | TypeList | LiteralType


class ParameterKind(StrEnum):
    """How a parameter binds its argument."""

    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"


@dataclass(frozen=True)
class ParameterSpec(DataClassJsonMixin):
    """Represents one parameter of a method, receiver excluded."""

    name: str
    kind: ParameterKind
    type: TypeExpression | None = None
    has_default: bool = False
    default: Any = None

    @property
    def variadic(self) -> bool:
        return self.kind in (ParameterKind.VAR_POSITIONAL, ParameterKind.VAR_KEYWORD)

    @property
    def positional(self) -> bool:
        return self.kind in (ParameterKind.POSITIONAL_ONLY, ParameterKind.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class MethodSignature(DataClassJsonMixin):
    """Represents a method of a target class."""

    name: str
    parameters: tuple[ParameterSpec, ...]
    return_type: TypeExpression | None
    declaring: NamedType
    parent: NamedType | None = None
    is_final: bool = False
    is_static: bool = False
    is_async: bool = False


@dataclass(frozen=True)
class TargetType(DataClassJsonMixin):
    """Represents the collection class being decorated."""

    module: str
    name: str
    methods: tuple[MethodSignature, ...]

    @property
    def fqcn(self) -> str:
        return f"{self.module}.{self.name}"


class GenerationPolicy(StrEnum):
    """When the loader generates a persistent collection class."""

    NEVER = "never"
    ALWAYS = "always"
    IF_MISSING = "if_missing"
    EPHEMERAL = "ephemeral"


@dataclass(frozen=True)
class GeneratedType:
    """A generated persistent collection class.

    path is None for classes that only exist in memory.
    """

    namespace: str
    short_name: str
    source: str
    path: Path | None = None

    @property
    def name(self) -> str:
        return f"{self.namespace}.{self.short_name}"

    @property
    def ephemeral(self) -> bool:
        return self.path is None


def is_nothing(rendered: str) -> bool:
    """Check if a rendered return type never carries a value."""
    return rendered in NOTHING_TYPES
