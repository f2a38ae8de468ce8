"""Reconstruct source text for the type hints and defaults of a method."""

import importlib
import math
import typing
from enum import Enum
from typing import Any

from .errors import (
    InvalidParameterTypeHintError,
    InvalidReturnTypeHintError,
    ParentClassRequiredError,
)
from .types import (
    ANY,
    PARENT,
    SELF,
    STATIC,
    GenericType,
    IntersectionType,
    LiteralType,
    MethodSignature,
    NamedType,
    ParameterSpec,
    TypeExpression,
    TypeList,
    UnionType,
)

LITERAL_SCALARS = (type(None), bool, int, float, str, bytes)


def type_exists(module: str | None, qualname: str) -> bool:
    """Check if `module.qualname` names a class, type variable or typing construct."""
    if module is None:
        return False
    try:
        obj: Any = importlib.import_module(module)
    except ImportError:
        return False
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return False
    if isinstance(obj, (type, typing.TypeVar, typing.ParamSpec, typing.TypeVarTuple)):
        return True
    return type(obj).__module__ == "typing"


def is_literal(value: Any) -> bool:
    """Check if a default value round-trips through repr()."""
    if isinstance(value, Enum):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if type(value) in LITERAL_SCALARS:
        return True
    if type(value) in (tuple, frozenset):
        return all(is_literal(item) for item in value)
    return False


class TypeRenderer:
    """Render TypeExpressions of one generated module.

    Every module a rendered name is qualified with is collected in `imports`.
    """

    def __init__(self) -> None:
        self.imports: set[str] = set()

    def qualify(self, t: NamedType) -> str:
        if t.module is not None:
            self.imports.add(t.module)
        return t.qualified_name

    def format_type(
        self,
        t: TypeExpression,
        method: MethodSignature,
        parameter: ParameterSpec | None = None,
        top: bool = True,
    ) -> str:
        """Render a type hint of `method`, or of `parameter` when given.

        `top` is False for the arguments of generic types, which keep their
        own nullability whatever the default of the parameter is.
        """
        if isinstance(t, UnionType):
            return " | ".join(self.format_type(m, method, parameter, top) for m in t.members)

        if isinstance(t, IntersectionType):
            return " & ".join(self.format_type(m, method, parameter, top) for m in t.members)

        if isinstance(t, TypeList):
            return "[" + ", ".join(self.format_type(i, method, parameter, False) for i in t.items) + "]"

        if isinstance(t, LiteralType):
            return repr(t.value)

        if isinstance(t, GenericType):
            origin = self.format_type(t.origin, method, parameter, False)
            args = ", ".join(self.format_type(a, method, parameter, False) for a in t.arguments)
            return self._nullable(f"{origin}[{args}]", t.nullable, parameter, top)

        name = t.name
        resolved = t
        if name == SELF:
            resolved = method.declaring
        elif name == PARENT:
            if method.parent is None:
                raise ParentClassRequiredError(method.declaring.qualified_name, method.name)
            resolved = method.parent

        if name == STATIC:
            rendered = "Self"
        elif resolved.builtin:
            rendered = resolved.name
        else:
            if not type_exists(resolved.module, resolved.name):
                if parameter is not None:
                    raise InvalidParameterTypeHintError(
                        method.declaring.qualified_name, method.name, parameter.name
                    )
                raise InvalidReturnTypeHintError(method.declaring.qualified_name, method.name)
            rendered = self.qualify(resolved)

        if rendered == ANY:
            return rendered
        return self._nullable(rendered, t.nullable, parameter, top)

    def _nullable(
        self,
        rendered: str,
        nullable: bool,
        parameter: ParameterSpec | None,
        top: bool,
    ) -> str:
        if not nullable:
            return rendered
        if top and parameter is not None and parameter.has_default and parameter.default is not None:
            return rendered
        return f"{rendered} | None"

    def format_default(self, parameter: ParameterSpec, method: MethodSignature) -> str:
        """Render the default value of a parameter.

        Values that are not plain literals are looked up on the declaring
        class when the generated module is executed, so sentinels keep their
        identity.
        """
        if is_literal(parameter.default):
            return repr(parameter.default)
        owner = self.qualify(method.declaring)
        return f"original_default({owner}, {method.name!r}, {parameter.name!r})"
