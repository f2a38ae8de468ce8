"""Build the typed signature model from a live collection class."""

import builtins
import importlib
import inspect
import sys
import types
import typing
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .errors import IntrospectionError
from .parser import (
    AnnotationNode,
    _Ellipsis,
    _Intersection,
    _Literal,
    _Name,
    _Subscript,
    _TypeList,
    _Union,
    parse_annotation,
)
from .types import (
    ANY,
    RELATIVE_TYPES,
    STATIC,
    GenericType,
    IntersectionType,
    LiteralType,
    MethodSignature,
    NamedType,
    ParameterKind,
    ParameterSpec,
    TargetType,
    TypeExpression,
    TypeList,
    UnionType,
)

# Dunders that belong to object machinery rather than to the collection surface
EXCLUDED_DUNDERS = frozenset(
    [
        "__init__",
        "__new__",
        "__del__",
        "__init_subclass__",
        "__subclasshook__",
        "__class_getitem__",
        "__getattribute__",
        "__getattr__",
        "__setattr__",
        "__delattr__",
        "__dir__",
        "__get__",
        "__set__",
        "__delete__",
        "__set_name__",
        "__post_init__",
        "__reduce__",
        "__reduce_ex__",
        "__getstate__",
        "__setstate__",
        "__getnewargs__",
        "__getnewargs_ex__",
        "__copy__",
        "__deepcopy__",
        "__sizeof__",
        "__format__",
        "__annotate__",
        "__annotate_func__",
    ]
)

_PARAMETER_KINDS = {
    inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
    inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
    inspect.Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}

_NONE = NamedType("None", builtin=True)

# Bases that never contribute collection methods
_SKIPPED_BASES = (object, typing.Generic)

Lookup = Callable[[str], Any]


def resolve_target(target: type | str) -> type:
    """Resolve `module:QualName` or `module.QualName` to a class."""
    if isinstance(target, type):
        return target

    if ":" in target:
        module_name, _, qualname = target.partition(":")
    else:
        module_name, _, qualname = target.rpartition(".")

    if not module_name or not qualname:
        raise IntrospectionError(f"Invalid target class {target!r}")

    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            raise IntrospectionError(f"Class {qualname!r} not found in module {module_name!r}")

    if not isinstance(obj, type):
        raise IntrospectionError(f"{target!r} is not a class")
    return obj


def is_public(name: str) -> bool:
    """Check if a method name belongs to the public collection surface."""
    if name.startswith("__") and name.endswith("__"):
        return name not in EXCLUDED_DUNDERS
    return not name.startswith("_")


def named_type(cls: type) -> NamedType:
    if cls is type(None):
        return _NONE
    if cls.__module__ == "builtins":
        return NamedType(cls.__qualname__, builtin=True)
    return NamedType(cls.__qualname__, module=cls.__module__)


def _union(members: list[TypeExpression]) -> TypeExpression:
    rest = [m for m in members if m != _NONE]
    if len(rest) == 1 and len(members) == 2 and isinstance(rest[0], (NamedType, GenericType)):
        return replace(rest[0], nullable=True)
    if len(members) == 1:
        return members[0]
    return UnionType(tuple(members))


def _typevar(tv: Any) -> NamedType:
    # Type parameters that are not module attributes cannot be referenced by name
    module = sys.modules.get(getattr(tv, "__module__", ""))
    if module is not None and getattr(module, tv.__name__, None) is tv:
        return NamedType(tv.__name__, module=module.__name__)
    return NamedType(ANY, builtin=True)


def convert_object(annotation: Any, lookup: Lookup) -> TypeExpression:
    """Convert a live annotation object to a TypeExpression."""
    if annotation is None or annotation is type(None):
        return _NONE
    if annotation is Any:
        return NamedType(ANY, builtin=True)
    if annotation is typing.Self:
        return NamedType(STATIC)
    if annotation is typing.NoReturn:
        return NamedType("NoReturn", builtin=True)
    if annotation is typing.Never:
        return NamedType("Never", builtin=True)
    if annotation is Ellipsis:
        return NamedType("...", builtin=True)
    if isinstance(annotation, str):
        return convert_string(annotation, lookup)
    if isinstance(annotation, typing.ForwardRef):
        return convert_string(annotation.__forward_arg__, lookup)
    if isinstance(annotation, (typing.TypeVar, typing.ParamSpec, typing.TypeVarTuple)):
        return _typevar(annotation)
    if isinstance(annotation, (typing.ParamSpecArgs, typing.ParamSpecKwargs)):
        suffix = "args" if isinstance(annotation, typing.ParamSpecArgs) else "kwargs"
        origin = _typevar(annotation.__origin__)
        if origin.module is None:
            return origin
        return replace(origin, name=f"{origin.name}.{suffix}")
    if isinstance(annotation, list):
        return TypeList(tuple(convert_object(item, lookup) for item in annotation))

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Annotated:
        return convert_object(args[0], lookup)
    if origin is typing.Union or origin is types.UnionType:
        return _union([convert_object(arg, lookup) for arg in args])
    if origin is typing.Literal:
        return GenericType(
            NamedType("Literal", module="typing"), tuple(LiteralType(arg) for arg in args)
        )
    if origin is not None:
        base = convert_object(origin, lookup)
        if not args:
            return base
        if not isinstance(base, NamedType):
            raise IntrospectionError(f"Unsupported generic annotation {annotation!r}")
        return GenericType(base, tuple(convert_object(arg, lookup) for arg in args))

    if isinstance(annotation, type):
        return named_type(annotation)

    # Special forms such as typing.Literal used as an origin
    if type(annotation).__module__ == "typing":
        module, _, name = repr(annotation).rpartition(".")
        if module == "typing" and name.isidentifier():
            return NamedType(name, module="typing")

    raise IntrospectionError(f"Unsupported type annotation {annotation!r}")


def _lookup_name(dotted: str, lookup: Lookup) -> Any:
    head, *rest = dotted.split(".")
    obj = lookup(head)
    for part in rest:
        if obj is None:
            break
        obj = getattr(obj, part, None)
    return obj


def convert_node(node: AnnotationNode, lookup: Lookup) -> TypeExpression:
    """Convert a parsed string annotation to a TypeExpression."""
    if isinstance(node, _Name):
        if node.value in RELATIVE_TYPES:
            return NamedType(node.value)
        if node.value == "None":
            return _NONE
        obj = _lookup_name(node.value, lookup)
        if obj is None:
            return NamedType(node.value)
        return convert_object(obj, lookup)

    if isinstance(node, _Union):
        return _union([convert_node(member, lookup) for member in node.members])

    if isinstance(node, _Intersection):
        return IntersectionType(tuple(convert_node(member, lookup) for member in node.members))

    if isinstance(node, _TypeList):
        return TypeList(tuple(convert_node(item, lookup) for item in node.items))

    if isinstance(node, _Ellipsis):
        return NamedType("...", builtin=True)

    if isinstance(node, _Literal):
        if isinstance(node.value, str):
            return convert_string(node.value, lookup)
        return LiteralType(node.value)

    if isinstance(node, _Subscript):
        origin = _lookup_name(node.origin.value, lookup)
        if origin is typing.Optional and len(node.arguments) == 1:
            return _union([convert_node(node.arguments[0], lookup), _NONE])
        if origin is typing.Union:
            return _union([convert_node(arg, lookup) for arg in node.arguments])
        if origin is typing.Literal:
            if not all(isinstance(arg, _Literal) for arg in node.arguments):
                raise IntrospectionError(f"Unsupported literal annotation {node!r}")
            return GenericType(
                NamedType("Literal", module="typing"),
                tuple(LiteralType(arg.value) for arg in node.arguments),
            )
        if origin is typing.Annotated:
            return convert_node(node.arguments[0], lookup)

        base = NamedType(node.origin.value) if origin is None else convert_object(origin, lookup)
        if isinstance(base, GenericType):
            base = base.origin
        if not isinstance(base, NamedType):
            raise IntrospectionError(f"Unsupported generic annotation {node.origin.value!r}")
        return GenericType(base, tuple(convert_node(arg, lookup) for arg in node.arguments))

    raise IntrospectionError(f"Unsupported annotation node {node!r}")


def convert_string(text: str, lookup: Lookup) -> TypeExpression:
    return convert_node(parse_annotation(text), lookup)


def _namespace_lookup(func: Any) -> Lookup:
    namespace = getattr(inspect.unwrap(func), "__globals__", {})

    def lookup(name: str) -> Any:
        if name in namespace:
            return namespace[name]
        return getattr(builtins, name, None)

    return lookup


def convert_annotation(annotation: Any, lookup: Lookup) -> TypeExpression | None:
    if annotation is inspect.Parameter.empty:
        return None
    return convert_object(annotation, lookup)


def _parent_of(cls: type) -> NamedType | None:
    if not cls.__bases__ or cls.__bases__[0] is object:
        return None
    return named_type(cls.__bases__[0])


def _forwarding_parameters() -> tuple[ParameterSpec, ...]:
    return (
        ParameterSpec(name="args", kind=ParameterKind.VAR_POSITIONAL),
        ParameterSpec(name="kwargs", kind=ParameterKind.VAR_KEYWORD),
    )


def introspect_method(cls: type, name: str, attr: Any) -> MethodSignature | None:
    """Build the signature of one class attribute, or None if it is not a method.

    Methods of builtin classes without a text signature, such as
    `list.__getitem__`, accept and forward any arguments.
    """
    if isinstance(attr, types.ClassMethodDescriptorType):
        is_static, func = True, attr
    else:
        is_static = isinstance(attr, (staticmethod, classmethod))
        func = attr.__func__ if is_static else attr

    if not (inspect.isfunction(func) or (inspect.ismethoddescriptor(func) and callable(func))):
        return None

    declaring = named_type(cls)
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        if inspect.isfunction(func):
            raise IntrospectionError(
                f"Cannot introspect method {name!r} of class {cls.__qualname__!r}"
            ) from exc
        return MethodSignature(
            name=name,
            parameters=_forwarding_parameters(),
            return_type=None,
            declaring=declaring,
            parent=_parent_of(cls),
            is_static=is_static,
        )

    parameters = list(signature.parameters.values())
    receiver = not isinstance(attr, staticmethod)
    if receiver and parameters and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        parameters = parameters[1:]

    lookup = _namespace_lookup(func)
    specs = tuple(
        ParameterSpec(
            name=param.name,
            kind=_PARAMETER_KINDS[param.kind],
            type=convert_annotation(param.annotation, lookup),
            has_default=param.default is not inspect.Parameter.empty,
            default=None if param.default is inspect.Parameter.empty else param.default,
        )
        for param in parameters
    )

    return MethodSignature(
        name=name,
        parameters=specs,
        return_type=convert_annotation(signature.return_annotation, lookup),
        declaring=declaring,
        parent=_parent_of(cls),
        is_final=bool(getattr(func, "__final__", False)),
        is_static=is_static,
        is_async=inspect.iscoroutinefunction(func),
    )


def introspect(cls: type) -> TargetType:
    """Introspect the public instance methods of a class.

    Methods are listed in MRO order: methods declared on the class first, then
    inherited ones. `object` and `Generic` are never walked.
    """
    seen: set[str] = set()
    methods: list[MethodSignature] = []

    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for name, attr in vars(klass).items():
            if name in seen or not is_public(name):
                continue
            seen.add(name)
            method = introspect_method(klass, name, attr)
            if method is not None:
                methods.append(method)

    return TargetType(module=cls.__module__, name=cls.__qualname__, methods=tuple(methods))
