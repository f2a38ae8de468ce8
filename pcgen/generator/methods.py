"""Emit forwarding methods for persistent collection classes."""

from dataclasses import dataclass

from jinja2 import Environment, PackageLoader

from pcgen.persistent import PersistentCollectionMixin

from .signature import TypeRenderer
from .types import MethodSignature, ParameterKind, ParameterSpec, is_nothing

env = Environment(
    loader=PackageLoader("pcgen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("method.py.j2")

CONSTRUCTORS = frozenset(["__init__", "__new__"])

# Names provided by the decoration support code of every generated class
MIXIN_MEMBERS = frozenset(
    name for klass in PersistentCollectionMixin.__mro__[:-1] for name in vars(klass)
)


@dataclass(frozen=True)
class DecoratedMethod:
    """Template context for one forwarding method."""

    name: str
    parameters: str
    arguments: str
    return_annotation: str
    returns: bool
    is_async: bool


def skip_reason(method: MethodSignature) -> str | None:
    """Return why a method is not decorated, or None if it is."""
    if method.name in MIXIN_MEMBERS:
        return "decoration support"
    if method.name in CONSTRUCTORS:
        return "constructor"
    if method.is_final:
        return "final"
    if method.is_static:
        return "static"
    return None


def _parameter_definition(
    param: ParameterSpec, method: MethodSignature, renderer: TypeRenderer
) -> str:
    definition = ""
    if param.kind == ParameterKind.VAR_POSITIONAL:
        definition += "*"
    elif param.kind == ParameterKind.VAR_KEYWORD:
        definition += "**"

    definition += param.name

    if param.type is not None:
        definition += ": " + renderer.format_type(param.type, method, param)

    if param.has_default:
        separator = " = " if param.type is not None else "="
        definition += separator + renderer.format_default(param, method)

    return definition


def build_parameters_string(method: MethodSignature, renderer: TypeRenderer) -> str:
    """Build the declaration list, receiver included.

    The `/` and `*` separators only exist in the declaration.
    """
    definitions = ["self"]
    params = method.parameters
    last_positional_only = max(
        (i for i, p in enumerate(params) if p.kind == ParameterKind.POSITIONAL_ONLY), default=-1
    )
    has_var_positional = any(p.kind == ParameterKind.VAR_POSITIONAL for p in params)
    keyword_marker_added = False

    for i, param in enumerate(params):
        if (
            param.kind == ParameterKind.KEYWORD_ONLY
            and not has_var_positional
            and not keyword_marker_added
        ):
            definitions.append("*")
            keyword_marker_added = True

        definitions.append(_parameter_definition(param, method, renderer))

        if i == last_positional_only:
            definitions.append("/")

    return ", ".join(definitions)


def build_call_arguments(parameters: tuple[ParameterSpec, ...]) -> list[str]:
    """Build the argument list of the delegated call."""
    arguments: list[str] = []
    for param in parameters:
        if param.kind == ParameterKind.VAR_POSITIONAL:
            arguments.append(f"*{param.name}")
        elif param.kind == ParameterKind.VAR_KEYWORD:
            arguments.append(f"**{param.name}")
        elif param.kind == ParameterKind.KEYWORD_ONLY:
            arguments.append(f"{param.name}={param.name}")
        else:
            arguments.append(param.name)
    return arguments


def get_method_return_type(method: MethodSignature, renderer: TypeRenderer) -> str:
    if method.return_type is None:
        return ""
    return renderer.format_type(method.return_type, method)


def decorate(method: MethodSignature, renderer: TypeRenderer) -> DecoratedMethod:
    return_type = get_method_return_type(method, renderer)
    return DecoratedMethod(
        name=method.name,
        parameters=build_parameters_string(method, renderer),
        arguments=", ".join(build_call_arguments(method.parameters)),
        return_annotation=f" -> {return_type}" if return_type else "",
        returns=not is_nothing(return_type),
        is_async=method.is_async,
    )


def generate_method(method: MethodSignature, renderer: TypeRenderer) -> str:
    """Render the forwarding method for one signature."""
    return template.render(method=decorate(method, renderer))
