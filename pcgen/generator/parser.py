"""String annotation parser using Lark."""

import ast
import os
from dataclasses import dataclass
from typing import Any

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

from .errors import IntrospectionError

_g_parser: Lark | None = None


@dataclass
class _Name:
    value: str


@dataclass
class _Subscript:
    origin: _Name
    arguments: list[Any]


@dataclass
class _Union:
    members: list[Any]


@dataclass
class _Intersection:
    members: list[Any]


@dataclass
class _TypeList:
    items: list[Any]


@dataclass
class _Literal:
    value: Any


@dataclass
class _Ellipsis:
    pass


AnnotationNode = _Name | _Subscript | _Union | _Intersection | _TypeList | _Literal | _Ellipsis


class TreeTransformer(Transformer):
    """Transform parse tree into annotation nodes."""

    def union(self, args: list[Any]) -> _Union:
        return _Union(members=list(args))

    def intersection(self, args: list[Any]) -> _Intersection:
        return _Intersection(members=list(args))

    def subscript(self, args: list[Any]) -> _Subscript:
        return _Subscript(origin=args[0], arguments=list(args[1:]))

    def type_list(self, args: list[Any]) -> _TypeList:
        return _TypeList(items=list(args))

    def name(self, args: list[Any]) -> _Name:
        return _Name(value=".".join(str(part) for part in args))

    def literal(self, args: list[Any]) -> _Literal:
        return _Literal(value=ast.literal_eval(str(args[0])))

    def ellipsis(self, _args: list[Any]) -> _Ellipsis:
        return _Ellipsis()


def parse_annotation(text: str) -> AnnotationNode:
    """Parse a string annotation into an unresolved syntax tree."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/annotation.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar)

    try:
        tree = _g_parser.parse(text)
    except LarkError as exc:
        raise IntrospectionError(f"Cannot parse type annotation {text!r}") from exc

    return TreeTransformer().transform(tree)
