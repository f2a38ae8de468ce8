"""Tests for class introspection."""

import inspect

import pytest
import sample_collections
import sample_typed
from sample_collections import ArrayCollection, SortedCollection

from pcgen.generator.errors import IntrospectionError
from pcgen.generator.introspect import introspect, introspect_method, is_public, resolve_target
from pcgen.generator.methods import skip_reason
from pcgen.generator.types import (
    GenericType,
    IntersectionType,
    NamedType,
    ParameterKind,
    TypeList,
    UnionType,
)


def _method(target, name):
    return next(m for m in target.methods if m.name == name)


def describe_resolve_target():
    def accepts_classes(expect):
        expect(resolve_target(ArrayCollection)) == ArrayCollection

    def accepts_colon_notation(expect):
        expect(resolve_target("sample_collections:ArrayCollection")) == ArrayCollection

    def accepts_dotted_notation(expect):
        expect(resolve_target("sample_collections.ArrayCollection")) == ArrayCollection

    def rejects_missing_class(expect):
        with pytest.raises(IntrospectionError):
            resolve_target("sample_collections:Missing")

    def rejects_non_class(expect):
        with pytest.raises(IntrospectionError):
            resolve_target("sample_collections:T")


def describe_is_public():
    def accepts_plain_names(expect):
        expect(is_public("add")) == True

    def rejects_private_names(expect):
        expect(is_public("_rebuild")) == False

    def accepts_container_dunders(expect):
        expect(is_public("__len__")) == True

    def rejects_object_machinery(expect):
        expect(is_public("__init__")) == False
        expect(is_public("__getattr__")) == False


def describe_introspect():
    def lists_declared_methods_in_order(expect):
        target = introspect(ArrayCollection)
        names = [m.name for m in target.methods]
        expect(names[:3]) == ["add", "append", "get"]
        expect(target.fqcn) == "sample_collections.ArrayCollection"

    def skips_constructor_private_methods_and_properties(expect):
        names = [m.name for m in introspect(ArrayCollection).methods]
        expect("__init__" in names) == False
        expect("_rebuild" in names) == False
        expect("is_empty" in names) == False

    def keeps_container_dunders(expect):
        names = [m.name for m in introspect(ArrayCollection).methods]
        expect("__len__" in names) == True
        expect("__iter__" in names) == True

    def lists_subclass_methods_before_inherited_ones(expect):
        names = [m.name for m in introspect(SortedCollection).methods]
        expect(names[:2]) == ["copy", "widen"]
        expect("add" in names) == True

    def records_declaring_class_and_parent(expect):
        target = introspect(SortedCollection)
        copy = _method(target, "copy")
        add = _method(target, "add")
        expect(copy.declaring) == NamedType("SortedCollection", module="sample_collections")
        expect(copy.parent) == NamedType("ArrayCollection", module="sample_collections")
        expect(add.declaring) == NamedType("ArrayCollection", module="sample_collections")

    def flags_final_static_and_async_methods(expect):
        target = introspect(ArrayCollection)
        expect(_method(target, "count").is_final) == True
        expect(_method(target, "from_iterable").is_static) == True
        expect(_method(target, "empty").is_static) == True
        expect(_method(target, "fetch").is_async) == True
        expect(_method(target, "add").is_final) == False

    def drops_receiver(expect):
        target = introspect(ArrayCollection)
        expect([p.name for p in _method(target, "get").parameters]) == ["index", "default"]
        expect([p.name for p in _method(target, "from_iterable").parameters]) == ["values"]

    def records_parameter_kinds(expect):
        target = introspect(ArrayCollection)
        kinds = [p.kind for p in _method(target, "slice").parameters]
        expect(kinds) == [
            ParameterKind.POSITIONAL_ONLY,
            ParameterKind.POSITIONAL_OR_KEYWORD,
            ParameterKind.KEYWORD_ONLY,
        ]
        extend = _method(target, "extend").parameters[0]
        expect(extend.kind) == ParameterKind.VAR_POSITIONAL
        expect(extend.variadic) == True

    def records_defaults(expect):
        pop = _method(introspect(ArrayCollection), "pop")
        expect(pop.parameters[0].has_default) == True
        expect(pop.parameters[0].default) == -1
        expect(pop.parameters[1].default is sample_collections._MISSING) == True

    def leaves_untyped_parameters_untyped(expect):
        to_list = _method(introspect(ArrayCollection), "to_list")
        expect(to_list.return_type) == None


def describe_builtin_bases():
    def forwards_methods_without_text_signature(expect, monkeypatch):
        def no_signature(obj):
            raise ValueError(f"no signature found for {obj!r}")

        monkeypatch.setattr(inspect, "signature", no_signature)
        method = introspect_method(list, "__getitem__", list.__getitem__)
        expect([p.kind for p in method.parameters]) == [
            ParameterKind.VAR_POSITIONAL,
            ParameterKind.VAR_KEYWORD,
        ]
        expect(method.return_type) == None
        expect(method.declaring) == NamedType("list", builtin=True)

    def rejects_python_functions_without_signature(expect, monkeypatch):
        def no_signature(obj):
            raise ValueError(f"no signature found for {obj!r}")

        monkeypatch.setattr(inspect, "signature", no_signature)
        with pytest.raises(IntrospectionError):
            introspect_method(ArrayCollection, "add", ArrayCollection.add)

    def treats_builtin_class_methods_as_static(expect):
        fromkeys = _method(introspect(sample_collections.DictBackedCollection), "fromkeys")
        expect(fromkeys.is_static) == True
        expect(skip_reason(fromkeys)) == "static"

    def lists_inherited_list_methods(expect):
        target = introspect(sample_collections.ListBackedCollection)
        names = [m.name for m in target.methods]
        expect(names[0]) == "first"
        expect("__getitem__" in names) == True
        expect("append" in names) == True
        expect(_method(target, "append").declaring) == NamedType("list", builtin=True)


def describe_string_annotations():
    def resolves_nullable_type_variable(expect):
        add = _method(introspect(ArrayCollection), "add")
        expect(add.parameters[0].type) == NamedType(
            "T", module="sample_collections", nullable=True
        )
        expect(add.return_type) == NamedType("bool", builtin=True)

    def resolves_typing_self_as_static(expect):
        expect(_method(introspect(ArrayCollection), "filter").return_type) == NamedType("static")

    def keeps_relative_pseudo_types(expect):
        target = introspect(SortedCollection)
        expect(_method(target, "copy").return_type) == NamedType("self")
        expect(_method(target, "widen").return_type) == NamedType("parent")

    def resolves_generics(expect):
        mapped = _method(introspect(ArrayCollection), "map")
        func = mapped.parameters[0].type
        expect(isinstance(func, GenericType)) == True
        expect(func.origin) == NamedType("Callable", module="collections.abc")
        expect(func.arguments[0]) == TypeList((NamedType("T", module="sample_collections"),))

    def resolves_literals(expect):
        mode = _method(introspect(ArrayCollection), "mode").return_type
        expect(mode.origin) == NamedType("Literal", module="typing")
        expect([a.value for a in mode.arguments]) == ["list", "set"]

    def keeps_unknown_names_unresolved(expect):
        add = _method(introspect(sample_collections.BrokenParameterCollection), "add")
        expect(add.parameters[0].type) == NamedType("Unknown")

    def parses_intersections(expect):
        merge = _method(introspect(sample_collections.IntersectionCollection), "merge")
        expect(isinstance(merge.parameters[0].type, IntersectionType)) == True


def describe_evaluated_annotations():
    def converts_optional(expect):
        add = _method(introspect(sample_typed.TypedCollection), "add")
        expect(add.parameters[0].type) == NamedType("int", builtin=True, nullable=True)

    def converts_union_with_none(expect):
        put = _method(introspect(sample_typed.TypedCollection), "put")
        expect(isinstance(put.parameters[0].type, UnionType)) == True
        expect(len(put.parameters[0].type.members)) == 3

    def converts_forward_references(expect):
        put = _method(introspect(sample_typed.TypedCollection), "put")
        expect(put.parameters[1].type) == NamedType("TypedCollection", module="sample_typed")

    def converts_nested_generics(expect):
        items = _method(introspect(sample_typed.TypedCollection), "items").return_type
        expect(items.origin) == NamedType("list", builtin=True)
        expect(items.arguments[0].origin) == NamedType("tuple", builtin=True)
