"""Reference tracking, reference packages, exclusions and ignore directives."""

import logging

import pytest

from gots.errors import CircularGenerationError, DuplicatePackageError
from gots.frontend.references import ReferencedTypes
from gots.gotypes import Pointer, Struct, basic
from gots.ir import KEYWORD_STRING, KEYWORD_UNKNOWN, ReferenceType, keyword
from gots.middleend import missing_references_to_any

from helpers import convert, field, named, new_package, render, string_enum, struct


def test_tracker_states(pkg):
    rt = ReferencedTypes()
    a = struct(pkg, "A")
    assert not rt.is_referenced(a)
    rt.mark_referenced(a)
    assert rt.is_referenced(a)
    assert not rt.is_generated(a)
    assert rt.pending() == [a]
    rt.mark_generated(a)
    assert rt.is_generated(a)
    assert rt.pending() == []


def test_tracker_sweeps_until_done(pkg):
    rt = ReferencedTypes()
    a = struct(pkg, "A")
    b = struct(pkg, "B")
    rt.mark_referenced(a)
    order = []

    def generate(obj):
        order.append(obj.name)
        if obj is a:
            rt.mark_referenced(b)
        rt.mark_generated(obj)

    rt.remaining(generate)
    assert order == ["A", "B"]
    assert rt.pending() == []


def test_mutual_reference_cycle_is_an_error(pkg):
    rt = ReferencedTypes()
    a = struct(pkg, "A")
    b = struct(pkg, "B")
    rt.mark_referenced(a)

    # Each one only pulls in the other and never finishes itself.
    def generate(obj):
        rt.mark_referenced(b if obj is a else a)

    with pytest.raises(CircularGenerationError, match="circular generation detected for example.com/api."):
        rt.remaining(generate)


def test_mutual_references_across_packages_terminate(pkg):
    dep = new_package("example.com/dep")
    a = dep.new_type("A")
    b = dep.new_type("B")
    named(a).under = Struct([field("B", Pointer(named(b)), 'json:"b"')])
    named(b).under = Struct([field("A", Pointer(named(a)), 'json:"a"')])
    struct(pkg, "Root", field("A", named(a), 'json:"a"'))
    ts = convert(pkg, references=(dep,))
    assert sorted(ts.nodes()) == ["A", "B", "Root"]


def test_reference_package_only_emits_used_types(pkg, caplog):
    dep = new_package("example.com/dep")
    inner = struct(dep, "Inner", field("X", basic("int"), 'json:"x"'))
    struct(dep, "Unused", field("Y", basic("int"), 'json:"y"'))
    struct(pkg, "Outer", field("In", named(inner), 'json:"in"'))
    with caplog.at_level(logging.INFO, logger="gots.frontend.convert"):
        ts = convert(pkg, references=(dep,))
    assert sorted(ts.nodes()) == ["Inner", "Outer"]
    assert "found external type Inner in example.com/dep" in caplog.text


def test_reference_types_pull_in_their_references(pkg):
    dep = new_package("example.com/dep")
    leaf = struct(dep, "Leaf", field("V", basic("string"), 'json:"v"'))
    mid = struct(dep, "Mid", field("Leaf", named(leaf), 'json:"leaf"'))
    struct(pkg, "Top", field("Mid", named(mid), 'json:"mid"'))
    assert sorted(convert(pkg, references=(dep,)).nodes()) == ["Leaf", "Mid", "Top"]


def test_generated_package_types_appear_once(pkg):
    dep = new_package("example.com/dep")
    shared = struct(dep, "Shared", field("V", basic("string"), 'json:"v"'))
    struct(pkg, "One", field("S", named(shared), 'json:"s"'))
    struct(pkg, "Two", field("S", named(shared), 'json:"s"'))
    # Both packages generated: Shared is referenced before its own package runs.
    ts = convert(pkg, dep)
    assert sorted(ts.nodes()) == ["One", "Shared", "Two"]


def test_unloaded_struct_is_unknown(pkg):
    ext = new_package("example.com/ext")
    thing = struct(ext, "Thing")
    struct(pkg, "Holder", field("T", named(thing), 'json:"t"'))
    prop = convert(pkg).get_node("Holder").fields[0]
    assert prop.type == keyword(KEYWORD_UNKNOWN)
    assert prop.comments[0].text == (
        ' external type "example.com/ext.Thing", to include this type the package'
        " must be explicitly included in the parsing"
    )


def test_unloaded_named_basic_is_inlined(pkg):
    ext = new_package("example.com/ext")
    kind = ext.new_type("Kind", basic("string"))
    struct(pkg, "Holder", field("K", named(kind), 'json:"k"'))
    prop = convert(pkg).get_node("Holder").fields[0]
    assert prop.type == keyword(KEYWORD_STRING)
    assert prop.comments[0].text == ' this is likely an enum in an external package "example.com/ext.Kind"'


def test_exclude_custom(pkg, parser):
    secret = struct(pkg, "Secret", field("Key", basic("string"), 'json:"key"'))
    struct(pkg, "User", field("Secret", named(secret), 'json:"secret"'))
    parser.exclude_custom("example.com/api.Secret")
    ts = convert(pkg, parser=parser)
    assert ts.get_node("Secret") is None
    ref = ts.get_node("User").fields[0].type
    assert isinstance(ref, ReferenceType)
    assert ref.name.ref() == "Secret"
    assert not parser.referenced_types.is_referenced(secret)


def test_excluded_reference_becomes_any(pkg, parser):
    secret = struct(pkg, "Secret")
    struct(pkg, "User", field("Secret", named(secret), 'json:"secret"'))
    parser.exclude_custom("example.com/api.Secret")
    out = render(pkg, parser=parser, mutations=(missing_references_to_any,))
    assert out == (
        "interface User {\n"
        "    // Reference to Secret is not generated, falling back to any\n"
        "    secret: any;\n"
        "}\n\n"
    )


def test_ignore_directive(pkg):
    pkg.comments = ["// @typescript-ignore Hidden, AlsoHidden", "// unrelated"]
    struct(pkg, "Hidden")
    struct(pkg, "AlsoHidden")
    struct(pkg, "Shown")
    assert sorted(convert(pkg).nodes()) == ["Shown"]


def test_ignore_directive_with_colon(pkg):
    pkg.comments = ["/* @typescript-ignore: Hidden */"]
    struct(pkg, "Hidden")
    assert len(convert(pkg).nodes()) == 0


def test_duplicate_package(pkg, parser):
    parser.include_generate(pkg)
    with pytest.raises(DuplicatePackageError, match="package example.com/api already exists"):
        parser.include_reference(pkg)


def test_package_errors_are_logged(pkg, parser, caplog):
    pkg.errors = ["user.go:3:2: could not import github.com/acme/missing (no required module)"]
    with caplog.at_level(logging.ERROR, logger="gots.frontend.parser"):
        parser.include_generate(pkg)
    assert "suggest running 'go get github.com/acme/missing'" in caplog.text


def test_regenerating_resets_references(pkg, parser):
    dep = new_package("example.com/dep")
    inner = struct(dep, "Inner")
    struct(pkg, "Outer", field("In", named(inner), 'json:"in"'))
    parser.include_generate(pkg)
    parser.include_reference(dep)
    first = parser.to_typescript()
    second = parser.to_typescript()
    assert sorted(first.nodes()) == sorted(second.nodes()) == ["Inner", "Outer"]


def test_excluded_enum_drops_its_constants(pkg, parser):
    string_enum(pkg, "Role", ("RoleAdmin", "admin"), ("RoleMember", "member"))
    parser.exclude_custom("example.com/api.Role")
    assert len(convert(pkg, parser=parser).nodes()) == 0
