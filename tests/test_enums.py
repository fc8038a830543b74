"""Enum assembly from typed constants, and the enum mutation passes."""

import logging

import pytest

from gots.errors import EnumUpgradeError, GenerationError
from gots.frontend.enums import ADD_MEMBER, EnumUpgrade, apply_upgrade, finalize_enums, queue_enum_member
from gots.gotypes import basic
from gots.ir import (
    KEYWORD_STRING,
    Alias,
    Enum,
    EnumMember,
    Identifier,
    Interface,
    LiteralType,
    UnionType,
    keyword,
)
from gots.middleend import enum_as_types, enum_lists, export_types, read_only, trim_enum_prefix
from gots.middleend.enums import literal_union, pluralize
from gots.store import NodeStore
from gots.typescript import Typescript

from helpers import convert, field, named, new_package, render, string_enum, struct


def enum_members(node) -> list[tuple[str, object]]:
    assert isinstance(node, Enum)
    return [(m.name, m.value.value) for m in node.members]


def test_constants_after_type(pkg):
    string_enum(pkg, "EnumString", ("Foo", "foo"), ("Bar", "bar"))
    node = convert(pkg).get_node("EnumString")
    assert enum_members(node) == [("Foo", "foo"), ("Bar", "bar")]


def test_constants_before_type(pkg):
    string_enum(pkg, "EnumString", ("Foo", "foo"), ("Bar", "bar"))
    # Move the type declaration after its constants.
    pkg.objects["EnumString"] = pkg.objects.pop("EnumString")
    assert pkg.names() == ["Foo", "Bar", "EnumString"]
    node = convert(pkg).get_node("EnumString")
    assert enum_members(node) == [("Foo", "foo"), ("Bar", "bar")]


def test_constants_split_around_type(pkg):
    obj = pkg.new_type("Level", basic("int"))
    pkg.new_const("Low", obj.type(), "int", 1)
    pkg.objects["Level"] = pkg.objects.pop("Level")
    pkg.new_const("High", obj.type(), "int", 2)
    assert pkg.names() == ["Low", "Level", "High"]
    assert enum_members(convert(pkg).get_node("Level")) == [("Low", 1), ("High", 2)]


def test_enum_render(pkg):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"), ("AudienceTenant", "tenant"), ("AudienceTeam", "team"))
    assert render(pkg) == (
        "enum Audience {\n"
        '    AudienceWorld = "world",\n'
        '    AudienceTenant = "tenant",\n'
        '    AudienceTeam = "team"\n'
        "}\n\n"
    )


def test_enum_as_types_then_lists(pkg):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"), ("AudienceTenant", "tenant"), ("AudienceTeam", "team"))
    assert render(pkg, mutations=(enum_as_types, enum_lists)) == (
        'type Audience = "world" | "tenant" | "team";\n\n'
        'const Audiences: Audience[] = ["world", "tenant", "team"];\n\n'
    )


def test_enum_lists_exported_and_readonly(pkg):
    string_enum(pkg, "Role", ("RoleAdmin", "admin"), ("RoleMember", "member"))
    out = render(pkg, mutations=(enum_as_types, enum_lists, export_types, read_only))
    assert 'export type Role = "admin" | "member";' in out
    assert 'export const Roles: readonly Role[] = ["admin", "member"];' in out


def test_enum_list_collision(pkg, caplog):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"), ("AudienceTeam", "team"))
    struct(pkg, "Audiences")
    with caplog.at_level(logging.WARNING, logger="gots.middleend.enums"):
        ts = convert(pkg, mutations=(enum_as_types, enum_lists))
    assert isinstance(ts.get_node("Audiences"), Interface)
    assert len(ts.nodes()) == 2
    assert "enum list Audiences for Audience already exists, skipping" in caplog.text


def test_enum_lists_need_enum_as_types_first(pkg):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"))
    ts = convert(pkg, mutations=(enum_lists, enum_as_types))
    assert ts.get_node("Audiences") is None


def test_int_enum_lists(pkg):
    obj = pkg.new_type("Level", basic("int"))
    pkg.new_const("LevelLow", obj.type(), "int", 1)
    pkg.new_const("LevelHigh", obj.type(), "int", 2)
    out = render(pkg, mutations=(enum_as_types, enum_lists))
    assert "type Level = 1 | 2;" in out
    assert "const Levels: Level[] = [1, 2];" in out


def test_mixed_literals_are_not_listed():
    node = Alias(name=Identifier("Mixed"), type=UnionType(types=[LiteralType("a"), LiteralType(1)]))
    assert literal_union(node) is None
    node = Alias(name=Identifier("Mixed"), type=UnionType(types=[LiteralType("a"), keyword(KEYWORD_STRING)]))
    assert literal_union(node) is None


def test_enum_list_values_are_copies(pkg):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"))
    ts = convert(pkg, mutations=(enum_as_types, enum_lists))
    union = ts.get_node("Audience").type
    values = ts.get_node("Audiences").declarations.declarations[0].initializer.elements
    assert values == union.types
    assert values[0] is not union.types[0]


@pytest.mark.parametrize(
    "name,plural",
    [("Role", "Roles"), ("Status", "Statuses"), ("Box", "Boxes"), ("Match", "Matches"), ("Mesh", "Meshes")],
)
def test_pluralize(name: str, plural: str):
    assert pluralize(name) == plural


def test_trim_enum_prefix(pkg):
    string_enum(pkg, "Audience", ("AudienceWorld", "world"), ("AudienceTeam", "team"), ("Other", "other"))
    ts = convert(pkg, mutations=(trim_enum_prefix,))
    assert [m.name for m in ts.get_node("Audience").members] == ["World", "Team", "Other"]


def test_trim_enum_prefix_keeps_whole_name_members():
    ts = Typescript()
    members = [EnumMember("Level", LiteralType(0)), EnumMember("LevelHigh", LiteralType(1))]
    ts.set_node("Level", Enum(name=Identifier("Level"), members=members))
    ts.apply_mutations(trim_enum_prefix)
    assert [m.name for m in ts.get_node("Level").members] == ["Level", "High"]


def test_enum_comments(pkg):
    obj = pkg.new_type("Color", basic("string"), doc=["// Color of a thing."])
    pkg.new_const("ColorRed", obj.type(), "string", "red", doc=["// ColorRed is red."])
    assert render(pkg) == (
        "// Color of a thing.\n"
        "enum Color {\n"
        "    // ColorRed is red.\n"
        '    ColorRed = "red"\n'
        "}\n\n"
    )


def test_reference_package_enum(pkg):
    dep = new_package("example.com/dep")
    color = string_enum(dep, "Color", ("ColorRed", "red"), ("ColorBlue", "blue"))
    string_enum(dep, "Unused", ("UnusedA", "a"))
    struct(pkg, "Paint", field("Color", named(color), 'json:"color"'))
    ts = convert(pkg, references=(dep,))
    assert enum_members(ts.get_node("Color")) == [("ColorRed", "red"), ("ColorBlue", "blue")]
    assert ts.get_node("Unused") is None


def test_enum_of_unloaded_package_is_skipped(pkg):
    dep = new_package("example.com/dep")
    color = dep.new_type("Color", basic("string"))
    pkg.new_const("Red", color.type(), "string", "red")
    ts = convert(pkg)
    assert len(ts.nodes()) == 0


def test_finalize_upgrades_alias():
    store = NodeStore()
    queue_enum_member(store, "Color", EnumMember("Red", LiteralType("red")))
    assert store.get_node("Color") is None
    assert "Color" not in store

    def _set(entry):
        entry.node = Alias(name=Identifier("Color"), type=keyword(KEYWORD_STRING))

    store.update_node("Color", _set)
    queue_enum_member(store, "Color", EnumMember("Blue", LiteralType("blue")))
    finalize_enums(store)
    node = store.get_node("Color")
    assert enum_members(node) == [("Red", "red"), ("Blue", "blue")]
    assert store.entry("Color").pending == []


def test_upgrade_of_wrong_node_fails():
    store = NodeStore()
    store.set_node("Thing", Interface(name=Identifier("Thing")))
    queue_enum_member(store, "Thing", EnumMember("A", LiteralType("a")))
    with pytest.raises(GenerationError, match="node 'Thing': apply mutation 0: expected enum, got Interface"):
        finalize_enums(store)


def test_upgrade_without_declaration_fails():
    store = NodeStore()
    queue_enum_member(store, "Ghost", EnumMember("A", LiteralType("a")))
    with pytest.raises(GenerationError, match="no declaration"):
        finalize_enums(store)


def test_apply_upgrade_appends():
    enum = Enum(name=Identifier("E"), members=[EnumMember("A", LiteralType("a"))])
    out = apply_upgrade(enum, EnumUpgrade(kind=ADD_MEMBER, member=EnumMember("B", LiteralType("b"))))
    assert out is enum
    assert [m.name for m in enum.members] == ["A", "B"]


def test_no_members_after_finalize():
    store = NodeStore()
    finalize_enums(store)
    with pytest.raises(EnumUpgradeError, match="enums are finalized, cannot add member 'Red' to 'Late'"):
        queue_enum_member(store, "Late", EnumMember("Red", LiteralType("red")))
    assert store.entry("Late") is None


def test_finalize_runs_once():
    store = NodeStore()
    finalize_enums(store)
    with pytest.raises(EnumUpgradeError, match="already finalized"):
        finalize_enums(store)


def test_parser_context_is_finalized(pkg):
    string_enum(pkg, "Color", ("ColorRed", "red"))
    ts = convert(pkg)
    assert ts.store.finalized
    with pytest.raises(EnumUpgradeError):
        queue_enum_member(ts.store, "Color", EnumMember("ColorBlue", LiteralType("blue")))
    assert [m.name for m in ts.get_node("Color").members] == ["ColorRed"]
