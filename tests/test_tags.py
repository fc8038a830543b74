"""Struct tag parsing."""

import pytest

from gots.errors import StructTagError
from gots.frontend.tags import parse_tags


def test_json_name_and_options():
    tags = parse_tags('json:"name,omitempty,string" db:"user_name"')
    json = tags.get("json")
    assert json.name == "name"
    assert json.options == ["omitempty", "string"]
    assert json.has_option("omitempty")
    assert not json.has_option("omitzero")
    assert tags.get("db").name == "user_name"
    assert tags.keys() == ["json", "db"]


def test_missing_key():
    assert parse_tags('json:"x"').get("typescript") is None
    assert parse_tags("").keys() == []


def test_extra_spaces_and_escapes():
    tags = parse_tags('  json:"a\\"b"   yaml:"c"  ')
    assert tags.get("json").name == 'a"b'
    assert tags.get("yaml").name == "c"


def test_empty_name():
    tag = parse_tags('json:",omitempty"').get("json")
    assert tag.name == ""
    assert tag.options == ["omitempty"]


@pytest.mark.parametrize("raw", ['json"x"', 'json:x', 'json:"unterminated', ':"x"'])
def test_malformed(raw: str):
    with pytest.raises(StructTagError):
        parse_tags(raw)
