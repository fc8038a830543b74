"""Struct tag parsing.

A struct tag is a space separated list of `key:"value"` pairs, the value
being a Go quoted string. For `json:"name,omitempty"` the name is `name` and
the options are `["omitempty"]`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import StructTagError


@dataclass
class Tag:
    key: str
    name: str
    options: list[str] = field(default_factory=list)

    def has_option(self, opt: str) -> bool:
        return opt in self.options


class Tags:
    def __init__(self, tags: list[Tag]) -> None:
        self.tags: list[Tag] = tags

    def get(self, key: str) -> Tag | None:
        for tag in self.tags:
            if tag.key == key:
                return tag
        return None

    def keys(self) -> list[str]:
        return [t.key for t in self.tags]


def parse_tags(tag: str) -> Tags:
    """Parse a raw struct tag. Malformed syntax raises StructTagError."""
    tags: list[Tag] = []
    i = 0
    n = len(tag)
    while i < n:
        # Skip leading space.
        while i < n and tag[i] == " ":
            i += 1
        if i >= n:
            break
        start = i
        while i < n and tag[i] > " " and tag[i] != ":" and tag[i] != '"' and tag[i] != "\x7f":
            i += 1
        if i == start:
            raise StructTagError(tag, "bad syntax for struct tag key")
        if i >= n or tag[i] != ":":
            raise StructTagError(tag, "bad syntax for struct tag pair")
        key = tag[start:i]
        i += 1
        if i >= n or tag[i] != '"':
            raise StructTagError(tag, "bad syntax for struct tag value")
        value, i = _scan_quoted(tag, i)
        parts = value.split(",")
        tags.append(Tag(key=key, name=parts[0], options=parts[1:]))
    return Tags(tags)


def _scan_quoted(tag: str, i: int) -> tuple[str, int]:
    """Read a Go quoted string starting at the opening quote. Returns (value, next index)."""
    out: list[str] = []
    i += 1
    n = len(tag)
    while i < n:
        c = tag[i]
        if c == '"':
            return ("".join(out), i + 1)
        if c == "\\":
            if i + 1 >= n:
                break
            esc = tag[i + 1]
            if esc == "n":
                out.append("\n")
            elif esc == "t":
                out.append("\t")
            elif esc == '"' or esc == "\\":
                out.append(esc)
            else:
                raise StructTagError(tag, "bad escape in struct tag value")
            i += 2
            continue
        out.append(c)
        i += 1
    raise StructTagError(tag, "bad syntax for struct tag value")
