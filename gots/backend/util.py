"""Shared utilities for the TypeScript printer."""

from __future__ import annotations

import re

# Identifiers that can be written as a bare property name.
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def escape_string(value: str) -> str:
    """Escape a string for use in a string literal (without quotes)."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\f", "\\f")
        .replace("\v", "\\v")
        .replace("\x00", "\\x00")
        .replace("\x7f", "\\u007f")
    )


def string_literal(value: str) -> str:
    return '"' + escape_string(value) + '"'


def property_name(name: str) -> str:
    """Field names like `-` or `user-id` must be quoted."""
    if _IDENTIFIER_RE.match(name):
        return name
    return string_literal(name)


class Emitter:
    """Base class for code emitters with indentation tracking."""

    def __init__(self, indent_str: str = "    ") -> None:
        self.indent: int = 0
        self.lines: list[str] = []
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Emit a line with current indentation."""
        if text:
            self.lines.append(self._indent_str * self.indent + text)
        else:
            self.lines.append("")

    def append(self, text: str) -> None:
        """Append text to the last emitted line."""
        if len(self.lines) == 0:
            self.lines.append(text)
            return
        self.lines[-1] += text

    def output(self) -> str:
        """Return the accumulated output as a string."""
        return "\n".join(self.lines)
