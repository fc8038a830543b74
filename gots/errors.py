"""Errors raised while converting, mutating, or serializing the declaration graph.

Every error here is fatal for the run. Recoverable conditions (dangling
references, package diagnostics, enum list collisions) are logged and the
affected node degrades instead.
"""

from __future__ import annotations


class GotsError(Exception):
    """Base for all gots errors."""


class GenerationError(GotsError):
    """A fatal error wrapped with the declaration that caused it."""

    def __init__(self, key: str, cause: Exception, action: str = "generate") -> None:
        self.key: str = key
        self.cause: Exception = cause
        self.action: str = action
        super().__init__(action + " " + repr(key) + ": " + str(cause))


class UnsupportedTypeError(GotsError):
    """A Go type shape the mapper does not handle."""


class StructTagError(GotsError):
    """A struct tag that does not follow `key:"value"` syntax."""

    def __init__(self, tag: str, reason: str) -> None:
        self.tag: str = tag
        self.reason: str = reason
        super().__init__("invalid struct tag " + repr(tag) + ": " + reason)


class DuplicateNodeError(GotsError):
    def __init__(self, key: str) -> None:
        self.key: str = key
        super().__init__("node " + repr(key) + " already exists")


class GenericCollisionError(GotsError):
    """Two generic parameters share a name but not a constraint."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(
            "generic parameter "
            + repr(name)
            + " is declared twice with different constraints"
        )


class CircularGenerationError(GotsError):
    def __init__(self, package: str, key: str) -> None:
        self.package: str = package
        self.key: str = key
        super().__init__(
            "circular generation detected for "
            + package
            + "."
            + key
            + ", infinite loop will not end"
        )


class AlreadySerializedError(GotsError):
    def __init__(self) -> None:
        super().__init__(
            "already serialized, create a new Typescript object to serialize again"
        )


class EnumUpgradeError(GotsError):
    """An enum upgrade was applied to a node that is not an alias or enum."""


class UnknownDeclarationError(GotsError):
    """An exhaustive mutation pass met a declaration kind it does not cover."""

    def __init__(self, pass_name: str, node: object) -> None:
        self.pass_name: str = pass_name
        super().__init__(
            pass_name + ": unexpected node type " + type(node).__name__
        )


class RenderError(GotsError):
    """The printer could not render a node."""


class ExpressionParseError(GotsError):
    """A Go type expression string could not be parsed."""

    def __init__(self, msg: str, expr: str, pos: int) -> None:
        self.msg: str = msg
        self.expr: str = expr
        self.pos: int = pos
        super().__init__(msg + " at offset " + str(pos) + " in " + repr(expr))


class DuplicatePackageError(GotsError):
    def __init__(self, path: str) -> None:
        self.path: str = path
        super().__init__("package " + path + " already exists")


class LoadError(GotsError):
    """A package dump could not be read into the source model."""


class DuplicateObjectError(GotsError):
    """Two package-level objects share a name."""

    def __init__(self, package: str, name: str) -> None:
        self.package: str = package
        self.name: str = name
        super().__init__(name + " redeclared in package " + package)
