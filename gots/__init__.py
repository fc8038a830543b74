"""gots: Go type declarations to TypeScript.

    parser = GoParser()
    parser.include_generate(load_file("api.json"))
    ts = parser.to_typescript()
    ts.apply_mutations(middleend.enum_as_types, middleend.export_types)
    print(ts.serialize())
"""

from .errors import (
    AlreadySerializedError,
    CircularGenerationError,
    DuplicateNodeError,
    DuplicateObjectError,
    DuplicatePackageError,
    EnumUpgradeError,
    ExpressionParseError,
    GenerationError,
    GenericCollisionError,
    GotsError,
    LoadError,
    RenderError,
    StructTagError,
    UnknownDeclarationError,
    UnsupportedTypeError,
)
from .frontend.parser import GoParser
from .loader import load_file, load_files, load_packages
from .typescript import Typescript

__all__ = [
    "AlreadySerializedError",
    "CircularGenerationError",
    "DuplicateNodeError",
    "DuplicateObjectError",
    "DuplicatePackageError",
    "EnumUpgradeError",
    "ExpressionParseError",
    "GenerationError",
    "GenericCollisionError",
    "GoParser",
    "GotsError",
    "LoadError",
    "RenderError",
    "StructTagError",
    "Typescript",
    "UnknownDeclarationError",
    "UnsupportedTypeError",
    "load_file",
    "load_files",
    "load_packages",
]
