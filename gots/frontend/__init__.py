"""Frontend package - maps Go packages to the declaration graph."""

from .convert import ParsedType, TypeMapper
from .parser import GoParser, TypeOverride, parse_package_error
from .single import parse_expression, parse_type_expression
