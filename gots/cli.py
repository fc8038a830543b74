"""Command line entry point: JSON package dumps in, TypeScript out."""

from __future__ import annotations

import logging
import sys

from . import middleend
from .config import DEFAULT_MUTATIONS, MUTATIONS, resolve_mutations, standard_mappings
from .errors import GotsError
from .frontend.parser import GoParser
from .loader import load_files

USAGE: str = """\
gots [OPTIONS] INPUT... [-o OUTPUT]

Convert Go package dumps (JSON) into TypeScript declarations.

Options:
  --mutations LIST     Comma separated mutations to apply, in order.
                       Default: enum-as-types,enum-lists,export,readonly,
                       not-null-maps,null-union-slices,missing-references-to-any
                       Use "" to apply none.
  --reference FILE     Dump of packages to emit only where referenced
                       (repeatable)
  --prefix PREFIX      Prefix for declarations of reference packages
  --exclude TYPE       Never generate TYPE, e.g. github.com/acme/api.Secret
                       (repeatable)
  -o, --output FILE    Write output to FILE instead of stdout
  -v, --verbose        Log debug messages
  -q, --quiet          Log errors only
  --help               Show this help message
"""


class Options:
    def __init__(self) -> None:
        self.inputs: list[str] = []
        self.references: list[str] = []
        self.prefix: str = ""
        self.excluded: list[str] = []
        self.mutations: list[str] = list(DEFAULT_MUTATIONS)
        self.output_file: str | None = None
        self.log_level: int = logging.WARNING


def _value(args: list[str], i: int) -> str:
    if i + 1 >= len(args):
        print("error: " + args[i] + " requires an argument", file=sys.stderr)
        sys.exit(2)
    return args[i + 1]


def parse_args(args: list[str] | None = None) -> Options:
    """Parse command-line arguments. Exits with status 2 on misuse."""
    if args is None:
        args = sys.argv[1:]
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg == "--mutations":
            value = _value(args, i)
            opts.mutations = [m.strip() for m in value.split(",") if m.strip() != ""]
            i += 2
        elif arg == "--reference":
            opts.references.append(_value(args, i))
            i += 2
        elif arg == "--prefix":
            opts.prefix = _value(args, i)
            i += 2
        elif arg == "--exclude":
            opts.excluded.append(_value(args, i))
            i += 2
        elif arg == "-o" or arg == "--output":
            opts.output_file = _value(args, i)
            i += 2
        elif arg == "-v" or arg == "--verbose":
            opts.log_level = logging.DEBUG
            i += 1
        elif arg == "-q" or arg == "--quiet":
            opts.log_level = logging.ERROR
            i += 1
        elif arg.startswith("-"):
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            sys.exit(2)
        else:
            opts.inputs.append(arg)
            i += 1
    if len(opts.inputs) == 0:
        print("error: no input provided", file=sys.stderr)
        sys.exit(2)
    for name in opts.mutations:
        if name not in MUTATIONS:
            print("error: unknown mutation '" + name + "'", file=sys.stderr)
            sys.exit(2)
    return opts


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w") as f:
                f.write(output)
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    sys.stdout.write(output)
    return 0


def run(opts: Options) -> str:
    """Load, convert, mutate, and serialize. Raises GotsError."""
    loaded = load_files(opts.inputs + opts.references)
    parser = GoParser()
    parser.include_custom_declaration(standard_mappings())
    parser.exclude_custom(*opts.excluded)
    for pkgs in loaded[: len(opts.inputs)]:
        parser.include_generate(pkgs)
    for pkgs in loaded[len(opts.inputs) :]:
        parser.include_reference(pkgs, prefix=opts.prefix)
    ts = parser.to_typescript()
    mutations = resolve_mutations(opts.mutations)
    middleend.check_order(mutations)
    ts.apply_mutations(*mutations)
    return ts.serialize()


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    opts = parse_args(args)
    logging.basicConfig(level=opts.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        output = run(opts)
    except GotsError as e:
        print("error: " + str(e), file=sys.stderr)
        return 1
    return write_output(output, opts.output_file)


if __name__ == "__main__":
    sys.exit(main())
