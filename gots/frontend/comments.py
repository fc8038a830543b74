"""Go comments to synthetic comments, and the `@typescript-ignore` directive."""

from __future__ import annotations

import re

from ..gotypes import Field, Object, Package
from ..ir import SyntheticComment, leading_comment

# `@typescript-ignore Foo, Bar` or `@typescript-ignore: Foo` anywhere in a comment.
IGNORE_RE = re.compile(r"@typescript-ignore[:]?(?P<ignored_types>.*)")


def normalize_comment_text(text: str) -> str:
    if text.startswith("//"):
        text = text[2:]
    elif text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
    return text


def synthetic_comments(leading: bool, lines: list[str]) -> list[SyntheticComment]:
    return [
        SyntheticComment(
            leading=leading,
            single_line="\n" not in line,
            text=normalize_comment_text(line),
            trailing_new_line=True,
        )
        for line in lines
    ]


def comments_for_object(obj: Object) -> list[SyntheticComment]:
    """Doc comments above the declaration, then the trailing line comment."""
    return synthetic_comments(True, obj.doc) + synthetic_comments(False, obj.comment)


def comments_for_field(f: Field, raised: list[str]) -> list[SyntheticComment]:
    """Field doc, then notes raised while mapping the field type, then the line comment."""
    result = synthetic_comments(True, f.doc)
    result.extend(leading_comment(text) for text in raised)
    result.extend(synthetic_comments(False, f.comment))
    return result


def ignored_types(pkg: Package) -> set[str]:
    """Names listed by `@typescript-ignore` directives in the package's comments."""
    skipped: set[str] = set()
    for line in pkg.comments:
        m = IGNORE_RE.search(line)
        if m is None:
            continue
        listed = m.group("ignored_types")
        if listed.strip() == "":
            continue
        for name in listed.split(","):
            name = name.strip()
            if name.endswith("*/"):
                name = name[:-2].strip()
            if name != "":
                skipped.add(name)
    return skipped
