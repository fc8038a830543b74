"""Reference tracking for on-demand generation.

A generated package may reference types from a package that was only
included by reference. Those types must be generated too, and they can in
turn reference more types, so generation keeps sweeping until nothing new
comes out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..errors import CircularGenerationError
from ..gotypes import Object, type_string

logger = logging.getLogger(__name__)


@dataclass
class ReferencedState:
    generated: bool
    obj: Object


class ReferencedTypes:
    """Per package: type key -> state. A key present means referenced."""

    def __init__(self) -> None:
        self.referenced_types: dict[str, dict[str, ReferencedState]] = {}

    def mark_referenced(self, obj: Object) -> None:
        if self._state(obj) is None:
            self._package(obj)[_key(obj)] = ReferencedState(generated=False, obj=obj)

    def mark_generated(self, obj: Object) -> None:
        self.mark_referenced(obj)
        state = self._state(obj)
        assert state is not None
        state.generated = True

    def is_referenced(self, obj: Object) -> bool:
        return self._state(obj) is not None

    def is_generated(self, obj: Object) -> bool:
        state = self._state(obj)
        if state is None:
            return False
        return state.generated

    def pending(self) -> list[Object]:
        """Referenced but not generated objects."""
        result: list[Object] = []
        for types in self.referenced_types.values():
            for state in types.values():
                if not state.generated:
                    result.append(state.obj)
        return result

    def remaining(self, generate: Callable[[Object], None]) -> None:
        """Call generate for every referenced type until a sweep generates nothing.

        generate is expected to mark the object generated. An object seen
        twice without that happening would loop forever, so it is an error.
        """
        tried: dict[str, set[str]] = {}
        while True:
            generated_something = False
            for pkg, types in list(self.referenced_types.items()):
                pkg_tried = tried.setdefault(pkg, set())
                for key, state in list(types.items()):
                    if state.generated:
                        continue
                    if key in pkg_tried:
                        raise CircularGenerationError(pkg, key)
                    pkg_tried.add(key)
                    logger.debug("generating referenced type %s in %s", key, pkg)
                    generate(state.obj)
                    generated_something = True
            if not generated_something:
                break

    def _package(self, obj: Object) -> dict[str, ReferencedState]:
        return self.referenced_types.setdefault(obj.pkg_path(), {})

    def _state(self, obj: Object) -> ReferencedState | None:
        return self._package(obj).get(_key(obj))


def _key(obj: Object) -> str:
    return type_string(obj.type()) + ":" + obj.id()
