"""Declaration store protocol and an in-memory implementation.

The on-disk format of change declarations is owned by the host. The engine
only needs the pending list, and the host removes declarations once a plan
built from them has been accepted.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from .models import ChangeDeclaration, ReleasePlan


class DeclarationStore(Protocol):
    """Source of pending change declarations."""

    def pending(self) -> list[ChangeDeclaration]: ...

    def remove(self, ids: Iterable[str]) -> None: ...


class MemoryDeclarationStore:
    """Keeps declarations in a dict, in insertion order."""

    def __init__(self, declarations: Iterable[ChangeDeclaration] = ()) -> None:
        self._declarations: dict[str, ChangeDeclaration] = {}
        for decl in declarations:
            self.add(decl)

    def add(self, declaration: ChangeDeclaration) -> None:
        if declaration.id in self._declarations:
            raise ValueError(f"Duplicate declaration id: {declaration.id!r}")
        self._declarations[declaration.id] = declaration

    def pending(self) -> list[ChangeDeclaration]:
        return list(self._declarations.values())

    def remove(self, ids: Iterable[str]) -> None:
        for decl_id in ids:
            self._declarations.pop(decl_id, None)


def consume_plan(store: DeclarationStore, plan: ReleasePlan) -> None:
    """Remove every declaration the accepted plan was computed from."""
    store.remove(plan.declarations)
