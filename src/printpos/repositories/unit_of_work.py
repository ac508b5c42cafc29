from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from printpos.domain.models import AppState
from printpos.repositories.state_store import StateStore

Transform = Callable[[AppState], AppState]


class UnitOfWork(Protocol):
    state: AppState

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def apply(self, transform: Transform) -> AppState: ...


@dataclass
class SnapshotUnitOfWork:
    """Snapshot transaction for write use-cases.

    Transforms run against a working copy of the current snapshot. On a clean exit
    the final snapshot is committed through the store in a single write; if the
    block raises, nothing is written and the store keeps its previous snapshot.
    """

    store: StateStore
    state: Optional[AppState] = field(default=None)
    _dirty: bool = field(default=False, init=False)

    def __enter__(self) -> "SnapshotUnitOfWork":
        self.state = self.store.state
        self._dirty = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and self._dirty:
            self.store.replace(self.state)
        return None

    def apply(self, transform: Transform) -> AppState:
        self.state = transform(self.state)
        self._dirty = True
        return self.state
