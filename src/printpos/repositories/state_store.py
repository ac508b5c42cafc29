from __future__ import annotations

import logging
from typing import Optional

from printpos.domain.models import AppState
from printpos.repositories.json_repo import JsonStateRepository

log = logging.getLogger(__name__)


class StateStore:
    """Owns the current snapshot.

    `replace` is the only mutation: the new snapshot is written first and becomes
    current only once the write succeeded.
    """

    def __init__(self, repo: JsonStateRepository, state: Optional[AppState] = None):
        self.repo = repo
        self._state = state if state is not None else repo.load()

    @property
    def state(self) -> AppState:
        return self._state

    def replace(self, new_state: AppState) -> AppState:
        self.repo.save(new_state)
        self._state = new_state
        return new_state

    def reload(self) -> AppState:
        self._state = self.repo.load()
        return self._state

    def reset(self) -> AppState:
        self.repo.clear()
        self._state = self.repo.load()
        log.warning("state_reset path=%s", self.repo.path)
        return self._state
