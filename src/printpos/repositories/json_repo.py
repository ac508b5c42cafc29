from __future__ import annotations

import logging
import os
from pathlib import Path

from printpos.domain.catalog import initial_state
from printpos.domain.errors import ImportFormatError, PersistenceError
from printpos.domain.models import AppState
from printpos.repositories.codec import dumps_state, loads_state

log = logging.getLogger(__name__)


class JsonStateRepository:
    """Whole-snapshot persistence: one JSON document under one storage key."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> AppState:
        seed = initial_state()
        if not self.path.exists():
            return seed
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            log.error("state_read_failed path=%s error=%s", self.path, e)
            return seed
        except UnicodeDecodeError as e:
            log.warning("state_unreadable path=%s error=%s using_seed=1", self.path, e)
            return seed
        if not text.strip():
            return seed
        try:
            return loads_state(text, fallback=seed)
        except ImportFormatError as e:
            log.warning("state_unreadable path=%s error=%s using_seed=1", self.path, e)
            return seed

    def save(self, state: AppState) -> None:
        try:
            payload = dumps_state(state)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Could not serialize data: {e}") from e

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Could not save data: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not remove saved data: {e}") from e
