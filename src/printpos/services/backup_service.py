from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from printpos.domain.errors import ImportFormatError, NotFoundError
from printpos.domain.models import AppState
from printpos.repositories.codec import dumps_state, loads_state
from printpos.repositories.state_store import StateStore

log = logging.getLogger(__name__)

BACKUP_GLOB = "printshop_backup_*.json"


class BackupService:
    """JSON export/import of the whole snapshot, plus timestamped backup files."""

    def __init__(self, store: StateStore, backup_dir: Path | str, max_backups: int = 30):
        self.store = store
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups

    def export_data(self) -> str:
        return dumps_state(self.store.state, pretty=True)

    def export_to_file(self, path: Path | str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.export_data(), encoding="utf-8")
        log.info("data_exported path=%s", target)
        return target

    def import_data(self, text: str) -> AppState:
        """Replace the snapshot with imported data.

        Fields that are missing or malformed keep their current value; settings
        merge over the current settings. Invalid JSON raises ImportFormatError and
        leaves the snapshot untouched.
        """
        imported = loads_state(text, fallback=self.store.state)
        self.store.replace(imported)
        log.info(
            "data_imported products=%s supplies=%s sales=%s expenses=%s",
            len(imported.products), len(imported.supplies), len(imported.sales), len(imported.expenses),
        )
        return imported

    def import_from_file(self, path: Path | str) -> AppState:
        source = Path(path)
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ImportFormatError(f"Could not read {source}: {e}") from e
        return self.import_data(text)

    def create_backup(self) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = self.backup_dir / f"printshop_backup_{ts}.json"
        target.write_text(self.export_data(), encoding="utf-8")
        self._enforce_retention()
        log.info("backup_created path=%s", target)
        return target

    def list_backups(self) -> list[Path]:
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob(BACKUP_GLOB))

    def restore_latest_backup(self) -> Path:
        files = self.list_backups()
        if not files:
            raise NotFoundError("No backups available to restore")
        latest = files[-1]
        self.import_from_file(latest)
        log.warning("backup_restored latest=%s", latest.name)
        return latest

    def reset_data(self) -> AppState:
        return self.store.reset()

    def _enforce_retention(self) -> None:
        files = self.list_backups()
        if len(files) <= self.max_backups:
            return
        for old in files[: len(files) - self.max_backups]:
            old.unlink(missing_ok=True)
