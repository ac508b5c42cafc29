from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


STORAGE_KEY = "printshop_data"


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    state_file: Path
    logs_dir: Path
    backups_dir: Path


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def _default_base(app_name: str) -> Path:
    override = os.environ.get("PRINTPOS_HOME")
    if override:
        return Path(override)
    if sys.platform.startswith("win"):
        return _windows_appdata() / app_name
    if sys.platform == "darwin":
        return _mac_app_support() / app_name
    return Path.home() / f".{app_name.lower()}"


def get_app_paths(app_name: str = "PrintShopPOS", base_dir: Path | str | None = None) -> AppPaths:
    base = Path(base_dir) if base_dir is not None else _default_base(app_name)

    logs = base / "logs"
    backups = base / "backups"
    state = base / f"{STORAGE_KEY}.json"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, state_file=state, logs_dir=logs, backups_dir=backups)
