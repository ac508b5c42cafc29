from __future__ import annotations

import time
import uuid


def new_id(prefix: str) -> str:
    """`<PREFIX>_<epoch millis>_<random>`; sortable by creation time within a prefix."""
    return f"{prefix}_{time.time_ns() // 1_000_000}_{uuid.uuid4().hex[:8]}"


def cash_register_id(day: str) -> str:
    return f"CASH_{day}"
