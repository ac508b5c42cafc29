import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def make_store(tmp_path: Path, state=None):
    from printpos.repositories.json_repo import JsonStateRepository
    from printpos.repositories.state_store import StateStore

    return StateStore(JsonStateRepository(tmp_path / "printshop_data.json"), state=state)


class FixedClock:
    def __init__(self, *stamps):
        from datetime import datetime

        self.stamps = [datetime.fromisoformat(s) for s in stamps]
        self.calls = 0

    def __call__(self):
        stamp = self.stamps[min(self.calls, len(self.stamps) - 1)]
        self.calls += 1
        return stamp
