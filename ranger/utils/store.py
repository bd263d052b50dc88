import threading
from pathlib import Path
from typing import Any, Dict, List
from uuid import uuid4


class InMemoryStore:
    """Generate runs and the output roots currently being written."""

    def __init__(self):
        self.runs: Dict[str, Dict[str, Any]] = {}
        self._claimed: set[Path] = set()
        self._lock = threading.Lock()

    def claim(self, out: Path) -> bool:
        key = Path(out).resolve()
        with self._lock:
            if key in self._claimed:
                return False
            self._claimed.add(key)
            return True

    def release(self, out: Path) -> None:
        with self._lock:
            self._claimed.discard(Path(out).resolve())

    def create_run(self, out: Path) -> Dict[str, Any]:
        rid = str(uuid4())
        run = {"id": rid, "out": str(out), "status": "running", "error": None}
        self.runs[rid] = run
        return run

    def finish_run(self, rid: str, error: str | None = None) -> Dict[str, Any]:
        run = self.runs[rid]
        run["status"] = "failed" if error else "ok"
        run["error"] = error
        return run

    def list_runs(self) -> List[Dict[str, Any]]:
        return list(self.runs.values())
