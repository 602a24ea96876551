# src/game/leaderboard.py
"""
Score persistence for the pygame host.

File contract (JSON, UTF-8):
    {"entries": [{"id": str, "name": str, "score": int, "date": int, "mode": str}, ...],
     "best": int}
entries are kept sorted by score (highest first) and capped at MAX_ENTRIES.
`date` is milliseconds since the epoch. A missing or unreadable file reads as empty.
"""
from __future__ import annotations
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.sim.config import GameMode

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50
DEFAULT_PATH = Path.home() / ".gap_runner" / "leaderboard.json"


class Leaderboard:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_PATH

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"entries": [], "best": 0}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unreadable leaderboard at %s (%s); starting fresh", self.path, e)
            return {"entries": [], "best": 0}
        if not isinstance(data, dict):
            logger.warning("Leaderboard at %s has unexpected shape; starting fresh", self.path)
            return {"entries": [], "best": 0}
        entries = data.get("entries", [])
        if not isinstance(entries, list):
            logger.warning("Leaderboard entries at %s are not a list; dropping them", self.path)
            entries = []
        kept = [e for e in entries if isinstance(e, dict) and isinstance(e.get("score"), (int, float))]
        if len(kept) != len(entries):
            logger.warning("Dropped %d malformed leaderboard entries from %s", len(entries) - len(kept), self.path)
        best = data.get("best", 0)
        if not isinstance(best, (int, float)):
            logger.warning("Leaderboard best at %s is %r; recomputing from entries", self.path, best)
            best = max((e["score"] for e in kept), default=0)
        data["entries"] = kept
        data["best"] = int(best)
        return data

    def _store(self, data: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def entries(self) -> List[Dict[str, Any]]:
        return list(self._load()["entries"])

    def best_score(self) -> int:
        return int(self._load()["best"])

    def save_score(self, name: str, score: int, mode: GameMode) -> Dict[str, Any]:
        data = self._load()
        now_ms = int(time.time() * 1000)
        entry = {
            "id": str(now_ms),
            "name": name or "Anonymous",
            "score": int(score),
            "date": now_ms,
            "mode": GameMode(mode).value,
        }
        ranked = sorted(data["entries"] + [entry], key=lambda e: e["score"], reverse=True)
        data["entries"] = ranked[:MAX_ENTRIES]
        if score > int(data["best"]):
            data["best"] = int(score)
        self._store(data)
        logger.info("Saved score %d (%s) to %s", score, entry["mode"], self.path)
        return entry
