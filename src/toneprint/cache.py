# Key-value caches with a TTL in minutes. Callers use these to avoid
# recomputing analyses; the core never assumes one is present.

import json
import re
import time
from pathlib import Path

from toneprint.console import Print


def _expired(entry, now) -> bool:
    age_minutes = (now - entry["timestamp"]) / 60
    return age_minutes > entry["ttl"]


class MemoryCache:
    def __init__(self, clock=time.time):
        self.clock = clock
        self._entries = {}

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        if _expired(entry, self.clock()):
            self.invalidate(key)
            return None
        return entry["data"]

    def set(self, key, value, ttl_minutes):
        self._entries[key] = {"data": value, "timestamp": self.clock(), "ttl": ttl_minutes}

    def invalidate(self, key):
        self._entries.pop(key, None)

    def clear_all(self):
        self._entries.clear()


class JsonFileCache:
    """One JSON file per key under `directory`."""

    def __init__(self, directory, clock=time.time):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.clock = clock

    def _path(self, key) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def get(self, key):
        path = self._path(key)
        if not path.exists():
            return None

        try:
            with path.open("r", encoding="utf-8") as f:
                entry = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            Print(f"Unreadable cache entry {key} ({e})", "warn")
            self.invalidate(key)
            return None

        now = self.clock()
        if _expired(entry, now):
            Print(f"Cache expired for {key}")
            self.invalidate(key)
            return None

        Print(f"Cache hit for {key} ({(now - entry['timestamp']) / 60:.1f}min old)")
        return entry["data"]

    def set(self, key, value, ttl_minutes):
        entry = {"key": key, "data": value, "timestamp": self.clock(), "ttl": ttl_minutes}
        with self._path(key).open("w", encoding="utf-8") as f:
            json.dump(entry, f, indent=4)

    def invalidate(self, key):
        self._path(key).unlink(missing_ok=True)

    def clear_all(self):
        removed = 0
        for path in self.directory.glob("*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        if removed:
            Print(f"Cleared {removed} cache entries")
        return removed

    def info(self):
        """(key, age in minutes, ttl) for every entry, for debugging."""
        now = self.clock()
        rows = []
        for path in sorted(self.directory.glob("*.json")):
            with path.open("r", encoding="utf-8") as f:
                entry = json.load(f)
            rows.append((entry.get("key", path.stem), round((now - entry["timestamp"]) / 60, 1), entry["ttl"]))
        return rows
