"""Per-shopper string key/value storage, the server-side twin of browser localStorage."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from storefront.config import settings

logger = logging.getLogger(__name__)

_file_locks: dict[str, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _file_locks_guard:
        return _file_locks.setdefault(str(path), threading.Lock())


class LocalStorage:
    """
    String-only key/value store for one shopper.

    Values survive process restarts, so a "reload" of the checkout wizard can
    pick up the last confirmed shipping details.
    """

    def __init__(self, namespace: str, base_dir: Path | None = None):
        self.namespace = namespace
        self._base_dir = Path(base_dir or settings.storage_dir)
        self.path = self._base_dir / f"{namespace}.json"
        self._lock = _lock_for(self.path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable local storage file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)

        # write-to-temp-then-rename keeps the file whole if we die mid-write
        fd, temp_path = tempfile.mkstemp(
            dir=self._base_dir, prefix=f".{self.namespace}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = str(value)
            self._write(data)

    def remove_item(self, *keys: str) -> None:
        with self._lock:
            data = self._read()
            if not any(key in data for key in keys):
                return
            for key in keys:
                data.pop(key, None)
            self._write(data)

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()

    def __contains__(self, key: str) -> bool:
        return self.get_item(key) is not None
