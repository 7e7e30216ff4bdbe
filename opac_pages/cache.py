# ==============================================
# MemoryCache
# ==============================================
#
# PURPOSE:
#   Process-wide, string-keyed memoization cache. Lives only as
#   long as the process, nothing is written to disk.
#
# USERS:
# ------
#   - schema.SchemaProbe  → "pages:schema_layout"
#   - i18n.I18N           → "i18n:plugin:initialized"
#
# USAGE:
# ------
#   cache = MemoryCache.get_instance()
#   cache.set("key", value)
#   cache.get("key")
#
# ==============================================

import threading
from typing import Any, Dict, Optional


class MemoryCache:
    _instance: Optional["MemoryCache"] = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "MemoryCache":
        """Return the process-wide cache, creating it on first use."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data
