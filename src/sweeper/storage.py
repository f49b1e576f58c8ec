"""
Key-value storage used for settings and statistics.

The core only needs named scalar fields, so any backend offering
get/set/remove will do. Two are provided: an in-memory dict and a
JSON file on disk.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# ============================================================================
# Store Interface
# ============================================================================

class KeyValueStore(ABC):
    """
    Abstract persistent store of named values.

    Absent keys read back as the supplied default.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# ============================================================================
# Implementations
# ============================================================================

class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and embedding."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self.data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store persisted as a single JSON object.

    The whole file is rewritten on every change. A missing file is
    treated as an empty store.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Open a store backed by ``path``.

        Args:
            path: JSON file to read from and write to.
        """
        self.path = Path(path)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(
                    f"Could not parse store {self.path}: {exc}"
                ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Store {self.path} is not a JSON object")
        logger.debug("Loaded %d keys from %s", len(data), self.path)
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()


# ============================================================================
# Value Coercion
# ============================================================================

def to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Read a stored value as int, falling back to ``default``."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def to_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Read a stored value as float, falling back to ``default``."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
