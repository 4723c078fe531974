"""
Session token storage.

Keeps the single opaque session token in a JSON key-value file so it
survives process restarts.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Dict

from ..config import StorageConfig

logger = logging.getLogger(__name__)


class TokenStore:
    """
    Durable single-slot store for the session token.

    Values live in an in-memory cache loaded at construction and are
    written through to disk on every change. Writing replaces the slot;
    set(None) deletes it.
    """

    def __init__(self, file_path: Optional[Path] = None, key: Optional[str] = None):
        """
        Initialize token store.

        Args:
            file_path: Path to the JSON file (default: data/.rustour_session.json)
            key: Key the token is stored under (default: jwtToken)
        """
        defaults = StorageConfig()
        self.file_path = Path(file_path) if file_path else defaults.token_file
        self.key = key or defaults.token_key
        self._lock = threading.Lock()
        self._values: Dict[str, str] = {}
        self._load()

    @classmethod
    def from_config(cls, config: StorageConfig) -> "TokenStore":
        return cls(file_path=config.token_file, key=config.token_key)

    @property
    def path(self) -> Path:
        return self.file_path

    def _load(self):
        """Load stored values from file."""
        try:
            if self.file_path.exists():
                data = json.loads(self.file_path.read_text())
                if not isinstance(data, dict):
                    raise ValueError("token file does not hold a JSON object")
                self._values = {k: v for k, v in data.items() if isinstance(v, str)}
                logger.debug(f"Loaded token store from {self.file_path}")
        except Exception as e:
            logger.warning(f"Could not load token store: {e}")
            self._values = {}

    def _save(self):
        """Save stored values to file, replacing it atomically."""
        temp_path = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".tmp", delete=False
            ) as f:
                temp_path = Path(f.name)
                json.dump(self._values, f, indent=2)
            os.replace(temp_path, self.file_path)
            temp_path = None
            logger.debug("Token store saved")
        except OSError as e:
            logger.warning(f"Could not save token store: {e}")
        finally:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)

    def get(self) -> Optional[str]:
        """Get the stored token, if any."""
        with self._lock:
            return self._values.get(self.key)

    def set(self, token: Optional[str]):
        """Replace the stored token, or delete it when token is None."""
        with self._lock:
            if token is None:
                if self.key not in self._values:
                    return
                del self._values[self.key]
            else:
                self._values[self.key] = token
            self._save()

    def clear(self):
        """Delete the stored token."""
        self.set(None)
