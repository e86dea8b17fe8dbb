"""
Local file-based key/value store for small pieces of session info.
Uses one JSON file per key, e.g. the last known coordinate.
"""
import json
from datetime import datetime
from typing import Any, Optional
from pathlib import Path

from geoinfo.core.config import settings
from geoinfo.core.logger import logs
import logging

CURRENT_COORD_KEY = "CurrentCoord"


class InfoRepository:
    """Repository for storing key/value info in local JSON files."""

    def __init__(self, base_dir: str | None = None):
        """Initialize local storage directory."""
        self.base_dir = Path(base_dir or settings.INFO_DIR)

        # Create directory if it doesn't exist
        self.base_dir.mkdir(parents=True, exist_ok=True)

        logs.log(logging.INFO, f"Local info repository initialized at {self.base_dir}")

    def _get_info_file(self, key: str) -> Path:
        """Get the file path for a key."""
        # Sanitize key for filename
        safe_key = key.replace(":", "_").replace("/", "_")
        return self.base_dir / f"{safe_key}.json"

    async def get_info(self, key: str) -> Optional[Any]:
        """Retrieve the value stored under key, or None."""
        try:
            info_file = self._get_info_file(key)

            if not info_file.exists():
                return None

            with open(info_file, 'r') as f:
                stored = json.load(f)

            return stored["value"]
        except Exception as e:
            logs.log(logging.ERROR, f"Failed to get info '{key}': {str(e)}")
            return None

    async def set_info(self, key: str, value: Any) -> bool:
        """Store a JSON-serializable value under key."""
        try:
            info_file = self._get_info_file(key)

            stored = {
                "key": key,
                "value": value,
                "updated_at": datetime.now().isoformat()
            }

            with open(info_file, 'w') as f:
                json.dump(stored, f, indent=2)

            return True
        except Exception as e:
            logs.log(logging.ERROR, f"Failed to set info '{key}': {str(e)}")
            return False

    async def remove_info(self, key: str) -> bool:
        """Delete the value stored under key (for testing/reset)."""
        info_file = self._get_info_file(key)
        if not info_file.exists():
            return False
        info_file.unlink()
        return True
