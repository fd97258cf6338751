"""
Key-value storage for sensor settings
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SensorStorage:
    """Per-device settings store, persisted as JSON when a path is given"""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._devices: Dict[str, Dict[str, Any]] = {}
        if path and os.path.exists(path):
            self._load()

    def _load(self) -> None:
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            self._devices = {
                native_id: {
                    "name": record.get("name"),
                    "settings": dict(record.get("settings") or {}),
                }
                for native_id, record in data.get("devices", {}).items()
            }
            logger.info(f"Loaded {len(self._devices)} sensors from {self.path}")
        except Exception as e:
            logger.error(f"Error loading sensor storage: {e}")
            raise

    def _save(self) -> None:
        if not self.path:
            return
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump({"devices": self._devices}, f, indent=2)
        os.replace(tmp_path, self.path)

    def add_device(self, native_id: str, name: str) -> None:
        """Create (or rename) a device record"""
        record = self._devices.setdefault(native_id, {"name": name, "settings": {}})
        record["name"] = name
        self._save()

    def remove_device(self, native_id: str) -> bool:
        """Delete a device record and its settings"""
        if self._devices.pop(native_id, None) is None:
            return False
        self._save()
        return True

    def has_device(self, native_id: str) -> bool:
        return native_id in self._devices

    def devices(self) -> Dict[str, str]:
        """Map of native ID to device name"""
        return {native_id: record["name"] for native_id, record in self._devices.items()}

    def get_name(self, native_id: str) -> Optional[str]:
        record = self._devices.get(native_id)
        return record["name"] if record else None

    def get_item(self, native_id: str, key: str) -> Optional[str]:
        record = self._devices.get(native_id)
        if not record:
            return None
        return record["settings"].get(key)

    def set_item(self, native_id: str, key: str, value: Optional[str]) -> None:
        """Store a setting; None removes it"""
        if value is None:
            self.remove_item(native_id, key)
            return
        record = self._devices.setdefault(native_id, {"name": native_id, "settings": {}})
        record["settings"][key] = str(value)
        self._save()

    def remove_item(self, native_id: str, key: str) -> None:
        record = self._devices.get(native_id)
        if record and record["settings"].pop(key, None) is not None:
            self._save()

