import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class SelectionStore:
    """Persists the last selected sensor id in a small JSON file."""

    KEY = "selected_sensor"

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                value = json.load(f).get(self.KEY)
        except (OSError, json.JSONDecodeError, AttributeError) as e:
            logger.warning(f"Could not read selection store {self.path}: {e}")
            return None
        return value if isinstance(value, str) else None

    def set(self, sensor_id: str) -> None:
        try:
            os.makedirs(self.path.parent, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w") as f:
                json.dump({self.KEY: sensor_id}, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Could not persist selected sensor {sensor_id}: {e}")
