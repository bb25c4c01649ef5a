import logging
from typing import Any, Dict, Iterable, List, Optional

from core.config_loader import config_loader
from core.models.reading import Series
from core.processing.normalizer import normalize_snapshot
from core.services.selection_store import SelectionStore

logger = logging.getLogger(__name__)


class SensorRegistry:
    """
    Known sensor identities, their latest series and the selected sensor.

    Identities are only ever added. The selection is made automatically on the
    first observation (persisted id if it is known, otherwise the
    lexicographically first id) and is never overridden by later feed updates,
    even when the selected id is missing from a later snapshot.
    """

    def __init__(self, store: SelectionStore):
        self.store = store
        self._series: Dict[str, Series] = {}
        self._known: List[str] = []
        self._selected: Optional[str] = None
        self._persisted: Optional[str] = store.get()

    def reset(self, store: Optional[SelectionStore] = None):
        """Forget everything and re-read the persisted selection."""
        if store is not None:
            self.store = store
        self._series = {}
        self._known = []
        self._selected = None
        self._persisted = self.store.get()

    def known(self) -> List[str]:
        return sorted(self._known)

    def selected(self) -> Optional[str]:
        return self._selected

    def observe_identities(self, ids: Iterable[str]) -> Optional[str]:
        """
        Register identities seen in a feed snapshot.

        Returns:
            The newly selected id if this call made the automatic selection,
            otherwise None.
        """
        observed = [str(sensor_id) for sensor_id in ids]
        for sensor_id in observed:
            if sensor_id not in self._known:
                self._known.append(sensor_id)
                logger.info(f"Discovered sensor {sensor_id}")

        if self._selected is not None or not observed:
            return None

        if self._persisted is not None and self._persisted in observed:
            choice = self._persisted
        else:
            choice = sorted(observed)[0]
        self._set_selected(choice)
        logger.info(f"Selected sensor {choice} automatically")
        return choice

    def select(self, sensor_id: str) -> bool:
        """
        Select a sensor. Unknown ids are accepted, they may appear in the feed
        later. Returns True when the selection changed.
        """
        if sensor_id == self._selected:
            return False
        if sensor_id not in self._known:
            logger.info(f"Selecting sensor {sensor_id} before it was seen in the feed")
        self._set_selected(sensor_id)
        logger.info(f"Selected sensor {sensor_id}")
        return True

    def _set_selected(self, sensor_id: str):
        self._selected = sensor_id
        self._persisted = sensor_id
        self.store.set(sensor_id)

    def update_series(self, sensor_id: str, snapshot: Any) -> Series:
        """Rebuild the sensor's series from a full snapshot, replacing the old one."""
        series = normalize_snapshot(snapshot)
        self._series[sensor_id] = series
        if sensor_id not in self._known:
            self._known.append(sensor_id)
        return series

    def series_for(self, sensor_id: Optional[str]) -> Series:
        if sensor_id is None:
            return ()
        return self._series.get(sensor_id, ())

    def all_series(self) -> Dict[str, Series]:
        """Series of every known sensor, empty for sensors without data."""
        return {sensor_id: self._series.get(sensor_id, ()) for sensor_id in self._known}


# Global instance
sensor_registry = SensorRegistry(SelectionStore(config_loader.get_selection_store_path()))
