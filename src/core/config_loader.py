import json
import logging
from pathlib import Path
from typing import List

from core.models.config_data import chartConfigData, configData, emulationConfigData
from core.models.window import WindowScale, resolve_window

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


class ConfigLoader:
    """Loads and manages application configuration from JSON file."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._config = configData()
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = self._get_default_config()
            self.load_config()
            self._initialized = True

    @staticmethod
    def get_config_path() -> Path:
        """Get the path to the app_config.json file."""
        return PROJECT_ROOT / "config" / "app_config.json"

    def load_config(self):
        """Load configuration from JSON file."""
        config_path = self.get_config_path()

        # Start from defaults so that missing keys keep their default value
        self._config = self._get_default_config()

        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r') as f:
                json_data = json.load(f)

            chart_cfg = json_data.get("chart", {})
            defaults = chartConfigData()
            chart = chartConfigData(
                refresh_interval_seconds=float(chart_cfg.get("refresh_interval_seconds", defaults.refresh_interval_seconds)),
                detail_window=int(chart_cfg.get("detail_window", defaults.detail_window)),
                overview_window=int(chart_cfg.get("overview_window", defaults.overview_window)),
            )
            self._check_window(chart.detail_window, WindowScale.FULL)
            self._check_window(chart.overview_window, WindowScale.COMPACT)

            emulator_cfg = json_data.get("emulator", {})
            emulator_defaults = emulationConfigData()
            emulator = emulationConfigData(
                interval_seconds=float(emulator_cfg.get("interval_seconds", emulator_defaults.interval_seconds)),
                retention_seconds=int(emulator_cfg.get("retention_seconds", emulator_defaults.retention_seconds)),
                sensors=[str(s) for s in emulator_cfg.get("sensors", emulator_defaults.sensors)],
            )

            self._config = configData(
                emulation=bool(json_data.get("emulation", True)),
                selection_store=str(json_data.get("selection_store", configData.selection_store)),
                chart=chart,
                emulator=emulator,
            )
            logger.info(f"Configuration loaded from {config_path}")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse configuration file: {e}")
            self._config = self._get_default_config()

        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Invalid configuration file: {e}")
            self._config = self._get_default_config()

    @staticmethod
    def _check_window(ordinal: int, scale: WindowScale):
        # Raises ValueError for an ordinal outside the scale
        resolve_window(ordinal, scale)

    @staticmethod
    def _get_default_config() -> configData:
        """Return default configuration."""
        return configData()

    def get_emulation_mode(self) -> bool:
        """Get the emulation mode setting."""
        return self._config.emulation

    def get_selection_store_path(self) -> Path:
        """Selection store path, relative paths resolved from the project root."""
        path = Path(self._config.selection_store)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path

    def get_chart_config(self) -> chartConfigData:
        return self._config.chart

    def get_emulator_config(self) -> emulationConfigData:
        return self._config.emulator

    def get_emulated_sensors(self) -> List[str]:
        return list(self._config.emulator.sensors)

    def reload_config(self):
        """Reload configuration from file."""
        self.load_config()
        logger.info("Configuration reloaded")


# Global singleton instance
config_loader = ConfigLoader()
