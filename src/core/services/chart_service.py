import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.config_loader import config_loader
from core.models.channel import AXES, CHANNEL_CATALOG, AxisConfig, ChannelDefinition, ChannelSeries, SensorBundle
from core.models.window import WindowScale, resolve_window
from core.processing.channel_transformer import transform_sensors, transform_series
from core.processing.window_filter import filter_window
from core.services.sensor_registry import SensorRegistry, sensor_registry
from core.services.visibility_controller import VisibilityController, visibility_controller

logger = logging.getLogger(__name__)

DETAIL_SCALE = WindowScale.FULL
OVERVIEW_SCALE = WindowScale.COMPACT


@dataclass
class ChartPayload:
    sensor_id: Optional[str]
    window: int
    window_seconds: int
    now: float
    has_data: bool
    channels: List[ChannelSeries]
    axes: Dict[str, AxisConfig] = field(default_factory=lambda: dict(AXES))


@dataclass
class OverviewPayload:
    window: int
    window_seconds: int
    now: float
    sensors: List[SensorBundle]
    axes: Dict[str, AxisConfig] = field(default_factory=lambda: dict(AXES))


class ChartService:
    """
    Builds renderer-ready chart payloads:
    registry series -> window filter -> channel datasets -> group visibility.
    """

    def __init__(
        self,
        registry: SensorRegistry,
        visibility: VisibilityController,
        detail_window: int = 0,
        overview_window: int = 1,
        catalog: Tuple[ChannelDefinition, ...] = CHANNEL_CATALOG,
    ):
        self.registry = registry
        self.visibility = visibility
        self.catalog = catalog
        self.detail_window = 0
        self.overview_window = 0
        self.set_detail_window(detail_window)
        self.set_overview_window(overview_window)

    def set_detail_window(self, ordinal: int):
        resolve_window(ordinal, DETAIL_SCALE)
        self.detail_window = ordinal

    def set_overview_window(self, ordinal: int):
        resolve_window(ordinal, OVERVIEW_SCALE)
        self.overview_window = ordinal

    def build_chart(self, now: float, window: Optional[int] = None) -> ChartPayload:
        """Chart of the selected sensor. No selection or no data yields has_data=False."""
        ordinal = self.detail_window if window is None else window
        seconds = resolve_window(ordinal, DETAIL_SCALE).value_seconds()
        sensor_id = self.registry.selected()
        series = filter_window(self.registry.series_for(sensor_id), seconds, now)
        channels = self.visibility.apply_visibility(transform_series(series, self.catalog))
        return ChartPayload(
            sensor_id=sensor_id,
            window=ordinal,
            window_seconds=seconds,
            now=now,
            has_data=len(series) > 0,
            channels=channels,
        )

    def build_overview(self, now: float, window: Optional[int] = None) -> OverviewPayload:
        """One bundle per known sensor, including sensors without data in the window."""
        ordinal = self.overview_window if window is None else window
        seconds = resolve_window(ordinal, OVERVIEW_SCALE).value_seconds()
        filtered = {
            sensor_id: filter_window(series, seconds, now)
            for sensor_id, series in self.registry.all_series().items()
        }
        bundles = []
        for bundle in transform_sensors(filtered, self.catalog):
            channels = tuple(self.visibility.apply_visibility(bundle.channels))
            bundles.append(SensorBundle(bundle.sensor_id, bundle.has_data, channels))
        return OverviewPayload(window=ordinal, window_seconds=seconds, now=now, sensors=bundles)


_chart_config = config_loader.get_chart_config()
chart_service = ChartService(
    sensor_registry,
    visibility_controller,
    detail_window=_chart_config.detail_window,
    overview_window=_chart_config.overview_window,
)
