"""
Channel catalog: every plotted quantity with its axis, color and toggle group.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from core.models.reading import Reading, SPECTRAL_BANDS

PRIMARY_AXIS = "y"
SECONDARY_AXIS = "y1"
TERTIARY_AXIS = "y2"

BROADBAND_GROUP = "broadband"
SPECTRAL_GROUP = "spectral"

Point = Tuple[datetime, Optional[float]]


@dataclass(frozen=True)
class ChannelDefinition:
    label: str
    axis_id: str
    color: str
    group_id: Optional[str] = None
    extract: Callable[[Reading], Optional[float]] = field(default=lambda r: None, compare=False, repr=False)


@dataclass(frozen=True)
class AxisConfig:
    position: str
    overlay_grid: bool
    title: str


@dataclass(frozen=True)
class ChannelSeries:
    """One channel projected over a series, ready for the renderer."""
    label: str
    axis_id: str
    color: str
    group_id: Optional[str]
    points: Tuple[Point, ...]
    hidden: bool = False


@dataclass(frozen=True)
class SensorBundle:
    sensor_id: str
    has_data: bool
    channels: Tuple[ChannelSeries, ...]


AXES: Dict[str, AxisConfig] = {
    PRIMARY_AXIS: AxisConfig("left", True, "Temperature / Humidity / Soil / Light Level"),
    SECONDARY_AXIS: AxisConfig("right", False, "TSL2591"),
    TERTIARY_AXIS: AxisConfig("right", False, "AS7341"),
}

_PALETTE = (
    "rgb(75, 192, 192)",
    "rgb(153, 102, 255)",
    "rgb(255, 206, 86)",
    "rgb(54, 162, 235)",
    "rgb(255, 99, 132)",
    "rgb(255, 159, 64)",
    "rgb(201, 203, 207)",
)


def _scalar(name: str) -> Callable[[Reading], Optional[float]]:
    return lambda reading: getattr(reading.scalars, name)


def _broadband(name: str) -> Callable[[Reading], Optional[float]]:
    def extract(reading: Reading) -> Optional[float]:
        if reading.broadband_light is None:
            return None
        return getattr(reading.broadband_light, name)
    return extract


def _spectral(band: str) -> Callable[[Reading], Optional[float]]:
    def extract(reading: Reading) -> Optional[float]:
        if reading.spectral is None:
            return None
        return reading.spectral.get(band)
    return extract


def _build_catalog() -> Tuple[ChannelDefinition, ...]:
    base = [
        ("Temperature (°C)", "temperature"),
        ("Humidity (%)", "humidity"),
        ("Light Level (%)", "light_level"),
        ("Soil Moisture (%)", "soil_moisture"),
    ]
    broadband = [
        ("TSL2591 Lux", "lux"),
        ("TSL2591 Visible", "visible"),
        ("TSL2591 IR", "ir"),
    ]
    catalog: List[ChannelDefinition] = []
    for label, name in base:
        catalog.append(ChannelDefinition(label, PRIMARY_AXIS, _PALETTE[len(catalog)], None, _scalar(name)))
    for label, name in broadband:
        catalog.append(ChannelDefinition(label, SECONDARY_AXIS, _PALETTE[len(catalog)], BROADBAND_GROUP, _broadband(name)))
    for i, band in enumerate(SPECTRAL_BANDS):
        catalog.append(ChannelDefinition(
            f"AS7341 {band.upper()}", TERTIARY_AXIS, f"hsl({i * 36}, 100%, 50%)", SPECTRAL_GROUP, _spectral(band)
        ))
    return tuple(catalog)


CHANNEL_CATALOG: Tuple[ChannelDefinition, ...] = _build_catalog()


def group_ids(catalog: Tuple[ChannelDefinition, ...] = CHANNEL_CATALOG) -> List[str]:
    """Distinct group ids in catalog order."""
    seen: List[str] = []
    for definition in catalog:
        if definition.group_id is not None and definition.group_id not in seen:
            seen.append(definition.group_id)
    return seen
