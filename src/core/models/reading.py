"""
Reading data model.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional, Tuple

# Ordered AS7341 band names as they appear in the feed
SPECTRAL_BANDS: Tuple[str, ...] = (
    "415nm", "445nm", "480nm", "515nm", "555nm",
    "590nm", "630nm", "680nm", "clear", "nir",
)

SCALAR_FIELDS: Tuple[str, ...] = ("temperature", "humidity", "light_level", "soil_moisture")


def to_instant(timestamp: int) -> datetime:
    """Epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


@dataclass(frozen=True)
class Scalars:
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    light_level: Optional[float] = None
    soil_moisture: Optional[float] = None


@dataclass(frozen=True)
class BroadbandLight:
    """TSL2591 broadband light measurement."""
    lux: Optional[float] = None
    visible: Optional[float] = None
    ir: Optional[float] = None


@dataclass(frozen=True)
class Reading:
    """
    Data class representing one timestamped reading of a sensor node.
    A field set to None is absent and must be rendered as a gap.
    """
    timestamp: int
    scalars: Scalars = Scalars()
    broadband_light: Optional[BroadbandLight] = None
    spectral: Optional[Mapping[str, Optional[float]]] = None


# Ordered by timestamp ascending, timestamps unique
Series = Tuple[Reading, ...]
