"""
Reading normalizer: turns a raw feed snapshot (timestamp key -> value-bag)
into an ordered Series of immutable readings.

The normalizer never raises on feed content. Entries that cannot be parsed are
dropped and normalization continues with the remainder.
"""
import logging
import math
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from core.models.reading import BroadbandLight, Reading, Scalars, Series, SPECTRAL_BANDS, to_instant

logger = logging.getLogger(__name__)

# Scalar field -> accepted raw keys, first match wins
SCALAR_ALIASES: Dict[str, tuple[str, ...]] = {
    "temperature": ("temperature",),
    "humidity": ("humidity",),
    "light_level": ("light_level", "light"),
    "soil_moisture": ("soil_moisture", "moisture"),
}
BROADBAND_KEY = "tsl2591"
SPECTRAL_KEY = "as7341"


def parse_timestamp(key: Any) -> Optional[int]:
    """
    Parse a snapshot key into epoch seconds, or None if malformed.

    Keys outside the range a datetime can represent (millisecond epochs,
    absurdly long digit strings) are malformed too.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        timestamp = key
    elif isinstance(key, str):
        text = key.strip()
        if not text or not (text.isdecimal() or (text[0] == "-" and text[1:].isdecimal())):
            return None
        try:
            timestamp = int(text)
        except ValueError:
            # Longer than the interpreter's int string-conversion limit
            return None
    else:
        return None

    try:
        to_instant(timestamp)
    except (OverflowError, OSError, ValueError):
        return None
    return timestamp


def _describe_key(key: Any) -> str:
    if isinstance(key, int) and key.bit_length() > 64:
        return f"<{key.bit_length()}-bit integer>"
    text = repr(key)
    return text if len(text) <= 40 else text[:37] + "..."


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def _scalars(bag: Mapping[str, Any]) -> Scalars:
    values: Dict[str, Optional[float]] = {}
    for field_name, aliases in SCALAR_ALIASES.items():
        values[field_name] = None
        for alias in aliases:
            if alias in bag:
                values[field_name] = _number(bag[alias])
                break
    return Scalars(**values)


def _broadband(bag: Mapping[str, Any]) -> Optional[BroadbandLight]:
    raw = bag.get(BROADBAND_KEY)
    if not isinstance(raw, Mapping):
        return None
    return BroadbandLight(
        lux=_number(raw.get("lux")),
        visible=_number(raw.get("visible")),
        ir=_number(raw.get("ir")),
    )


def _spectral(bag: Mapping[str, Any]) -> Optional[Mapping[str, Optional[float]]]:
    raw = bag.get(SPECTRAL_KEY)
    if not isinstance(raw, Mapping):
        return None
    lowered = {str(k).lower(): v for k, v in raw.items()}
    return MappingProxyType({band: _number(lowered.get(band)) for band in SPECTRAL_BANDS})


def normalize_entry(timestamp: int, bag: Mapping[str, Any]) -> Reading:
    """Build one reading from an already validated value-bag."""
    return Reading(
        timestamp=timestamp,
        scalars=_scalars(bag),
        broadband_light=_broadband(bag),
        spectral=_spectral(bag),
    )


def normalize_snapshot(snapshot: Any) -> Series:
    """
    Normalize a full snapshot into a Series ordered by timestamp.

    Args:
        snapshot: mapping of timestamp key to value-bag, as delivered by the feed.
            Anything else (including None when the path holds no data) yields
            an empty series.

    Returns:
        Tuple of readings, ascending by timestamp, timestamps unique.
    """
    if not isinstance(snapshot, Mapping):
        if snapshot is not None:
            logger.warning(f"Ignoring snapshot of type {type(snapshot).__name__}")
        return ()

    readings: Dict[int, Reading] = {}
    dropped = 0
    for key, bag in snapshot.items():
        timestamp = parse_timestamp(key)
        if timestamp is None:
            logger.debug(f"Dropping entry with malformed timestamp key {_describe_key(key)}")
            dropped += 1
            continue
        if not isinstance(bag, Mapping):
            logger.debug(f"Dropping entry {_describe_key(key)}: value is not an object")
            dropped += 1
            continue
        if timestamp in readings:
            logger.debug(f"Dropping entry {_describe_key(key)}: duplicate timestamp {timestamp}")
            dropped += 1
            continue
        readings[timestamp] = normalize_entry(timestamp, bag)

    if dropped:
        logger.warning(f"Dropped {dropped} malformed snapshot entries out of {len(snapshot)}")

    return tuple(readings[ts] for ts in sorted(readings))
