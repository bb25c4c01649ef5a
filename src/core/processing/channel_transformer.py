"""
Fans a filtered series out into one point list per catalog channel.
"""
from typing import List, Mapping, Sequence

from core.models.channel import CHANNEL_CATALOG, ChannelDefinition, ChannelSeries, SensorBundle
from core.models.reading import Series, to_instant


def transform_series(
    series: Series, catalog: Sequence[ChannelDefinition] = CHANNEL_CATALOG
) -> List[ChannelSeries]:
    """
    Project a series through every channel definition.

    Missing values stay None so the renderer draws a gap.
    """
    instants = [to_instant(reading.timestamp) for reading in series]
    channels: List[ChannelSeries] = []
    for definition in catalog:
        points = tuple(
            (instant, definition.extract(reading))
            for instant, reading in zip(instants, series)
        )
        channels.append(ChannelSeries(
            label=definition.label,
            axis_id=definition.axis_id,
            color=definition.color,
            group_id=definition.group_id,
            points=points,
        ))
    return channels


def transform_sensors(
    series_by_sensor: Mapping[str, Series], catalog: Sequence[ChannelDefinition] = CHANNEL_CATALOG
) -> List[SensorBundle]:
    """One bundle per sensor, sorted by id. Empty series are kept and flagged."""
    bundles: List[SensorBundle] = []
    for sensor_id in sorted(series_by_sensor):
        series = series_by_sensor[sensor_id]
        bundles.append(SensorBundle(
            sensor_id=sensor_id,
            has_data=len(series) > 0,
            channels=tuple(transform_series(series, catalog)),
        ))
    return bundles
