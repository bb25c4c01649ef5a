from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

from core.models.channel import AxisConfig, ChannelSeries, SensorBundle
from core.models.reading import Reading


class AppHealthOK(BaseModel):
    status: str
    app: str


class ChartPoint(BaseModel):
    x: datetime
    y: Optional[float]


class ChannelSeriesModel(BaseModel):
    label: str
    axis_id: str
    color: str
    group_id: Optional[str]
    hidden: bool
    points: List[ChartPoint]

    @classmethod
    def from_channel(cls, channel: ChannelSeries) -> "ChannelSeriesModel":
        return cls(
            label=channel.label,
            axis_id=channel.axis_id,
            color=channel.color,
            group_id=channel.group_id,
            hidden=channel.hidden,
            points=[ChartPoint(x=x, y=y) for x, y in channel.points],
        )


class AxisModel(BaseModel):
    position: str
    overlay_grid: bool
    title: str

    @classmethod
    def from_axis(cls, axis: AxisConfig) -> "AxisModel":
        return cls(position=axis.position, overlay_grid=axis.overlay_grid, title=axis.title)


class ChartResponse(BaseModel):
    sensor_id: Optional[str]
    window: int
    window_seconds: int
    has_data: bool
    datasets: List[ChannelSeriesModel]
    axes: Dict[str, AxisModel]


class SensorBundleModel(BaseModel):
    sensor_id: str
    has_data: bool
    datasets: List[ChannelSeriesModel]

    @classmethod
    def from_bundle(cls, bundle: SensorBundle) -> "SensorBundleModel":
        return cls(
            sensor_id=bundle.sensor_id,
            has_data=bundle.has_data,
            datasets=[ChannelSeriesModel.from_channel(c) for c in bundle.channels],
        )


class OverviewResponse(BaseModel):
    window: int
    window_seconds: int
    sensors: List[SensorBundleModel]
    axes: Dict[str, AxisModel]


class LiveChartResponse(BaseModel):
    refreshed_at: datetime
    chart: ChartResponse
    overview: OverviewResponse


class GroupsResponse(BaseModel):
    groups: Dict[str, bool]


class SensorListResponse(BaseModel):
    known: List[str]
    selected: Optional[str]


class BroadbandModel(BaseModel):
    lux: Optional[float] = None
    visible: Optional[float] = None
    ir: Optional[float] = None


class ReadingModel(BaseModel):
    timestamp: int
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    light_level: Optional[float] = None
    soil_moisture: Optional[float] = None
    broadband_light: Optional[BroadbandModel] = None
    spectral: Optional[Dict[str, Optional[float]]] = None

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingModel":
        broadband = reading.broadband_light
        return cls(
            timestamp=reading.timestamp,
            temperature=reading.scalars.temperature,
            humidity=reading.scalars.humidity,
            light_level=reading.scalars.light_level,
            soil_moisture=reading.scalars.soil_moisture,
            broadband_light=None if broadband is None else BroadbandModel(
                lux=broadband.lux, visible=broadband.visible, ir=broadband.ir
            ),
            spectral=None if reading.spectral is None else dict(reading.spectral),
        )


class ReadingsList(BaseModel):
    sensor_id: str
    window_seconds: int
    list: List[ReadingModel]


class WindowStep(BaseModel):
    ordinal: int
    seconds: int
    label: str


class WindowScalesResponse(BaseModel):
    scales: Dict[str, List[WindowStep]]
