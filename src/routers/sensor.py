from fastapi import APIRouter, HTTPException
import time

from core.models.window import parse_scale, resolve_window
from core.processing.window_filter import filter_window
from core.services.feed_views import sensor_feed_view
from core.services.sensor_registry import sensor_registry

from schemas import ReadingModel, ReadingsList, SensorListResponse

router = APIRouter(prefix="/sensors", tags=["sensors"])


@router.get("", response_model=SensorListResponse)
async def get_sensors() -> SensorListResponse:
    """
    List every sensor identity seen in the feed and the selected one.
    `selected` is null until the feed has delivered its first snapshot.
    """
    return SensorListResponse(known=sensor_registry.known(), selected=sensor_registry.selected())


@router.put("/selected/{sensor_id}", status_code=204)
async def select_sensor(sensor_id: str) -> None:
    """
    Select the sensor shown by the chart.
    Unknown sensors are accepted: their readings may arrive from the feed later.
    """
    sensor_feed_view.select(sensor_id)


@router.get("/{sensor_id}/readings", response_model=ReadingsList, responses={
    400: {
        "description": "Invalid window or scale parameter.",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_window": {"value": {"detail": "Invalid window: 9. Allowed values are: [0, 1, 2, 3, 4, 5]"}},
                    "invalid_scale": {"value": {"detail": "Invalid scale: big. Allowed values are: ['full', 'compact']"}}
                }
            }
        }
    }
})
async def get_sensor_readings(sensor_id: str, window: int = 0, scale: str = "full") -> ReadingsList:
    """
    Get the normalized readings of a sensor within the trailing window.
    Missing values are null. An unknown sensor or an empty window returns an empty list.
    """
    try:
        seconds = resolve_window(window, parse_scale(scale)).value_seconds()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    series = filter_window(sensor_registry.series_for(sensor_id), seconds, time.time())
    return ReadingsList(
        sensor_id=sensor_id,
        window_seconds=seconds,
        list=[ReadingModel.from_reading(r) for r in series],
    )
