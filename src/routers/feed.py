from fastapi import APIRouter, Body
from typing import Any, Dict, Optional

from core.services.feed_publisher import feed_publisher

router = APIRouter(prefix="/feed", tags=["feed"])


@router.put("/sensors", status_code=204)
async def push_all_sensors(snapshot: Optional[Dict[str, Any]] = Body(None)) -> None:
    """
    Replace the whole feed tree: sensor id -> timestamp -> value-bag.
    Sensors missing from the tree keep their last known readings.
    """
    feed_publisher.publish_all(snapshot or {})


@router.put("/sensors/{sensor_id}", status_code=204)
async def push_sensor(sensor_id: str, readings: Optional[Dict[str, Any]] = Body(None)) -> None:
    """
    Replace the readings of one sensor: timestamp -> value-bag.
    Malformed entries are dropped when the readings are normalized.
    """
    feed_publisher.publish_sensor(sensor_id, readings or {})
