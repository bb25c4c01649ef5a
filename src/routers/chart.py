from fastapi import APIRouter, HTTPException, Query
from typing import Optional
import time

from core.models.reading import to_instant
from core.models.window import WindowScale, scale_steps
from core.processing.chart_refresher import chart_refresher
from core.services.chart_service import ChartPayload, OverviewPayload, chart_service
from core.services.visibility_controller import visibility_controller

from schemas import (
    AxisModel,
    ChannelSeriesModel,
    ChartResponse,
    GroupsResponse,
    LiveChartResponse,
    OverviewResponse,
    SensorBundleModel,
    WindowScalesResponse,
    WindowStep,
)

router = APIRouter(prefix="/chart", tags=["chart"])

INVALID_WINDOW_RESPONSE = {
    400: {
        "description": "Invalid window ordinal.",
        "content": {
            "application/json": {
                "example": {"detail": "Invalid window: 9. Allowed values are: [0, 1, 2, 3, 4, 5]"}
            }
        }
    }
}


def _chart_response(payload: ChartPayload) -> ChartResponse:
    return ChartResponse(
        sensor_id=payload.sensor_id,
        window=payload.window,
        window_seconds=payload.window_seconds,
        has_data=payload.has_data,
        datasets=[ChannelSeriesModel.from_channel(c) for c in payload.channels],
        axes={axis_id: AxisModel.from_axis(axis) for axis_id, axis in payload.axes.items()},
    )


def _overview_response(payload: OverviewPayload) -> OverviewResponse:
    return OverviewResponse(
        window=payload.window,
        window_seconds=payload.window_seconds,
        sensors=[SensorBundleModel.from_bundle(b) for b in payload.sensors],
        axes={axis_id: AxisModel.from_axis(axis) for axis_id, axis in payload.axes.items()},
    )


@router.get("", response_model=ChartResponse, responses=INVALID_WINDOW_RESPONSE)
async def get_chart(window: Optional[int] = Query(None, description="Ordinal on the full window scale")) -> ChartResponse:
    """
    Get the chart datasets of the selected sensor for the trailing window.
    Without `window` the last window set with PUT /chart/window is used.
    `has_data` is false when no sensor is selected or the window is empty.
    """
    try:
        payload = chart_service.build_chart(time.time(), window)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return _chart_response(payload)


@router.put("/window/{ordinal}", status_code=204, responses=INVALID_WINDOW_RESPONSE)
async def set_chart_window(ordinal: int) -> None:
    """Set the window used by the chart and by the live frame."""
    try:
        chart_service.set_detail_window(ordinal)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    chart_refresher.refresh_once()


@router.get("/live", response_model=LiveChartResponse)
async def get_live_chart() -> LiveChartResponse:
    """
    Get the last frame rendered by the chart refresher: the detail chart and
    the overview at their stored windows, as of `refreshed_at`.
    The frame is re-rendered on every feed push, on window and group changes,
    and every `refresh_interval_seconds`.
    """
    frame = chart_refresher.latest()
    return LiveChartResponse(
        refreshed_at=to_instant(frame["now"]),
        chart=_chart_response(frame["chart"]),
        overview=_overview_response(frame["overview"]),
    )


@router.get("/overview", response_model=OverviewResponse, responses={
    400: {
        "description": "Invalid window ordinal.",
        "content": {
            "application/json": {
                "example": {"detail": "Invalid window: 5. Allowed values are: [0, 1, 2, 3]"}
            }
        }
    }
})
async def get_overview(window: Optional[int] = Query(None, description="Ordinal on the compact window scale")) -> OverviewResponse:
    """
    Get one dataset bundle per known sensor.
    Sensors without readings in the window are listed with `has_data` false.
    """
    try:
        payload = chart_service.build_overview(time.time(), window)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return _overview_response(payload)


@router.get("/groups", response_model=GroupsResponse)
async def get_groups() -> GroupsResponse:
    """Hidden flag of each toggle-able channel group."""
    return GroupsResponse(groups=visibility_controller.groups())


@router.put("/groups/{group_id}/toggle", response_model=GroupsResponse)
async def toggle_group(group_id: str) -> GroupsResponse:
    """
    Show or hide every channel of a group.
    Toggling an unknown group changes nothing.
    """
    if visibility_controller.toggle_group(group_id):
        chart_refresher.refresh_once()
    return GroupsResponse(groups=visibility_controller.groups())


@router.get("/windows", response_model=WindowScalesResponse)
async def get_windows() -> WindowScalesResponse:
    """Window slider steps of the chart (full) and overview (compact) scales."""
    return WindowScalesResponse(scales={
        scale.value: [
            WindowStep(ordinal=i, seconds=d.value_seconds(), label=d.label)
            for i, d in enumerate(scale_steps(scale))
        ]
        for scale in WindowScale
    })
