from fastapi import APIRouter

from routers import chart, feed, sensor

router = APIRouter()

# include sub-routers
router.include_router(sensor.router)
router.include_router(chart.router)
router.include_router(feed.router)
