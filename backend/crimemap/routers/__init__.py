"""API routers."""

from crimemap.routers.health import router as health_router
from crimemap.routers.heatmap import router as heatmap_router
from crimemap.routers.incidents import router as incidents_router
from crimemap.routers.risk import router as risk_router

__all__ = ["health_router", "heatmap_router", "incidents_router", "risk_router"]
