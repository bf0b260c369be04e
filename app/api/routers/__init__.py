"""
app/api/routers package marker.
"""

from app.api.routers.dashboard_router import router as dashboard_router
from app.api.routers.hmis_router import router as hmis_router
from app.api.routers.report_router import router as report_router

__all__ = [
    "dashboard_router",
    "hmis_router",
    "report_router",
]
