"""
app/schemas/dashboard.py

Response schemas for dashboard endpoints.

Summary entries are open-ended (``month`` plus one numeric field per
domain bucket), so they are typed as plain mappings.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

SummaryEntry = dict[str, str | float]


class LiveDashboardsResponse(BaseModel):
    """
    Last snapshot published by the periodic refresher.
    """

    refreshed_at: datetime
    row_count: int = Field(..., ge=0)
    dashboards: dict[str, list[SummaryEntry]]
