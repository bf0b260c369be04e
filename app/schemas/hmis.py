"""
app/schemas/hmis.py

Response schemas for the HMIS store endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HMISSaveResponse(BaseModel):
    message: str = "Data saved successfully"


class CSVValidationErrorResponse(BaseModel):
    """
    API response model for one row-level validation error.
    """

    row_number: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None


class CSVIngestionSummaryResponse(BaseModel):
    """
    API response model for CSV upload summary.
    """

    rows_processed: int = Field(..., ge=0)
    rows_failed: int = Field(..., ge=0)
    validation_errors: list[CSVValidationErrorResponse] = Field(default_factory=list)


class CatalogCategoryResponse(BaseModel):
    category: str
    metrics: list[str]


class HMISCatalogResponse(BaseModel):
    """
    Submission form catalogue: categories, role mapping and departments.
    """

    categories: list[CatalogCategoryResponse]
    roles: dict[str, str]
    departments: list[str]
