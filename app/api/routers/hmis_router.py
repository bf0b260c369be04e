"""
app/api/routers/hmis_router.py

HMIS store HTTP endpoints: submit, summary, export, CSV upload, catalogue.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from app.api.dependencies import get_csv_upload, get_store_service
from app.repositories.hmis_csv_repository import HMISStoreError
from app.schemas.hmis import (
    CSVIngestionSummaryResponse,
    CSVValidationErrorResponse,
    HMISCatalogResponse,
    HMISSaveResponse,
)
from app.services.hmis_store_service import CSVHeaderValidationError, HMISStoreService
from app.validators.hmis_validator import HMISPayloadError

router = APIRouter(prefix="/api/hmis", tags=["hmis"])


@router.post("", response_model=HMISSaveResponse)
def save_records(
    payload: Any = Body(default=None),
    store_service: HMISStoreService = Depends(get_store_service),
) -> HMISSaveResponse:
    """
    Append a batch of metric records to the CSV store.
    """

    try:
        store_service.submit(payload)
    except HMISPayloadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except HMISStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save data to CSV",
        ) from exc
    return HMISSaveResponse()


@router.get("/summary")
def read_summary(
    store_service: HMISStoreService = Depends(get_store_service),
) -> list[dict[str, str | None]]:
    try:
        return store_service.read_summary()
    except HMISStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read summary",
        ) from exc


@router.get("/export")
def export_csv(store_service: HMISStoreService = Depends(get_store_service)) -> FileResponse:
    path = store_service.export_path()
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CSV file not found")
    return FileResponse(path, media_type="text/csv", filename="hmis_data.csv")


@router.post("/upload-csv", response_model=CSVIngestionSummaryResponse)
def upload_csv(
    file: UploadFile = Depends(get_csv_upload),
    store_service: HMISStoreService = Depends(get_store_service),
) -> CSVIngestionSummaryResponse:
    """
    Ingest one CSV file of metric rows into the store.
    """

    try:
        summary = store_service.ingest_csv(file.file)
    except CSVHeaderValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except HMISStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist valid CSV rows.",
        ) from exc
    finally:
        file.file.close()

    return CSVIngestionSummaryResponse(
        rows_processed=summary.rows_processed,
        rows_failed=summary.rows_failed,
        validation_errors=[
            CSVValidationErrorResponse(
                row_number=error.row_number,
                column=error.column,
                message=error.message,
                value=error.value,
            )
            for error in summary.validation_errors
        ],
    )


@router.get("/catalog", response_model=HMISCatalogResponse)
def read_catalog(store_service: HMISStoreService = Depends(get_store_service)) -> HMISCatalogResponse:
    return HMISCatalogResponse(**store_service.catalog())
