"""Reading routes: upload, confirm and list."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from meter_reader.core.database import get_db
from meter_reader.schemas.reading import (
    ConfirmRequest,
    ConfirmResponse,
    ErrorResponse,
    ReadingList,
    ReadingListItem,
    UploadRequest,
    UploadResponse,
)
from meter_reader.services import readings as reading_service
from meter_reader.services.extraction import Extractor, get_extractor

router = APIRouter(tags=["readings"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def upload_reading(
    payload: UploadRequest,
    db: Session = Depends(get_db),
    extractor: Extractor = Depends(get_extractor),
) -> UploadResponse:
    """
    Read a meter from a base64 image and record the value.

    Only one reading per customer, type and calendar month is accepted.
    """
    reading = reading_service.create_reading(db, payload, extractor)
    return UploadResponse(
        image_url=reading.image_url,
        measure_value=reading.measure_value,
        measure_uuid=reading.measure_uuid,
    )


@router.patch(
    "/confirm",
    response_model=ConfirmResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def confirm_reading(
    payload: ConfirmRequest,
    db: Session = Depends(get_db),
) -> ConfirmResponse:
    """Confirm or correct the value extracted for a reading."""
    reading_service.confirm_reading(db, payload)
    return ConfirmResponse(success=True)


@router.get(
    "/{customer_code}/list",
    response_model=ReadingList,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
def list_readings(
    customer_code: str,
    measure_type: str | None = Query(None, description="WATER or GAS, case-insensitive"),
    db: Session = Depends(get_db),
) -> ReadingList:
    """List a customer's readings."""
    type_filter = reading_service.parse_measure_type_filter(measure_type)
    readings = reading_service.list_readings(db, customer_code, type_filter)
    return ReadingList(
        customer_code=customer_code,
        measures=[ReadingListItem.model_validate(r) for r in readings],
    )
