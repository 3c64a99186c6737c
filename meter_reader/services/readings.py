"""Reading service for business logic: upload, confirmation and listing."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from meter_reader.core.config import settings
from meter_reader.core.errors import (
    ConfirmationDuplicateError,
    DoubleReportError,
    InvalidTypeError,
    MeasureNotFoundError,
    MeasuresNotFoundError,
    ServerError,
)
from meter_reader.core.periods import measure_period, to_utc_naive
from meter_reader.models.enums import MeasureType
from meter_reader.models.reading import Reading
from meter_reader.schemas.reading import ConfirmRequest, UploadRequest
from meter_reader.services.extraction import Extractor, parse_measure_value

logger = logging.getLogger(__name__)


def is_duplicate_reading(
    db: Session,
    customer_code: str,
    measure_type: MeasureType,
    measure_datetime: datetime,
) -> bool:
    """
    Check whether the customer already has a reading of this type in the month.

    Months are compared by their ``YYYY-MM`` label in each reading's own
    offset, the same rule the unique constraint enforces.
    """
    existing = (
        db.query(Reading.id)
        .filter(
            Reading.customer_code == customer_code,
            Reading.measure_type == measure_type,
            Reading.measure_period == measure_period(measure_datetime),
        )
        .first()
    )
    return existing is not None


def create_reading(db: Session, payload: UploadRequest, extractor: Extractor) -> Reading:
    """
    Extract the meter value from an uploaded image and record the reading.

    Raises:
        DoubleReportError: a reading already exists for the customer, type and month
        MeasureNotFoundError: the model response contained no number
        ServerError: the extractor or the store failed

    """
    if is_duplicate_reading(
        db, payload.customer_code, payload.measure_type, payload.measure_datetime
    ):
        logger.warning(
            "Duplicate %s reading for customer %s in %s",
            payload.measure_type.value,
            payload.customer_code,
            measure_period(payload.measure_datetime),
        )
        raise DoubleReportError()

    try:
        text = extractor.extract(
            payload.image.data, payload.image.mime_type, settings.EXTRACTION_PROMPT
        )
    except Exception as exc:
        logger.exception("Extraction failed for customer %s", payload.customer_code)
        raise ServerError("Error processing image.") from exc

    measure_value = parse_measure_value(text)
    if measure_value is None:
        raise MeasureNotFoundError(
            "Could not extract a numeric value from the image.",
            status_code=400,
        )

    reading = Reading(
        measure_uuid=str(uuid.uuid4()),
        customer_code=payload.customer_code,
        measure_datetime=to_utc_naive(payload.measure_datetime),
        measure_type=payload.measure_type,
        measure_period=measure_period(payload.measure_datetime),
        measure_value=measure_value,
        image_url=settings.IMAGE_URL_PLACEHOLDER,
    )
    db.add(reading)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent upload for the same month
        db.rollback()
        raise DoubleReportError() from None
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not store reading for customer %s", payload.customer_code)
        raise ServerError("Error processing image.") from exc
    db.refresh(reading)

    logger.info(
        "Recorded %s reading %s for customer %s: %s",
        reading.measure_type.value,
        reading.measure_uuid,
        reading.customer_code,
        reading.measure_value,
    )
    return reading


def get_reading_by_uuid(db: Session, measure_uuid: str) -> Reading | None:
    """Get a reading by its public identifier."""
    return db.query(Reading).filter(Reading.measure_uuid == measure_uuid).first()


def confirm_reading(db: Session, payload: ConfirmRequest) -> Reading:
    """Record the human-confirmed value of a reading; allowed once."""
    reading = get_reading_by_uuid(db, payload.measure_uuid)
    if not reading:
        raise MeasureNotFoundError()

    if reading.confirmed_value is not None:
        raise ConfirmationDuplicateError()

    # Conditional update so a concurrent confirmation cannot overwrite this one
    updated = (
        db.query(Reading)
        .filter(Reading.id == reading.id, Reading.confirmed_value.is_(None))
        .update(
            {
                Reading.confirmed_value: payload.confirmed_decimal,
                Reading.updated_at: datetime.now(UTC),
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        raise ConfirmationDuplicateError()

    db.commit()
    db.refresh(reading)
    logger.info("Confirmed reading %s with value %s", reading.measure_uuid, reading.confirmed_value)
    return reading


def list_readings(
    db: Session,
    customer_code: str,
    measure_type: MeasureType | None = None,
) -> list[Reading]:
    """Get a customer's readings, optionally of one type, oldest first."""
    query = db.query(Reading).filter(Reading.customer_code == customer_code)
    if measure_type:
        query = query.filter(Reading.measure_type == measure_type)

    readings = query.order_by(Reading.measure_datetime, Reading.id).all()
    if not readings:
        raise MeasuresNotFoundError()
    return readings


def parse_measure_type_filter(value: str | None) -> MeasureType | None:
    """Case-insensitive measure type filter for listings."""
    if not value:
        return None
    try:
        return MeasureType(value.upper())
    except ValueError:
        raise InvalidTypeError("Measure type not allowed.") from None
