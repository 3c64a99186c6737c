"""Reading Pydantic schemas for request/response validation."""

import base64
import binascii
import re
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, NamedTuple

from pydantic import (
    BaseModel,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from meter_reader.core.periods import check_storable
from meter_reader.models.enums import MeasureType
from meter_reader.models.reading import CONFIRMED_VALUE_PRECISION, CONFIRMED_VALUE_SCALE

IMAGE_DATA_URI = re.compile(r"data:image/(jpeg|png);base64,(.*)", re.DOTALL)
ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


class ImageData(NamedTuple):
    """Decoded image bytes with the MIME type from their data URI."""

    data: bytes
    mime_type: str


def decode_image(image: Any) -> ImageData:
    """Split a ``data:image/...;base64,`` URI into raw bytes and MIME type."""
    match = IMAGE_DATA_URI.fullmatch(image) if isinstance(image, str) else None
    if not match:
        raise ValueError(
            "The 'image' field must be a base64 string with a valid image type prefix."
        )

    subtype, payload = match.groups()
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if not decoded:
        raise ValueError("The 'image' field must be a valid base64 string.")

    return ImageData(decoded, f"image/{subtype}")


class UploadRequest(BaseModel):
    """
    Body of ``POST /upload``.

    Checks run in field order after the presence check, and the handler
    reports only the first failure.
    """

    image: ImageData
    customer_code: StrictStr
    measure_datetime: datetime
    measure_type: MeasureType

    @model_validator(mode="before")
    @classmethod
    def require_all_fields(cls, data: Any) -> Any:
        """Every field must be present and non-empty."""
        if not isinstance(data, dict) or not all(data.get(name) for name in cls.model_fields):
            raise ValueError("All fields are required.")
        return data

    @field_validator("image", mode="before")
    @classmethod
    def parse_image(cls, v: Any) -> ImageData:
        return decode_image(v)

    @field_validator("measure_datetime", mode="before")
    @classmethod
    def require_iso_string(cls, v: Any) -> Any:
        """Reject unix timestamps and other non-ISO-8601 inputs."""
        if not isinstance(v, str) or not ISO_DATE_PREFIX.match(v):
            raise ValueError(
                "The 'measure_datetime' field must be a valid ISO-8601 date-time."
            )
        return v

    @field_validator("measure_datetime")
    @classmethod
    def assume_utc_and_check_range(cls, v: datetime) -> datetime:
        """Naive timestamps are UTC; the month around it must be representable."""
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        try:
            check_storable(v)
        except ValueError:
            raise ValueError(
                "The 'measure_datetime' field is out of the supported range."
            ) from None
        return v


class UploadResponse(BaseModel):
    """Schema for a successful upload."""

    image_url: str
    measure_value: int
    measure_uuid: str


class ConfirmRequest(BaseModel):
    """Body of ``PATCH /confirm``."""

    measure_uuid: StrictStr = Field(min_length=1)
    confirmed_value: StrictInt | StrictFloat

    @field_validator("confirmed_value")
    @classmethod
    def fits_column(cls, v: int | float) -> int | float:
        """The value must be stored exactly, without rounding."""
        value = Decimal(str(v))
        if not value.is_finite():
            raise ValueError("The 'confirmed_value' field must be a finite number.")
        if value.as_tuple().exponent < -CONFIRMED_VALUE_SCALE:
            raise ValueError(
                f"The 'confirmed_value' field allows at most {CONFIRMED_VALUE_SCALE} "
                "decimal places."
            )
        if abs(value) >= 10 ** (CONFIRMED_VALUE_PRECISION - CONFIRMED_VALUE_SCALE):
            raise ValueError("The 'confirmed_value' field is too large.")
        return v

    @property
    def confirmed_decimal(self) -> Decimal:
        return Decimal(str(self.confirmed_value))


class ConfirmResponse(BaseModel):
    """Schema for a successful confirmation."""

    success: bool = True


class ReadingListItem(BaseModel):
    """Public projection of a reading; the confirmed value itself is never exposed."""

    measure_uuid: str
    measure_datetime: datetime
    measure_type: MeasureType
    has_confirmed: bool
    image_url: str

    model_config = {"from_attributes": True}

    @field_validator("measure_datetime")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Stored timestamps are naive UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class ReadingList(BaseModel):
    """Schema for a customer's reading history."""

    customer_code: str
    measures: list[ReadingListItem]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error_code: str
    error_description: str
