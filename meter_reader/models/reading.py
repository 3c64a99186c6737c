"""Reading database model."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Enum, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from meter_reader.core.database import Base
from meter_reader.models.enums import MeasureType

# Confirmed values must fit this column without rounding
CONFIRMED_VALUE_PRECISION = 12
CONFIRMED_VALUE_SCALE = 3


class Reading(Base):
    """A single meter measurement with its extracted and confirmed values."""

    __tablename__ = "readings"
    __table_args__ = (
        # One reading per customer, type and calendar month
        UniqueConstraint(
            "customer_code",
            "measure_type",
            "measure_period",
            name="uq_readings_customer_type_period",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    measure_uuid: Mapped[str] = mapped_column(String(36), unique=True, index=True)

    customer_code: Mapped[str] = mapped_column(String(255), index=True)
    measure_datetime: Mapped[datetime] = mapped_column(index=True)  # naive UTC
    measure_type: Mapped[MeasureType] = mapped_column(Enum(MeasureType, native_enum=False))
    measure_period: Mapped[str] = mapped_column(String(7))  # YYYY-MM

    measure_value: Mapped[int | None] = mapped_column(nullable=True)
    image_url: Mapped[str] = mapped_column(String(2048))
    confirmed_value: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=CONFIRMED_VALUE_PRECISION, scale=CONFIRMED_VALUE_SCALE),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    @property
    def has_confirmed(self) -> bool:
        return self.confirmed_value is not None
