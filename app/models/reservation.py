import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Date, Time, Integer, DateTime, Enum, String, Text, Boolean, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from app.database import Base


class ReservationSource(enum.Enum):
    MANUAL = "manual"
    WIDGET = "widget"
    EXTERNAL = "external"


class ReservationStatus(enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Diese Status belegen Plätze in einem Zeitfenster
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class Reservation(Base):
    """
    Eine gebuchte Zeitspanne für eine Aktivität, egal über welchen Kanal.

    Für Shopify-Buchungen ist (external_order_id, activity_id, booking_date, start_time)
    eindeutig. Bei manuellen Buchungen ist external_order_id NULL und die
    Constraint greift nicht.
    """
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id"), nullable=False)
    variant_id = Column(Uuid, ForeignKey("activity_variants.id"), nullable=True)
    booking_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    number_of_people = Column(Integer, nullable=False, default=1)
    external_order_id = Column(String(50), nullable=True)
    source = Column(Enum(ReservationSource, values_callable=lambda e: [m.value for m in e]), nullable=False, default=ReservationSource.MANUAL)
    status = Column(Enum(ReservationStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, default=ReservationStatus.PENDING)
    notes = Column(Text, nullable=True)

    privacy_policy_accepted = Column(Boolean, nullable=False, default=False)
    privacy_policy_accepted_at = Column(DateTime(timezone=True), nullable=True)
    marketing_consent = Column(Boolean, nullable=False, default=False)
    marketing_consent_at = Column(DateTime(timezone=True), nullable=True)
    waiver_accepted = Column(Boolean, nullable=False, default=False)
    waiver_accepted_at = Column(DateTime(timezone=True), nullable=True)
    waiver_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)

    activity = relationship("Activity")
    variant = relationship("ActivityVariant")
    answers = relationship("CustomAnswer", back_populates="reservation", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('external_order_id', 'activity_id', 'booking_date', 'start_time', name='uq_booking_idempotency'),
        CheckConstraint("number_of_people >= 1", name="ck_booking_people"),
        CheckConstraint("start_time < end_time", name="ck_booking_range"),
    )
