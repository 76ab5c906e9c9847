"""
Die vier Ebenen der Öffnungszeiten, von allgemein nach speziell:

WeeklyDefault -> ActivityWeeklyOverride -> GlobalDateOverride -> ActivityDateOverride

day_of_week: 0 = Sonntag, 1 = Montag ... 6 = Samstag
"""
from sqlalchemy import Column, Integer, Time, Date, Boolean, String, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
import uuid

from app.database import Base


class WeeklyDefault(Base):
    __tablename__ = "working_hours"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('day_of_week', name='uq_working_hours_day'),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_working_hours_day"),
        CheckConstraint("start_time < end_time", name="ck_working_hours_range"),
    )


class ActivityWeeklyOverride(Base):
    __tablename__ = "activity_availability_overrides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('activity_id', 'day_of_week', name='uq_activity_weekday'),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_activity_override_day"),
        CheckConstraint("start_time < end_time", name="ck_activity_override_range"),
    )


class GlobalDateOverride(Base):
    """Sonderöffnungszeiten für einen Kalendertag (z.B. Feiertag geschlossen)."""
    __tablename__ = "working_hours_date_overrides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    specific_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)
    label = Column(String(100), nullable=True)

    __table_args__ = (
        UniqueConstraint('specific_date', name='uq_date_override_date'),
        CheckConstraint("start_time < end_time", name="ck_date_override_range"),
    )


class ActivityDateOverride(Base):
    # Noch ohne Verwaltungsoberfläche, wird aber beim Auflösen berücksichtigt
    __tablename__ = "activity_date_overrides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    specific_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('activity_id', 'specific_date', name='uq_activity_date'),
        CheckConstraint("start_time < end_time", name="ck_activity_date_range"),
    )
