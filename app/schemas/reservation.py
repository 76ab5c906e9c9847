from uuid import UUID
from datetime import date, datetime, time
from pydantic import BaseModel
from typing import Optional

from app.models.reservation import ReservationSource, ReservationStatus


class ActivityInfo(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class ReservationResponse(BaseModel):
    id: UUID
    activity_id: UUID
    activity: Optional[ActivityInfo] = None
    variant_id: Optional[UUID] = None
    booking_date: date
    start_time: time
    end_time: time
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    number_of_people: int
    external_order_id: Optional[str] = None
    source: ReservationSource
    status: ReservationStatus
    notes: Optional[str] = None
    privacy_policy_accepted: bool
    privacy_policy_accepted_at: Optional[datetime] = None
    marketing_consent: bool
    marketing_consent_at: Optional[datetime] = None
    waiver_accepted: bool
    waiver_accepted_at: Optional[datetime] = None
    waiver_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class SlotResponse(BaseModel):
    """Ein Zeitfenster: available darf negativ sein (überbucht)"""
    start: time
    end: time
    capacity: int
    booked: int
    available: int
    utilization_percent: float
    utilization_level: str
    availability_level: str
    reservations: list[ReservationResponse]


class ActivitySlotsResponse(BaseModel):
    activity: ActivityInfo
    max_capacity: int
    slots: list[SlotResponse]


class DayOverviewResponse(BaseModel):
    """Alle Aktivitäten mit Buchungen an einem Tag"""
    booking_date: date
    activities: list[ActivitySlotsResponse]


class DashboardStatsResponse(BaseModel):
    total_reservations: int
    today_reservations: int
    upcoming_reservations: int
    active_activities: int
