import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models import Reservation, ReservationStatus
from app.schemas.reservation import (
     ActivityInfo,
     ActivitySlotsResponse,
     DashboardStatsResponse,
     DayOverviewResponse,
     ReservationResponse,
     ReservationStatusUpdate,
     SlotResponse
)
from app.services import reservation_service, slot_aggregator
from app.services.reservation_service import DateFilter
from app.utils.security import get_current_subject

logger = logging.getLogger("app.routers.reservations")

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("/", response_model=list[ReservationResponse])
def get_reservations(
    search: Optional[str] = Query(default=None),
    status: Optional[ReservationStatus] = Query(default=None),
    activity_id: Optional[UUID] = Query(default=None),
    date_filter: DateFilter = Query(default=DateFilter.ALL),
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    return reservation_service.list_reservations(
        db,
        search=search,
        status=status,
        activity_id=activity_id,
        date_filter=date_filter
    )


@router.get("/stats", response_model=DashboardStatsResponse)
def get_stats(
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    return reservation_service.get_dashboard_stats(db)


@router.get("/slots", response_model=DayOverviewResponse)
def get_day_slots(
    booking_date: date = Query(alias="date"),
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    """
    Zeitfenster-Übersicht eines Tages: pro Aktivität belegte Fenster mit
    Kapazität, gebuchten und freien Plätzen.
    """
    overview = slot_aggregator.build_day_overview(db, booking_date)

    activities = []
    for activity, slots in overview:
        activities.append(ActivitySlotsResponse(
            activity=ActivityInfo.model_validate(activity),
            max_capacity=activity.max_capacity,
            slots=[
                SlotResponse(
                    start=slot.start,
                    end=slot.end,
                    capacity=slot.capacity,
                    booked=slot.booked,
                    available=slot.available,
                    utilization_percent=round(slot.utilization_percent, 1),
                    utilization_level=slot_aggregator.utilization_level(slot),
                    availability_level=slot_aggregator.availability_level(slot),
                    reservations=[ReservationResponse.model_validate(r) for r in slot.members]
                )
                for slot in slots
            ]
        ))

    return DayOverviewResponse(booking_date=booking_date, activities=activities)


@router.get("/{id}", response_model=ReservationResponse)
def get_reservation(
    id: UUID,
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    reservation = db.query(Reservation).options(
        joinedload(Reservation.activity)
    ).filter(Reservation.id == id).first()
    if not reservation:
        raise HTTPException(status_code=404, detail="Buchung nicht gefunden")
    return reservation


@router.patch("/{id}/status", response_model=ReservationResponse)
def update_reservation_status(
    id: UUID,
    request: ReservationStatusUpdate,
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    reservation = db.query(Reservation).filter(Reservation.id == id).first()
    if not reservation:
        raise HTTPException(status_code=404, detail="Buchung nicht gefunden")
    return reservation_service.update_status(db, reservation, request.status)
