"""
Gruppiert Buchungen eines Tages in Zeitfenster und berechnet die Auslastung.
"""
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.models import Activity, ActivityVariant, Reservation
from app.models.reservation import ACTIVE_STATUSES

# Schwellwerte für die Anzeige
LEVEL_CRITICAL = "critical"
LEVEL_WARNING = "warning"
LEVEL_NORMAL = "normal"

UTILIZATION_WARNING_PERCENT = 80
UTILIZATION_CRITICAL_PERCENT = 100
AVAILABLE_WARNING_SPOTS = 2


@dataclass
class Slot:
    start: time
    end: time
    capacity: int
    booked: int = 0
    members: list = field(default_factory=list)

    @property
    def available(self) -> int:
        # Bewusst nicht auf 0 begrenzt: negativ = überbucht
        return self.capacity - self.booked

    @property
    def utilization_percent(self) -> float:
        if self.capacity <= 0:
            return 100.0
        return self.booked / self.capacity * 100


def capacity_baseline(activity: Activity, variant: Optional[ActivityVariant]) -> int:
    """Kapazität der Variante falls gesetzt, sonst die der Aktivität."""
    if variant is not None and variant.max_capacity:
        return variant.max_capacity
    return activity.max_capacity


def aggregate(
    activity: Activity,
    variants: Iterable[ActivityVariant],
    reservations: Iterable[Reservation]
) -> list[Slot]:
    """
    Baut die Zeitfenster einer Aktivität.

    - nur pending/confirmed zählen
    - Gruppierung nach exaktem (start, end)
    - Kapazität eines Fensters kommt von der ERSTEN Buchung, die im Fenster landet
    - Sortierung aufsteigend nach Startzeit
    """
    variants_by_id = {v.id: v for v in variants}
    slots: dict[tuple[time, time], Slot] = {}

    for reservation in reservations:
        if reservation.status not in ACTIVE_STATUSES:
            continue

        key = (reservation.start_time, reservation.end_time)
        if key not in slots:
            variant = variants_by_id.get(reservation.variant_id) if reservation.variant_id else None
            slots[key] = Slot(
                start=reservation.start_time,
                end=reservation.end_time,
                capacity=capacity_baseline(activity, variant)
            )

        slot = slots[key]
        slot.members.append(reservation)
        slot.booked += reservation.number_of_people

    return sorted(slots.values(), key=lambda s: s.start)


def utilization_level(slot: Slot) -> str:
    percent = slot.utilization_percent
    if percent >= UTILIZATION_CRITICAL_PERCENT:
        return LEVEL_CRITICAL
    if percent >= UTILIZATION_WARNING_PERCENT:
        return LEVEL_WARNING
    return LEVEL_NORMAL


def availability_level(slot: Slot) -> str:
    if slot.available <= 0:
        return LEVEL_CRITICAL
    if slot.available <= AVAILABLE_WARNING_SPOTS:
        return LEVEL_WARNING
    return LEVEL_NORMAL


def build_day_overview(db: Session, target_date: date) -> list[tuple[Activity, list[Slot]]]:
    """
    Tagesübersicht aller aktiven Aktivitäten mit ihren belegten Zeitfenstern.
    Aktivitäten ohne Buchungen an dem Tag werden weggelassen.
    """
    activities = db.query(Activity).filter(Activity.is_active == True).order_by(Activity.name).all()
    variants = db.query(ActivityVariant).filter(ActivityVariant.is_active == True).all()
    reservations = db.query(Reservation).filter(
        Reservation.booking_date == target_date,
        Reservation.status.in_(ACTIVE_STATUSES)
    ).order_by(Reservation.start_time, Reservation.created_at).all()

    overview = []
    for activity in activities:
        activity_variants = [v for v in variants if v.activity_id == activity.id]
        activity_reservations = [r for r in reservations if r.activity_id == activity.id]
        slots = aggregate(activity, activity_variants, activity_reservations)
        if slots:
            overview.append((activity, slots))

    return overview
