import enum
import logging
from datetime import date, datetime, time, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.exceptions import PersistenceError
from app.models import Activity, Reservation, ReservationStatus

logger = logging.getLogger("app.services.reservation_service")


class InsertOutcome(enum.Enum):
    INSERTED = "INSERTED"
    ALREADY_EXISTS = "ALREADY_EXISTS"


class DateFilter(str, enum.Enum):
    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    PAST = "past"


def find_by_idempotency_key(
    db: Session,
    external_order_id: str,
    activity_id: UUID,
    booking_date: date,
    start_time: time
) -> Optional[Reservation]:
    return db.query(Reservation).filter(
        Reservation.external_order_id == external_order_id,
        Reservation.activity_id == activity_id,
        Reservation.booking_date == booking_date,
        Reservation.start_time == start_time
    ).first()


def insert_reservation(db: Session, reservation: Reservation) -> InsertOutcome:
    """
    Insert mit Konflikterkennung statt Check-then-Insert.

    Der Insert läuft in einem SAVEPOINT. Verletzt er die Idempotenz-Constraint
    (parallel zugestellter Webhook), wird nur der Savepoint zurückgerollt und
    ALREADY_EXISTS gemeldet. Andere Schreibfehler -> PersistenceError.
    Committen muss der Aufrufer.
    """
    try:
        with db.begin_nested():
            db.add(reservation)
            db.flush()
    except IntegrityError as e:
        if reservation.external_order_id and find_by_idempotency_key(
            db,
            reservation.external_order_id,
            reservation.activity_id,
            reservation.booking_date,
            reservation.start_time
        ):
            return InsertOutcome.ALREADY_EXISTS
        raise PersistenceError(f"Buchung konnte nicht gespeichert werden: {e.orig}") from e
    except SQLAlchemyError as e:
        raise PersistenceError(f"Buchung konnte nicht gespeichert werden: {e}") from e

    return InsertOutcome.INSERTED


def list_reservations(
    db: Session,
    search: Optional[str] = None,
    status: Optional[ReservationStatus] = None,
    activity_id: Optional[UUID] = None,
    date_filter: DateFilter = DateFilter.ALL,
    today: Optional[date] = None
) -> list[Reservation]:
    """Buchungsliste fürs Backoffice, neueste zuerst."""
    today = today or date.today()

    query = db.query(Reservation).options(
        joinedload(Reservation.activity)
    ).join(Activity, Reservation.activity_id == Activity.id)

    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(
            func.lower(Reservation.customer_name).like(pattern),
            func.lower(Reservation.customer_email).like(pattern),
            func.lower(Activity.name).like(pattern)
        ))
    if status:
        query = query.filter(Reservation.status == status)
    if activity_id:
        query = query.filter(Reservation.activity_id == activity_id)

    if date_filter == DateFilter.TODAY:
        query = query.filter(Reservation.booking_date == today)
    elif date_filter == DateFilter.UPCOMING:
        query = query.filter(Reservation.booking_date >= today)
    elif date_filter == DateFilter.PAST:
        query = query.filter(Reservation.booking_date < today)

    return query.order_by(
        Reservation.booking_date.desc(),
        Reservation.start_time.desc()
    ).all()


def update_status(db: Session, reservation: Reservation, status: ReservationStatus) -> Reservation:
    # Kein Status-Workflow: jeder Status darf jederzeit gesetzt werden
    old_status = reservation.status
    reservation.status = status
    reservation.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(reservation)
    logger.info(f"Buchung {reservation.id}: Status {old_status.value} -> {status.value}")
    return reservation


def get_dashboard_stats(db: Session, today: Optional[date] = None) -> dict:
    today = today or date.today()

    total = db.query(func.count(Reservation.id)).scalar()
    today_confirmed = db.query(func.count(Reservation.id)).filter(
        Reservation.booking_date == today,
        Reservation.status == ReservationStatus.CONFIRMED
    ).scalar()
    upcoming_confirmed = db.query(func.count(Reservation.id)).filter(
        Reservation.booking_date >= today,
        Reservation.status == ReservationStatus.CONFIRMED
    ).scalar()
    active_activities = db.query(func.count(Activity.id)).filter(
        Activity.is_active == True
    ).scalar()

    return {
        "total_reservations": total or 0,
        "today_reservations": today_confirmed or 0,
        "upcoming_reservations": upcoming_confirmed or 0,
        "active_activities": active_activities or 0,
    }
