"""
Verarbeitet Shopify Order-Webhooks zu Buchungen.

Regeln:
- Positionen ohne Activity ID / Booking Date / Booking Time sind keine Buchung -> still überspringen
- Idempotenz über (Order-ID, Aktivität, Datum, Startzeit): Doppelte Zustellung erzeugt keine zweite Buchung
- Ein Schreibfehler bei einer Position bricht die anderen Positionen NICHT ab
- Shopify bekommt immer ein OK, sonst schickt es den Webhook endlos erneut.
  Das Log ist daher der einzige Nachweis für übersprungene/fehlgeschlagene Positionen.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Iterator, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import BookingValidationError, PersistenceError
from app.models import Activity, CustomAnswer, CustomQuestion, Reservation, ReservationSource, ReservationStatus
from app.schemas.webhook import ShopifyLineItem, ShopifyOrder
from app.services import reservation_service
from app.services.consent_sync import sync_waiver_consent
from app.services.reservation_service import InsertOutcome
from app.services.shopify_client import ShopifyClient

logger = logging.getLogger("app.services.order_ingestion")

HANDLED_TOPICS = {"orders/create", "orders/updated"}

# Property-Namen, wie sie das Shopify-Widget an die Position hängt
PROP_ACTIVITY_ID = "Activity ID"
PROP_VARIANT_ID = "Variant ID"
PROP_BOOKING_DATE = "Booking Date"
PROP_BOOKING_TIME = "Booking Time"
PROP_CUSTOMER_NAME = "Customer Name"
PROP_CUSTOMER_EMAIL = "Customer Email"
PROP_CUSTOMER_PHONE = "Customer Phone"
PROP_PEOPLE = "Number of People"
PROP_NOTES = "Notes"
PROP_PRIVACY = "Privacy Policy Accepted"
PROP_MARKETING = "Marketing Consent"
PROP_WAIVER = "Waiver Accepted"

RESERVED_PROPERTIES = frozenset({
    PROP_ACTIVITY_ID, PROP_VARIANT_ID, PROP_BOOKING_DATE, PROP_BOOKING_TIME,
    PROP_CUSTOMER_NAME, PROP_CUSTOMER_EMAIL, PROP_CUSTOMER_PHONE, PROP_PEOPLE,
    PROP_NOTES, PROP_PRIVACY, PROP_MARKETING, PROP_WAIVER,
})

CONSENT_YES = "Yes"
PAID = "paid"
TIME_RANGE_SEPARATOR = " - "


class LineItemProperties:
    """
    Geordnete Properties einer Position. Bei doppelten Namen gilt der erste Eintrag.
    """

    def __init__(self, pairs: list[tuple[Optional[str], Optional[str]]]):
        self._values: dict[str, Optional[str]] = {}
        for name, value in pairs:
            if name and name not in self._values:
                self._values[name] = value

    @classmethod
    def from_line_item(cls, line_item: ShopifyLineItem) -> "LineItemProperties":
        return cls([(p.name, p.value) for p in (line_item.properties or [])])

    def get(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        if value is None or value == "":
            return None
        return value

    def is_yes(self, name: str) -> bool:
        return self._values.get(name) == CONSENT_YES

    def custom_fields(self) -> Iterator[tuple[str, str]]:
        for name, value in self._values.items():
            if name not in RESERVED_PROPERTIES and value is not None:
                yield name, value


@dataclass(frozen=True)
class BookingRequest:
    activity_id: UUID
    variant_id: Optional[UUID]
    booking_date: date
    start_time: time
    end_time: time


@dataclass
class IngestionReport:
    created: int = 0
    duplicates: int = 0
    skipped: int = 0
    failed: int = 0
    reservation_ids: list[UUID] = field(default_factory=list)


# ============ PARSING ============

def _parse_uuid(value: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise BookingValidationError(f"{label} ist keine gültige ID: {value!r}")


def parse_time_range(value: str) -> tuple[time, time]:
    """ "09:00 - 10:30" -> (09:00, 10:30) """
    parts = value.split(TIME_RANGE_SEPARATOR)
    if len(parts) != 2:
        raise BookingValidationError(f"Ungültiger Zeitraum: {value!r}")
    try:
        start, end = time.fromisoformat(parts[0].strip()), time.fromisoformat(parts[1].strip())
    except ValueError:
        raise BookingValidationError(f"Ungültiger Zeitraum: {value!r}")
    if start >= end:
        raise BookingValidationError(f"Startzeit liegt nicht vor Endzeit: {value!r}")
    return start, end


def parse_booking_request(props: LineItemProperties) -> BookingRequest:
    activity_id = props.get(PROP_ACTIVITY_ID)
    booking_date = props.get(PROP_BOOKING_DATE)
    booking_time = props.get(PROP_BOOKING_TIME)

    if not activity_id or not booking_date or not booking_time:
        raise BookingValidationError("Keine Buchungs-Properties")

    try:
        parsed_date = date.fromisoformat(booking_date)
    except ValueError:
        raise BookingValidationError(f"Ungültiges Datum: {booking_date!r}")

    start, end = parse_time_range(booking_time)
    variant_id = props.get(PROP_VARIANT_ID)

    return BookingRequest(
        activity_id=_parse_uuid(activity_id, PROP_ACTIVITY_ID),
        variant_id=_parse_uuid(variant_id, PROP_VARIANT_ID) if variant_id else None,
        booking_date=parsed_date,
        start_time=start,
        end_time=end
    )


def parse_party_size(value: Optional[str]) -> int:
    try:
        people = int(value)
    except (TypeError, ValueError):
        return 1
    return people if people >= 1 else 1


def derive_status(financial_status: Optional[str]) -> ReservationStatus:
    return ReservationStatus.CONFIRMED if financial_status == PAID else ReservationStatus.PENDING


def derive_customer(props: LineItemProperties, order: ShopifyOrder, placeholder_email: str) -> tuple[str, str, Optional[str]]:
    """Name, Email, Telefon: Property -> Shopify-Kunde -> Order -> Platzhalter."""
    customer = order.customer

    name = props.get(PROP_CUSTOMER_NAME)
    if not name and customer:
        name = f"{customer.first_name or ''} {customer.last_name or ''}".strip()
    name = name or "Unknown"

    email = (
        props.get(PROP_CUSTOMER_EMAIL)
        or (customer.email if customer else None)
        or order.email
        or placeholder_email
    )

    phone = props.get(PROP_CUSTOMER_PHONE) or (customer.phone if customer else None)

    return name, email, phone


def build_reservation(
    request: BookingRequest,
    props: LineItemProperties,
    order: ShopifyOrder,
    now: datetime,
    waiver_url: str,
    placeholder_email: str
) -> Reservation:
    name, email, phone = derive_customer(props, order, placeholder_email)

    privacy = props.is_yes(PROP_PRIVACY)
    marketing = props.is_yes(PROP_MARKETING)
    waiver = props.is_yes(PROP_WAIVER)

    return Reservation(
        activity_id=request.activity_id,
        variant_id=request.variant_id,
        booking_date=request.booking_date,
        start_time=request.start_time,
        end_time=request.end_time,
        customer_name=name,
        customer_email=email,
        customer_phone=phone,
        number_of_people=parse_party_size(props.get(PROP_PEOPLE)),
        external_order_id=str(order.id),
        source=ReservationSource.EXTERNAL,
        status=derive_status(order.financial_status),
        notes=props.get(PROP_NOTES),
        privacy_policy_accepted=privacy,
        privacy_policy_accepted_at=now if privacy else None,
        marketing_consent=marketing,
        marketing_consent_at=now if marketing else None,
        waiver_accepted=waiver,
        waiver_accepted_at=now if waiver else None,
        waiver_url=waiver_url if waiver else None
    )


# ============ VERARBEITUNG ============

def _save_custom_answers(db: Session, reservation: Reservation, props: LineItemProperties) -> int:
    """Nicht reservierte Properties gegen die Formularfelder der Aktivität matchen (exakter Label-Vergleich)."""
    candidates = list(props.custom_fields())
    if not candidates:
        return 0

    questions = db.query(CustomQuestion).filter(
        CustomQuestion.activity_id == reservation.activity_id
    ).all()
    by_label = {q.label: q for q in questions}

    saved = 0
    for name, value in candidates:
        question = by_label.get(name)
        if not question:
            continue
        db.add(CustomAnswer(
            reservation_id=reservation.id,
            question_id=question.id,
            value=value
        ))
        saved += 1

    if saved:
        db.commit()
    return saved


def ingest_order(
    db: Session,
    order: ShopifyOrder,
    shopify_client: ShopifyClient,
    waiver_url: str,
    placeholder_email: str
) -> IngestionReport:
    """
    Legt für jede Buchungs-Position der Order eine Reservierung an.

    Lesefehler der Datenbank (z.B. nicht erreichbar) werden durchgereicht,
    Schreibfehler einzelner Positionen nur geloggt.
    """
    report = IngestionReport()
    external_order_id = str(order.id)
    seen_keys: set[tuple] = set()

    for line_item in order.line_items:
        props = LineItemProperties.from_line_item(line_item)

        try:
            request = parse_booking_request(props)
        except BookingValidationError as e:
            logger.info(f"Order {order.id}, Position {line_item.id}: keine Buchung ({e}) - übersprungen")
            report.skipped += 1
            continue

        key = (external_order_id, request.activity_id, request.booking_date, request.start_time)
        if key in seen_keys or reservation_service.find_by_idempotency_key(db, *key):
            logger.info(f"Buchung für Order {order.id} existiert bereits ({request.booking_date} {request.start_time}) - übersprungen")
            report.duplicates += 1
            continue
        seen_keys.add(key)

        activity = db.query(Activity).filter(Activity.id == request.activity_id).first()
        if not activity:
            logger.error(f"Order {order.id}, Position {line_item.id}: Aktivität {request.activity_id} nicht gefunden")
            report.failed += 1
            continue

        now = datetime.now(timezone.utc)
        reservation = build_reservation(request, props, order, now, waiver_url, placeholder_email)

        try:
            outcome = reservation_service.insert_reservation(db, reservation)
            if outcome == InsertOutcome.ALREADY_EXISTS:
                db.rollback()
                logger.info(f"Buchung für Order {order.id} wurde parallel angelegt - übersprungen")
                report.duplicates += 1
                continue
            db.commit()
        except (PersistenceError, SQLAlchemyError) as e:
            db.rollback()
            logger.error(f"Order {order.id}, Position {line_item.id}: Buchung nicht gespeichert: {e}")
            report.failed += 1
            continue

        logger.info(f"Buchung {reservation.id} für Order {order.id} angelegt")
        report.created += 1
        report.reservation_ids.append(reservation.id)

        if reservation.waiver_accepted and order.customer and order.customer.id:
            sync_waiver_consent(shopify_client, order.customer.id, now, waiver_url)

        # Eigene Transaktion nach dem Commit der Buchung: schlägt sie fehl, gehen die Antworten
        # verloren, denn eine erneute Zustellung überspringt die Position als Duplikat.
        try:
            answers = _save_custom_answers(db, reservation, props)
            if answers:
                logger.info(f"{answers} Zusatzfelder für Buchung {reservation.id} gespeichert")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Zusatzfelder für Buchung {reservation.id} nicht gespeichert: {e}")

    logger.info(
        f"Order {order.id} verarbeitet: {report.created} angelegt, {report.duplicates} doppelt, "
        f"{report.skipped} übersprungen, {report.failed} fehlgeschlagen"
    )
    return report
