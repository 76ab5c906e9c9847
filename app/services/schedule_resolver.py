"""
Ermittelt die effektiven Öffnungszeiten einer Aktivität an einem Tag.

Reihenfolge (erste vorhandene Ebene gewinnt komplett, Zeiten UND offen/geschlossen):
1. ActivityDateOverride   (Aktivität + Datum)
2. GlobalDateOverride     (Datum, gilt für alle Aktivitäten)
3. ActivityWeeklyOverride (Aktivität + Wochentag)
4. WeeklyDefault          (Wochentag), fehlt auch die -> geschlossen
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.schedule import WeeklyDefault, ActivityWeeklyOverride, GlobalDateOverride, ActivityDateOverride

logger = logging.getLogger("app.services.schedule_resolver")

LAYER_ACTIVITY_DATE = "activity_date"
LAYER_GLOBAL_DATE = "global_date"
LAYER_ACTIVITY_WEEKLY = "activity_weekly"
LAYER_WEEKLY_DEFAULT = "weekly_default"
LAYER_NONE = "none"


@dataclass(frozen=True)
class ResolvedHours:
    start: Optional[time]
    end: Optional[time]
    is_open: bool
    layer: str


@dataclass
class ScheduleLayers:
    """Die Kandidaten aller vier Ebenen für genau ein (Aktivität, Datum)-Paar."""
    activity_date: Optional[ActivityDateOverride] = None
    global_date: Optional[GlobalDateOverride] = None
    activity_weekly: Optional[ActivityWeeklyOverride] = None
    weekly_default: Optional[WeeklyDefault] = None


CLOSED = ResolvedHours(start=None, end=None, is_open=False, layer=LAYER_NONE)


def day_of_week(d: date) -> int:
    """Wochentag mit Sonntag = 0 (Python: Montag = 0)."""
    return (d.weekday() + 1) % 7


def resolve(layers: ScheduleLayers) -> ResolvedHours:
    if layers.activity_date is not None:
        row = layers.activity_date
        return ResolvedHours(row.start_time, row.end_time, bool(row.is_available), LAYER_ACTIVITY_DATE)

    if layers.global_date is not None:
        row = layers.global_date
        return ResolvedHours(row.start_time, row.end_time, bool(row.is_open), LAYER_GLOBAL_DATE)

    if layers.activity_weekly is not None:
        row = layers.activity_weekly
        return ResolvedHours(row.start_time, row.end_time, bool(row.is_available), LAYER_ACTIVITY_WEEKLY)

    if layers.weekly_default is not None:
        row = layers.weekly_default
        return ResolvedHours(row.start_time, row.end_time, bool(row.is_active), LAYER_WEEKLY_DEFAULT)

    return CLOSED


def load_schedule_layers(db: Session, activity_id: UUID, target_date: date) -> ScheduleLayers:
    """Lädt alle vier Ebenen in einer Session, damit die Auflösung auf einem Stand basiert."""
    weekday = day_of_week(target_date)

    return ScheduleLayers(
        activity_date=db.query(ActivityDateOverride).filter(
            ActivityDateOverride.activity_id == activity_id,
            ActivityDateOverride.specific_date == target_date
        ).first(),
        global_date=db.query(GlobalDateOverride).filter(
            GlobalDateOverride.specific_date == target_date
        ).first(),
        activity_weekly=db.query(ActivityWeeklyOverride).filter(
            ActivityWeeklyOverride.activity_id == activity_id,
            ActivityWeeklyOverride.day_of_week == weekday
        ).first(),
        weekly_default=db.query(WeeklyDefault).filter(
            WeeklyDefault.day_of_week == weekday
        ).first(),
    )


def resolve_for_date(db: Session, activity_id: UUID, target_date: date) -> ResolvedHours:
    hours = resolve(load_schedule_layers(db, activity_id, target_date))
    logger.debug(f"Öffnungszeiten {activity_id} am {target_date}: {hours}")
    return hours
