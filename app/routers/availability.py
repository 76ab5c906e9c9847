from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Activity
from app.schemas.availability import ResolvedHoursResponse
from app.services import schedule_resolver
from app.utils.security import get_current_subject

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/{activity_id}", response_model=ResolvedHoursResponse)
def get_opening_hours(
    activity_id: UUID,
    target_date: date = Query(alias="date"),
    db: Session = Depends(get_db),
    subject: str = Depends(get_current_subject)
):
    activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if not activity:
        raise HTTPException(status_code=404, detail="Aktivität nicht gefunden")

    hours = schedule_resolver.resolve_for_date(db, activity_id, target_date)
    return ResolvedHoursResponse(
        activity_id=activity_id,
        date=target_date,
        day_of_week=schedule_resolver.day_of_week(target_date),
        is_open=hours.is_open,
        start_time=hours.start,
        end_time=hours.end,
        layer=hours.layer
    )
