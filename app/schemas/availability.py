from uuid import UUID
from datetime import date, time
from pydantic import BaseModel
from typing import Optional


class ResolvedHoursResponse(BaseModel):
    activity_id: UUID
    date: date
    day_of_week: int
    is_open: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    layer: str
