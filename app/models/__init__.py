from app.models.activity import Activity, ActivityVariant
from app.models.schedule import WeeklyDefault, ActivityWeeklyOverride, GlobalDateOverride, ActivityDateOverride
from app.models.reservation import Reservation, ReservationSource, ReservationStatus
from app.models.custom_question import CustomQuestion, CustomAnswer, QuestionType
