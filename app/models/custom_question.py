import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.database import Base


class QuestionType(enum.Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    NUMBER = "number"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"


class CustomQuestion(Base):
    """Zusatzfeld im Buchungsformular einer Aktivität."""
    __tablename__ = "booking_form_fields"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    label = Column(String(200), nullable=False)
    field_type = Column(Enum(QuestionType, values_callable=lambda e: [m.value for m in e]), nullable=False, default=QuestionType.TEXT)
    is_required = Column(Boolean, nullable=False, default=False)
    placeholder = Column(String(200), nullable=True)
    order_position = Column(Integer, nullable=False, default=0)

    activity = relationship("Activity", back_populates="questions")


class CustomAnswer(Base):
    __tablename__ = "booking_field_responses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reservation_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Uuid, ForeignKey("booking_form_fields.id", ondelete="CASCADE"), nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    reservation = relationship("Reservation", back_populates="answers")
    question = relationship("CustomQuestion")

    __table_args__ = (
        UniqueConstraint('reservation_id', 'question_id', name='uq_answer_question'),
    )
