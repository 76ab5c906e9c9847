from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Numeric, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime, timezone

from app.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    max_capacity = Column(Integer, nullable=False, default=10)
    shopify_variant_id = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)

    variants = relationship("ActivityVariant", back_populates="activity", order_by="ActivityVariant.order_position")
    questions = relationship("CustomQuestion", back_populates="activity", order_by="CustomQuestion.order_position")

    __table_args__ = (
        CheckConstraint("max_capacity >= 1", name="ck_activity_capacity"),
    )


class ActivityVariant(Base):
    """Variante einer Aktivität (z.B. andere Dauer/Kapazität), optional mit Shopify-Variante verknüpft."""
    __tablename__ = "activity_variants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    shopify_variant_id = Column(String(50), nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    max_capacity = Column(Integer, nullable=False, default=10)
    price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    order_position = Column(Integer, nullable=False, default=0)

    activity = relationship("Activity", back_populates="variants")
