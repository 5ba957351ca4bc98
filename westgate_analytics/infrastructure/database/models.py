"""SQLAlchemy ORM models for committed thresholds"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Float, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ThresholdSetting(Base):
    """Threshold pair committed for use by the underwriting model"""

    __tablename__ = "threshold_setting"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    default_threshold = Column(Float, nullable=False)
    refusal_threshold = Column(Float, nullable=False)
    saved_by = Column(Text, nullable=True)
    # Set client-side so commits within the same second still order correctly
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
