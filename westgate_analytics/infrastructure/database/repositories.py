"""Data access layer for committed thresholds"""

from typing import List, Optional
from sqlalchemy.orm import Session
from westgate_analytics.infrastructure.database.models import ThresholdSetting
from westgate_analytics.domain.models import Thresholds


class ThresholdRepository:
    """Repository for threshold commits"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, thresholds: Thresholds, saved_by: str | None = None) -> ThresholdSetting:
        """Append a threshold commit; history is kept, the newest row wins"""
        setting = ThresholdSetting(
            default_threshold=thresholds.default_threshold,
            refusal_threshold=thresholds.refusal_threshold,
            saved_by=saved_by,
        )
        self.db.add(setting)
        self.db.flush()  # Get ID without committing
        return setting

    def latest(self) -> Optional[Thresholds]:
        """Most recently committed pair, or None before the first commit"""
        setting = (
            self.db.query(ThresholdSetting)
            .order_by(ThresholdSetting.created_at.desc())
            .first()
        )
        if setting is None:
            return None
        return Thresholds(
            default_threshold=setting.default_threshold,
            refusal_threshold=setting.refusal_threshold,
        )

    def history(self, limit: int = 20) -> List[ThresholdSetting]:
        return (
            self.db.query(ThresholdSetting)
            .order_by(ThresholdSetting.created_at.desc())
            .limit(limit)
            .all()
        )
