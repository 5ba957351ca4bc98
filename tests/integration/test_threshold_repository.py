"""Integration tests for threshold persistence"""

from sqlalchemy.orm import Session
from westgate_analytics.domain.models import Thresholds
from westgate_analytics.infrastructure.database.repositories import ThresholdRepository


def test_latest_is_none_before_first_commit(db: Session):
    assert ThresholdRepository(db).latest() is None


def test_latest_returns_newest_commit(db: Session):
    repo = ThresholdRepository(db)
    repo.save(Thresholds(0.7, 0.6), saved_by="initial")
    repo.save(Thresholds(0.55, 0.45), saved_by="tuned")
    db.commit()

    assert repo.latest() == Thresholds(0.55, 0.45)
    assert [s.saved_by for s in repo.history()] == ["tuned", "initial"]


def test_save_assigns_id_without_commit(db: Session):
    setting = ThresholdRepository(db).save(Thresholds(0.3, 0.2))
    assert setting.id is not None
    assert setting.created_at is not None
