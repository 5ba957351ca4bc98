"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Callable, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from westgate_analytics.api.main import create_app
from westgate_analytics.api.dependencies import get_record_source
from westgate_analytics.domain.exceptions import RecordStoreError
from westgate_analytics.domain.models import DateRange, LoanRecord
from westgate_analytics.infrastructure.database.models import Base
from westgate_analytics.infrastructure.database.session import get_db
from westgate_analytics.utils.date_utils import in_date_range


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StaticRecordSource:
    """In-memory record source standing in for the remote store"""

    def __init__(self, records: List[LoanRecord], error: Optional[Exception] = None):
        self.records = records
        self.error = error
        self.calls: List[Optional[DateRange]] = []

    async def get_records(self, date_range: Optional[DateRange] = None) -> List[LoanRecord]:
        self.calls.append(date_range)
        if self.error is not None:
            raise self.error
        if date_range is None:
            return list(self.records)
        return [r for r in self.records if in_date_range(r.created_at, date_range)]


@pytest.fixture
def make_record() -> Callable[..., LoanRecord]:
    """Factory for loan records with sensible defaults"""

    def _make(
        default_score: float = 0.5,
        refusal_score: float = 0.3,
        created_at: datetime = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
        historical_decision: Optional[str] = "accept",
        id: int = 1,
    ) -> LoanRecord:
        return LoanRecord(
            id=id,
            created_at=created_at,
            default_score=default_score,
            refusal_score=refusal_score,
            historical_decision=historical_decision,
        )

    return _make


@pytest.fixture
def sample_records() -> List[LoanRecord]:
    """Loans spread over three months of 2024 with mixed scores and decisions"""
    rows = [
        # (day, default, refusal, recorded decision)
        (datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc), 0.20, 0.10, "accept"),
        (datetime(2024, 1, 20, 16, 0, tzinfo=timezone.utc), 0.80, 0.30, "refuse"),
        (datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc), 0.40, 0.70, "refuse"),
        (datetime(2024, 2, 10, 8, 0, tzinfo=timezone.utc), 0.10, 0.20, "accept"),
        (datetime(2024, 2, 14, 12, 0, tzinfo=timezone.utc), 0.60, 0.50, None),
        (datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc), 0.70, 0.60, "accept"),
        (datetime(2024, 3, 18, 18, 45, tzinfo=timezone.utc), 0.95, 0.90, "refuse"),
        (datetime(2024, 3, 30, 7, 15, tzinfo=timezone.utc), 0.00, 0.00, "accept"),
    ]
    return [
        LoanRecord(
            id=i,
            created_at=created_at,
            default_score=default_score,
            refusal_score=refusal_score,
            historical_decision=decision,
        )
        for i, (created_at, default_score, refusal_score, decision) in enumerate(rows, start=1)
    ]


@pytest.fixture
def record_source(sample_records: List[LoanRecord]) -> StaticRecordSource:
    return StaticRecordSource(sample_records)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, record_source: StaticRecordSource) -> TestClient:
    """Create FastAPI test client with test database and in-memory records"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_record_source] = lambda: record_source
    return TestClient(app)


@pytest.fixture
def failing_client(db: Session) -> TestClient:
    """Test client whose record source is unreachable"""
    app = create_app()
    source = StaticRecordSource([], error=RecordStoreError("connection refused"))

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_record_source] = lambda: source
    return TestClient(app)
