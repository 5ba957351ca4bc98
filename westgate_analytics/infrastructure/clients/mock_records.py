"""Synthetic loan records for development and demos"""

import logging
import random
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from westgate_analytics.domain.models import DateRange, LoanRecord
from westgate_analytics.domain.normalizer import normalize_rows
from westgate_analytics.infrastructure.observability.metrics import records_fetched_counter
from westgate_analytics.utils.date_utils import in_date_range

logger = logging.getLogger(__name__)


class MockRecordSource:
    """
    Generates uniformly scored loans between start and end.

    Historical decisions follow a 0.7 / 0.6 threshold rule for roughly 90% of
    loans and are random otherwise, so historical and simulated views differ.
    """

    def __init__(
        self,
        count: int = 500,
        seed: int | None = None,
        start: date = date(2023, 1, 1),
        end: datetime | None = None,
    ):
        self.count = count
        self.seed = seed
        self.start = datetime.combine(start, datetime.min.time(), tzinfo=timezone.utc)
        self.end = end or datetime.now(timezone.utc)

    def generate_rows(self) -> List[Dict[str, Any]]:
        rng = random.Random(self.seed)
        span_seconds = max((self.end - self.start).total_seconds(), 0)
        rows = []

        for i in range(self.count):
            created_at = self.start + timedelta(seconds=rng.random() * span_seconds)
            default_score = rng.random()
            refusal_score = rng.random()

            should_refuse = default_score > 0.7 or refusal_score > 0.6
            if rng.random() > 0.1:
                decision = "refuse" if should_refuse else "accept"
            else:
                decision = rng.choice(["accept", "refuse"])

            rows.append(
                {
                    "id": f"loan-{i}",
                    "created_at": created_at.isoformat(),
                    "default_score": default_score,
                    "refusal_score": refusal_score,
                    "historical_decision": decision,
                }
            )

        return rows

    async def get_records(self, date_range: Optional[DateRange] = None) -> List[LoanRecord]:
        records = sorted(normalize_rows(self.generate_rows()), key=lambda r: r.created_at)
        if date_range is not None:
            records = [r for r in records if in_date_range(r.created_at, date_range)]

        records_fetched_counter.labels(source="mock").inc(len(records))
        logger.info("Generated mock loan records", extra={"source": "mock", "record_count": len(records)})
        return records
