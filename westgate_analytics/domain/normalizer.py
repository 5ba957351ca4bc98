"""Conversion of raw record-store rows into canonical LoanRecord values"""

import math
from typing import Any, Iterable, List, Mapping, Optional

from westgate_analytics.domain.exceptions import InvalidRecordError
from westgate_analytics.domain.models import Decision, LoanRecord
from westgate_analytics.utils.date_utils import parse_timestamp

_KNOWN_DECISIONS = {Decision.ACCEPT.value, Decision.REFUSE.value}


def coerce_score(value: Any) -> float:
    """Null, NaN and unparseable scores become 0; everything else is clamped to [0, 1]"""
    if value is None:
        return 0.0
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(score):
        return 0.0
    return min(max(score, 0.0), 1.0)


def coerce_decision(value: Any) -> Optional[str]:
    """Keep "accept"/"refuse" verbatim; anything else is an absent decision"""
    if isinstance(value, str) and value in _KNOWN_DECISIONS:
        return value
    return None


def normalize_row(row: Mapping[str, Any]) -> LoanRecord:
    """
    Build a LoanRecord from a store row.

    Rows carry the recorded decision under "decision"; synthetic rows use
    "historical_decision".

    Raises:
        InvalidRecordError: Missing id/created_at or unparseable timestamp
    """
    try:
        record_id = row["id"]
        raw_created_at = row["created_at"]
        if record_id is None or raw_created_at is None:
            raise KeyError("id" if record_id is None else "created_at")
        created_at = parse_timestamp(raw_created_at)
    except KeyError as e:
        raise InvalidRecordError(f"Loan row missing required field {e}") from e
    except (TypeError, ValueError) as e:
        raise InvalidRecordError(f"Loan row {row.get('id')!r} has invalid created_at: {e}") from e

    raw_decision = row.get("decision", row.get("historical_decision"))

    return LoanRecord(
        id=record_id,
        created_at=created_at,
        default_score=coerce_score(row.get("default_score")),
        refusal_score=coerce_score(row.get("refusal_score")),
        historical_decision=coerce_decision(raw_decision),
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[LoanRecord]:
    return [normalize_row(row) for row in rows]
