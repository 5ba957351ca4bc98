"""Record store HTTP client for fetching loan records page by page"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx

from westgate_analytics.config import Settings, settings
from westgate_analytics.domain.exceptions import InvalidRecordError, RecordStoreError
from westgate_analytics.domain.models import DateRange, LoanRecord
from westgate_analytics.domain.normalizer import normalize_rows
from westgate_analytics.infrastructure.clients.mock_records import MockRecordSource
from westgate_analytics.infrastructure.observability.metrics import (
    record_fetch_failures_counter,
    records_fetched_counter,
)
from westgate_analytics.utils.date_utils import end_of_day, in_date_range, start_of_day

logger = logging.getLogger(__name__)

RECORD_COLUMNS = "id,created_at,default_score,refusal_score,decision"


class RecordSource(Protocol):
    """Anything that can load the full record set for an analysis window"""

    async def get_records(self, date_range: Optional[DateRange] = None) -> List[LoanRecord]:
        ...


class SupabaseRecordClient:
    """Client for the remote loan table exposed through a PostgREST endpoint"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        table: str | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self.table = table or settings.loans_table
        self.page_size = page_size or settings.page_size
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _query_params(self, offset: int, date_range: Optional[DateRange]) -> List[Tuple[str, Any]]:
        params: List[Tuple[str, Any]] = [
            ("select", RECORD_COLUMNS),
            ("default_score", "not.is.null"),
            ("refusal_score", "not.is.null"),
            ("order", "created_at.asc"),
        ]
        if date_range is not None:
            params.append(("created_at", f"gte.{start_of_day(date_range.start).isoformat()}"))
            params.append(("created_at", f"lte.{end_of_day(date_range.end).isoformat()}"))
        params.append(("offset", offset))
        params.append(("limit", self.page_size))
        return params

    async def get_records(self, date_range: Optional[DateRange] = None) -> List[LoanRecord]:
        """
        Fetch every loan record in the window, ordered by created_at.

        Pages of page_size rows are requested until a short page signals the
        end. A failure aborts the whole load; there is no retry.

        Raises:
            RecordStoreError: On timeout, HTTP errors, or invalid rows
        """
        rows: List[Dict[str, Any]] = []
        offset = 0

        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                while True:
                    response = await client.get(
                        f"/rest/v1/{self.table}",
                        params=self._query_params(offset, date_range),
                    )
                    response.raise_for_status()
                    page = response.json()
                    if not isinstance(page, list):
                        raise ValueError("expected a JSON array of rows")

                    rows.extend(page)
                    logger.debug("Fetched record page", extra={"offset": offset, "rows": len(page)})

                    if len(page) < self.page_size:
                        break
                    offset += self.page_size

                records = normalize_rows(rows)

            except httpx.TimeoutException as e:
                record_fetch_failures_counter.inc()
                raise RecordStoreError(f"Record store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                record_fetch_failures_counter.inc()
                raise RecordStoreError(f"Record store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                record_fetch_failures_counter.inc()
                raise RecordStoreError(f"Record store unreachable: {e}") from e
            except (InvalidRecordError, ValueError, TypeError) as e:
                record_fetch_failures_counter.inc()
                raise RecordStoreError(f"Invalid loan data from record store: {e}") from e

        # The store bounds are instants; re-check on calendar days
        if date_range is not None:
            records = [r for r in records if in_date_range(r.created_at, date_range)]

        records_fetched_counter.labels(source="supabase").inc(len(records))
        logger.info("Loaded loan records", extra={"source": "supabase", "record_count": len(records)})
        return records


def build_record_source(config: Settings = settings) -> RecordSource:
    """Pick the record source strategy named by configuration"""
    if config.data_source == "supabase":
        return SupabaseRecordClient(
            base_url=config.supabase_url,
            api_key=config.supabase_anon_key,
            table=config.loans_table,
            page_size=config.page_size,
            timeout=config.http_timeout_seconds,
        )
    if config.data_source == "mock":
        return MockRecordSource(count=config.mock_record_count, seed=config.mock_seed)
    raise ValueError(f"Unknown data source: {config.data_source!r}")
