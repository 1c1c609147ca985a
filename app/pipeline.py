"""
The /generate-csv pipeline.

Fetching -> Validating -> Joining -> Sanitizing -> Writing.

Any stage may raise a PipelineError; the route turns it into the failure
envelope. Nothing here holds state between requests.
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool

from .config import AppConfig
from .csv_output import file_timestamp, write_csv
from .errors import EmptySource, PipelineError, UnexpectedFailure
from .fetch import SourceEndpoint, fetch_sources
from .join import join_sources
from .models import ErrorResponse, GenerateCsvResponse, SourceRecord
from .sanitize import sanitize_row

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[SourceRecord])

SUCCESS_MESSAGE = "CSV file generated successfully"
FAILURE_MESSAGE = "Failed to generate CSV file"


def validate_payloads(
    endpoints: Sequence[SourceEndpoint], payloads: Sequence[Any]
) -> List[List[SourceRecord]]:
    """
    Check every payload is a non-empty JSON array of records with integer ids.

    Raises:
        EmptySource: naming every source whose collection is empty.
        UnexpectedFailure: if a payload is not an array or an item is malformed.
    """
    for endpoint, payload in zip(endpoints, payloads):
        if not isinstance(payload, list):
            raise UnexpectedFailure(
                f"Malformed response from {endpoint.label}: expected a JSON array, "
                f"got {type(payload).__name__}"
            )

    empty = [endpoint.label for endpoint, payload in zip(endpoints, payloads) if not payload]
    if empty:
        raise EmptySource(empty)

    collections = []
    for endpoint, payload in zip(endpoints, payloads):
        try:
            collections.append(_records_adapter.validate_python(payload))
        except ValidationError as e:
            raise UnexpectedFailure(
                f"Malformed response from {endpoint.label}: {e.error_count()} invalid item(s)"
            ) from e
    return collections


async def generate_csv(
    client: httpx.AsyncClient,
    config: AppConfig,
    now: Optional[datetime] = None,
) -> GenerateCsvResponse:
    endpoints = config.endpoints()

    payloads = await fetch_sources(client, endpoints, config.retry_policy())
    users, posts, comments = validate_payloads(endpoints, payloads)

    joined = join_sources(users, posts, comments, max_identifier=config.max_identifier)
    rows = [sanitize_row(row) for row in joined]

    timestamp = file_timestamp(now or datetime.now(timezone.utc))
    path = await run_in_threadpool(write_csv, rows, config.output_dir, timestamp)

    return GenerateCsvResponse(
        success=True,
        message=SUCCESS_MESSAGE,
        file_path=str(path),
        record_count=len(rows),
        timestamp=timestamp,
    )


def failure_response(exc: BaseException, development: bool = False) -> tuple[int, ErrorResponse]:
    """Map an exception to (status code, failure envelope)."""
    if not isinstance(exc, PipelineError):
        wrapped = UnexpectedFailure(str(exc) or type(exc).__name__)
        wrapped.__cause__ = exc
        exc = wrapped

    details = None
    if development:
        cause = exc.__cause__ or exc
        details = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))

    return exc.status_code, ErrorResponse(
        success=False,
        message=FAILURE_MESSAGE,
        error=str(exc),
        details=details,
    )
