"""Date/time data endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query

from datagen_api.dependencies import localized_generator
from datagen_api.errors import InvalidParameter
from datagen_api.generators import GeneratorContext
from datagen_api.validation import parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dates"])

MAX_YEARS = 100


def parse_ref_date(raw: str | None) -> datetime:
    """ISO-8601 reference date, UTC if no offset is given. Defaults to now."""
    if raw is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidParameter(f"Invalid refDate parameter: '{raw}'. Must be an ISO-8601 date.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@router.get("/date")
async def generate_date(
    count: str | None = None,
    date_format: str = Query(default="iso", alias="format"),
    years: str | None = None,
    ref_date: str | None = Query(default=None, alias="refDate"),
    fake: GeneratorContext = Depends(localized_generator),
):
    """Generate date/time values.

    ``format`` selects the value: ``iso`` (default) and ``unix`` (epoch
    milliseconds) draw from any time; ``recent``/``past`` draw from the
    ``years`` before ``refDate``; ``soon``/``future`` from the ``years`` after.
    """
    n = parse_count(count)
    span_years = parse_count(years, MAX_YEARS, name="years") if years is not None else 1
    reference = parse_ref_date(ref_date)
    kind = date_format.lower()
    span = timedelta(days=span_years * 365)
    start, end = reference, reference
    try:
        if kind in ("recent", "past"):
            start = reference - span
        elif kind in ("soon", "future"):
            end = reference + span
    except OverflowError:
        raise InvalidParameter(
            f"Invalid refDate parameter: '{ref_date}'. "
            f"{span_years} year(s) from it falls outside the supported date range."
        )
    logger.info("Handling /date with count: %d, format: %s, years: %d", n, kind, span_years)

    def date() -> dict:
        if kind == "unix":
            value = int(fake.date_time(tzinfo=timezone.utc).timestamp() * 1000)
        elif start != end:
            value = fake.date_time_between(start_date=start, end_date=end, tzinfo=timezone.utc).isoformat()
        else:
            value = fake.date_time(tzinfo=timezone.utc).isoformat()
        return {"date": value}

    return fake.produce(n, date)
