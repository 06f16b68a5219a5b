"""Conversion between wire timestamps and datetimes.

The API uses the pattern yyyy-MM-dd'T'HH:mm:ss.SSSXXX, e.g.
2019-08-19T14:03:27.000Z or 2019-08-19T16:03:27.000+02:00.
"""

from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from qontoclient.domain.errors import ConverterError


def date_to_model(api_date: Optional[str]) -> Optional[datetime]:
    """Parse a wire timestamp. None stays None.

    Raises:
        ConverterError: If the string is not an ISO 8601 timestamp
    """
    if api_date is None:
        return None
    try:
        return date_parser.isoparse(api_date)
    except (ValueError, TypeError) as e:
        raise ConverterError(f"Could not parse date '{api_date}': {e}") from e


def date_to_api(model_date: Optional[datetime]) -> Optional[str]:
    """Format a datetime for the wire. Naive datetimes are taken as UTC."""
    if model_date is None:
        return None
    if model_date.tzinfo is None:
        model_date = model_date.replace(tzinfo=timezone.utc)

    millis = model_date.microsecond // 1000
    offset = model_date.utcoffset()
    if not offset:
        zone = "Z"
    else:
        total_minutes = int(offset.total_seconds()) // 60
        sign = "+" if total_minutes >= 0 else "-"
        hours, minutes = divmod(abs(total_minutes), 60)
        zone = f"{sign}{hours:02d}:{minutes:02d}"
    return f"{model_date.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}{zone}"
