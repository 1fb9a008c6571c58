"""Encoding and decoding of the compact XDS.b timestamp (`YYYY[MM[DD[hh[mm[ss]]]]]`)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

from res_bridge.core.wire import REGISTRY_WIRE

DateLike = Union[date, datetime]

# Precisions allowed by the XDS DTM type, mapped to the strptime format for that length.
_PRECISION_FORMATS = {
    4: "%Y",
    6: "%Y%m",
    8: "%Y%m%d",
    10: "%Y%m%d%H",
    12: "%Y%m%d%H%M",
    14: "%Y%m%d%H%M%S",
}


def _to_utc(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def format_xds_timestamp(value: DateLike) -> str:
    """
    Render a date or datetime as a 14-digit UTC XDS timestamp.

    Naive datetimes are taken to already be UTC. Plain dates render at midnight.
    Sub-second precision is dropped.
    """
    return _to_utc(value).strftime(REGISTRY_WIRE.timestamp_format)


def parse_xds_timestamp(text: str) -> datetime:
    """
    Decode an XDS timestamp of 4 to 14 digits into a UTC-aware datetime.

    Raises:
        ValueError: If the text is not a valid XDS timestamp.
    """
    value = (text or "").strip()
    fmt = _PRECISION_FORMATS.get(len(value))
    if fmt is None or not value.isdigit():
        raise ValueError(f"Invalid XDS timestamp: {text!r}")
    return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
