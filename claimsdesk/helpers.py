"""JSON responses and conversions shared by the HTTP handlers."""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from flask import Response

from claimsdesk.api_types import (
    ApiClaim,
    ApiReversal,
    _clock,
    _rfc3339_nano,
    _zone_suffix,
)
from claimsdesk.models import Claim, Reversal

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def _encodable(value: Any, *, ordered: bool = False) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _encodable(to_dict(), ordered=True)
    if isinstance(value, Mapping):
        keys = list(value) if ordered else sorted(value, key=str)
        return {str(key): _encodable(value[key]) for key in keys}
    if isinstance(value, (list, tuple)):
        return [_encodable(item) for item in value]
    if isinstance(value, datetime):
        return _rfc3339_nano(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def json_response(status_code: int, data: Any = None) -> Response:
    """Build a JSON response; maps are written with sorted keys."""
    body = b""
    if data is not None:
        try:
            text = json.dumps(
                _encodable(data),
                ensure_ascii=False,
                separators=(",", ":"),
                allow_nan=False,
            )
        except (TypeError, ValueError):
            body = b"Failed to encode response\n"
        else:
            body = (text.translate(_HTML_ESCAPES) + "\n").encode("utf-8")
    return Response(body, status=status_code, content_type="application/json")


def error_response(
    status_code: int, message: str, details: Mapping[str, Any] | None = None
) -> Response:
    """Build an error response carrying status, message, code and any details."""
    payload: dict[str, Any] = {
        "status": "error",
        "message": message,
        "code": status_code,
    }
    if details:
        payload.update(details)
    return json_response(status_code, payload)


def convert_claim(claim: Claim) -> ApiClaim:
    """Turn a stored claim into its API form."""
    return ApiClaim(
        id=str(claim.id),
        ndc=claim.ndc,
        quantity=int(claim.quantity),
        npi=claim.npi,
        price=claim.price,
        timestamp=claim.timestamp,
    )


def convert_reversal(reversal: Reversal) -> ApiReversal:
    """Turn a stored reversal into its API form."""
    return ApiReversal(
        id=str(reversal.id),
        claim_id=str(reversal.claim_id),
        timestamp=reversal.timestamp,
    )


def parse_time(text: str) -> datetime:
    """Parse an RFC 3339 timestamp; raises ``ValueError`` when malformed."""
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    if zone == "Z":
        tzinfo = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tzinfo = timezone(sign * offset)
    micro = int((fraction or "")[:6].ljust(6, "0"))
    return datetime(
        int(year),
        int(month),
        int(day),
        int(hour),
        int(minute),
        int(second),
        micro,
        tzinfo=tzinfo,
    )


def format_time(moment: datetime) -> str:
    """Format *moment* as RFC 3339 in whole seconds."""
    return _clock(moment) + _zone_suffix(moment)