"""Shapes of the HTTP API's requests and responses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

NIL_UUID = uuid.UUID(int=0)


def _clock(moment: datetime) -> str:
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def _zone_suffix(moment: datetime) -> str:
    offset = moment.utcoffset()
    if offset is None or offset == timedelta(0):
        return "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, remainder = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}:{remainder // 60:02d}"


def _rfc3339_nano(moment: datetime) -> str:
    """Format *moment* as RFC 3339 with a fraction trimmed of trailing zeros."""
    text = _clock(moment)
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    return text + _zone_suffix(moment)


@dataclass(frozen=True)
class ApiClaim:
    """A pharmacy claim as the API presents it."""

    id: str
    ndc: str
    quantity: int
    npi: str
    price: float
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ndc": self.ndc,
            "quantity": self.quantity,
            "npi": self.npi,
            "price": self.price,
            "timestamp": _rfc3339_nano(self.timestamp),
        }


@dataclass(frozen=True)
class ApiReversal:
    """A claim reversal as the API presents it."""

    id: str
    claim_id: str
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "claim_id": self.claim_id,
            "timestamp": _rfc3339_nano(self.timestamp),
        }


@dataclass(frozen=True)
class CreateClaimRequest:
    """Body of a claim submission."""

    ndc: str = ""
    quantity: int = 0
    npi: str = ""
    price: float = 0.0


@dataclass(frozen=True)
class CreateReversalRequest:
    """Body of a claim reversal."""

    claim_id: uuid.UUID = NIL_UUID


@dataclass(frozen=True)
class APIResponse:
    """Standard response envelope; empty fields are left out."""

    success: bool = False
    message: str = ""
    status: str = ""
    data: Any = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.success:
            result["success"] = self.success
        if self.message:
            result["message"] = self.message
        if self.status:
            result["status"] = self.status
        if self.data is not None:
            result["data"] = self.data
        if self.error:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class ErrorResponse:
    """An error response."""

    error: str
    code: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "code": self.code, "message": self.message}