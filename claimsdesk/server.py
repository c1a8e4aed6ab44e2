"""HTTP server exposing claims, reversals and a health check."""

from __future__ import annotations

import json
import logging
import math
import sqlite3
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from flask import Flask, Response, g, request

from claimsdesk.api_types import (
    NIL_UUID,
    APIResponse,
    CreateClaimRequest,
    CreateReversalRequest,
)
from claimsdesk.config import Config
from claimsdesk.events import EventLogger
from claimsdesk.helpers import convert_claim, error_response, json_response
from claimsdesk.models import CreateClaimParams
from claimsdesk.store import Store

log = logging.getLogger(__name__)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_JSON_WHITESPACE = " \t\r\n"

_UUID_DETAILS = {
    "field": "claim_id",
    "type": "string (UUID)",
    "format": "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx",
    "example": "550e8400-e29b-41d4-a716-446655440000",
}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


def _decode_first_value(body: bytes) -> Any:
    text = body.decode("utf-8").lstrip(_JSON_WHITESPACE)
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    value, _ = decoder.raw_decode(text)
    return value


def _fields(document: Any, names: tuple[str, ...]) -> dict[str, Any]:
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError("request body must be a JSON object")
    found: dict[str, Any] = {}
    for key, value in document.items():
        for name in names:
            if key.casefold() == name:
                found[name] = value
    return found


def _string(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("expected a string")
    return value


def _integer(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an integer")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError("integer out of range")
    return value


def _number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError("number out of range") from exc
    if not math.isfinite(number):
        raise ValueError("number out of range")
    return number


def _decode_claim_request(body: bytes) -> CreateClaimRequest:
    fields = _fields(_decode_first_value(body), ("ndc", "quantity", "npi", "price"))
    return CreateClaimRequest(
        ndc=_string(fields.get("ndc")),
        quantity=_integer(fields.get("quantity")),
        npi=_string(fields.get("npi")),
        price=_number(fields.get("price")),
    )


def _decode_reversal_request(body: bytes) -> CreateReversalRequest:
    fields = _fields(_decode_first_value(body), ("claim_id",))
    raw = fields.get("claim_id")
    if raw is None:
        return CreateReversalRequest()
    if not isinstance(raw, str):
        raise ValueError("claim_id must be a string")
    return CreateReversalRequest(claim_id=uuid.UUID(raw))


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port) if port else 80


class Server:
    """Routes HTTP requests to the claims store and records events."""

    def __init__(self, store: Store, logger: EventLogger | None = None) -> None:
        self.store = store
        self.logger = logger
        self.app = Flask(__name__)
        self._setup_routes()

    def _setup_routes(self) -> None:
        app = self.app
        app.add_url_rule("/health", "health", self._health_check, methods=["GET"])
        app.add_url_rule("/api/v1/claims", "create_claim", self._create_claim, methods=["POST"])
        app.add_url_rule(
            "/api/v1/claims/<claim_id>", "get_claim", self._get_claim, methods=["GET"]
        )
        app.add_url_rule(
            "/api/v1/reversals", "create_reversal", self._create_reversal, methods=["POST"]
        )
        app.before_request(self._start_timer)
        app.after_request(self._log_request)

    def start(self, config: Config) -> None:
        """Serve requests on ``config.server_address`` until stopped."""
        host, port = _split_address(config.server_address)
        log.info("Starting server on %s", config.server_address)
        self.app.run(host=host, port=port, threaded=True, use_reloader=False)

    @staticmethod
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @staticmethod
    def _log_request(response: Response) -> Response:
        started = g.get("request_started", time.perf_counter())
        elapsed = time.perf_counter() - started
        log.info(
            "%s %s %d %.3fms",
            request.method,
            request.path,
            response.status_code,
            elapsed * 1000,
        )
        return response

    def _health_check(self) -> Response:
        response = APIResponse(
            success=True,
            message="Server is healthy",
            data={"timestamp": datetime.now(timezone.utc), "status": "ok"},
        )
        return json_response(200, response)

    def _create_claim(self) -> Response:
        try:
            req = _decode_claim_request(request.get_data())
        except ValueError:
            return error_response(
                400,
                "Invalid JSON format in request body",
                {
                    "expected_format": "JSON object with fields: ndc (string), npi (string), "
                    "quantity (integer), price (number)",
                    "example": {
                        "ndc": "123456789",
                        "npi": "9876543210",
                        "quantity": 30,
                        "price": 15.99,
                    },
                },
            )

        if not req.ndc:
            return error_response(
                400,
                "NDC (National Drug Code) is required",
                {
                    "field": "ndc",
                    "type": "string",
                    "description": "National Drug Code identifier",
                    "example": "123456789",
                },
            )
        if not req.npi:
            return error_response(
                400,
                "NPI (National Provider Identifier) is required",
                {
                    "field": "npi",
                    "type": "string",
                    "description": "National Provider Identifier",
                    "example": "9876543210",
                },
            )
        if req.quantity <= 0:
            return error_response(
                400,
                "Quantity must be greater than 0",
                {"field": "quantity", "type": "integer", "min_value": 1, "example": 30},
            )
        if req.price < 0:
            return error_response(
                400,
                "Price cannot be negative",
                {"field": "price", "type": "number", "min_value": 0, "example": 15.99},
            )

        params = CreateClaimParams(
            ndc=req.ndc, quantity=req.quantity, npi=req.npi, price=req.price
        )
        try:
            claim = self.store.create_claim(params)
        except sqlite3.Error:
            return error_response(500, "Failed to create claim")

        if self.logger is not None:
            try:
                self.logger.log_claim_submission(
                    claim.id, req.ndc, req.npi, req.quantity, req.price
                )
            except (OSError, ValueError) as exc:
                log.warning("Warning: failed to log claim submission: %s", exc)

        return json_response(201, {"status": "claim submitted", "claim_id": str(claim.id)})

    def _get_claim(self, claim_id: str) -> Response:
        if not claim_id:
            return error_response(400, "Claim ID cannot be empty")
        try:
            parsed = uuid.UUID(claim_id)
        except ValueError:
            return error_response(
                400, "Invalid claim ID format. Must be a valid UUID", _UUID_DETAILS
            )
        try:
            claim = self.store.get_claim(parsed)
        except (LookupError, sqlite3.Error):
            return error_response(404, "Claim not found")
        return json_response(200, APIResponse(success=True, data=convert_claim(claim)))

    def _create_reversal(self) -> Response:
        try:
            req = _decode_reversal_request(request.get_data())
        except ValueError:
            return error_response(
                400,
                "Invalid JSON format in request body",
                {
                    "expected_format": "JSON object with field: claim_id (string, UUID format)",
                    "example": {"claim_id": "550e8400-e29b-41d4-a716-446655440000"},
                },
            )
        if req.claim_id == NIL_UUID:
            return error_response(
                400, "Claim ID is required and must be a valid UUID", _UUID_DETAILS
            )
        try:
            self.store.create_reversal(req.claim_id)
        except sqlite3.Error:
            return error_response(500, "Failed to create reversal")

        if self.logger is not None:
            try:
                self.logger.log_claim_reversal(req.claim_id)
            except (OSError, ValueError) as exc:
                log.warning("Warning: failed to log claim reversal: %s", exc)

        return json_response(201, {"status": "claim reversed", "claim_id": str(req.claim_id)})