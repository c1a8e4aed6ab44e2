"""SQL queries over the claims database."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from claimsdesk.models import (
    Claim,
    CreateClaimParams,
    CreatePharmacyParams,
    Pharmacy,
    Reversal,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pharmacies (
    npi TEXT PRIMARY KEY,
    chain TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS claims (
    id TEXT PRIMARY KEY,
    ndc TEXT NOT NULL,
    quantity INTEGER NOT NULL,
    npi TEXT NOT NULL REFERENCES pharmacies (npi),
    price REAL NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS reversals (
    id TEXT PRIMARY KEY,
    claim_id TEXT NOT NULL REFERENCES claims (id),
    timestamp TEXT NOT NULL
);
"""


class NotFoundError(LookupError):
    """Raised when a query that expects one row finds none."""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the tables if missing and enforce foreign keys."""
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(_SCHEMA)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _claim_from_row(row) -> Claim:
    claim_id, ndc, quantity, npi, price, stamp = row
    return Claim(
        id=uuid.UUID(claim_id),
        ndc=ndc,
        quantity=int(quantity),
        npi=npi,
        price=float(price),
        timestamp=datetime.fromisoformat(stamp),
    )


def _pharmacy_from_row(row) -> Pharmacy:
    npi, chain, stamp = row
    return Pharmacy(npi=npi, chain=chain, timestamp=datetime.fromisoformat(stamp))


def _reversal_from_row(row) -> Reversal:
    reversal_id, claim_id, stamp = row
    return Reversal(
        id=uuid.UUID(reversal_id),
        claim_id=uuid.UUID(claim_id),
        timestamp=datetime.fromisoformat(stamp),
    )


class Queries:
    """Queries run on one database connection; the caller owns its transactions."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _one(self, sql: str, params: tuple, what: str):
        row = self.conn.execute(sql, params).fetchone()
        if row is None:
            raise NotFoundError(f"{what} not found")
        return row

    def create_claim(self, params: CreateClaimParams) -> Claim:
        claim = Claim(
            id=uuid.uuid4(),
            ndc=params.ndc,
            quantity=int(params.quantity),
            npi=params.npi,
            price=float(params.price),
            timestamp=_now(),
        )
        self.conn.execute(
            "INSERT INTO claims (id, ndc, quantity, npi, price, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                str(claim.id),
                claim.ndc,
                claim.quantity,
                claim.npi,
                claim.price,
                claim.timestamp.isoformat(),
            ),
        )
        return claim

    def get_claim(self, claim_id: uuid.UUID) -> Claim:
        row = self._one(
            "SELECT id, ndc, quantity, npi, price, timestamp FROM claims "
            "WHERE id = ? LIMIT 1",
            (str(claim_id),),
            f"claim {claim_id}",
        )
        return _claim_from_row(row)

    def delete_claim(self, claim_id: uuid.UUID) -> None:
        self.conn.execute("DELETE FROM claims WHERE id = ?", (str(claim_id),))

    def create_pharmacy(self, params: CreatePharmacyParams) -> Pharmacy:
        pharmacy = Pharmacy(npi=params.npi, chain=params.chain, timestamp=_now())
        self.conn.execute(
            "INSERT INTO pharmacies (npi, chain, timestamp) VALUES (?, ?, ?)",
            (pharmacy.npi, pharmacy.chain, pharmacy.timestamp.isoformat()),
        )
        return pharmacy

    def get_pharmacy(self, npi: str) -> Pharmacy:
        row = self._one(
            "SELECT npi, chain, timestamp FROM pharmacies WHERE npi = ? LIMIT 1",
            (npi,),
            f"pharmacy {npi}",
        )
        return _pharmacy_from_row(row)

    def count_pharmacies(self) -> int:
        (count,) = self.conn.execute("SELECT COUNT(*) FROM pharmacies").fetchone()
        return int(count)

    def create_reversal(self, claim_id: uuid.UUID) -> Reversal:
        reversal = Reversal(id=uuid.uuid4(), claim_id=claim_id, timestamp=_now())
        self.conn.execute(
            "INSERT INTO reversals (id, claim_id, timestamp) VALUES (?, ?, ?)",
            (str(reversal.id), str(reversal.claim_id), reversal.timestamp.isoformat()),
        )
        return reversal

    def get_reversal_by_claim_id(self, claim_id: uuid.UUID) -> Reversal:
        row = self._one(
            "SELECT id, claim_id, timestamp FROM reversals WHERE claim_id = ? LIMIT 1",
            (str(claim_id),),
            f"reversal for claim {claim_id}",
        )
        return _reversal_from_row(row)

    def delete_reversal(self, reversal_id: uuid.UUID) -> None:
        self.conn.execute("DELETE FROM reversals WHERE id = ?", (str(reversal_id),))