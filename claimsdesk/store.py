"""Database store with transactional helpers."""

from __future__ import annotations

import sqlite3
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from claimsdesk.models import (
    Claim,
    CreateClaimParams,
    CreatePharmacyParams,
    Pharmacy,
    Reversal,
)
from claimsdesk.queries import Queries, create_schema


class Store:
    """Runs queries on one SQLite connection, alone or inside transactions."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._queries = Queries(conn)
        self._lock = threading.RLock()

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Yield queries bound to a transaction committed on success, rolled back on error."""
        with self._lock:
            self._conn.execute("BEGIN")
            try:
                yield Queries(self._conn)
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")

    def create_claim(self, params: CreateClaimParams) -> Claim:
        with self._lock:
            return self._queries.create_claim(params)

    def get_claim(self, claim_id: uuid.UUID) -> Claim:
        with self._lock:
            return self._queries.get_claim(claim_id)

    def create_reversal(self, claim_id: uuid.UUID) -> Reversal:
        with self._lock:
            return self._queries.create_reversal(claim_id)

    def create_pharmacy(self, params: CreatePharmacyParams) -> Pharmacy:
        with self._lock:
            return self._queries.create_pharmacy(params)

    def get_pharmacy(self, npi: str) -> Pharmacy:
        with self._lock:
            return self._queries.get_pharmacy(npi)

    def count_pharmacies(self) -> int:
        with self._lock:
            return self._queries.count_pharmacies()

    def create_claim_tx(self, params: CreateClaimParams) -> Claim:
        """Create a claim inside its own transaction."""
        with self.transaction() as queries:
            return queries.create_claim(params)

    def create_reversal_tx(self, claim_id: uuid.UUID) -> Reversal:
        """Create a reversal inside its own transaction."""
        with self.transaction() as queries:
            return queries.create_reversal(claim_id)


def open_store(source: str) -> Store:
    """Open the SQLite database at *source*, creating the schema if needed."""
    conn = sqlite3.connect(source, isolation_level=None, check_same_thread=False)
    create_schema(conn)
    return Store(conn)