import sqlite3
import uuid
from datetime import timedelta

import pytest

from claimsdesk.models import CreateClaimParams, CreatePharmacyParams
from claimsdesk.queries import NotFoundError, Queries, create_schema
from claimsdesk.randomgen import (
    random_int,
    random_money,
    random_numeric_string,
    random_string,
)


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def tx_queries(conn):
    queries = Queries(conn)
    yield queries
    conn.rollback()


def _pharmacy_params():
    return CreatePharmacyParams(npi=random_numeric_string(10), chain=random_string(10))


def _claim_params(npi):
    return CreateClaimParams(
        ndc=random_string(11),
        price=random_money(),
        quantity=random_int(1, 1000),
        npi=npi,
    )


def test_create_pharmacy(tx_queries):
    arg = _pharmacy_params()
    pharmacy = tx_queries.create_pharmacy(arg)
    assert pharmacy.npi == arg.npi
    assert pharmacy.chain == arg.chain


def test_get_pharmacy(tx_queries):
    pharmacy1 = tx_queries.create_pharmacy(_pharmacy_params())
    pharmacy2 = tx_queries.get_pharmacy(pharmacy1.npi)
    assert pharmacy2.npi == pharmacy1.npi
    assert pharmacy2.chain == pharmacy1.chain
    assert pharmacy2.timestamp == pharmacy1.timestamp


def test_simple_transaction(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    assert pharmacy.npi
    retrieved = tx_queries.get_pharmacy(pharmacy.npi)
    assert retrieved.npi == pharmacy.npi


def test_create_claim_with_transaction(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    arg = _claim_params(pharmacy.npi)
    claim = tx_queries.create_claim(arg)
    assert claim.ndc == arg.ndc
    assert claim.price == arg.price
    assert claim.npi == arg.npi
    assert claim.quantity == arg.quantity
    assert claim.id.int != 0
    assert claim.timestamp.year > 1

    retrieved = tx_queries.get_claim(claim.id)
    assert retrieved.id == claim.id
    assert retrieved.ndc == claim.ndc


def test_get_claim(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    claim1 = tx_queries.create_claim(_claim_params(pharmacy.npi))
    claim2 = tx_queries.get_claim(claim1.id)
    assert claim2.id == claim1.id
    assert claim2.ndc == claim1.ndc
    assert claim2.npi == claim1.npi
    assert claim2.price == claim1.price
    assert claim2.quantity == claim1.quantity
    assert abs(claim2.timestamp - claim1.timestamp) <= timedelta(seconds=1)


def test_create_reversal(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    claim = tx_queries.create_claim(_claim_params(pharmacy.npi))
    reversal = tx_queries.create_reversal(claim.id)
    assert reversal.claim_id == claim.id
    assert reversal.id.int != 0
    assert reversal.timestamp.year > 1


def test_get_reversal_by_claim_id(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    claim = tx_queries.create_claim(_claim_params(pharmacy.npi))
    reversal1 = tx_queries.create_reversal(claim.id)
    reversal2 = tx_queries.get_reversal_by_claim_id(reversal1.claim_id)
    assert reversal2.claim_id == reversal1.claim_id
    assert reversal2.id == reversal1.id
    assert abs(reversal2.timestamp - reversal1.timestamp) <= timedelta(seconds=1)


def test_rollback_discards_data(conn):
    queries = Queries(conn)
    queries.create_pharmacy(_pharmacy_params())
    assert queries.count_pharmacies() == 1
    conn.rollback()
    assert queries.count_pharmacies() == 0


def test_count_pharmacies(tx_queries):
    assert tx_queries.count_pharmacies() == 0
    for _ in range(3):
        tx_queries.create_pharmacy(_pharmacy_params())
    assert tx_queries.count_pharmacies() == 3


def test_duplicate_pharmacy_rejected(tx_queries):
    arg = _pharmacy_params()
    tx_queries.create_pharmacy(arg)
    with pytest.raises(sqlite3.IntegrityError):
        tx_queries.create_pharmacy(arg)


def test_claim_requires_known_pharmacy(tx_queries):
    with pytest.raises(sqlite3.IntegrityError):
        tx_queries.create_claim(_claim_params(random_numeric_string(10)))


def test_reversal_requires_known_claim(tx_queries):
    with pytest.raises(sqlite3.IntegrityError):
        tx_queries.create_reversal(uuid.uuid4())


def test_missing_rows_raise_not_found(tx_queries):
    with pytest.raises(NotFoundError):
        tx_queries.get_claim(uuid.uuid4())
    with pytest.raises(NotFoundError):
        tx_queries.get_pharmacy(random_numeric_string(10))
    with pytest.raises(NotFoundError):
        tx_queries.get_reversal_by_claim_id(uuid.uuid4())


def test_delete_reversal_then_claim(tx_queries):
    pharmacy = tx_queries.create_pharmacy(_pharmacy_params())
    claim = tx_queries.create_claim(_claim_params(pharmacy.npi))
    reversal = tx_queries.create_reversal(claim.id)

    tx_queries.delete_reversal(reversal.id)
    with pytest.raises(NotFoundError):
        tx_queries.get_reversal_by_claim_id(claim.id)

    tx_queries.delete_claim(claim.id)
    with pytest.raises(NotFoundError):
        tx_queries.get_claim(claim.id)


def test_create_schema_is_idempotent(conn):
    create_schema(conn)
    queries = Queries(conn)
    pharmacy = queries.create_pharmacy(_pharmacy_params())
    assert queries.get_pharmacy(pharmacy.npi).chain == pharmacy.chain