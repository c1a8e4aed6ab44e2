import dataclasses
import uuid
from datetime import datetime, timezone

import pytest

from claimsdesk.models import (
    Claim,
    CreateClaimParams,
    CreatePharmacyParams,
    Pharmacy,
    Reversal,
)

MOMENT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_claim_equality_by_value():
    claim_id = uuid.uuid4()
    first = Claim(claim_id, "abc", 3, "123", 1.5, MOMENT)
    second = Claim(claim_id, "abc", 3, "123", 1.5, MOMENT)
    assert first == second
    assert hash(first) == hash(second)


def test_claim_is_immutable():
    claim = Claim(uuid.uuid4(), "abc", 3, "123", 1.5, MOMENT)
    with pytest.raises(dataclasses.FrozenInstanceError):
        claim.quantity = 4
    assert claim.quantity == 3
    assert claim.ndc == "abc"


def test_replace_produces_new_pharmacy():
    pharmacy = Pharmacy("123", "chain", MOMENT)
    renamed = dataclasses.replace(pharmacy, chain="other")
    assert renamed.chain == "other"
    assert pharmacy.chain == "chain"


def test_reversal_fields_round_trip():
    reversal = Reversal(uuid.uuid4(), uuid.uuid4(), MOMENT)
    assert Reversal(**dataclasses.asdict(reversal)) == reversal


def test_params_keep_given_values():
    claim_params = CreateClaimParams("ndc1", 30, "9876543210", 15.99)
    assert dataclasses.astuple(claim_params) == ("ndc1", 30, "9876543210", 15.99)
    pharmacy_params = CreatePharmacyParams(npi="9876543210", chain="chain")
    assert dataclasses.asdict(pharmacy_params) == {"npi": "9876543210", "chain": "chain"}