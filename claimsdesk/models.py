"""Rows stored in the claims database and the parameters used to create them."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Claim:
    """A pharmacy claim."""

    id: uuid.UUID
    ndc: str
    quantity: int
    npi: str
    price: float
    timestamp: datetime


@dataclass(frozen=True)
class Pharmacy:
    """A pharmacy identified by its NPI."""

    npi: str
    chain: str
    timestamp: datetime


@dataclass(frozen=True)
class Reversal:
    """The reversal of a claim."""

    id: uuid.UUID
    claim_id: uuid.UUID
    timestamp: datetime


@dataclass(frozen=True)
class CreateClaimParams:
    """Values for a new claim."""

    ndc: str
    quantity: int
    npi: str
    price: float


@dataclass(frozen=True)
class CreatePharmacyParams:
    """Values for a new pharmacy."""

    npi: str
    chain: str