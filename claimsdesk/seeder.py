"""Fill an empty pharmacies table from CSV files."""

from __future__ import annotations

import csv
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from claimsdesk.models import CreatePharmacyParams
from claimsdesk.store import Store

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PharmacyData:
    """A pharmacy record read from CSV."""

    chain: str
    npi: str


class SeedError(Exception):
    """Raised when pharmacy seeding cannot proceed."""


def _find_csv_files(directory: Path) -> list[Path]:
    return sorted(
        (entry for entry in directory.iterdir() if not entry.is_dir() and entry.name.endswith(".csv")),
        key=lambda entry: entry.name,
    )


def _read_records(csv_file: Path) -> list[list[str]]:
    try:
        handle = csv_file.open(encoding="utf-8", newline="")
    except OSError as exc:
        raise SeedError(f"failed to open CSV file: {exc}") from exc
    with handle:
        try:
            records = [row for row in csv.reader(handle) if row]
        except csv.Error as exc:
            raise SeedError(f"failed to read CSV: {exc}") from exc
    if records:
        expected = len(records[0])
        for number, record in enumerate(records, start=1):
            if len(record) != expected:
                raise SeedError(f"failed to read CSV: record {number}: wrong number of fields")
    return records


def _process_csv(store: Store, csv_file: Path) -> int:
    records = _read_records(csv_file)
    if len(records) < 2:
        raise SeedError("CSV file is empty or missing data")

    inserted = 0
    for line, record in enumerate(records[1:], start=2):
        if len(record) < 2:
            log.warning("Skipping invalid record at line %d: %s", line, record)
            continue
        pharmacy = PharmacyData(chain=record[0].strip(), npi=record[1].strip())
        if not pharmacy.chain or not pharmacy.npi:
            log.warning(
                "Skipping invalid pharmacy data at line %d: chain=%s, npi=%s",
                line,
                pharmacy.chain,
                pharmacy.npi,
            )
            continue
        try:
            store.create_pharmacy(CreatePharmacyParams(npi=pharmacy.npi, chain=pharmacy.chain))
        except sqlite3.Error as exc:
            log.warning("Failed to insert pharmacy %s: %s", pharmacy.npi, exc)
            continue
        inserted += 1
        log.info("Inserted pharmacy: %s (NPI: %s)", pharmacy.chain, pharmacy.npi)
    return inserted


def seed_pharmacies(store: Store, data_dir: str | Path) -> int:
    """Seed pharmacies from ``<data_dir>/pharmacies/*.csv`` when the table is empty.

    Returns the number of pharmacies inserted.
    """
    try:
        count = store.count_pharmacies()
    except sqlite3.Error as exc:
        raise SeedError(f"failed to check pharmacy count: {exc}") from exc
    if count > 0:
        log.info("Pharmacies table is not empty, skipping seed")
        return 0

    directory = Path(data_dir) / "pharmacies"
    try:
        csv_files = _find_csv_files(directory)
    except OSError as exc:
        raise SeedError(f"failed to find CSV files: {exc}") from exc
    if not csv_files:
        raise SeedError(f"no CSV files found in {directory}")

    inserted = 0
    for csv_file in csv_files:
        try:
            inserted += _process_csv(store, csv_file)
        except SeedError as exc:
            raise SeedError(f"failed to process {csv_file}: {exc}") from exc

    log.info("Successfully seeded %d pharmacies from CSV files", inserted)
    return inserted