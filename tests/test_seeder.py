import pytest

from claimsdesk.models import CreatePharmacyParams
from claimsdesk.seeder import SeedError, seed_pharmacies
from claimsdesk.store import open_store


@pytest.fixture
def store():
    with open_store(":memory:") as opened:
        yield opened


def _write(data_dir, name, text):
    folder = data_dir / "pharmacies"
    folder.mkdir(parents=True, exist_ok=True)
    (folder / name).write_text(text, encoding="utf-8")


def test_seeds_all_rows(store, tmp_path):
    _write(tmp_path, "a.csv", "chain,npi\nhealth, 1000000001\nwell,1000000002\n")
    _write(tmp_path, "b.csv", "chain,npi\ncare,1000000003\n")
    assert seed_pharmacies(store, tmp_path) == 3
    assert store.count_pharmacies() == 3
    assert store.get_pharmacy("1000000001").chain == "health"


def test_skips_when_table_not_empty(store, tmp_path):
    store.create_pharmacy(CreatePharmacyParams(npi="1000000009", chain="first"))
    assert seed_pharmacies(store, tmp_path) == 0
    assert store.count_pharmacies() == 1


def test_missing_directory(store, tmp_path):
    with pytest.raises(SeedError, match="failed to find CSV files"):
        seed_pharmacies(store, tmp_path)


def test_no_csv_files(store, tmp_path):
    _write(tmp_path, "notes.txt", "chain,npi\n")
    with pytest.raises(SeedError, match="no CSV files found"):
        seed_pharmacies(store, tmp_path)


def test_header_only_file(store, tmp_path):
    _write(tmp_path, "a.csv", "chain,npi\n")
    with pytest.raises(SeedError, match="CSV file is empty or missing data"):
        seed_pharmacies(store, tmp_path)


def test_blank_fields_skipped(store, tmp_path):
    _write(tmp_path, "a.csv", "chain,npi\n ,1000000001\nwell,\ncare,1000000003\n")
    assert seed_pharmacies(store, tmp_path) == 1
    assert store.get_pharmacy("1000000003").chain == "care"


def test_duplicate_npi_skipped(store, tmp_path):
    _write(tmp_path, "a.csv", "chain,npi\nhealth,1000000001\nother,1000000001\n")
    assert seed_pharmacies(store, tmp_path) == 1
    assert store.get_pharmacy("1000000001").chain == "health"


def test_ragged_rows_rejected(store, tmp_path):
    _write(tmp_path, "a.csv", "chain,npi\nhealth,1000000001,extra\n")
    with pytest.raises(SeedError, match="wrong number of fields"):
        seed_pharmacies(store, tmp_path)
    assert store.count_pharmacies() == 0