# claimsdesk

claimsdesk is a small HTTP service for pharmacy claims, built on Flask and
SQLite. It accepts claim submissions, returns stored claims by ID, records
reversals, seeds its pharmacy table from CSV files on first start, and keeps
a JSON log of every submission and reversal.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Configuration

Settings are read from a file named `app.env`:

    DB_DRIVER=sqlite
    DB_SOURCE=claims.db
    SERVER_ADDRESS=0.0.0.0:8080

- `DB_SOURCE` is the path of the SQLite database file (`:memory:` also
  works). The tables are created if they do not exist.
- `SERVER_ADDRESS` is the `host:port` the server listens on; an empty host
  (`:8080`) means all interfaces.
- `DB_DRIVER` is read but not used.

`claimsdesk.config.load_config(path)` looks for `app.env` in `path` first.
When it is found there, environment variables override the keys the file
defines. Otherwise it looks in the current directory and then the parent
directory, and uses the file's values as they are. If no file is found it
raises `FileNotFoundError`.

The `claimsdesk` command calls `load_config("")`, so it reads `app.env` from
the current or parent directory, and environment variables do not override it.

## Running

    claimsdesk

The command takes no options besides `--help`. On start it:

1. loads the configuration;
2. opens the SQLite store at `DB_SOURCE`;
3. prepares the event log in `logs/pharmacy_events.json`;
4. if the pharmacy table is empty, loads every `*.csv` file in
   `data/pharmacies/` (a header row, then `chain,npi` rows; rows with a blank
   chain or NPI, and rows that cannot be inserted, are skipped);
5. serves HTTP until it receives SIGINT or SIGTERM.

A failure to prepare the event log or to seed pharmacies is logged as a
warning and the server still starts. If the configuration cannot be loaded,
the database cannot be opened or the server cannot start, the command exits
with status 1. Each request is logged with its method, path, status and time
taken.

## Endpoints

| Method | Path                   | Purpose                          |
|--------|------------------------|----------------------------------|
| GET    | `/health`              | Liveness check                   |
| POST   | `/api/v1/claims`       | Submit a claim                   |
| GET    | `/api/v1/claims/{id}`  | Fetch a claim by its UUID        |
| POST   | `/api/v1/reversals`    | Reverse a previously filed claim |

Responses are JSON. Object keys are written in sorted order, except in the
standard envelope and claim objects, which keep their field order.

### Health

    curl localhost:8080/health

    {"success":true,"message":"Server is healthy","data":{"status":"ok","timestamp":"…"}}

### Submit a claim

    curl -X POST localhost:8080/api/v1/claims \
         -H 'Content-Type: application/json' \
         -d '{"ndc": "123456789", "npi": "9876543210", "quantity": 30, "price": 15.99}'

    {"claim_id":"…","status":"claim submitted"}

`ndc` and `npi` are required, `quantity` must be an integer of at least 1 and
`price` may not be negative. The `npi` must belong to a known pharmacy;
otherwise the insert fails and the answer is 500 "Failed to create claim".
Answers with status 201 on success.

### Fetch a claim

    curl localhost:8080/api/v1/claims/550e8400-e29b-41d4-a716-446655440000

Returns `{"success": true, "data": {...}}` with the claim's `id`, `ndc`,
`quantity`, `npi`, `price` and `timestamp` (RFC 3339), 400 when the ID is not
a UUID, or 404 when there is no such claim.

### Reverse a claim

    curl -X POST localhost:8080/api/v1/reversals \
         -H 'Content-Type: application/json' \
         -d '{"claim_id": "550e8400-e29b-41d4-a716-446655440000"}'

    {"claim_id":"550e8400-e29b-41d4-a716-446655440000","status":"claim reversed"}

The claim must exist; otherwise the answer is 500 "Failed to create reversal".

### Errors

Every error is a JSON object with `status` set to `"error"`, a `message`, the
HTTP `code`, and for validation failures extra fields describing what was
expected, for example:

    {"code":400,"example":30,"field":"quantity","message":"Quantity must be greater than 0",
     "min_value":1,"status":"error","type":"integer"}

## Event log

Each successful submission and reversal is appended to
`logs/pharmacy_events.json`, a JSON array of objects with `id`, `type`
(`claim_submitted` or `claim_reversed`), `timestamp` (UTC) and `data`.
`claimsdesk.events.EventLogger(log_dir)` writes and reads this file; its
`get_events()` and `get_events_by_type(event_type)` return `Event` objects.

## Using it as a library

    from claimsdesk.config import load_config
    from claimsdesk.cli import build_server

    config = load_config(".")
    server = build_server(config, "logs", "data")
    server.start(config)

Other pieces can be used on their own:

- `claimsdesk.store.open_store(source)` returns a `Store` over a SQLite
  database, with `create_claim`, `get_claim`, `create_reversal`,
  `create_pharmacy`, `get_pharmacy`, `count_pharmacies`, the transactional
  `create_claim_tx` and `create_reversal_tx`, and a `transaction()` context
  manager that yields a `Queries` object and commits or rolls back.
- `claimsdesk.queries.Queries` runs the individual SQL statements on a
  connection; lookups that find nothing raise `NotFoundError`.
- `claimsdesk.seeder.seed_pharmacies(store, data_dir)` loads the CSV files and
  returns the number of pharmacies inserted, raising `SeedError` on failure.
- `claimsdesk.randomgen` makes random integers, strings, digit strings,
  UUIDs and money amounts for test data.

## What it does not do

The store is SQLite only; there is no support for a separate database
server. The API has no endpoints for listing claims, looking up reversals or
managing pharmacies; pharmacies come only from the CSV seed files.