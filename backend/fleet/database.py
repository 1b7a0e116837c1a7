import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from fleet.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- TENANTS AND USERS
-- ============================================================
CREATE TABLE IF NOT EXISTS tenants (
    id         TEXT PRIMARY KEY,
    name       TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    tenant_id     TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    email         TEXT NOT NULL UNIQUE,
    full_name     TEXT,
    password_hash TEXT NOT NULL,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_users_tenant ON users(tenant_id);

CREATE TABLE IF NOT EXISTS auth_throttle (
    key             TEXT PRIMARY KEY,
    failed_attempts INTEGER NOT NULL,
    last_failed_at  REAL NOT NULL
);

-- ============================================================
-- VEHICLES
-- ============================================================
CREATE TABLE IF NOT EXISTS vehicles (
    id                  TEXT PRIMARY KEY,
    tenant_id           TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    plate               TEXT NOT NULL,
    brand               TEXT NOT NULL,
    model               TEXT NOT NULL,
    year_manufacture    INTEGER,
    year_model          INTEGER,
    color               TEXT,
    status              TEXT NOT NULL DEFAULT 'active'
                        CHECK(status IN ('active','maintenance','inactive')),
    vehicle_type        TEXT NOT NULL DEFAULT 'car'
                        CHECK(vehicle_type IN ('car','truck','motorcycle')),
    fuel_type           TEXT,
    current_km          INTEGER NOT NULL DEFAULT 0,
    chassis             TEXT,
    renavam             TEXT,
    purchase_date       TEXT,
    purchase_price      REAL,
    average_consumption REAL,
    notes               TEXT,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_vehicles_plate ON vehicles(tenant_id, plate);
CREATE INDEX IF NOT EXISTS idx_vehicles_status ON vehicles(tenant_id, status);

-- ============================================================
-- DRIVERS
-- ============================================================
CREATE TABLE IF NOT EXISTS drivers (
    id                      TEXT PRIMARY KEY,
    tenant_id               TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    name                    TEXT NOT NULL,
    cpf                     TEXT NOT NULL,
    birth_date              TEXT NOT NULL,
    phone                   TEXT NOT NULL,
    email                   TEXT,
    photo_path              TEXT,
    cnh_number              TEXT NOT NULL,
    cnh_category            TEXT NOT NULL
                            CHECK(cnh_category IN ('A','B','AB','C','D','E','ACC')),
    cnh_expiration_date     TEXT NOT NULL,
    admission_date          TEXT NOT NULL,
    status                  TEXT NOT NULL DEFAULT 'active'
                            CHECK(status IN ('active','inactive','vacation','leave','terminated')),
    address_cep             TEXT,
    address_street          TEXT,
    address_number          TEXT,
    address_complement      TEXT,
    address_neighborhood    TEXT,
    address_city            TEXT,
    address_state           TEXT,
    emergency_contact_name  TEXT,
    emergency_contact_phone TEXT,
    notes                   TEXT,
    created_at              TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at              TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_drivers_name ON drivers(tenant_id, name);
CREATE INDEX IF NOT EXISTS idx_drivers_cnh_expiration ON drivers(cnh_expiration_date);

-- ============================================================
-- MAINTENANCES
-- ============================================================
CREATE TABLE IF NOT EXISTS maintenances (
    id               TEXT PRIMARY KEY,
    tenant_id        TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    vehicle_id       TEXT NOT NULL REFERENCES vehicles(id) ON DELETE CASCADE,
    maintenance_type TEXT NOT NULL
                     CHECK(maintenance_type IN ('preventive','corrective','predictive',
                                                'improvement','other')),
    description      TEXT NOT NULL,
    scheduled_date   TEXT,
    completion_date  TEXT,
    cost_parts       REAL,
    cost_services    REAL,
    total_cost       REAL,
    supplier_name    TEXT,
    status           TEXT NOT NULL DEFAULT 'scheduled'
                     CHECK(status IN ('scheduled','in_progress','completed',
                                      'cancelled','pending')),
    notes            TEXT,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_maintenances_vehicle ON maintenances(vehicle_id);
CREATE INDEX IF NOT EXISTS idx_maintenances_scheduled ON maintenances(tenant_id, scheduled_date);

-- ============================================================
-- SUPPLIES
-- ============================================================
CREATE TABLE IF NOT EXISTS supplies (
    id               TEXT PRIMARY KEY,
    tenant_id        TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    vehicle_id       TEXT NOT NULL REFERENCES vehicles(id) ON DELETE CASCADE,
    driver_id        TEXT REFERENCES drivers(id) ON DELETE SET NULL,
    supply_date      TEXT NOT NULL,
    odometer_reading INTEGER NOT NULL,
    fuel_type        TEXT NOT NULL,
    quantity_liters  REAL NOT NULL,
    price_per_unit   REAL NOT NULL,
    total_cost       REAL NOT NULL,
    gas_station_name TEXT,
    invoice_number   TEXT,
    notes            TEXT,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_supplies_vehicle ON supplies(vehicle_id);
CREATE INDEX IF NOT EXISTS idx_supplies_date ON supplies(tenant_id, supply_date);

-- ============================================================
-- DOCUMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS documents (
    id                              TEXT PRIMARY KEY,
    tenant_id                       TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    document_name                   TEXT NOT NULL,
    document_type                   TEXT NOT NULL
                                    CHECK(document_type IN ('cnh','crlv','insurance_policy',
                                                            'inspection_certificate',
                                                            'course_certificate',
                                                            'proof_of_address','rg','cpf',
                                                            'other')),
    custom_document_type_description TEXT,
    description                     TEXT,
    entity_type                     TEXT NOT NULL CHECK(entity_type IN ('vehicle','driver')),
    vehicle_id                      TEXT REFERENCES vehicles(id),
    driver_id                       TEXT REFERENCES drivers(id),
    issue_date                      TEXT,
    expiration_date                 TEXT,
    issuing_authority               TEXT,
    document_number                 TEXT,
    file_path                       TEXT,
    file_name                       TEXT,
    file_size                       INTEGER,
    file_type                       TEXT,
    notes                           TEXT,
    created_at                      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at                      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    CHECK (
        (entity_type = 'vehicle' AND vehicle_id IS NOT NULL AND driver_id IS NULL)
        OR (entity_type = 'driver' AND driver_id IS NOT NULL AND vehicle_id IS NULL)
    )
);

CREATE INDEX IF NOT EXISTS idx_documents_tenant ON documents(tenant_id, created_at);
CREATE INDEX IF NOT EXISTS idx_documents_vehicle ON documents(vehicle_id);
CREATE INDEX IF NOT EXISTS idx_documents_driver ON documents(driver_id);
CREATE INDEX IF NOT EXISTS idx_documents_expiration ON documents(expiration_date);

-- ============================================================
-- TENANT SETTINGS
-- ============================================================
CREATE TABLE IF NOT EXISTS tenant_settings (
    tenant_id            TEXT PRIMARY KEY REFERENCES tenants(id) ON DELETE CASCADE,
    default_station_name TEXT,
    updated_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS tenant_fuel_prices (
    tenant_id       TEXT NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
    fuel_type       TEXT NOT NULL,
    price_per_liter REAL NOT NULL,
    PRIMARY KEY (tenant_id, fuel_type)
);
"""


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    conn.close()
