import uuid
from datetime import date

import pytest

from fleet.models import Document, Driver, Maintenance, Tenant, Vehicle
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import DOCUMENT_LIST, DRIVER_LIST, MAINTENANCE_LIST, VEHICLE_LIST
from fleet.services.query import (
    NO_RECORDS_MESSAGE,
    DateRange,
    ExpiryStatusFilter,
    ListSpec,
    QueryError,
    run_list,
)

NOW = "2024-06-01T12:00:00Z"


def _tenant(db, name="Acme"):
    tenant = Tenant(id=str(uuid.uuid4()), name=name, created_at=NOW)
    db.add(tenant)
    db.commit()
    return TenantContext(user_id="u", tenant_id=tenant.id, email="u@test")


def _vehicle(db, ctx, plate, model="Actros", status="active", vehicle_type="truck"):
    v = Vehicle(id=str(uuid.uuid4()), tenant_id=ctx.tenant_id, plate=plate, brand="Mercedes",
                model=model, status=status, vehicle_type=vehicle_type, current_km=0,
                created_at=NOW, updated_at=NOW)
    db.add(v)
    db.commit()
    return v


def _driver(db, ctx, name, status="active", cnh_category="B"):
    d = Driver(id=str(uuid.uuid4()), tenant_id=ctx.tenant_id, name=name, cpf=f"cpf-{name}",
               birth_date="1990-01-01", phone="11999999999", cnh_number="123",
               cnh_category=cnh_category, cnh_expiration_date="2030-01-01",
               admission_date="2020-01-01", status=status, created_at=NOW, updated_at=NOW)
    db.add(d)
    db.commit()
    return d


class TestRunList:
    def test_filters_are_and_combined(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        _driver(db, ctx, "Ana", status="active", cnh_category="B")
        _driver(db, ctx, "Bruno", status="active", cnh_category="D")
        _driver(db, ctx, "Carla", status="vacation", cnh_category="B")

        page = run_list(db, ctx, DRIVER_LIST, {"status": "active", "cnh_category": "B"})
        assert [d.name for d in page.items] == ["Ana"]
        assert page.total == 1
        db.close()

    def test_text_filter_is_case_insensitive_substring(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        _vehicle(db, ctx, "ABC1D23", model="Actros")
        _vehicle(db, ctx, "XYZ9A87", model="Axor")

        page = run_list(db, ctx, VEHICLE_LIST, {"model": "ACT"})
        assert [v.plate for v in page.items] == ["ABC1D23"]
        db.close()

    def test_text_filter_escapes_wildcards(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        _vehicle(db, ctx, "ABC1D23")

        page = run_list(db, ctx, VEHICLE_LIST, {"plate": "%"})
        assert page.items == []
        assert page.message == NO_RECORDS_MESSAGE
        db.close()

    def test_empty_values_mean_no_filter(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        _vehicle(db, ctx, "ABC1D23")
        _vehicle(db, ctx, "XYZ9A87")

        page = run_list(db, ctx, VEHICLE_LIST, {"plate": "  ", "status": None, "model": ""})
        assert page.total == 2
        assert page.message is None
        db.close()

    def test_tenant_scoping(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        other = _tenant(db, "Other")
        _vehicle(db, ctx, "ABC1D23")
        _vehicle(db, other, "XYZ9A87")

        page = run_list(db, ctx, VEHICLE_LIST, {})
        assert [v.plate for v in page.items] == ["ABC1D23"]
        db.close()

    def test_invalid_enum_value(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        with pytest.raises(QueryError):
            run_list(db, ctx, VEHICLE_LIST, {"status": "flying"})
        db.close()

    def test_unknown_filter(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        with pytest.raises(QueryError):
            run_list(db, ctx, VEHICLE_LIST, {"colour": "red"})
        db.close()

    def test_page_window_validation(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        with pytest.raises(QueryError):
            run_list(db, ctx, VEHICLE_LIST, {}, page=-1)
        with pytest.raises(QueryError):
            run_list(db, ctx, VEHICLE_LIST, {}, per_page=7)
        with pytest.raises(QueryError):
            run_list(db, ctx, VEHICLE_LIST, {}, per_page=0)
        db.close()

    def test_exact_count_pagination(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        for i in range(7):
            _vehicle(db, ctx, f"AAA000{i}")

        first = run_list(db, ctx, VEHICLE_LIST, {}, page=0, per_page=5)
        second = run_list(db, ctx, VEHICLE_LIST, {}, page=1, per_page=5)
        assert first.total == 7 and first.has_more
        assert len(second.items) == 2 and not second.has_more
        assert {v.plate for v in first.items}.isdisjoint({v.plate for v in second.items})
        db.close()

    def test_without_count_reports_has_more(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        v = _vehicle(db, ctx, "ABC1D23")
        for day in range(1, 7):
            db.add(Maintenance(id=str(uuid.uuid4()), tenant_id=ctx.tenant_id, vehicle_id=v.id,
                               maintenance_type="preventive", description="Oil",
                               scheduled_date=f"2024-06-0{day}", status="scheduled",
                               created_at=NOW, updated_at=NOW))
        db.commit()

        first = run_list(db, ctx, MAINTENANCE_LIST, {}, page=0, per_page=5)
        assert first.total is None
        assert first.has_more
        assert first.items[0].scheduled_date == "2024-06-06"
        second = run_list(db, ctx, MAINTENANCE_LIST, {}, page=1, per_page=5)
        assert len(second.items) == 1 and not second.has_more
        db.close()

    def test_date_range_is_inclusive(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        v = _vehicle(db, ctx, "ABC1D23")
        for d in ("2024-05-31", "2024-06-01", "2024-06-15", "2024-06-30T18:00:00", "2024-07-01"):
            db.add(Maintenance(id=str(uuid.uuid4()), tenant_id=ctx.tenant_id, vehicle_id=v.id,
                               maintenance_type="corrective", description="Brakes",
                               scheduled_date=d, status="scheduled", created_at=NOW, updated_at=NOW))
        db.commit()

        page = run_list(db, ctx, MAINTENANCE_LIST,
                        {"scheduled": DateRange(date(2024, 6, 1), date(2024, 6, 30))}, per_page=10)
        assert len(page.items) == 3
        db.close()

    def test_date_range_reversed(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        with pytest.raises(QueryError):
            run_list(db, ctx, MAINTENANCE_LIST, {"scheduled": DateRange(date(2024, 7, 1), date(2024, 6, 1))})
        db.close()

    def test_document_status_filter_in_query(self, test_db):
        db = test_db()
        ctx = _tenant(db)
        v = _vehicle(db, ctx, "ABC1D23")
        expirations = {"old": "2024-05-31", "soon": "2024-06-20", "later": "2024-09-01", "none": None}
        for name, exp in expirations.items():
            db.add(Document(id=str(uuid.uuid4()), tenant_id=ctx.tenant_id, document_name=name,
                            document_type="crlv", entity_type="vehicle", vehicle_id=v.id,
                            expiration_date=exp, created_at=NOW, updated_at=NOW))
        db.commit()

        spec = ListSpec(
            model=Document,
            filters={**DOCUMENT_LIST.filters,
                     "status": ExpiryStatusFilter(Document.expiration_date, today=date(2024, 6, 1))},
            sort=DOCUMENT_LIST.sort,
        )
        names = {
            status: [d.document_name for d in run_list(db, ctx, spec, {"status": status}).items]
            for status in ("expired", "approaching", "valid", "not_applicable")
        }
        assert names == {"expired": ["old"], "approaching": ["soon"],
                         "valid": ["later"], "not_applicable": ["none"]}

        with pytest.raises(QueryError):
            run_list(db, ctx, spec, {"status": "stale"})
        db.close()
