import os

# Must be set before the app modules create the engine
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app import app
from database import db, reset_db
from database.models import Building, ChargeType, Flat, FlatType
from database.seed import create_society
from core.society import setup_society_events, clear_current_society
from schemas.settings import BillingSettings


SLUG = "green-park"


@pytest.fixture
def session():
    reset_db()
    setup_society_events()
    clear_current_society()
    s = db.SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def society(session):
    return create_society(session, name="Green Park CHS", slug=SLUG, with_defaults=False)


@pytest.fixture
def billing_settings():
    return BillingSettings()


@pytest.fixture
def client(society):
    return TestClient(app)


@pytest.fixture
def api():
    def _url(path: str = "") -> str:
        return f"/api/v1/{SLUG}{path}"
    return _url


@pytest.fixture
def master(session, society):
    """One building, one flat type, maintenance (per sq.ft 3) and water (fixed 200)."""
    building = Building(society_id=society.id, name="A Wing")
    flat_type = FlatType(society_id=society.id, name="2 BHK", default_area=Decimal("650"))
    maintenance = ChargeType(
        society_id=society.id, name="Maintenance", calculation_type="per_sqft",
        default_amount=Decimal("3"), sort_order=0,
    )
    water = ChargeType(
        society_id=society.id, name="Water Charges", calculation_type="fixed",
        default_amount=Decimal("200"), sort_order=1,
    )
    session.add_all([building, flat_type, maintenance, water])
    session.commit()
    return {
        "building": building,
        "flat_type": flat_type,
        "maintenance": maintenance,
        "water": water,
    }


@pytest.fixture
def make_flat(session, society, master):
    def _make(flat_no="A-101", area="650", **fields):
        flat = Flat(
            society_id=society.id,
            flat_no=flat_no,
            building_id=fields.pop("building_id", master["building"].id),
            flat_type_id=master["flat_type"].id,
            area=Decimal(area),
            owner_name=fields.pop("owner_name", f"Owner {flat_no}"),
            **fields,
        )
        session.add(flat)
        session.commit()
        return flat
    return _make

