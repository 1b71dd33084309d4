from database.seed import create_society


def setup_master_data(client, api):
    building = client.post(api("/master-data/buildings"), json={"name": "A Wing"}).json()["data"]
    flat_type = client.post(
        api("/master-data/flat-types"), json={"name": "2 BHK", "default_area": 650}
    ).json()["data"]
    client.post(api("/master-data/charge-types"), json={
        "name": "Maintenance", "calculation_type": "per_sqft", "default_amount": 3, "sort_order": 0,
    })
    client.post(api("/master-data/charge-types"), json={
        "name": "Water Charges", "calculation_type": "fixed", "default_amount": 200, "sort_order": 1,
    })
    return building, flat_type


def create_flat(client, api, building, flat_type, flat_no="A-101", **fields):
    payload = {
        "flat_no": flat_no,
        "building_id": building["id"],
        "flat_type_id": flat_type["id"],
        "area": 650,
        "owner_name": "Ramesh Patil",
        **fields,
    }
    response = client.post(api("/flats"), json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ==================== PUBLIC ====================

def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "database": "connected"}
    assert client.get("/").json()["status"] == "running"


def test_public_info(client):
    response = client.get("/api/v1/society/green-park/info")
    assert response.status_code == 200
    assert response.json()["name"] == "Green Park CHS"
    assert client.get("/api/v1/society/nowhere/info").status_code == 404


def test_unknown_society_is_404(client):
    response = client.get("/api/v1/nowhere/flats")
    assert response.status_code == 404
    assert response.json()["detail"] == "Society not found"


def test_inactive_society_is_403(client, session, society):
    society.is_active = False
    session.commit()
    assert client.get("/api/v1/green-park/flats").status_code == 403


# ==================== END TO END ====================

def test_bill_payment_scenario(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)

    response = client.post(api("/bills/generate"), json={"month": 3, "year": 2024})
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["generated_count"] == 1
    bill = body["data"][0]
    assert bill["bill_no"] == "BILL-2024-03-0001"
    assert [(li["description"], li["amount"]) for li in bill["line_items"]] == [
        ("Maintenance", 1950.0), ("Water Charges", 200.0),
    ]
    assert bill["total_amount"] == 2150.0
    assert bill["grand_total"] == 2150.0
    assert bill["due_date"] == "2024-03-16"
    assert bill["status"] == "pending"

    response = client.post(api("/payments"), json={
        "flat_id": flat["id"], "bill_id": bill["id"],
        "amount": 2150, "payment_date": "2024-03-10", "payment_mode": "upi",
    })
    assert response.status_code == 201, response.text
    payment = response.json()["data"]
    assert payment["receipt_no"] == "RCP-2024-03-0001"

    paid = client.get(api(f"/bills/{bill['id']}")).json()
    assert paid["status"] == "paid"
    assert paid["paid_amount"] == 2150.0

    ledger = client.get(api(f"/reports/ledger/{flat['id']}")).json()["data"]
    assert ledger["outstanding"] == 0.0
    assert len(ledger["entries"]) == 2

    assert client.delete(api(f"/payments/{payment['id']}")).status_code == 200

    reverted = client.get(api(f"/bills/{bill['id']}")).json()
    assert reverted["status"] == "pending"
    assert reverted["paid_amount"] == 0.0


def test_generate_twice_skips(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)

    client.post(api("/bills/generate"), json={"month": 3, "year": 2024})
    body = client.post(api("/bills/generate"), json={"month": 3, "year": 2024}).json()

    assert body["generated_count"] == 0
    assert body["skipped_flat_ids"] == [flat["id"]]
    assert client.get(api("/bills"), params={"month": 3, "year": 2024}).json()["count"] == 1

    response = client.post(
        api("/bills/generate"), json={"month": 3, "year": 2024, "skip_existing": False}
    )
    assert response.status_code == 400


def test_generate_without_flats_is_400(client, api):
    response = client.post(api("/bills/generate"), json={"month": 3, "year": 2024})
    assert response.status_code == 400
    assert response.json()["detail"] == "No active flats to generate bills for"


def test_generate_validates_month(client, api):
    assert client.post(api("/bills/generate"), json={"month": 13, "year": 2024}).status_code == 422


def test_delete_bill_with_payment_is_400(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    bill = client.post(api("/bills/generate"), json={"month": 3, "year": 2024}).json()["data"][0]
    client.post(api("/payments"), json={
        "flat_id": flat["id"], "bill_id": bill["id"], "amount": 100, "payment_date": "2024-03-10",
    })

    response = client.delete(api(f"/bills/{bill['id']}"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete bill with payments. Delete payments first."


def test_missing_entities_are_404(client, api):
    assert client.get(api("/bills/999")).status_code == 404
    assert client.delete(api("/bills/999")).status_code == 404
    assert client.get(api("/payments/999")).status_code == 404
    assert client.get(api("/payments/999/receipt")).status_code == 404
    assert client.delete(api("/payments/999")).status_code == 404
    assert client.get(api("/flats/999")).status_code == 404
    assert client.get(api("/reports/ledger/999")).status_code == 404
    response = client.post(api("/payments"), json={
        "flat_id": 999, "amount": 100, "payment_date": "2024-03-10",
    })
    assert response.status_code == 404


def test_payment_validation(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    base = {"flat_id": flat["id"], "payment_date": "2024-03-10"}

    assert client.post(api("/payments"), json={**base, "amount": 0}).status_code == 422
    assert client.post(api("/payments"), json={**base, "amount": 10, "payment_mode": "gold"}).status_code == 422


def test_overpayment_setting(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    bill = client.post(api("/bills/generate"), json={"month": 3, "year": 2024}).json()["data"][0]

    client.put(api("/settings/billing"), json={"allow_overpayment": False})
    response = client.post(api("/payments"), json={
        "flat_id": flat["id"], "bill_id": bill["id"], "amount": 5000, "payment_date": "2024-03-10",
    })
    assert response.status_code == 400


# ==================== MASTER DATA & FLATS ====================

def test_master_data_listing(client, api):
    setup_master_data(client, api)
    data = client.get(api("/master-data")).json()
    assert [b["name"] for b in data["buildings"]] == ["A Wing"]
    assert [c["name"] for c in data["charge_types"]] == ["Maintenance", "Water Charges"]


def test_duplicate_building_is_400(client, api):
    client.post(api("/master-data/buildings"), json={"name": "A Wing"})
    response = client.post(api("/master-data/buildings"), json={"name": "a wing"})
    assert response.status_code == 400


def test_per_vehicle_charge_requires_vehicle_type(client, api):
    response = client.post(api("/master-data/charge-types"), json={
        "name": "Parking", "calculation_type": "per_vehicle", "default_amount": 100,
    })
    assert response.status_code == 422

    response = client.post(api("/master-data/charge-types"), json={
        "name": "Parking", "calculation_type": "per_vehicle", "default_amount": 100,
        "vehicle_type": "4wheeler",
    })
    assert response.status_code == 201
    charge_type = response.json()["data"]

    response = client.put(
        api(f"/master-data/charge-types/{charge_type['id']}"), json={"vehicle_type": None}
    )
    assert response.status_code == 400


def test_building_with_flats_cannot_be_deleted(client, api):
    building, flat_type = setup_master_data(client, api)
    create_flat(client, api, building, flat_type)

    assert client.delete(api(f"/master-data/buildings/{building['id']}")).status_code == 400
    assert client.delete(api(f"/master-data/flat-types/{flat_type['id']}")).status_code == 400


def test_charge_type_on_bills_cannot_be_deleted(client, api):
    building, flat_type = setup_master_data(client, api)
    create_flat(client, api, building, flat_type)
    client.post(api("/bills/generate"), json={"month": 3, "year": 2024})
    charge_type = client.get(api("/master-data/charge-types")).json()["data"][0]

    response = client.delete(api(f"/master-data/charge-types/{charge_type['id']}"))
    assert response.status_code == 400


def test_flat_crud(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type, occupancy_type="tenant",
                       tenant_name="Suresh", four_wheeler_count=1)
    assert flat["occupancy_type"] == "tenant"

    duplicate = client.post(api("/flats"), json={
        "flat_no": "a-101", "building_id": building["id"], "flat_type_id": flat_type["id"],
        "area": 500, "owner_name": "Someone",
    })
    assert duplicate.status_code == 400

    response = client.put(api(f"/flats/{flat['id']}"), json={"area": 700, "owner_name": "New Owner"})
    assert response.status_code == 200
    assert response.json()["data"]["area"] == 700.0

    listing = client.get(api("/flats"), params={"search": "new owner"}).json()
    assert listing["count"] == 1

    assert client.delete(api(f"/flats/{flat['id']}")).status_code == 200
    assert client.get(api("/flats")).json()["count"] == 0


def test_flat_with_bills_cannot_be_deleted(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    client.post(api("/bills/generate"), json={"month": 3, "year": 2024})

    assert client.delete(api(f"/flats/{flat['id']}")).status_code == 400


def test_flat_requires_existing_building(client, api):
    _, flat_type = setup_master_data(client, api)
    response = client.post(api("/flats"), json={
        "flat_no": "Z-1", "building_id": 999, "flat_type_id": flat_type["id"],
        "area": 500, "owner_name": "Someone",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a building"


# ==================== SETTINGS ====================

def test_settings_roundtrip(client, api):
    data = client.get(api("/settings")).json()["data"]
    assert data["billing"]["bill_prefix"] == "BILL"
    assert data["billing"]["carry_forward_mode"] == "all_unpaid"

    response = client.put(api("/settings/billing"), json={"billing_day": 5, "bill_prefix": "gp"})
    assert response.status_code == 200
    assert response.json()["data"]["bill_prefix"] == "GP"
    assert client.get(api("/settings")).json()["data"]["billing"]["billing_day"] == 5


def test_invalid_settings_rejected(client, api):
    assert client.put(api("/settings/billing"), json={"billing_day": 31}).status_code == 400
    assert client.put(api("/settings/billing"), json={"carry_forward_mode": "never"}).status_code == 400
    assert client.get(api("/settings")).json()["data"]["billing"]["billing_day"] == 1


def test_corrupt_settings_document_is_400(client, api, session, society):
    society.settings = {"billing_day": "soon"}
    session.commit()
    response = client.post(api("/bills/generate"), json={"month": 3, "year": 2024})
    assert response.status_code == 400


def test_update_profile(client, api):
    response = client.put(api("/settings/profile"), json={"address": "Pune 411001"})
    assert response.status_code == 200
    assert response.json()["data"]["address"] == "Pune 411001"
    assert client.put(api("/settings/profile"), json={"name": "  "}).status_code == 422


# ==================== EXPENSES & REPORTS ====================

def test_expense_crud(client, api):
    categories = client.get(api("/expenses/categories")).json()["data"]
    assert {"code": "electricity", "name": "Electricity"} in categories

    response = client.post(api("/expenses"), json={
        "expense_date": "2024-04-10", "category": "electricity",
        "description": "MSEB bill", "amount": 1200, "payment_mode": "bank_transfer",
    })
    assert response.status_code == 201, response.text
    expense = response.json()["data"]

    updated = client.put(api(f"/expenses/{expense['id']}"), json={"amount": 1300}).json()["data"]
    assert updated["amount"] == 1300.0

    listing = client.get(api("/expenses")).json()
    assert listing["count"] == 1
    assert listing["total_amount"] == 1300.0

    report = client.get(api("/reports/income-expense"), params={"fy": 2024}).json()["data"]
    assert report["total_expense"] == 1300.0

    assert client.delete(api(f"/expenses/{expense['id']}")).status_code == 200
    assert client.get(api(f"/expenses/{expense['id']}")).status_code == 404


def test_expense_validation(client, api):
    response = client.post(api("/expenses"), json={
        "expense_date": "2024-04-10", "category": "parties", "description": "x", "amount": 10,
    })
    assert response.status_code == 422


def test_report_endpoints(client, api):
    building, flat_type = setup_master_data(client, api)
    create_flat(client, api, building, flat_type)
    client.post(api("/bills/generate"), json={"month": 3, "year": 2024})

    outstanding = client.get(api("/reports/outstanding")).json()["data"]
    assert outstanding["summary"]["total_outstanding"] == 2150.0

    fee = client.get(api("/reports/fee-position"), params={"as_of": "2100-01-01"}).json()["data"]
    assert fee["grand_total"]["total"] == 2150.0

    dashboard = client.get(api("/reports/dashboard")).json()["data"]
    assert dashboard["pending_bills"] == 1

    collection = client.get(
        api("/reports/collection"), params={"date_from": "2024-03-01", "date_to": "2024-03-31"}
    )
    assert collection.status_code == 200
    bad_range = client.get(
        api("/reports/collection"), params={"date_from": "2024-04-01", "date_to": "2024-03-01"}
    )
    assert bad_range.status_code == 400


# ==================== ISOLATION ====================

def test_societies_are_isolated(client, api, session):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    create_society(session, name="Blue Ridge", slug="blue-ridge", with_defaults=True)

    other = "/api/v1/blue-ridge"
    assert client.get(f"{other}/flats").json()["count"] == 0
    assert client.get(f"{other}/flats/{flat['id']}").status_code == 404
    assert client.get(f"{other}/master-data/buildings").json()["count"] == 0
    assert len(client.get(f"{other}/master-data/charge-types").json()["data"]) == 5

    response = client.post(f"{other}/bills/generate", json={"month": 3, "year": 2024})
    assert response.status_code == 400
    assert client.get(api("/bills")).json()["count"] == 0


# ==================== NULLS IN UPDATES ====================

def test_null_in_update_body_is_422(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type)
    charge_type = client.get(api("/master-data/charge-types")).json()["data"][0]
    expense = client.post(api("/expenses"), json={
        "expense_date": "2024-04-10", "category": "water", "description": "Tanker", "amount": 900,
    }).json()["data"]

    assert client.put(api(f"/flats/{flat['id']}"), json={"area": None}).status_code == 422
    assert client.put(
        api(f"/master-data/charge-types/{charge_type['id']}"), json={"default_amount": None}
    ).status_code == 422
    assert client.put(
        api(f"/master-data/buildings/{building['id']}"), json={"name": None}
    ).status_code == 422
    assert client.put(
        api(f"/master-data/flat-types/{flat_type['id']}"), json={"is_active": None}
    ).status_code == 422
    assert client.put(api(f"/expenses/{expense['id']}"), json={"amount": None}).status_code == 422

    assert client.get(api(f"/flats/{flat['id']}")).json()["area"] == 650.0
    # Still usable after the rejected updates
    assert client.put(api(f"/flats/{flat['id']}"), json={"area": 700}).status_code == 200


def test_nullable_fields_can_be_cleared(client, api):
    building, flat_type = setup_master_data(client, api)
    flat = create_flat(client, api, building, flat_type, owner_phone="9800000000")

    response = client.put(api(f"/flats/{flat['id']}"), json={"owner_phone": None})
    assert response.status_code == 200
    assert response.json()["data"]["owner_phone"] is None


def test_settings_update_keeps_stored_keys(client, api, session, society):
    society.settings = {
        "noc_enabled": True,
        "noc_amount": 500,
        "tenant_parking_multiplier": 2,
        "billing_day": 40,
    }
    session.commit()

    response = client.put(api("/settings/billing"), json={"billing_day": 5})

    assert response.status_code == 200, response.text
    billing = client.get(api("/settings")).json()["data"]["billing"]
    assert billing["billing_day"] == 5
    assert billing["noc_enabled"] is True
    assert billing["noc_amount"] == 500.0
    assert billing["tenant_parking_multiplier"] == 2.0


def test_settings_update_not_repairing_document_is_400(client, api, session, society):
    society.settings = {"noc_amount": 500, "billing_day": 40}
    session.commit()

    response = client.put(api("/settings/billing"), json={"due_days": 10})

    assert response.status_code == 400
    session.refresh(society)
    assert society.settings == {"noc_amount": 500, "billing_day": 40}
