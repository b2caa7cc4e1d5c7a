# Overview: Pytest coverage for the keg and activity HTTP endpoints.

"""
Keg API Tests

Covers the scanner workflow end to end: register a keg, look it up by QR
code, move it through its lifecycle, and read back its activity history.
"""

import re

from kegtrack.services import identifier_service


class TestCreateKeg:

    def test_create_keg(self, client):
        res = client.post("/api/kegs", json={"id": "K-12345678", "size": "half_bbl"})

        assert res.status_code == 201
        body = res.get_json()
        assert body["id"] == "K-12345678"
        assert body["qrCode"] == "SK12345678"
        assert body["status"] == "clean"
        assert body["ciderType"] is None
        assert body["createdAt"] == "2024-03-04T12:00:00Z"

    def test_duplicate_keg_is_conflict(self, client):
        client.post("/api/kegs", json={"id": "K-12345678", "size": "half_bbl"})

        res = client.post("/api/kegs", json={"id": "K-12345678", "size": "sixth_bbl"})

        assert res.status_code == 409
        assert "K-12345678" in res.get_json()["message"]

    def test_invalid_keg(self, client):
        res = client.post("/api/kegs", json={"id": "K-12345678", "size": "firkin"})

        assert res.status_code == 400
        body = res.get_json()
        assert body["message"] == "Invalid keg data"
        assert body["errors"][0]["path"] == ["size"]

    def test_unknown_fields_rejected(self, client):
        res = client.post("/api/kegs", json={"id": "K-12345678", "size": "half_bbl", "color": "silver"})

        assert res.status_code == 400
        assert res.get_json()["errors"][0]["message"] == "Unknown field: color"

    def test_missing_body(self, client):
        res = client.post("/api/kegs", data="not json", content_type="text/plain")

        assert res.status_code == 400
        paths = [e["path"] for e in res.get_json()["errors"]]
        assert paths == [["id"], ["size"]]

    def test_batch_create(self, client, store):
        res = client.post("/api/kegs/batch", json={"quantity": 3, "size": "sixth_bbl", "location": "Warehouse A"})

        assert res.status_code == 201
        kegs = res.get_json()
        assert len(kegs) == 3
        assert len({k["id"] for k in kegs}) == 3
        for keg in kegs:
            assert re.match(r"^K-\d{8}$", keg["id"])
            assert keg["qrCode"] == "SK" + keg["id"][2:]
            assert keg["location"] == "Warehouse A"
        assert len(store.get_all_activities()) == 3

    def test_batch_create_skips_taken_ids(self, client, make_keg, monkeypatch):
        make_keg("K-11111111")
        candidates = iter(["K-11111111", "K-22222222"])
        monkeypatch.setattr(identifier_service, "generate_keg_id", lambda: next(candidates))

        res = client.post("/api/kegs/batch", json={"quantity": 1, "size": "half_bbl"})

        assert res.status_code == 201
        assert res.get_json()[0]["id"] == "K-22222222"

    def test_batch_create_requires_quantity(self, client):
        res = client.post("/api/kegs/batch", json={"quantity": 0, "size": "half_bbl"})

        assert res.status_code == 400
        assert res.get_json()["errors"][0]["path"] == ["quantity"]

    def test_batch_create_caps_quantity(self, client, store):
        res = client.post("/api/kegs/batch", json={"quantity": 501, "size": "half_bbl"})

        assert res.status_code == 400
        assert res.get_json()["errors"] == [{"path": ["quantity"], "message": "quantity must be <= 500"}]
        assert store.get_all_kegs() == []


class TestReadKegs:

    def test_get_keg(self, client, make_keg):
        make_keg("K-12345678")

        assert client.get("/api/kegs/K-12345678").get_json()["qrCode"] == "SK12345678"

        res = client.get("/api/kegs/K-00000000")
        assert res.status_code == 404
        assert res.get_json() == {"message": "Keg not found"}

    def test_qr_lookup_normalizes_scans(self, client, make_keg):
        make_keg("K-12345678")

        assert client.get("/api/kegs/qr/SK12345678").status_code == 200
        assert client.get("/api/kegs/qr/sk12345678").get_json()["id"] == "K-12345678"
        assert client.get("/api/kegs/qr/sk%201234%205678").get_json()["id"] == "K-12345678"
        assert client.get("/api/kegs/qr/SK00000000").status_code == 404

    def test_list_filters(self, client, make_keg):
        make_keg("K-11111111")
        make_keg("K-22222222", status="full", cider_type="Apple")
        make_keg("K-33333333", status="deployed", cider_type="Peach", customer_id="customer-1")

        assert len(client.get("/api/kegs").get_json()) == 3
        assert [k["id"] for k in client.get("/api/kegs?status=full").get_json()] == ["K-22222222"]
        assert [k["id"] for k in client.get("/api/kegs?customer=customer-1").get_json()] == ["K-33333333"]
        assert [k["id"] for k in client.get("/api/kegs/customer/customer-1").get_json()] == ["K-33333333"]

    def test_unknown_status_filter(self, client):
        res = client.get("/api/kegs?status=missing")

        assert res.status_code == 400
        assert res.get_json()["errors"][0]["path"] == ["status"]


class TestKegLifecycle:

    def test_fill_requires_cider_type_then_deploy(self, client, clock, make_keg):
        make_keg("K-12345678")
        clock.advance(hours=1)

        rejected = client.patch("/api/kegs/K-12345678/status", json={"status": "full"})
        assert rejected.status_code == 400
        body = rejected.get_json()
        assert body["message"] == "Cider type is required for full kegs"
        assert body["errors"] == [{"path": ["ciderType"], "message": "Cider type is required for full kegs"}]
        assert client.get("/api/kegs/K-12345678").get_json()["status"] == "clean"

        filled = client.patch("/api/kegs/K-12345678/status", json={"status": "full", "ciderType": "Apple"})
        assert filled.status_code == 200
        assert filled.get_json()["ciderType"] == "Apple"
        assert filled.get_json()["filledAt"] == "2024-03-04T13:00:00Z"

        clock.advance(hours=1)
        deployed = client.patch(
            "/api/kegs/K-12345678/status",
            json={"status": "deployed", "customerId": "customer-1", "location": "Tipsy Tavern"},
        )
        keg = deployed.get_json()
        assert keg["status"] == "deployed"
        assert keg["location"] == "Tipsy Tavern"
        assert keg["customerId"] == "customer-1"
        assert keg["ciderType"] == "Apple"
        assert keg["deployedAt"] == "2024-03-04T14:00:00Z"
        assert keg["filledAt"] == "2024-03-04T13:00:00Z"

        history = client.get("/api/activities?kegId=K-12345678").get_json()
        assert [(a["action"], a["previousStatus"], a["newStatus"]) for a in history] == [
            ("deployed", "full", "deployed"),
            ("filled", "clean", "full"),
            ("created", None, "clean"),
        ]
        assert history[0]["customerId"] == "customer-1"

    def test_clean_with_cider_type_rejected(self, client, make_keg):
        make_keg("K-12345678", status="dirty")

        res = client.patch("/api/kegs/K-12345678/status", json={"status": "clean", "ciderType": "Apple"})

        assert res.status_code == 400
        assert res.get_json()["message"] == "Clean kegs cannot have a cider type"

    def test_cleaning_clears_cider_type(self, client, make_keg):
        make_keg("K-12345678", status="full", cider_type="Peach")

        res = client.patch("/api/kegs/K-12345678/status", json={"status": "clean"})

        assert res.get_json()["ciderType"] is None
        assert res.get_json()["filledAt"] is not None

    def test_beer_type_alias(self, client, make_keg):
        make_keg("K-12345678")

        res = client.patch("/api/kegs/K-12345678/status", json={"status": "full", "beerType": "Rhubarb"})

        assert res.status_code == 200
        assert res.get_json()["ciderType"] == "Rhubarb"

    def test_unknown_keg(self, client):
        res = client.patch("/api/kegs/K-00000000/status", json={"status": "dirty"})

        assert res.status_code == 404
        assert res.get_json()["message"] == "Keg not found"

    def test_batch_status_update_reports_failures(self, client, make_keg):
        make_keg("K-11111111", status="deployed", cider_type="Apple")
        make_keg("K-22222222")

        res = client.patch("/api/kegs/batch/status", json={"updates": [
            {"id": "K-11111111", "status": "dirty", "notes": "Returned by Tipsy Tavern"},
            {"id": "K-99999999", "status": "dirty"},
            {"id": "K-22222222", "status": "full"},
            {"status": "dirty"},
        ]})

        assert res.status_code == 200
        body = res.get_json()
        assert [k["id"] for k in body["updated"]] == ["K-11111111"]
        assert body["failed"] == [
            {"id": "K-99999999", "index": 1, "message": "Keg not found"},
            {"id": "K-22222222", "index": 2, "message": "Cider type is required for full kegs"},
            {"id": None, "index": 3, "message": "id is required"},
        ]
        assert client.get("/api/kegs/K-11111111").get_json()["status"] == "dirty"

    def test_batch_status_update_rejects_non_string_ids(self, client, make_keg):
        make_keg("K-12345678", status="dirty")

        res = client.patch("/api/kegs/batch/status", json={"updates": [
            {"id": "K-12345678", "status": "clean"},
            {"id": ["K-1"], "status": "clean"},
            {"id": 12345678, "status": "clean"},
        ]})

        assert res.status_code == 200
        body = res.get_json()
        assert [k["id"] for k in body["updated"]] == ["K-12345678"]
        assert body["failed"] == [
            {"id": None, "index": 1, "message": "id must be a string"},
            {"id": None, "index": 2, "message": "id must be a string"},
        ]

    def test_batch_status_update_needs_list(self, client):
        res = client.patch("/api/kegs/batch/status", json={"updates": "K-11111111"})

        assert res.status_code == 400


class TestActivities:

    def test_recent_activity_limit(self, client, clock, make_keg):
        for n in range(4):
            make_keg(f"K-1111111{n}")
            clock.advance(seconds=30)

        recent = client.get("/api/activities?limit=2").get_json()
        everything = client.get("/api/activities").get_json()

        assert [a["kegId"] for a in recent] == ["K-11111113", "K-11111112"]
        assert len(everything) == 4
