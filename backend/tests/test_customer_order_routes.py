# Overview: Pytest coverage for customer, order and customer-note endpoints.


class TestCustomers:

    def test_create_and_list(self, client):
        res = client.post("/api/customers", json={"name": "Craft Corner", "contactPerson": "Emma Davis"})
        client.post("/api/customers", json={"name": "Brewhouse Bistro"})

        assert res.status_code == 201
        created = res.get_json()
        assert created["contactPerson"] == "Emma Davis"
        assert created["isActive"] is True
        assert created["email"] is None

        names = [c["name"] for c in client.get("/api/customers").get_json()]
        assert names == ["Brewhouse Bistro", "Craft Corner"]

    def test_name_required(self, client):
        res = client.post("/api/customers", json={"email": "orders@example.com"})

        assert res.status_code == 400
        assert res.get_json()["errors"] == [{"path": ["name"], "message": "name is required"}]

    def test_get_and_update(self, client, customer):
        assert client.get(f"/api/customers/{customer.id}").get_json()["name"] == "The Tipsy Tavern"

        res = client.patch(f"/api/customers/{customer.id}", json={"phone": "555-0101", "isActive": False})

        assert res.status_code == 200
        assert res.get_json()["phone"] == "555-0101"
        assert res.get_json()["isActive"] is False
        assert res.get_json()["name"] == "The Tipsy Tavern"

    def test_missing_customer(self, client):
        assert client.get("/api/customers/missing").status_code == 404

        res = client.patch("/api/customers/missing", json={"name": "Nobody"})
        assert res.status_code == 404
        assert res.get_json() == {"message": "Customer not found"}


class TestOrders:

    def _create(self, client, customer_id, week, items=None):
        payload = {"customerId": customer_id, "weekStartDate": week}
        if items is not None:
            payload["items"] = items
        res = client.post("/api/orders", json=payload)
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    def test_total_kegs_follows_items(self, client, customer):
        order = self._create(client, customer.id, "2024-01-01", [
            {"ciderType": "Apple", "quantity": 2},
            {"ciderType": "Peach", "quantity": 1},
        ])
        assert order["totalKegs"] == 3
        assert order["status"] == "pending"
        assert order["weekStartDate"] == "2024-01-01T00:00:00Z"

        res = client.patch(f"/api/orders/{order['id']}", json={"items": [{"ciderType": "Apple", "quantity": 6}]})

        assert res.get_json()["totalKegs"] == 6
        assert res.get_json()["items"] == [{"ciderType": "Apple", "quantity": 6}]

    def test_total_kegs_not_client_writable(self, client, customer):
        res = client.post("/api/orders", json={
            "customerId": customer.id,
            "weekStartDate": "2024-01-01",
            "totalKegs": 40,
        })

        assert res.status_code == 400
        assert res.get_json()["errors"][0]["path"] == ["totalKegs"]

    def test_date_range_returns_one_week(self, client, customer):
        self._create(client, customer.id, "2024-01-01")
        self._create(client, customer.id, "2024-01-08")

        res = client.get("/api/orders/date-range?startDate=2024-01-01&endDate=2024-01-07")

        assert res.status_code == 200
        assert [o["weekStartDate"] for o in res.get_json()] == ["2024-01-01T00:00:00Z"]

    def test_date_range_requires_both_dates(self, client):
        res = client.get("/api/orders/date-range?startDate=2024-01-01")

        assert res.status_code == 400
        assert res.get_json()["message"] == "startDate and endDate are required"

    def test_date_range_rejects_blank_dates(self, client):
        res = client.get("/api/orders/date-range?startDate=%20&endDate=2024-01-07")

        assert res.status_code == 400
        assert res.get_json()["message"] == "startDate and endDate are required"
        assert client.get("/api/orders/date-range?startDate=2024-01-01&endDate=%20%20").status_code == 400

    def test_orders_by_customer(self, client, customer, store):
        other = store.create_customer({"name": "Craft Corner"})
        self._create(client, customer.id, "2024-01-01")
        self._create(client, other.id, "2024-01-01")

        orders = client.get(f"/api/orders/customer/{customer.id}").get_json()

        assert [o["customerId"] for o in orders] == [customer.id]
        assert len(client.get("/api/orders").get_json()) == 2

    def test_update_status(self, client, customer):
        order = self._create(client, customer.id, "2024-01-01")

        res = client.patch(f"/api/orders/{order['id']}", json={"status": "confirmed"})

        assert res.get_json()["status"] == "confirmed"
        assert client.patch(f"/api/orders/{order['id']}", json={"status": "shipped"}).status_code == 400

    def test_delete_is_idempotent(self, client, customer):
        order = self._create(client, customer.id, "2024-01-01")

        assert client.delete(f"/api/orders/{order['id']}").status_code == 204
        assert client.delete(f"/api/orders/{order['id']}").status_code == 204
        assert client.get(f"/api/orders/{order['id']}").status_code == 404

    def test_update_missing_order(self, client):
        res = client.patch("/api/orders/missing", json={"status": "confirmed"})

        assert res.status_code == 404


class TestCustomerNotes:

    def test_note_lifecycle(self, client, customer):
        res = client.post("/api/customer-notes", json={
            "customerId": customer.id,
            "content": "Prefers Friday deliveries",
            "category": "delivery",
        })
        assert res.status_code == 201
        note = res.get_json()

        listed = client.get(f"/api/customer-notes/{customer.id}").get_json()
        assert [n["id"] for n in listed] == [note["id"]]

        updated = client.patch(f"/api/customer-notes/{note['id']}", json={"content": "Prefers Thursday deliveries"})
        assert updated.get_json()["content"] == "Prefers Thursday deliveries"
        assert updated.get_json()["category"] == "delivery"

        assert client.delete(f"/api/customer-notes/{note['id']}").status_code == 204
        assert client.delete(f"/api/customer-notes/{note['id']}").status_code == 204
        assert client.get(f"/api/customer-notes/{customer.id}").get_json() == []

    def test_default_category(self, client, customer):
        res = client.post("/api/customer-notes", json={"customerId": customer.id, "content": "Met at festival"})

        assert res.get_json()["category"] == "general"

    def test_invalid_category(self, client, customer):
        res = client.post("/api/customer-notes", json={
            "customerId": customer.id,
            "content": "Late payment",
            "category": "billing",
        })

        assert res.status_code == 400
        assert res.get_json()["errors"][0]["path"] == ["category"]

    def test_update_missing_note(self, client):
        res = client.patch("/api/customer-notes/missing", json={"content": "x"})

        assert res.status_code == 404
        assert res.get_json()["message"] == "Customer note not found"
