from __future__ import annotations

from backoffice.services.pagination import encode_page_token


def test_health_endpoints(client) -> None:
    root = client.get("/")
    health = client.get("/api/healthz")

    assert root.status_code == 200
    assert root.json() == {"ok": True, "service": "purchase-management-api"}
    assert health.status_code == 200
    assert health.json()["ok"] is True
    assert health.json()["uptime"] >= 0


def test_unknown_api_path_returns_error_body(client) -> None:
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_client_crud_round_trip(client, client_payload) -> None:
    created = client.post("/api/clients", json=client_payload)
    assert created.status_code == 201
    body = created.json()
    client_id = body["id"]
    assert body["contactPerson"] == "Priya Raman"
    assert body["msmeNumber"] == ""
    assert body["createdAt"] == body["updatedAt"]

    fetched = client.get(f"/api/clients/{client_id}")
    assert fetched.status_code == 200
    assert fetched.json()["billingAddress"]["postalCode"] == "635109"

    updated = client.put(f"/api/clients/{client_id}", json={"status": "inactive"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "inactive"
    assert updated.json()["company"] == "Acme Components"

    deleted = client.delete(f"/api/clients/{client_id}")
    assert deleted.status_code == 204
    assert deleted.content == b""

    missing = client.get(f"/api/clients/{client_id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Not found"}


def test_client_validation_errors_are_field_level(client, client_payload) -> None:
    client_payload["email"] = "not-an-email"
    client_payload.pop("contactPerson")
    client_payload["billingAddress"].pop("city")

    response = client.post("/api/clients", json=client_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert set(body["details"]["fieldErrors"]) == {"email", "contactPerson", "billingAddress"}
    assert body["details"]["formErrors"] == []


def test_non_object_body_is_a_form_error(client) -> None:
    response = client.post("/api/clients", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["details"]["formErrors"] == ["Expected a JSON object"]


def test_update_and_delete_unknown_ids_return_404(client) -> None:
    assert client.put("/api/clients/nope", json={"status": "active"}).status_code == 404
    assert client.delete("/api/purchases/nope").status_code == 404
    assert client.patch("/api/finance/nope", json={"amount": 3}).status_code == 404
    assert client.delete("/api/invoices/nope").status_code == 404


def test_list_pagination_over_api(client, client_payload) -> None:
    for index in range(5):
        client.post("/api/clients", json={**client_payload, "company": f"Company {index}"})

    first = client.get("/api/clients", params={"limit": 2}).json()
    assert len(first["items"]) == 2
    assert first["nextPageToken"] == encode_page_token(2)

    seen = [item["id"] for item in first["items"]]
    token = first["nextPageToken"]
    while token:
        page = client.get("/api/clients", params={"limit": 2, "pageToken": token}).json()
        seen.extend(item["id"] for item in page["items"])
        token = page["nextPageToken"]

    assert len(seen) == len(set(seen)) == 5

    past_end = client.get("/api/clients", params={"pageToken": encode_page_token(5)}).json()
    assert past_end == {"items": [], "nextPageToken": None}

    lenient = client.get("/api/clients", params={"limit": "abc"})
    assert lenient.status_code == 200
    assert len(lenient.json()["items"]) == 5


def test_purchase_create_computes_missing_line_totals(client) -> None:
    payload = {
        "clientId": "client-1",
        "poNumber": "PO-1001",
        "date": "2025-04-01",
        "status": "pending",
        "items": [
            {
                "name": "Relay",
                "model": "RL-24",
                "supplier": "Volt Supply",
                "quantity": 4,
                "unitPrice": 12.5,
                "uom": "pcs",
                "currency": "INR",
            }
        ],
        "subtotal": 50,
        "tax": 9,
        "total": 59,
        "baseCurrency": "INR",
    }

    response = client.post("/api/purchases", json=payload)

    assert response.status_code == 201
    item = response.json()["items"][0]
    assert item["total"] == 50.0
    assert item["id"]


def test_purchase_rejects_unknown_status_and_empty_items(client) -> None:
    response = client.post(
        "/api/purchases",
        json={
            "clientId": "c",
            "poNumber": "PO-1",
            "status": "shipped",
            "items": [],
            "subtotal": 0,
            "tax": 0,
            "total": 0,
            "baseCurrency": "INR",
        },
    )

    assert response.status_code == 400
    assert {"status", "items"} <= set(response.json()["details"]["fieldErrors"])


def test_invoice_endpoints(client) -> None:
    created = client.post(
        "/api/invoices",
        json={"clientId": "client-1", "purchaseIds": ["p1", "p2"], "total": 120, "dueDate": "2025-06-30"},
    )
    assert created.status_code == 201
    invoice = created.json()
    assert invoice["invoiceNumber"].startswith("INV-")
    assert invoice["dueDate"] == "2025-06-30T00:00:00+00:00"
    assert invoice["purchaseIds"] == ["p1", "p2"]

    status = client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "paid"})
    assert status.status_code == 200
    assert status.json()["status"] == "paid"

    bad_status = client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "lost"})
    assert bad_status.status_code == 400

    stats = client.get("/api/invoices/stats")
    assert stats.status_code == 200
    assert stats.json()["paidInvoices"] == 1
    assert stats.json()["paidRevenue"] == 120
    assert "from" in stats.json()

    bad_dates = client.get("/api/invoices/stats", params={"dateFrom": "soon"})
    assert bad_dates.status_code == 400


def test_finance_stats_endpoint(client) -> None:
    for payload in (
        {"type": "invested", "category": "Capital", "amount": 100},
        {"type": "expense", "category": "Rent", "amount": 40},
        {"type": "tds", "category": "TDS", "amount": 10},
        {"type": "tds", "category": "TDS", "amount": 99, "status": "pending"},
    ):
        assert client.post("/api/finance", json=payload).status_code == 201

    stats = client.get("/api/finance/stats").json()
    listing = client.get("/api/finance", params={"type": "tds"}).json()

    assert stats == {"totalInvested": 100.0, "totalExpenses": 40.0, "totalTDS": 10.0, "profit": 50.0}
    assert listing["total"] == 2
    assert listing["nextPageToken"] is None


def test_finance_create_requires_known_type(client) -> None:
    response = client.post("/api/finance", json={"type": "gift", "category": "Misc"})

    assert response.status_code == 400
    assert "type" in response.json()["details"]["fieldErrors"]


def test_settings_endpoints(client) -> None:
    current = client.get("/api/settings")
    assert current.status_code == 200
    assert current.json()["id"] == "current"
    assert current.json()["defaultTaxRate"] == 18

    patched = client.patch(
        "/api/settings",
        json={"defaultTaxRate": 150, "companyGST": "33aaccf2123p1z5", "sessionTimeout": 1},
    )
    assert patched.status_code == 200
    assert patched.json()["defaultTaxRate"] == 100
    assert patched.json()["companyGST"] == "33AACCF2123P1Z5"
    assert patched.json()["sessionTimeout"] == 5

    replaced = client.put("/api/settings", json={"theme": "dark"})
    assert replaced.json()["theme"] == "dark"
    assert replaced.json()["defaultTaxRate"] == 18
    assert replaced.json()["createdAt"] == current.json()["createdAt"]

    history = client.get("/api/settings/history", params={"limit": "abc"})
    assert history.status_code == 200
    assert [item["id"] for item in history.json()["items"]] == ["current"]


def test_settings_patch_ignores_malformed_body(client) -> None:
    response = client.patch(
        "/api/settings", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 200
    assert response.json()["theme"] == "light"


def test_non_finite_amounts_are_rejected(client) -> None:
    finance = client.post("/api/finance", json={"type": "expense", "category": "X", "amount": "inf"})
    purchase = client.post(
        "/api/purchases",
        json={
            "clientId": "c",
            "poNumber": "PO-2",
            "status": "draft",
            "items": [
                {"name": "Bolt", "model": "M6", "quantity": 1, "unitPrice": "nan", "uom": "pcs", "currency": "INR"}
            ],
            "subtotal": 0,
            "tax": 0,
            "total": 0,
            "baseCurrency": "INR",
        },
    )

    assert finance.status_code == 400
    assert finance.json()["error"] == "ValidationError"
    assert "amount" in finance.json()["details"]["fieldErrors"]
    assert purchase.status_code == 400
    assert "items" in purchase.json()["details"]["fieldErrors"]


def test_unknown_order_falls_back_to_newest_first(client) -> None:
    for amount in (1, 2):
        client.post("/api/finance", json={"type": "expense", "category": "X", "amount": amount})

    newest_first = client.get("/api/finance", params={"order": "up"})
    oldest_first = client.get("/api/finance", params={"order": "asc"})
    invoices = client.get("/api/invoices", params={"order": "sideways"})

    assert newest_first.status_code == 200
    assert [item["amount"] for item in newest_first.json()["items"]] == [2.0, 1.0]
    assert [item["amount"] for item in oldest_first.json()["items"]] == [1.0, 2.0]
    assert invoices.status_code == 200
