from fastapi.testclient import TestClient

from redeemhub.main import app

client = TestClient(app)


def _stock(product_id):
    res = client.get(f"/api/products/{product_id}")
    assert res.status_code == 200
    return res.json()["stock"]


def test_create_generate_redeem_scenario():
    res = client.post("/api/products", json={"product_code": "TEST1", "name": "Test", "stock": 0})
    assert res.status_code == 200
    product_id = res.json()["productId"]

    res = client.post(
        "/api/accounts", json={"product_id": product_id, "email": "a@b.com", "password": "p"}
    )
    assert res.status_code == 200
    account_id = res.json()["accountId"]
    assert _stock(product_id) == 1

    res = client.post(
        "/api/codes/generate", json={"product_id": product_id, "account_id": account_id}
    )
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    code = body["code"]
    assert code.startswith("TES-")

    accounts = client.get(f"/api/products/{product_id}/accounts").json()
    assert accounts[0]["status"] == "reserved"
    assert client.get(f"/api/products/{product_id}/available-accounts").json() == []

    res = client.post("/api/redeem", json={"code": code})
    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "account": {"email": "a@b.com", "password": "p", "login_via": "Email", "product": "Test"},
    }
    accounts = client.get(f"/api/products/{product_id}/accounts").json()
    assert accounts[0]["status"] == "used"
    assert _stock(product_id) == 0

    again = client.post("/api/redeem", json={"code": code})
    assert again.status_code == 404
    assert again.json() == {"error": "Invalid or used code"}


def test_list_products_includes_available_accounts():
    pid = client.post("/api/products", json={"product_code": "SPOT1", "name": "Spotify"}).json()[
        "productId"
    ]
    client.post("/api/accounts/import", json={"product_id": pid, "text": "x@y.com|1\ny@y.com|2"})
    products = client.get("/api/products").json()
    assert len(products) == 1
    assert products[0]["available_accounts"] == 2
    assert products[0]["stock"] == 2
    assert products[0]["logo"] == "fas fa-box"


def test_duplicate_product_code_is_client_error():
    client.post("/api/products", json={"product_code": "DUP1", "name": "One"})
    res = client.post("/api/products", json={"product_code": "DUP1", "name": "Two"})
    assert res.status_code == 400
    assert "DUP1" in res.json()["error"]


def test_update_and_delete_product():
    pid = client.post("/api/products", json={"product_code": "UPD1", "name": "Before"}).json()[
        "productId"
    ]
    res = client.put(
        f"/api/products/{pid}",
        json={"name": "After", "description": "d", "logo": "fas fa-film", "stock": 4},
    )
    assert res.json() == {"success": True}
    assert client.get(f"/api/products/{pid}").json()["name"] == "After"

    assert client.delete(f"/api/products/{pid}").json() == {"success": True}
    missing = client.get(f"/api/products/{pid}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Product not found"}


def test_account_for_missing_product_is_404():
    res = client.post("/api/accounts", json={"product_id": 77, "email": "a@b.com", "password": "p"})
    assert res.status_code == 404
    assert res.json() == {"error": "Product not found"}


def test_bulk_and_import_endpoints():
    pid = client.post("/api/products", json={"product_code": "BULK1", "name": "Bulk"}).json()[
        "productId"
    ]
    res = client.post(
        "/api/accounts/bulk",
        json={
            "product_id": pid,
            "accounts": [{"email": "a@x.com", "password": "1"}, {"email": "b@x.com"}],
        },
    )
    assert res.json() == {"success": True, "added": 1, "failed": 1}

    res = client.post(
        "/api/accounts/import",
        json={"product_id": pid, "text": "a@x.com|pw1|Email\nbad-line\nb@x.com|pw2"},
    )
    assert res.json() == {"success": True, "imported": 2, "failed": 1}
    assert _stock(pid) == 3


def test_delete_account_endpoint():
    pid = client.post("/api/products", json={"product_code": "DEL1", "name": "Del"}).json()[
        "productId"
    ]
    aid = client.post(
        "/api/accounts", json={"product_id": pid, "email": "a@b.com", "password": "p"}
    ).json()["accountId"]
    assert client.delete(f"/api/accounts/{aid}").json() == {"success": True}
    assert _stock(pid) == 0
    # deleting again is a no-op
    assert client.delete(f"/api/accounts/{aid}").json() == {"success": True}
    assert _stock(pid) == 0


def test_generate_multiple_and_list_codes():
    pid = client.post("/api/products", json={"product_code": "MULTI", "name": "Multi"}).json()[
        "productId"
    ]
    client.post(
        "/api/accounts/import", json={"product_id": pid, "text": "a@x.com|1\nb@x.com|2"}
    )

    too_many = client.post("/api/codes/generate-multiple", json={"product_id": pid, "count": 3})
    assert too_many.status_code == 400
    assert too_many.json() == {"error": "Only 2 accounts available (requested: 3)"}

    res = client.post(
        "/api/codes/generate-multiple",
        json={"product_id": pid, "count": 2, "custom_prefix": "GIFT"},
    )
    assert res.status_code == 200
    codes = res.json()["codes"]
    assert len(codes) == 2
    assert all(c["code"].startswith("GIFT-") for c in codes)
    assert {c["email"] for c in codes} == {"a@x.com", "b@x.com"}

    listed = client.get(f"/api/codes/{pid}").json()
    assert {c["code"] for c in listed} == {c["code"] for c in codes}
    assert all(c["account_status"] == "reserved" for c in listed)


def test_generate_for_unavailable_account_is_404():
    pid = client.post("/api/products", json={"product_code": "GEN1", "name": "Gen"}).json()[
        "productId"
    ]
    res = client.post("/api/codes/generate", json={"product_id": pid, "account_id": 5})
    assert res.status_code == 404
    assert res.json() == {"error": "Account not found or not available"}


def test_malformed_body_uses_error_envelope():
    res = client.post("/api/redeem", json={})
    assert res.status_code == 422
    assert "error" in res.json()


def test_reset_database():
    client.post("/api/products", json={"product_code": "GONE", "name": "Gone"})
    res = client.post("/api/reset-database")
    assert res.json() == {"success": True, "message": "Database reset successfully"}
    assert client.get("/api/products").json() == []


def test_reconcile_stock_endpoint():
    pid = client.post(
        "/api/products", json={"product_code": "REC1", "name": "Rec", "stock": 9}
    ).json()["productId"]
    res = client.post("/api/admin/reconcile-stock")
    assert res.json() == {"success": True, "updated": {str(pid): 0}}
    assert _stock(pid) == 0
