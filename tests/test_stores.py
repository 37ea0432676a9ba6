from conftest import auth_headers

from nilhub.models.store import Store
from nilhub.services.store_service import StoreService


def test_slugify_strips_accents_and_symbols():
    assert StoreService.slugify("  Cosméticos  & Más!! ") == "cosmeticos-mas"
    assert StoreService.slugify("***") == "store"


def test_read_my_store(client, vendor):
    _, store, headers = vendor
    r = client.get("/api/stores/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["id"] == str(store.id)


def test_read_my_store_without_one(client, make_account):
    account = make_account(email="nostore@example.com")
    r = client.get("/api/stores/me", headers=auth_headers(account))
    assert r.status_code == 404


def test_create_store_once(client, make_account):
    headers = auth_headers(make_account(email="late@example.com"))
    payload = {"name": "Late Bloomer", "whatsapp": "51911122233"}

    r = client.post("/api/stores", json=payload, headers=headers)
    assert r.status_code == 201
    assert r.json()["data"]["slug"] == "late-bloomer"
    assert r.json()["data"]["theme_color"] == "#EC4899"

    again = client.post("/api/stores", json=payload, headers=headers)
    assert again.status_code == 400
    assert again.json()["error"] == "You already have a store"


def test_update_my_store_ignores_protected_fields(client, db, vendor):
    _, store, headers = vendor
    r = client.put(
        "/api/stores/me",
        json={
            "description": "Natural cosmetics",
            "theme_color": "#112233",
            "slug": "hijacked",
            "visit_count": 999,
        },
        headers=headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["description"] == "Natural cosmetics"
    assert data["theme_color"] == "#112233"
    assert data["slug"] == "beauty-corner"
    assert data["visit_count"] == 0


def test_update_rejects_bad_theme_color(client, vendor):
    _, _, headers = vendor
    r = client.put("/api/stores/me", json={"theme_color": "pink"}, headers=headers)
    assert r.status_code == 400
    assert "hex color" in r.json()["error"]


def test_update_my_store_clears_optional_fields(client, db, vendor):
    _, store, headers = vendor
    client.put(
        "/api/stores/me",
        json={"logo_url": "https://cdn.test/logo.png", "instagram": "beautycorner"},
        headers=headers,
    )

    r = client.put("/api/stores/me", json={"logo_url": None, "instagram": None}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["logo_url"] is None
    assert r.json()["data"]["instagram"] is None
    assert db.get(Store, store.id).logo_url is None


def test_update_my_store_rejects_null_whatsapp(client, vendor):
    _, _, headers = vendor
    r = client.put("/api/stores/me", json={"whatsapp": None}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "whatsapp: cannot be null"


def test_public_store_counts_visits(client, vendor):
    _, store, _ = vendor
    client.get(f"/api/stores/{store.slug}")
    r = client.get(f"/api/stores/{store.slug.upper()}")
    assert r.status_code == 200
    assert r.json()["data"]["visit_count"] == 2


def test_inactive_store_is_hidden(client, make_account, make_store):
    owner = make_account(email="closed@example.com")
    store = make_store(owner, name="Closed Shop", slug="closed-shop", is_active=False)

    assert client.get(f"/api/stores/{store.slug}").status_code == 404
    assert client.get(f"/api/stores/{store.slug}/products").status_code == 404


def test_public_products_filters(client, vendor, make_product):
    _, store, _ = vendor
    make_product(store, name="Rose Lipstick", brand="Flora")
    make_product(store, name="Night Cream", category="skincare", description="Rose hip oil")
    make_product(store, name="Old Perfume", category="fragancias", is_active=False)

    everything = client.get(f"/api/stores/{store.slug}/products").json()
    assert everything["count"] == 2

    todas = client.get(f"/api/stores/{store.slug}/products", params={"category": "todas"}).json()
    assert todas["count"] == 2

    skincare = client.get(f"/api/stores/{store.slug}/products", params={"category": "skincare"}).json()
    assert [p["name"] for p in skincare["data"]] == ["Night Cream"]

    search = client.get(f"/api/stores/{store.slug}/products", params={"search": "ROSE"}).json()
    assert {p["name"] for p in search["data"]} == {"Rose Lipstick", "Night Cream"}

    brand = client.get(f"/api/stores/{store.slug}/products", params={"search": "flora"}).json()
    assert [p["name"] for p in brand["data"]] == ["Rose Lipstick"]


def test_update_store_by_id(client, db, vendor):
    _, store, headers = vendor
    r = client.put(f"/api/stores/{store.id}", json={"instagram": "@beautycorner"}, headers=headers)
    assert r.status_code == 200
    db.expire_all()
    assert db.get(Store, store.id).instagram == "@beautycorner"
