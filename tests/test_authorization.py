import uuid

import pytest

from nilhub.core.auth import require_admin, require_ownership
from nilhub.core.errors import Forbidden, NotFound


def test_admin_route_without_token_is_401(client):
    r = client.get("/api/admin/stats")
    assert r.status_code == 401


def test_admin_route_for_vendor_is_403(client, vendor):
    _, _, headers = vendor
    r = client.get("/api/admin/stats", headers=headers)
    assert r.status_code == 403
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Access denied. Administrators only."


def test_admin_route_for_admin_is_200(client, admin):
    _, headers = admin
    r = client.get("/api/admin/stats", headers=headers)
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_non_owner_cannot_update_product(client, vendor, other_vendor, make_product):
    _, store, _ = vendor
    _, _, intruder_headers = other_vendor
    product = make_product(store)

    r = client.put(f"/api/products/{product.id}", json={"name": "Hacked"}, headers=intruder_headers)
    assert r.status_code == 403
    assert r.json()["error"] == "You do not have permission to access this resource"


def test_missing_product_is_404_before_ownership(client, other_vendor):
    _, _, headers = other_vendor
    r = client.put(f"/api/products/{uuid.uuid4()}", json={"name": "Whatever"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Product not found"


def test_malformed_id_is_404(client, vendor):
    _, _, headers = vendor
    r = client.put("/api/products/not-a-uuid", json={"name": "Whatever"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Resource not found"


def test_ownership_check_requires_authentication_first(client, vendor, make_product):
    _, store, _ = vendor
    product = make_product(store)
    r = client.delete(f"/api/products/{product.id}")
    assert r.status_code == 401


def test_admin_may_act_on_any_store(client, vendor, admin):
    _, store, _ = vendor
    _, headers = admin
    r = client.put(f"/api/stores/{store.id}", json={"description": "Moderated"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["description"] == "Moderated"


def test_non_owner_cannot_update_store_by_id(client, vendor, other_vendor):
    _, store, _ = vendor
    _, _, headers = other_vendor
    r = client.put(f"/api/stores/{store.id}", json={"description": "Mine now"}, headers=headers)
    assert r.status_code == 403


# ----- Factory used directly -----


class _State:
    pass


class _Request:
    def __init__(self):
        self.state = _State()


class _Resource:
    def __init__(self, owner_id):
        self.owner_id = owner_id


class _Account:
    def __init__(self, role="user"):
        self.id = uuid.uuid4()
        self.role = role
        self.email = "someone@example.com"


def test_factory_attaches_resource_to_request_state():
    account = _Account()
    resource = _Resource(account.id)
    dependency = require_ownership(lambda session, rid: resource)

    request = _Request()
    result = dependency(request, uuid.uuid4(), account=account, session=None)

    assert result is resource
    assert request.state.resource is resource


def test_factory_uses_callable_owner_resolver():
    account = _Account()
    resource = object()
    dependency = require_ownership(
        lambda session, rid: resource,
        owner_field=lambda session, res: account.id,
    )
    assert dependency(_Request(), uuid.uuid4(), account=account, session=None) is resource


def test_factory_missing_resource_wins_over_ownership():
    dependency = require_ownership(lambda session, rid: None, resource_name="Store")
    with pytest.raises(NotFound) as exc:
        dependency(_Request(), uuid.uuid4(), account=_Account(), session=None)
    assert exc.value.detail == "Store not found"


def test_factory_rejects_other_owner():
    dependency = require_ownership(lambda session, rid: _Resource(uuid.uuid4()))
    with pytest.raises(Forbidden):
        dependency(_Request(), uuid.uuid4(), account=_Account(), session=None)


def test_require_admin_passes_admin_through():
    account = _Account(role="admin")
    assert require_admin(_Request(), account=account) is account


def test_require_admin_rejects_vendor():
    request = _Request()
    request.method = "GET"
    request.url = type("URL", (), {"path": "/api/admin/stats"})()
    with pytest.raises(Forbidden) as exc:
        require_admin(request, account=_Account())
    assert exc.value.detail == "Access denied. Administrators only."
