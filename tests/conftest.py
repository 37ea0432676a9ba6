"""
Shared fixtures: in-memory SQLite, a TestClient bound to it, factories for
accounts / stores / products, and fakes for Storage and SMTP.
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from nilhub.core.security import hash_password, issue_token
from nilhub.database import build_engine, get_session
from nilhub.main import app
from nilhub.models.account import Account
from nilhub.models.product import Product
from nilhub.models.store import Store

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    # Unhandled errors must come back as 500 envelopes, not test failures
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


def _save(engine, obj):
    with Session(engine) as session:
        session.add(obj)
        session.commit()
        session.refresh(obj)
        return obj


@pytest.fixture
def make_account(engine):
    counter = {"n": 0}

    def factory(
        name: str = "Maria Vendor",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: str = "user",
        is_active: bool = True,
    ) -> Account:
        counter["n"] += 1
        return _save(
            engine,
            Account(
                name=name,
                email=email or f"vendor{counter['n']}@example.com",
                password_hash=hash_password(password),
                role=role,
                is_active=is_active,
            ),
        )

    return factory


@pytest.fixture
def make_store(engine):
    def factory(owner: Account, name: str = "Beauty Corner", slug: str | None = None, **fields) -> Store:
        return _save(
            engine,
            Store(
                owner_id=owner.id,
                name=name,
                slug=slug or name.lower().replace(" ", "-"),
                whatsapp="51987654321",
                **fields,
            ),
        )

    return factory


@pytest.fixture
def make_product(engine):
    def factory(store: Store, name: str = "Matte Lipstick", **fields) -> Product:
        fields.setdefault("category", "maquillaje")
        fields.setdefault("price", 35.0)
        fields.setdefault("images", [{"url": "https://cdn.test/a.png", "asset_id": "nilhub/products/a.png"}])
        stock = fields.pop("stock", 10)
        product = Product(store_id=store.id, name=name, **fields)
        product.set_stock(stock)
        return _save(engine, product)

    return factory


def auth_headers(account: Account) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(account.id)}"}


@pytest.fixture
def vendor(make_account, make_store):
    """A vendor account with its store: (account, store, headers)."""
    account = make_account(name="Maria Vendor", email="maria@example.com")
    store = make_store(account, name="Beauty Corner", slug="beauty-corner")
    return account, store, auth_headers(account)


@pytest.fixture
def other_vendor(make_account, make_store):
    account = make_account(name="Lucia Other", email="lucia@example.com")
    store = make_store(account, name="Glow Shop", slug="glow-shop")
    return account, store, auth_headers(account)


@pytest.fixture
def admin(make_account):
    account = make_account(name="Admin", email="admin@example.com", role="admin")
    return account, auth_headers(account)


@pytest.fixture
def db(engine):
    """Fresh session for assertions after requests."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_storage(monkeypatch):
    """Replace Supabase Storage with an in-memory dict of path -> bytes."""
    from nilhub.services import product_service, upload_service

    state = {"objects": {}, "deleted": []}

    def upload(path, file_bytes, content_type):
        state["objects"][path] = file_bytes
        return f"https://cdn.test/{path}"

    def delete(path):
        state["deleted"].append(path)
        state["objects"].pop(path, None)

    monkeypatch.setattr(upload_service, "upload_to_storage", upload)
    monkeypatch.setattr(upload_service, "delete_from_storage", delete)
    monkeypatch.setattr(product_service, "delete_from_storage", delete)
    return state


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing emails instead of talking to SMTP."""
    from nilhub.services import password_reset_service

    outbox = []

    def send(to_email, subject, text_body, html_body=None):
        outbox.append({"to": to_email, "subject": subject, "text": text_body})

    monkeypatch.setattr(password_reset_service, "send_email", send)
    return outbox
