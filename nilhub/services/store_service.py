# nilhub/services/store_service.py
import logging
import re
import unicodedata
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from nilhub.core.errors import Conflict, NotFound
from nilhub.models.account import Account
from nilhub.models.product import Product
from nilhub.models.store import Store
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.store import StoreCreate, StoreUpdate

logger = logging.getLogger(__name__)

# Category value meaning "no category filter" on the public storefront
ALL_CATEGORIES = "todas"


class StoreService:
    """
    Business logic for Store.

    Responsibilities:
      - slug generation & uniqueness
      - public storefront lookups (active stores only)
      - owner-side edits restricted to branding/contact fields
      - denormalized product counter maintenance
    """

    def __init__(self, repo: StoreRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    # ----- Slugs -----

    @staticmethod
    def slugify(raw: str) -> str:
        """
        - strip accents ("Cosméticos" -> "cosmeticos")
        - lowercase
        - non-alphanumeric -> '-'
        - collapse multiple '-', strip leading/trailing '-'
        """
        value = unicodedata.normalize("NFD", raw.strip().lower())
        value = "".join(ch for ch in value if unicodedata.category(ch) != "Mn")
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "store"

    def unique_slug(self, session: Session, name: str) -> str:
        """
        Slug from `name`, suffixed -1, -2, ... until unused.
        """
        base_slug = self.slugify(name)
        slug = base_slug
        i = 1
        while self.repo.slug_exists(session, slug):
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    # ----- Lookups -----

    def get_store(self, session: Session, store_id: uuid.UUID) -> Store:
        store = self.repo.get_by_id(session, store_id)
        if not store:
            raise NotFound("Store not found")
        return store

    def get_store_for_owner(self, session: Session, account: Account) -> Store:
        store = self.repo.get_by_owner(session, account.id)
        if not store:
            raise NotFound("You do not have a store yet")
        return store

    def get_public_store(self, session: Session, slug: str) -> Store:
        """
        Active store by slug. Each lookup counts as a storefront visit.
        """
        store = self.repo.get_active_by_slug(session, slug.strip().lower())
        if not store:
            raise NotFound("Store not found")

        store.visit_count += 1
        return self.repo.update(session, store)

    def list_public_products(
        self,
        session: Session,
        slug: str,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """
        Active products of an active store.

        - category "todas" (or empty) means every category
        - search matches name, description and brand, case-insensitive
        """
        store = self.repo.get_active_by_slug(session, slug.strip().lower())
        if not store:
            raise NotFound("Store not found")

        if category and category.strip().lower() == ALL_CATEGORIES:
            category = None
        search = search.strip() if search else None

        return self.product_repo.list_for_store(
            session,
            store.id,
            only_active=True,
            category=category.strip().lower() if category else None,
            search=search or None,
        )

    # ----- Mutations -----

    def create_store(
        self,
        session: Session,
        owner: Account,
        name: str,
        whatsapp: str,
        description: str | None = None,
        instagram: str | None = None,
        facebook: str | None = None,
    ) -> Store:
        store = Store(
            owner_id=owner.id,
            name=name.strip(),
            slug=self.unique_slug(session, name),
            description=description,
            whatsapp=whatsapp,
            instagram=instagram,
            facebook=facebook,
        )
        store = self.repo.create(session, store)
        logger.info("Store created: %s (owner %s)", store.slug, owner.email)
        return store

    def create_my_store(
        self,
        session: Session,
        owner: Account,
        payload: StoreCreate,
    ) -> Store:
        """One store per account."""
        if self.repo.get_by_owner(session, owner.id) is not None:
            raise Conflict("You already have a store")

        return self.create_store(
            session,
            owner,
            name=payload.name,
            whatsapp=payload.whatsapp,
            description=payload.description,
            instagram=payload.instagram,
            facebook=payload.facebook,
        )

    def update_store(
        self,
        session: Session,
        store: Store,
        payload: StoreUpdate,
    ) -> Store:
        """
        Apply a partial update. Ownership is checked by the router
        dependency before this is called.
        """
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(store, field, value)

        store.updated_at = datetime.now(timezone.utc)
        store = self.repo.update(session, store)
        logger.info("Store updated: %s (%s)", store.name, store.id)
        return store

    def update_my_store(
        self,
        session: Session,
        owner: Account,
        payload: StoreUpdate,
    ) -> Store:
        store = self.get_store_for_owner(session, owner)
        return self.update_store(session, store, payload)

    def set_active(self, session: Session, store: Store, is_active: bool) -> Store:
        store.is_active = is_active
        store.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, store)

    # ----- Product counter -----

    def increment_products(self, session: Session, store: Store) -> Store:
        store.product_count += 1
        return self.repo.update(session, store)

    def decrement_products(self, session: Session, store: Store) -> Store:
        if store.product_count > 0:
            store.product_count -= 1
        return self.repo.update(session, store)
