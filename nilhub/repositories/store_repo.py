# nilhub/repositories/store_repo.py
import uuid

from sqlmodel import Session, select

from nilhub.database import commit_or_raise
from nilhub.models.store import Store


class StoreRepository:
    """
    Data access layer for Store.
    """

    def get_by_id(self, session: Session, store_id: uuid.UUID) -> Store | None:
        return session.get(Store, store_id)

    def get_by_slug(self, session: Session, slug: str) -> Store | None:
        stmt = select(Store).where(Store.slug == slug)
        return session.exec(stmt).first()

    def get_active_by_slug(self, session: Session, slug: str) -> Store | None:
        stmt = select(Store).where(Store.slug == slug, Store.is_active == True)
        return session.exec(stmt).first()

    def get_by_owner(self, session: Session, owner_id: uuid.UUID) -> Store | None:
        stmt = select(Store).where(Store.owner_id == owner_id)
        return session.exec(stmt).first()

    def slug_exists(self, session: Session, slug: str) -> bool:
        return self.get_by_slug(session, slug) is not None

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[Store]:
        stmt = (
            select(Store)
            .order_by(Store.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, store: Store) -> Store:
        session.add(store)
        commit_or_raise(session, store)
        session.refresh(store)
        return store

    def update(self, session: Session, store: Store) -> Store:
        session.add(store)
        commit_or_raise(session, store)
        session.refresh(store)
        return store
