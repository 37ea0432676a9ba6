# nilhub/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from nilhub.database import commit_or_raise
from nilhub.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_for_store(
        self,
        session: Session,
        store_id: uuid.UUID,
        only_active: bool = False,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """
        Products of a store, newest first.

        Args:
            category: exact category match (None = any)
            search: case-insensitive match on name, description or brand
        """
        stmt = select(Product).where(Product.store_id == store_id)
        if only_active:
            stmt = stmt.where(Product.is_active == True)
        if category:
            stmt = stmt.where(Product.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                    col(Product.brand).ilike(pattern),
                )
            )
        stmt = stmt.order_by(col(Product.created_at).desc())
        return list(session.exec(stmt).all())

    def list_related(
        self,
        session: Session,
        product: Product,
        limit: int = 4,
    ) -> list[Product]:
        """Active products of the same store and category, excluding `product`."""
        stmt = (
            select(Product)
            .where(
                Product.store_id == product.store_id,
                Product.category == product.category,
                Product.is_active == True,
                Product.id != product.id,
            )
            .order_by(col(Product.created_at).desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        commit_or_raise(session, product)
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        commit_or_raise(session, product)
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
