# nilhub/repositories/stats_repo.py
import uuid

from sqlalchemy import case, func
from sqlmodel import Session, select

from nilhub.models.account import Account
from nilhub.models.product import Product
from nilhub.models.store import Store


class StatsRepository:
    """
    Read-only aggregated queries for dashboards.
    """

    # ----- Vendor dashboard -----

    def store_product_totals(self, session: Session, store_id: uuid.UUID) -> tuple:
        """
        (total, active, out_of_stock, views, whatsapp_clicks) for one store.
        """
        active = case((Product.is_active == True, 1), else_=0)
        out_of_stock = case((Product.stock <= 0, 1), else_=0)
        stmt = select(
            func.count(Product.id),
            func.coalesce(func.sum(active), 0),
            func.coalesce(func.sum(out_of_stock), 0),
            func.coalesce(func.sum(Product.views), 0),
            func.coalesce(func.sum(Product.whatsapp_clicks), 0),
        ).where(Product.store_id == store_id)
        return tuple(session.exec(stmt).one())

    # ----- Platform (admin) -----

    def count_accounts(self, session: Session, role: str | None = None) -> int:
        stmt = select(func.count()).select_from(Account)
        if role is not None:
            stmt = stmt.where(Account.role == role)
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_stores(self, session: Session, only_active: bool = False) -> int:
        stmt = select(func.count()).select_from(Store)
        if only_active:
            stmt = stmt.where(Store.is_active == True)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_products(self, session: Session, only_active: bool = False) -> int:
        stmt = select(func.count()).select_from(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)
        value = session.exec(stmt).one()
        return int(value or 0)
