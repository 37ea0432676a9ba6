# nilhub/services/stats_service.py
from sqlmodel import Session

from nilhub.models.account import Account
from nilhub.repositories.stats_repo import StatsRepository
from nilhub.schemas.stats import PlatformStats, StoreDashboardStats
from nilhub.services.store_service import StoreService


class StatsService:
    """
    Orchestrates aggregated dashboard statistics.
    """

    def __init__(self, repo: StatsRepository, store_service: StoreService):
        self.repo = repo
        self.store_service = store_service

    def get_store_dashboard(self, session: Session, account: Account) -> StoreDashboardStats:
        store = self.store_service.get_store_for_owner(session, account)
        total, active, out_of_stock, views, clicks = self.repo.store_product_totals(
            session, store.id
        )
        return StoreDashboardStats(
            total_products=int(total or 0),
            active_products=int(active or 0),
            out_of_stock_products=int(out_of_stock or 0),
            total_views=int(views or 0),
            total_whatsapp_clicks=int(clicks or 0),
        )

    def get_platform_stats(self, session: Session) -> PlatformStats:
        return PlatformStats(
            accounts=self.repo.count_accounts(session),
            vendors=self.repo.count_accounts(session, role="user"),
            admins=self.repo.count_accounts(session, role="admin"),
            stores=self.repo.count_stores(session),
            active_stores=self.repo.count_stores(session, only_active=True),
            products=self.repo.count_products(session),
            active_products=self.repo.count_products(session, only_active=True),
        )
