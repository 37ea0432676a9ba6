# nilhub/routers/stats.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from nilhub.core.auth import protect
from nilhub.database import get_session
from nilhub.models.account import Account
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.stats_repo import StatsRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.common import ApiResponse
from nilhub.schemas.stats import StoreDashboardStats
from nilhub.services.stats_service import StatsService
from nilhub.services.store_service import StoreService

router = APIRouter(prefix="/stats", tags=["Stats"])

repo = StatsRepository()
service = StatsService(repo, StoreService(StoreRepository(), ProductRepository()))


@router.get("/dashboard", response_model=ApiResponse[StoreDashboardStats])
def get_store_dashboard(
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Catalog counters for the caller's store: products, stock, views and
    WhatsApp clicks.
    """
    return ApiResponse(data=service.get_store_dashboard(session, account))
