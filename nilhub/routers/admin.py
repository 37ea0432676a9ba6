# nilhub/routers/admin.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from nilhub.core.auth import require_admin
from nilhub.database import get_session
from nilhub.models.account import Account
from nilhub.repositories.account_repo import AccountRepository
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.stats_repo import StatsRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.account import AccountRead
from nilhub.schemas.admin import AdminStoreRead
from nilhub.schemas.common import ApiResponse
from nilhub.schemas.stats import PlatformStats
from nilhub.schemas.store import StoreRead
from nilhub.services.admin_service import AdminService
from nilhub.services.stats_service import StatsService
from nilhub.services.store_service import StoreService

# Every route requires an admin
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

store_service = StoreService(StoreRepository(), ProductRepository())
service = AdminService(AccountRepository(), store_service)
stats_service = StatsService(StatsRepository(), store_service)


@router.get("/stats", response_model=ApiResponse[PlatformStats])
def get_platform_stats(session: Session = Depends(get_session)):
    """
    Platform-wide counters: accounts, stores and products.
    """
    return ApiResponse(data=stats_service.get_platform_stats(session))


@router.get("/accounts", response_model=ApiResponse[list[AccountRead]])
def list_accounts(
    skip: int = 0,
    limit: int = 100,
    session: Session = Depends(get_session),
):
    accounts = service.list_accounts(session, skip=skip, limit=limit)
    return ApiResponse(data=accounts, count=len(accounts))


@router.get("/stores", response_model=ApiResponse[list[AdminStoreRead]])
def list_stores(
    skip: int = 0,
    limit: int = 100,
    session: Session = Depends(get_session),
):
    """
    All stores, newest first, with their owner.
    """
    stores = service.list_stores(session, skip=skip, limit=limit)
    return ApiResponse(data=stores, count=len(stores))


@router.put("/stores/{store_id}/toggle", response_model=ApiResponse[StoreRead])
def toggle_store(
    store_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Activate / deactivate a store. Inactive stores disappear from the
    public storefront.
    """
    return ApiResponse(data=service.toggle_store(session, store_id))


@router.put("/accounts/{account_id}/toggle", response_model=ApiResponse[AccountRead])
def toggle_account(
    account_id: uuid.UUID,
    admin: Account = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """
    Activate / deactivate an account. A deactivated account is rejected on
    its very next request.
    """
    return ApiResponse(data=service.toggle_account(session, admin, account_id))
