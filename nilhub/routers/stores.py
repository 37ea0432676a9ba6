# nilhub/routers/stores.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from nilhub.core.auth import protect, require_ownership
from nilhub.database import get_session
from nilhub.models.account import Account
from nilhub.models.store import Store
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.common import ApiResponse
from nilhub.schemas.product import ProductRead
from nilhub.schemas.store import StoreCreate, StoreRead, StoreUpdate
from nilhub.services.store_service import StoreService

router = APIRouter(prefix="/stores", tags=["Stores"])

repo = StoreRepository()
service = StoreService(repo, ProductRepository())

owned_store = require_ownership(
    repo.get_by_id,
    owner_field="owner_id",
    id_param="store_id",
    resource_name="Store",
)


# -------- Own store --------


@router.get("/me", response_model=ApiResponse[StoreRead])
def read_my_store(
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    return ApiResponse(data=service.get_store_for_owner(session, account))


@router.post(
    "",
    response_model=ApiResponse[StoreRead],
    status_code=status.HTTP_201_CREATED,
)
def create_my_store(
    payload: StoreCreate,
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Create a store for an account that has none (one store per account).
    """
    store = service.create_my_store(session, account, payload)
    return ApiResponse(data=store, message="Store created successfully")


@router.put("/me", response_model=ApiResponse[StoreRead])
def update_my_store(
    payload: StoreUpdate,
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Update branding/contact fields of the caller's store.
    """
    store = service.update_my_store(session, account, payload)
    return ApiResponse(data=store, message="Store updated successfully")


# -------- Public storefront --------


@router.get("/{slug}", response_model=ApiResponse[StoreRead])
def read_store(
    slug: str,
    session: Session = Depends(get_session),
):
    """
    Active store by slug. Counts a visit.
    """
    return ApiResponse(data=service.get_public_store(session, slug))


@router.get("/{slug}/products", response_model=ApiResponse[list[ProductRead]])
def list_store_products(
    slug: str,
    category: str | None = None,
    search: str | None = None,
    session: Session = Depends(get_session),
):
    """
    Active products of an active store.

    Query params (optional):
      - category: exact category, "todas" for all
      - search: matches name, description or brand
    """
    products = service.list_public_products(session, slug, category=category, search=search)
    return ApiResponse(data=products, count=len(products))


# -------- By id (owner or admin) --------


@router.put("/{store_id}", response_model=ApiResponse[StoreRead])
def update_store(
    payload: StoreUpdate,
    store: Store = Depends(owned_store),
    session: Session = Depends(get_session),
):
    store = service.update_store(session, store, payload)
    return ApiResponse(data=store, message="Store updated successfully")
