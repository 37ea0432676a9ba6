# nilhub/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from nilhub.core.auth import protect, require_ownership
from nilhub.database import get_session
from nilhub.models.account import Account
from nilhub.models.product import Product
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.common import ApiResponse, MessageResponse
from nilhub.schemas.product import (
    ProductCreate,
    ProductRead,
    ProductUpdate,
    StockUpdate,
    WhatsAppClick,
)
from nilhub.services.product_service import RELATED_PRODUCTS_LIMIT, ProductService
from nilhub.services.store_service import StoreService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
store_service = StoreService(StoreRepository(), repo)
service = ProductService(repo, store_service)

# Products are owned through their store
owned_product = require_ownership(
    repo.get_by_id,
    owner_field=service.owner_of,
    id_param="product_id",
    resource_name="Product",
)


# -------- Vendor endpoints --------


@router.get("/mine", response_model=ApiResponse[list[ProductRead]])
def list_my_products(
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Every product of the caller's store, active or not.
    """
    products = service.list_my_products(session, account)
    return ApiResponse(data=products, count=len(products))


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Create a product in the caller's store.

    - At least one image (upload first via /upload).
    - sale_price must be lower than price.
    """
    product = service.create_product(session, account, payload)
    return ApiResponse(data=product, message="Product created successfully")


@router.put("/{product_id}", response_model=ApiResponse[ProductRead])
def update_product(
    payload: ProductUpdate,
    product: Product = Depends(owned_product),
    session: Session = Depends(get_session),
):
    """
    Partial update (owner or admin).
    """
    product = service.update_product(session, product, payload)
    return ApiResponse(data=product, message="Product updated successfully")


@router.patch("/{product_id}/stock", response_model=ApiResponse[ProductRead])
def update_stock(
    payload: StockUpdate,
    product: Product = Depends(owned_product),
    session: Session = Depends(get_session),
):
    """
    Set the stock level; in_stock follows it.
    """
    product = service.update_stock(session, product, payload.stock)
    return ApiResponse(data=product, message="Stock updated")


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product: Product = Depends(owned_product),
    session: Session = Depends(get_session),
):
    """
    Delete a product (owner or admin).

    - Also deletes its images from Storage (best-effort).
    """
    service.delete_product(session, product)
    return MessageResponse(message="Product deleted successfully")


# -------- Public endpoints --------


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Public product page. Counts a view.
    """
    return ApiResponse(data=service.view_product(session, product_id))


@router.get("/{product_id}/related", response_model=ApiResponse[list[ProductRead]])
def list_related_products(
    product_id: uuid.UUID,
    limit: int = RELATED_PRODUCTS_LIMIT,
    session: Session = Depends(get_session),
):
    """
    Active products of the same store and category.
    """
    products = service.list_related(session, product_id, limit=max(1, min(limit, 20)))
    return ApiResponse(data=products, count=len(products))


@router.post("/{product_id}/whatsapp-click", response_model=ApiResponse[WhatsAppClick])
def register_whatsapp_click(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Public counter, called when a buyer opens the WhatsApp chat.
    """
    clicks = service.register_whatsapp_click(session, product_id)
    return ApiResponse(data=WhatsAppClick(whatsapp_clicks=clicks))
