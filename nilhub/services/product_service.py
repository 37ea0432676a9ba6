# nilhub/services/product_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable

from sqlmodel import Session

from nilhub.core.errors import FieldValidationError, NotFound, StorageError
from nilhub.core.storage_utils import delete_from_storage
from nilhub.models.account import Account
from nilhub.models.product import Product
from nilhub.repositories.product_repo import ProductRepository
from nilhub.schemas.product import ProductCreate, ProductUpdate
from nilhub.services.store_service import StoreService

logger = logging.getLogger(__name__)

RELATED_PRODUCTS_LIMIT = 4


class ProductService:
    """
    Business logic for Product.

    Responsibilities:
      - sale price must stay below the regular price
      - in_stock follows stock
      - store product counter on create/delete
      - best-effort cleanup of stored images
      - view / WhatsApp click counters

    Ownership is enforced at the router via `require_ownership`.
    """

    def __init__(self, repo: ProductRepository, store_service: StoreService):
        self.repo = repo
        self.store_service = store_service

    # ----- Helpers -----

    @staticmethod
    def _check_sale_price(price: float, sale_price: float | None) -> None:
        if sale_price is None:
            return
        if sale_price >= price:
            raise FieldValidationError.single(
                "sale_price",
                f"Sale price ({sale_price:g}) must be lower than the regular price ({price:g})",
            )

    @staticmethod
    def _touch(product: Product) -> None:
        product.updated_at = datetime.now(timezone.utc)

    def _delete_assets(self, asset_ids: Iterable[str]) -> None:
        """Storage cleanup never blocks the database change."""
        for asset_id in asset_ids:
            try:
                delete_from_storage(asset_id)
            except StorageError as e:
                logger.warning("Could not delete image %s: %s", asset_id, e)

    def owner_of(self, session: Session, product: Product) -> uuid.UUID | None:
        """Products are owned through their store."""
        store = self.store_service.repo.get_by_id(session, product.store_id)
        return store.owner_id if store else None

    # ----- Reads -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def view_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """Public product page; each read counts as a view."""
        product = self.get_product(session, product_id)
        product.views += 1
        return self.repo.update(session, product)

    def list_my_products(self, session: Session, account: Account) -> list[Product]:
        store = self.store_service.get_store_for_owner(session, account)
        return self.repo.list_for_store(session, store.id)

    def list_related(
        self,
        session: Session,
        product_id: uuid.UUID,
        limit: int = RELATED_PRODUCTS_LIMIT,
    ) -> list[Product]:
        product = self.get_product(session, product_id)
        return self.repo.list_related(session, product, limit=limit)

    # ----- Mutations -----

    def create_product(
        self,
        session: Session,
        account: Account,
        payload: ProductCreate,
    ) -> Product:
        """
        Create a product in the caller's store.

        Raises:
            NotFound(404): if the account has no store.
            FieldValidationError(400): if sale_price >= price.
        """
        store = self.store_service.get_store_for_owner(session, account)
        self._check_sale_price(payload.price, payload.sale_price)

        data = payload.model_dump()
        data["images"] = [img.model_dump() for img in payload.images]
        product = Product(store_id=store.id, **data)
        product.set_stock(payload.stock)

        product = self.repo.create(session, product)
        self.store_service.increment_products(session, store)

        logger.info("Product created: %s (store %s)", product.name, store.slug)
        return product

    def update_product(
        self,
        session: Session,
        product: Product,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        - sale_price is checked against the price the product will have
          after the update; sending sale_price=null ends the sale
        - images dropped from the list are removed from storage
        """
        changes = payload.model_dump(exclude_unset=True)

        if "price" in changes or "sale_price" in changes:
            self._check_sale_price(
                changes.get("price", product.price),
                changes.get("sale_price", product.sale_price),
            )

        removed_assets: list[str] = []
        if "images" in changes:
            kept = {img["asset_id"] for img in changes["images"]}
            removed_assets = [
                img["asset_id"] for img in product.images if img.get("asset_id") not in kept
            ]
            # New list object so the JSON column is flagged dirty
            product.images = list(changes.pop("images"))

        stock = changes.pop("stock", None)
        for field, value in changes.items():
            setattr(product, field, value)
        if stock is not None:
            product.set_stock(stock)

        self._touch(product)
        product = self.repo.update(session, product)
        self._delete_assets(removed_assets)

        logger.info("Product updated: %s", product.id)
        return product

    def update_stock(self, session: Session, product: Product, stock: int) -> Product:
        product.set_stock(stock)
        self._touch(product)
        product = self.repo.update(session, product)
        logger.info("Stock updated: %s -> %s", product.id, stock)
        return product

    def delete_product(self, session: Session, product: Product) -> None:
        """
        Delete a product, decrement its store counter and clean up images.
        """
        asset_ids = [img["asset_id"] for img in product.images if img.get("asset_id")]
        store = self.store_service.repo.get_by_id(session, product.store_id)

        self.repo.delete(session, product)
        if store is not None:
            self.store_service.decrement_products(session, store)

        self._delete_assets(asset_ids)
        logger.info("Product deleted: %s", product.id)

    def register_whatsapp_click(self, session: Session, product_id: uuid.UUID) -> int:
        """Public counter behind the "buy on WhatsApp" button."""
        product = self.get_product(session, product_id)
        product.whatsapp_clicks += 1
        product = self.repo.update(session, product)
        return product.whatsapp_clicks
