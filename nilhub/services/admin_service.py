# nilhub/services/admin_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from nilhub.core.errors import NotFound, ValidationFailed
from nilhub.models.account import Account
from nilhub.models.store import Store
from nilhub.repositories.account_repo import AccountRepository
from nilhub.schemas.account import AccountSummary
from nilhub.schemas.admin import AdminStoreRead
from nilhub.services.store_service import StoreService

logger = logging.getLogger(__name__)


class AdminService:
    """
    Platform moderation. Accounts are deactivated, never deleted.
    Access is enforced at the router via `require_admin`.
    """

    def __init__(self, account_repo: AccountRepository, store_service: StoreService):
        self.account_repo = account_repo
        self.store_service = store_service

    def list_accounts(self, session: Session, skip: int = 0, limit: int = 100) -> list[Account]:
        return self.account_repo.list(session, skip=skip, limit=limit)

    def list_stores(self, session: Session, skip: int = 0, limit: int = 100) -> list[AdminStoreRead]:
        stores = self.store_service.repo.list(session, skip=skip, limit=limit)
        rows: list[AdminStoreRead] = []
        for store in stores:
            owner = self.account_repo.get_by_id(session, store.owner_id)
            row = AdminStoreRead.model_validate(store)
            row.owner = AccountSummary.model_validate(owner) if owner else None
            rows.append(row)
        return rows

    def toggle_store(self, session: Session, store_id: uuid.UUID) -> Store:
        store = self.store_service.get_store(session, store_id)
        store = self.store_service.set_active(session, store, not store.is_active)
        logger.info("Store %s is now %s", store.slug, "active" if store.is_active else "inactive")
        return store

    def toggle_account(self, session: Session, admin: Account, account_id: uuid.UUID) -> Account:
        """
        Raises:
            NotFound(404): unknown account.
            ValidationFailed(400): an admin trying to deactivate themselves.
        """
        account = self.account_repo.get_by_id(session, account_id)
        if account is None:
            raise NotFound("Account not found")
        if account.id == admin.id:
            raise ValidationFailed("You cannot deactivate your own account")

        account.is_active = not account.is_active
        account.updated_at = datetime.now(timezone.utc)
        account = self.account_repo.update(session, account)
        logger.info(
            "Account %s %s by %s",
            account.email, "reactivated" if account.is_active else "deactivated", admin.email,
        )
        return account
