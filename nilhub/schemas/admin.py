# nilhub/schemas/admin.py
from nilhub.schemas.account import AccountSummary
from nilhub.schemas.store import StoreRead


class AdminStoreRead(StoreRead):
    """Store row for the admin panel, with its owner attached."""

    owner: AccountSummary | None = None
