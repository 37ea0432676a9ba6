# nilhub/repositories/account_repo.py
import uuid

from sqlmodel import Session, select

from nilhub.database import commit_or_raise
from nilhub.models.account import Account


class AccountRepository:
    """
    Data access layer for Account.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, account_id: uuid.UUID) -> Account | None:
        """Return an Account by primary key, or None if not found."""
        return session.get(Account, account_id)

    def get_by_email(self, session: Session, email: str) -> Account | None:
        """Return an Account by unique (normalized) email, or None."""
        stmt = select(Account).where(Account.email == email)
        return session.exec(stmt).first()

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[Account]:
        """Newest accounts first."""
        stmt = (
            select(Account)
            .order_by(Account.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, account: Account) -> Account:
        """Insert a new Account and return the persisted row."""
        session.add(account)
        commit_or_raise(session, account)
        session.refresh(account)
        return account

    def update(self, session: Session, account: Account) -> Account:
        """Persist changes to an existing Account."""
        session.add(account)
        commit_or_raise(session, account)
        session.refresh(account)
        return account
