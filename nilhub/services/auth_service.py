# nilhub/services/auth_service.py
import logging

from sqlmodel import Session

from nilhub.core.errors import Conflict, Unauthenticated
from nilhub.core.security import hash_password, issue_token, verify_password
from nilhub.models.account import Account
from nilhub.repositories.account_repo import AccountRepository
from nilhub.schemas.account import (
    AccountRead,
    AccountSummary,
    AuthData,
    LoginRequest,
    MeData,
    RegisterRequest,
    normalize_email,
)
from nilhub.schemas.store import StoreRead, StoreSummary
from nilhub.services.store_service import StoreService

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """
    Registration, login and "who am I".

    Responsibilities:
      - normalize emails before every lookup
      - create the vendor's store alongside the account
      - never reveal whether an email exists on login
    """

    def __init__(self, repo: AccountRepository, store_service: StoreService):
        self.repo = repo
        self.store_service = store_service

    def _auth_data(self, session: Session, account: Account) -> AuthData:
        store = self.store_service.repo.get_by_owner(session, account.id)
        return AuthData(
            account=AccountSummary.model_validate(account),
            store=StoreSummary.model_validate(store) if store else None,
            token=issue_token(account.id),
        )

    def register(self, session: Session, payload: RegisterRequest) -> AuthData:
        """
        Create account + store and return a session token.

        Raises:
            Conflict(400): if the email is already registered.
        """
        email = normalize_email(payload.email)
        if self.repo.get_by_email(session, email) is not None:
            raise Conflict("Email is already registered")

        account = self.repo.create(
            session,
            Account(
                name=payload.name,
                email=email,
                password_hash=hash_password(payload.password),
            ),
        )
        store = self.store_service.create_store(
            session,
            account,
            name=payload.store_name,
            whatsapp=payload.whatsapp,
            instagram=payload.instagram,
            facebook=payload.facebook,
        )

        logger.info("Account registered: %s | store: %s", account.email, store.slug)
        return self._auth_data(session, account)

    def login(self, session: Session, payload: LoginRequest) -> AuthData:
        """
        Raises:
            Unauthenticated(401): bad credentials or inactive account.
        """
        email = normalize_email(payload.email)
        account = self.repo.get_by_email(session, email)

        if account is None or not verify_password(payload.password, account.password_hash):
            logger.warning("Failed login for %s", email)
            raise Unauthenticated(INVALID_CREDENTIALS, reason="credentials")

        if not account.is_active:
            raise Unauthenticated(
                "Account inactive. Contact the administrator.",
                reason="account_inactive",
            )

        logger.info("Login: %s", account.email)
        return self._auth_data(session, account)

    def me(self, session: Session, account: Account) -> MeData:
        store = self.store_service.repo.get_by_owner(session, account.id)
        return MeData(
            account=AccountRead.model_validate(account),
            store=StoreRead.model_validate(store) if store else None,
        )
