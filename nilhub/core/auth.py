# nilhub/core/auth.py
import logging
import uuid
from typing import Any, Callable

from fastapi import Depends, Path, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError
from sqlmodel import Session

from nilhub.core.errors import Forbidden, NotFound, Unauthenticated
from nilhub.core.security import decode_token
from nilhub.database import get_session
from nilhub.models.account import Account

logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise a
#   generic 403; `protect` answers with its own 401 instead.
bearer_scheme = HTTPBearer(auto_error=False)

# Resource loader: (session, id) -> resource | None
ResourceLoader = Callable[[Session, uuid.UUID], Any]
# Owner resolver: attribute name, or (session, resource) -> owner id
OwnerField = str | Callable[[Session, Any], uuid.UUID | None]


def _route(request: Request) -> str:
    return f"{request.method} {request.url.path}"


def protect(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Account:
    """
    Authenticate the request from its bearer token.

    Flow:
      1. No Authorization header / wrong scheme => 401 no_token.
      2. Token without three dot-separated segments => 401 malformed.
      3. Signature or expiry invalid => 401 (expired vs invalid message).
      4. Account missing => 401; account inactive => 401.
      5. Attach the Account to request.state.account and return it.

    The account is loaded on every request so a deactivation takes effect
    immediately.
    """
    if credentials is None:
        logger.warning("Access without token to %s", _route(request))
        raise Unauthenticated(
            "Not authorized: no token provided",
            reason="no_token",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning("Malformed token on %s", _route(request))
        raise Unauthenticated("Malformed token", reason="malformed")

    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        logger.warning("Expired token on %s", _route(request))
        raise Unauthenticated(
            "Your session has expired. Please log in again.",
            reason="expired",
        )
    except JWTError:
        logger.warning("Invalid token on %s", _route(request))
        raise Unauthenticated("Invalid authentication token", reason="invalid")

    try:
        account_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        logger.warning("Token with malformed subject on %s", _route(request))
        raise Unauthenticated("Invalid authentication token", reason="invalid")

    account = session.get(Account, account_id)
    if account is None:
        logger.warning("Valid token but account does not exist: %s", account_id)
        raise Unauthenticated("Account not found", reason="account_not_found")

    if not account.is_active:
        logger.warning("Inactive account tried to access: %s", account.email)
        raise Unauthenticated(
            "Account inactive. Contact the administrator.",
            reason="account_inactive",
        )

    request.state.account = account
    return account


def require_admin(request: Request, account: Account = Depends(protect)) -> Account:
    """
    Enforce admin role. Always composed after `protect`, which either
    returns an active account or raises 401.

    Raises:
        Forbidden(403): if role is not admin.
    """
    if account.role != "admin":
        logger.warning("%s tried to access admin route %s", account.email, _route(request))
        raise Forbidden("Access denied. Administrators only.")
    return account


def _owner_of(session: Session, resource: Any, owner_field: OwnerField) -> uuid.UUID | None:
    if callable(owner_field):
        return owner_field(session, resource)
    return getattr(resource, owner_field)


def require_ownership(
    loader: ResourceLoader,
    owner_field: OwnerField = "owner_id",
    id_param: str = "id",
    resource_name: str = "Resource",
):
    """
    Dependency factory: load the resource named by the `id_param` path
    parameter and check that the authenticated account owns it.

    Order matters: a missing resource is always 404, never 403.
    Admins may act on any resource.

    Usage:

        owned_store = require_ownership(repo.get_by_id, "owner_id", "store_id")

        @router.put("/{store_id}")
        def update(store: Store = Depends(owned_store)): ...
    """

    def dependency(
        request: Request,
        resource_id: uuid.UUID = Path(alias=id_param),
        account: Account = Depends(protect),
        session: Session = Depends(get_session),
    ):
        resource = loader(session, resource_id)
        if resource is None:
            raise NotFound(f"{resource_name} not found")

        owner_id = _owner_of(session, resource, owner_field)
        if owner_id != account.id:
            if account.role == "admin":
                logger.info(
                    "Admin %s acting on %s %s owned by %s",
                    account.email, resource_name.lower(), resource_id, owner_id,
                )
            else:
                logger.warning(
                    "%s tried to access a %s they do not own: %s",
                    account.email, resource_name.lower(), resource_id,
                )
                raise Forbidden("You do not have permission to access this resource")

        request.state.resource = resource
        return resource

    return dependency
