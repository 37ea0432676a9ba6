# nilhub/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from nilhub.core.auth import protect
from nilhub.database import get_session
from nilhub.models.account import Account
from nilhub.repositories.account_repo import AccountRepository
from nilhub.repositories.product_repo import ProductRepository
from nilhub.repositories.store_repo import StoreRepository
from nilhub.schemas.account import AuthData, LoginRequest, MeData, RegisterRequest
from nilhub.schemas.common import ApiResponse
from nilhub.services.auth_service import AuthService
from nilhub.services.store_service import StoreService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = AccountRepository()
store_service = StoreService(StoreRepository(), ProductRepository())
service = AuthService(repo, store_service)


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Vendor sign-up.

    - Creates the account and its store (slug generated from store_name).
    - Returns a session token so the client is logged in right away.
    """
    data = service.register(session, payload)
    return ApiResponse(data=data, message="Account created successfully")


@router.post("/login", response_model=ApiResponse[AuthData])
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Email + password login.

    - Unknown email and wrong password get the same 401.
    """
    return ApiResponse(data=service.login(session, payload))


@router.get("/me", response_model=ApiResponse[MeData])
def read_me(
    account: Account = Depends(protect),
    session: Session = Depends(get_session),
):
    """
    Return the authenticated account and its store.
    """
    return ApiResponse(data=service.me(session, account))
