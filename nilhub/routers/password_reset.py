# nilhub/routers/password_reset.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from nilhub.core.config import get_settings
from nilhub.database import get_session
from nilhub.repositories.account_repo import AccountRepository
from nilhub.repositories.password_reset_repo import PasswordResetRepository
from nilhub.schemas.common import MessageResponse
from nilhub.schemas.password_reset import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)
from nilhub.services.password_reset_service import PasswordResetService

router = APIRouter(prefix="/auth", tags=["Password Recovery"])

repo = PasswordResetRepository()
service = PasswordResetService(repo, AccountRepository())


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
def forgot_password(
    payload: ForgotPasswordRequest,
    session: Session = Depends(get_session),
):
    """
    Request a 6-digit recovery code.

    - Never reveals whether the email is registered.
    - One request per email every 5 minutes (429 otherwise).
    - The code is echoed back only outside production.
    """
    return service.request_code(
        session,
        payload,
        expose_code=get_settings().detailed_errors,
    )


@router.post("/verify-reset-code", response_model=MessageResponse)
def verify_reset_code(
    payload: VerifyResetCodeRequest,
    session: Session = Depends(get_session),
):
    """
    Check a recovery code. Each check counts as an attempt (max 3).
    """
    return MessageResponse(message=service.verify_code(session, payload))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    payload: ResetPasswordRequest,
    session: Session = Depends(get_session),
):
    """
    Set a new password with a valid code. The code cannot be reused.
    """
    return MessageResponse(message=service.reset_password(session, payload))
