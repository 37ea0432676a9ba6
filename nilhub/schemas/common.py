# nilhub/schemas/common.py
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Success envelope shared by every endpoint:

        {"success": true, "data": ..., "count": n?, "message": "..."?}

    Errors use the envelope produced by nilhub.core.error_handler.
    """

    success: bool = True
    data: T
    count: int | None = None
    message: str | None = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
