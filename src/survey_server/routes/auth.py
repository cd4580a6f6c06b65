"""Credential endpoints — registration and credential verification.

The survey API does not issue sessions or tokens: the identity gateway in
front of it calls ``/auth/verify`` at sign-in and then forwards the user id
on every request in ``X-User-ID``.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_core.models.user import UserInfo
from survey_core.service import EvaluationService

from survey_server.dependencies import get_db, get_service

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


class VerifyRequest(BaseModel):
    email: str
    password: str


class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "User created successfully"
    user: UserInfo


class VerifyResponse(BaseModel):
    success: bool = True
    user: UserInfo


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
) -> RegisterResponse:
    """Register a user.  400 on a weak password or an email already in use."""
    user = await service.register_user(
        db, email=body.email, password=body.password, name=body.name,
    )
    return RegisterResponse(user=user)


@router.post("/verify")
async def verify(
    body: VerifyRequest,
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
) -> VerifyResponse:
    """Check an email/password pair; 401 if it does not match."""
    user = await service.verify_credentials(
        db, email=body.email, password=body.password,
    )
    return VerifyResponse(user=user)
