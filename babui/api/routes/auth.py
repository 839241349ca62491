"""
API routes for account management: sign-up, sign-in, password reset.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from babui.api.deps import get_session
from babui.context import Session

router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignUpRequest(BaseModel):
    email: str
    password: str
    confirm_password: str
    name: str
    phone: str = ""
    gender: str = ""


class SignInRequest(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


@router.post("/signup", status_code=201)
async def sign_up(request: SignUpRequest, session: Session = Depends(get_session)) -> dict[str, Any]:
    result = session.auth.sign_up(
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
        name=request.name,
        phone=request.phone,
        gender=request.gender,
    )
    return {"user_id": result.user_id, "confirmation_required": result.confirmation_required}


@router.post("/signin")
async def sign_in(request: SignInRequest, session: Session = Depends(get_session)) -> dict[str, Any]:
    user = session.auth.sign_in(request.email, request.password)
    return {
        "user": user.model_dump(),
        "access_token": getattr(session.auth.session, "access_token", None),
        "refresh_token": getattr(session.auth.session, "refresh_token", None),
    }


@router.post("/password-reset", status_code=202)
async def request_password_reset(
    request: PasswordResetRequest,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    session.auth.request_password_reset(request.email)
    return {"status": "sent"}
