"""Auth Routes: phone OTP login, profile creation, current user and logout.

Invariants:
    - The session token only travels in an HttpOnly cookie, never in a body
    - verify-otp opens a session only for an existing user; new phones get an HttpOnly
      signup cookie that create-profile redeems once
    - logout is idempotent: a missing or stale cookie still answers 200
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from investestate.api.deps import (
    get_auth_flow, get_current_user, get_session_token, get_signup_token,
)
from investestate.config import get_settings
from investestate.core.records import AuthSessionRecord, UserRecord
from investestate.schemas.auth import (
    CreateProfileRequest, MessageResponse, SendOtpRequest,
    UserResponse, VerifyOtpRequest, VerifyOtpResponse,
)
from investestate.services.auth_flow import AuthFlow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_session_cookie(response: Response, session: AuthSessionRecord) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def _set_signup_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.signup_cookie_name,
        value=token,
        max_age=settings.otp_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/send-otp", response_model=MessageResponse)
async def send_otp(body: SendOtpRequest, auth: AuthFlow = Depends(get_auth_flow)):
    await auth.send_otp(body.phone_number)
    return MessageResponse(message="OTP sent successfully")


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    body: VerifyOtpRequest,
    response: Response,
    auth: AuthFlow = Depends(get_auth_flow),
):
    """Consume the code. Existing users are logged in on the spot."""
    verification = await auth.verify_otp(body.phone_number, body.otp)
    user = verification.user
    if user is None:
        _set_signup_cookie(response, verification.signup_token)
        return VerifyOtpResponse(is_new_user=True)
    _set_session_cookie(response, await auth.open_session(user.id))
    logger.info("User logged in", extra={"user_id": user.id})
    return VerifyOtpResponse(
        is_new_user=False, user=UserResponse.model_validate(user),
    )


@router.post(
    "/create-profile", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_profile(
    body: CreateProfileRequest,
    response: Response,
    signup_token: str | None = Depends(get_signup_token),
    auth: AuthFlow = Depends(get_auth_flow),
):
    user = await auth.create_profile(
        body.phone_number, body.name, body.email, signup_token,
    )
    response.delete_cookie(get_settings().signup_cookie_name)
    _set_session_cookie(response, await auth.open_session(user.id))
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def me(user: UserRecord = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    auth: AuthFlow = Depends(get_auth_flow),
):
    await auth.close_session(token)
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse(message="Logged out successfully")
