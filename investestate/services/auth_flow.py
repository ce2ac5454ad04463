"""Auth Flow: phone OTP login, profile creation and cookie sessions.

Invariants:
    - send_otp stores only the code hash; the plain code goes to the OtpSender
    - A wrong code increments the attempt counter; the verdict is always "Invalid OTP"
    - A code is consumed atomically (mark_used) before any session is opened
    - A code consumed for an unregistered phone issues a signup token; only its hash is stored
    - create_profile requires an unused phone AND redeems that token exactly once, inside
      the code's validity window
    - Sessions expire after settings.session_ttl_hours; expired sessions resolve as absent
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from investestate.config import Settings
from investestate.core.errors import (
    ErrorContext, InvalidOtpError, PhoneAlreadyRegisteredError,
    UnauthenticatedError, ValidationFailedError,
)
from investestate.core.otp_policy import (
    OtpVerdict, evaluate_otp, generate_code, generate_signup_token, hash_code,
    hash_signup_token, is_signup_token_valid, is_valid_phone_number,
    mask_phone_number,
)
from investestate.core.records import AuthSessionRecord, UserRecord
from investestate.core.repository_protocols import OtpSender, Repositories

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OtpVerification:
    """An existing user, or a signup token for a phone with no account yet."""
    user: UserRecord | None
    signup_token: str | None = None


class AuthFlow:
    def __init__(self, repos: Repositories, settings: Settings, sender: OtpSender):
        self.repos = repos
        self.settings = settings
        self.sender = sender

    async def send_otp(self, phone_number: str, now: datetime | None = None) -> None:
        if not is_valid_phone_number(phone_number):
            raise ValidationFailedError("Invalid phone number format", "phone_number")
        now = now or _now()
        code = generate_code(self.settings.otp_length)
        await self.repos.otps.create(
            phone_number,
            hash_code(phone_number, code),
            now + timedelta(seconds=self.settings.otp_ttl_seconds),
            now,
        )
        await self.sender.send(phone_number, code)

    async def verify_otp(
        self, phone_number: str, code: str, now: datetime | None = None,
    ) -> OtpVerification:
        """Consume a valid code. New phones get a signup token for create_profile."""
        now = now or _now()
        otp = await self.repos.otps.get_latest(phone_number)
        verdict = evaluate_otp(
            otp, phone_number, code, now, self.settings.otp_max_attempts,
        )
        if verdict == OtpVerdict.MISMATCH:
            await self.repos.otps.record_failed_attempt(otp.id)
        if verdict != OtpVerdict.ACCEPTED:
            logger.warning(
                f"OTP rejected ({verdict.value}) for {mask_phone_number(phone_number)}",
                extra={"error_code": "INVALID_OTP"},
            )
            raise InvalidOtpError(verdict.value)
        user = await self.repos.users.get_by_phone(phone_number)
        token = generate_signup_token() if user is None else None
        token_hash = hash_signup_token(token) if token else None
        if not await self.repos.otps.mark_used(otp.id, token_hash):
            raise InvalidOtpError(OtpVerdict.USED.value)
        return OtpVerification(user=user, signup_token=token)

    async def create_profile(
        self,
        phone_number: str,
        name: str,
        email: str | None = None,
        signup_token: str | None = None,
        now: datetime | None = None,
    ) -> UserRecord:
        now = now or _now()
        if await self.repos.users.get_by_phone(phone_number):
            raise PhoneAlreadyRegisteredError()
        otp = await self.repos.otps.get_latest(phone_number)
        if not is_signup_token_valid(otp, signup_token, now):
            raise InvalidOtpError("unverified")
        if not await self.repos.otps.consume_signup_token(
            otp.id, hash_signup_token(signup_token),
        ):
            raise InvalidOtpError("unverified")
        user = await self.repos.users.create(phone_number, name, email, now)
        logger.info(f"User {user.id} created", extra={"user_id": user.id})
        return user

    async def open_session(
        self, user_id: int, now: datetime | None = None,
    ) -> AuthSessionRecord:
        now = now or _now()
        purged = await self.repos.auth_sessions.delete_expired(now)
        if purged:
            logger.debug(f"Purged {purged} expired session(s)")
        return await self.repos.auth_sessions.create(
            secrets.token_urlsafe(32),
            user_id,
            now + timedelta(hours=self.settings.session_ttl_hours),
            now,
        )

    async def resolve_session(
        self, token: str | None, now: datetime | None = None,
    ) -> UserRecord:
        if not token:
            raise UnauthenticatedError()
        now = now or _now()
        session = await self.repos.auth_sessions.get(token)
        if session is None or session.expires_at <= now:
            raise UnauthenticatedError()
        user = await self.repos.users.get(session.user_id)
        if user is None:
            raise UnauthenticatedError(ErrorContext(user_id=session.user_id))
        return user

    async def close_session(self, token: str | None) -> None:
        if token:
            await self.repos.auth_sessions.delete(token)
