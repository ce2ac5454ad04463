"""OTP Policy: code generation, hashing and verification rules.

Invariants:
    - Codes are numeric, fixed length, drawn from `secrets`
    - Only a hash of (phone, code) is ever stored
    - evaluate_otp is PURE: returns a verdict, the shell applies side effects
    - A code is accepted at most once, before expiry, within max_attempts wrong tries
    - Signup tokens are stored hashed and only bind to the code they were issued with
"""

import hashlib
import hmac
import re
import secrets
from datetime import datetime
from enum import Enum

from investestate.core.records import OtpRecord


PHONE_NUMBER_PATTERN = re.compile(r"^\d{10}$")


class OtpVerdict(str, Enum):
    ACCEPTED = "accepted"
    MISSING = "missing"
    EXPIRED = "expired"
    USED = "used"
    LOCKED = "locked"
    MISMATCH = "mismatch"


def is_valid_phone_number(phone_number: str) -> bool:
    return bool(PHONE_NUMBER_PATTERN.match(phone_number))


def mask_phone_number(phone_number: str) -> str:
    """Log-safe form: keeps the last 4 digits."""
    return "*" * max(len(phone_number) - 4, 0) + phone_number[-4:]


def generate_code(length: int = 6) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_code(phone_number: str, code: str) -> str:
    return hashlib.sha256(f"{phone_number}:{code}".encode()).hexdigest()


def evaluate_otp(
    record: OtpRecord | None,
    phone_number: str,
    code: str,
    now: datetime,
    max_attempts: int,
) -> OtpVerdict:
    if record is None:
        return OtpVerdict.MISSING
    if record.used:
        return OtpVerdict.USED
    if record.expires_at <= now:
        return OtpVerdict.EXPIRED
    if record.attempts >= max_attempts:
        return OtpVerdict.LOCKED
    if not hmac.compare_digest(record.code_hash, hash_code(phone_number, code)):
        return OtpVerdict.MISMATCH
    return OtpVerdict.ACCEPTED


def generate_signup_token() -> str:
    return secrets.token_urlsafe(32)


def hash_signup_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def is_signup_token_valid(
    record: OtpRecord | None, token: str | None, now: datetime,
) -> bool:
    """The token issued when this code was consumed, still inside the code's window."""
    if record is None or not token or not record.used:
        return False
    if record.signup_token_hash is None or record.expires_at <= now:
        return False
    return hmac.compare_digest(record.signup_token_hash, hash_signup_token(token))
