"""Auth Schemas: OTP and profile payloads.

Invariants:
    - phone_number is exactly 10 digits everywhere
    - name is stripped and non-empty
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


PHONE_PATTERN = r"^\d{10}$"


class SendOtpRequest(BaseModel):
    phone_number: str = Field(pattern=PHONE_PATTERN)


class VerifyOtpRequest(BaseModel):
    phone_number: str = Field(pattern=PHONE_PATTERN)
    otp: str = Field(pattern=r"^\d{4,10}$")


class CreateProfileRequest(BaseModel):
    phone_number: str = Field(pattern=PHONE_PATTERN)
    name: str = Field(min_length=1, max_length=200)
    email: str | None = Field(
        None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    phone_number: str
    name: str
    email: str | None = None
    created_at: datetime


class VerifyOtpResponse(BaseModel):
    is_new_user: bool
    user: UserResponse | None = None


class MessageResponse(BaseModel):
    message: str
