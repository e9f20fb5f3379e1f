from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt rejects input longer than 72 bytes.
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    fullname: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    token: str


class ProfileUpdateRequest(BaseModel):
    username: str | None = Field(None, min_length=1, max_length=50)
    fullname: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, pattern=EMAIL_PATTERN, max_length=255)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(alias="oldPassword", min_length=1)
    new_password: str = Field(alias="newPassword", min_length=6)
    confirm_password: str = Field(alias="confirmPassword", min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("new_password")
    @classmethod
    def new_password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class ProfileResponse(BaseModel):
    id: int
    username: str
    fullname: str
    email: str
    avatar: str | None

    model_config = {"from_attributes": True}


class UserSummaryResponse(BaseModel):
    id: int
    username: str
    fullname: str

    model_config = {"from_attributes": True}
