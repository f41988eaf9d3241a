"""Pydantic schemas for user API endpoints."""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from ....core.security import PASSWORD_TOO_LONG_MESSAGE, password_too_long


def _check_password_length(value: str) -> str:
    if password_too_long(value):
        raise ValueError(PASSWORD_TOO_LONG_MESSAGE)
    return value


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    role: str = "User"

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        return _check_password_length(value)


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    """Request schema to start a password reset."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request schema to complete a password reset."""

    token: str = Field(min_length=1)
    new_password: str = Field(
        min_length=1, validation_alias=AliasChoices("new_password", "newPassword")
    )

    @field_validator("new_password")
    @classmethod
    def _check_new_password(cls, value: str) -> str:
        return _check_password_length(value)


class UserProfileResponse(BaseModel):
    """Response schema for the public user profile."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    role: str


class UserLoginResponse(BaseModel):
    """Response schema for user login."""

    token: str
    token_type: str = "bearer"
    user: UserProfileResponse
