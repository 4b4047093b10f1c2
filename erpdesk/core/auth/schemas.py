"""Schemas for auth flows and the cached user profile."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from erpdesk.core.api.result import NETWORK_ERROR_MESSAGE
from erpdesk.core.auth.roles import Role


class UserProfile(BaseModel):
    """Profile returned by ``GET /api/auth/me``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default="", alias="_id")
    name: str = ""
    email: str = ""
    role: Optional[Role] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = Field(default=True, alias="isActive")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("role", mode="before")
    @classmethod
    def known_role_or_none(cls, v: Any) -> Optional[Role]:
        # Unknown wire roles are kept as "no role" so they fail every check.
        return Role.parse(v)


class AuthEnvelopeData(BaseModel):
    model_config = ConfigDict(extra="allow")

    user: Optional[UserProfile] = None


class AuthEnvelope(BaseModel):
    """Uniform ``{status, token?, data?: {user}, message?}`` response wrapper."""

    model_config = ConfigDict(extra="allow")

    status: str = "error"
    token: Optional[str] = None
    data: Optional[AuthEnvelopeData] = None
    message: Optional[str] = None
    http_status: Optional[int] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        ok_status = self.http_status is None or 200 <= self.http_status < 300
        return ok_status and self.status in ("success", "ok")

    @property
    def user(self) -> Optional[UserProfile]:
        return self.data.user if self.data else None

    @classmethod
    def network_error(cls) -> "AuthEnvelope":
        return cls(status="error", message=NETWORK_ERROR_MESSAGE)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    password_confirm: Optional[str] = None
    role: Optional[Role] = None
    department: Optional[str] = Field(default=None, max_length=100)
    position: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role", "department", "position", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password_confirm is not None and self.password_confirm != self.password:
            raise ValueError("passwords do not match")
        return self

    def api_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude={"password_confirm"}, exclude_none=True)
        if self.role is not None:
            payload["role"] = self.role.value
        return payload


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)
    position: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name", "department", "position", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("new password and confirmation do not match")
        return self
