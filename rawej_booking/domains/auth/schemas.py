from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """User as returned by the identity API's /auth/me."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | int
    uuid: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    mobile: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    gender: Optional[str] = None
    birthdate: Optional[str] = None


class Session(BaseModel):
    """Persisted authentication state; expires_at is epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token: str = Field(..., min_length=1)
    user: UserRecord
    expires_at: int = Field(..., alias="expiresAt")

    def to_blob(self) -> str:
        return self.model_dump_json(by_alias=True)


class OTPSendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(..., pattern=r"^\d{6,14}$")
    country_code: str = Field(..., alias="countryCode", pattern=r"^\+\d{1,4}$")
    language: str = "en"


class OTPSendResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    success: bool = True
    message: Optional[str] = None
    otp_id: Optional[str] = Field(default=None, alias="otpId")


class OTPVerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(..., pattern=r"^\d{6,14}$")
    code: str = Field(..., pattern=r"^\d{4,6}$")
    country_code: str = Field(..., alias="countryCode", pattern=r"^\+\d{1,4}$")


class OTPStatus(BaseModel):
    code: int
    message: str = ""


class OTPVerifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: OTPStatus
    access_token: Optional[str] = Field(default=None, alias="accessToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    expires_in: Optional[int] = Field(default=None, alias="expiresIn")

    @property
    def succeeded(self) -> bool:
        return self.status.code == 0 and bool(self.access_token)
