"""
API request and response models for the alert service REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
alerts/models.py, which own the internal domain representation. Route
handlers map between the two.

Wire names follow the public contract: an alert's condition travels as
"alert" and its owner as "user_id". password_hash has no response model and
so can never be serialized.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alerts.models import Alert
from auth.models import User
from auth.tokens import MAX_PASSWORD_BYTES

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /api/register and POST /api/login.

    Emails are compared exactly as sent: no case folding, no trimming.
    """

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def within_bcrypt_limit(cls, value: str) -> str:
        """bcrypt reads at most 72 bytes; reject rather than truncate."""
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class OkResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool = True


class UserInfo(BaseModel):
    """Minimal public identity. Never carries the password digest."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(id=user.id, email=user.email)


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    user: UserInfo


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserInfo


# ---------------------------------------------------------------------------
# Alerts -- request models
# ---------------------------------------------------------------------------


class AlertCreate(BaseModel):
    """Request body for POST /api/alerts. All three fields are required."""

    address: str = Field(min_length=1)
    alert: str = Field(min_length=1)
    time: str = Field(min_length=1)


class AlertUpdate(BaseModel):
    """Request body for PUT /api/alerts/{id}.

    Every field is optional; only the ones sent are written. Anything else in
    the body (modified, user_id, id, deleted) is ignored -- ownership and
    timestamps are server-controlled, and the deleted flag moves only through
    DELETE and /restore.
    """

    model_config = ConfigDict(extra="ignore")

    address: Optional[str] = Field(default=None, min_length=1)
    alert: Optional[str] = Field(default=None, min_length=1)
    time: Optional[str] = Field(default=None, min_length=1)
    pinned: Optional[bool] = None

    def to_fields(self) -> dict:
        """Return the explicitly-sent, non-null fields keyed by domain name."""
        sent = self.model_dump(exclude_unset=True, exclude_none=True)
        if "alert" in sent:
            sent["alert_condition"] = sent.pop("alert")
        return sent


# ---------------------------------------------------------------------------
# Alerts -- response models
# ---------------------------------------------------------------------------


class AlertOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    address: str
    alert: str
    time: str
    pinned: bool
    deleted: bool
    created_at: str
    modified: str

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertOut":
        """Build the wire representation from the domain dataclass."""
        return cls(
            id=alert.id,
            user_id=alert.user_id,
            address=alert.address,
            alert=alert.alert_condition,
            time=alert.time,
            pinned=alert.pinned,
            deleted=alert.deleted,
            created_at=alert.created_at,
            modified=alert.modified,
        )


class AlertResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    alert: AlertOut


class AlertListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    alerts: list[AlertOut]


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str
    code: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    database: str = "ok"
