"""
Auth data models.

Wire shapes are pydantic models using the API's camelCase keys; the
signed-in principal is a plain dataclass owned by the session manager.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Login request body."""
    email: str
    password: str = Field(..., repr=False)

    def to_wire(self) -> dict:
        return self.model_dump()


class RegistrationRequest(BaseModel):
    """Registration request body, serialized verbatim."""
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str = Field(..., repr=False)
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    role: str = "User"

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class LoginResponse(BaseModel):
    """Login response; only the token is consumed."""
    model_config = ConfigDict(strict=True)

    token: str


class UserPayload(BaseModel):
    """User object as returned by the registration endpoint."""
    model_config = ConfigDict(strict=True, populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    role: str
    notifications_enabled: bool = Field(..., alias="notificationsEnabled")


@dataclass
class User:
    """The signed-in principal."""
    first_name: str
    last_name: str
    email: str
    role: str
    notifications_enabled: bool = False
    profile_image: Optional[bytes] = None  # Never sent, decoded or persisted

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop("profile_image")
        return data

    @classmethod
    def from_payload(cls, payload: UserPayload) -> "User":
        return cls(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            role=payload.role,
            notifications_enabled=payload.notifications_enabled
        )

    @classmethod
    def from_json(cls, body: bytes) -> "User":
        """
        Decode a registration response body.

        Raises:
            pydantic.ValidationError: If the body is not a well-formed user object
        """
        return cls.from_payload(UserPayload.model_validate_json(body))
