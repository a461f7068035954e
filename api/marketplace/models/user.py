from __future__ import annotations

from typing import Any

from pydantic.v1 import BaseModel, Field


class User(BaseModel):
    """Represents an authenticated marketplace user."""

    uid: str = Field(..., description="The Firebase uid of the user")
    email: str | None = Field(None, description="The email address of the user")
    display_name: str | None = Field(None, description="The display name of the user")

    @classmethod
    def from_identity_toolkit(cls, payload: dict[str, Any]) -> User:
        """Returns the User from an Identity Toolkit sign-in or sign-up response."""
        return cls(
            uid=payload["localId"],
            email=payload.get("email"),
            display_name=payload.get("displayName") or None,
        )

    @classmethod
    def from_decoded_token(cls, claims: dict[str, Any]) -> User:
        """Returns the User from the claims of a verified Firebase ID token."""
        return cls(
            uid=claims["uid"],
            email=claims.get("email"),
            display_name=claims.get("name"),
        )
