from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from pydantic.v1 import BaseModel, Field, validator
from pydantic.v1 import ValidationError as PydanticValidationError

from marketplace.config import ListingsConfig
from marketplace.errors import ValidationError


def _clean_text(value: Any, field_name: str, max_chars: int) -> str:
    if value is None:
        raise ValueError(f"{field_name} is required")
    value = str(value).strip()
    if not value:
        raise ValueError(f"{field_name} is required")
    if len(value) > max_chars:
        raise ValueError(f"{field_name} must be at most {max_chars} characters")
    return value


def _clean_price(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("Please enter a valid price")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValueError("Please enter a valid price") from None
    if not math.isfinite(price) or price <= 0:
        raise ValueError("Please enter a valid price")
    return price


def _first_error_message(error: PydanticValidationError) -> str:
    errors = error.errors()
    return errors[0]["msg"] if errors else str(error)


class Listing(BaseModel):
    """Represents a marketplace listing as stored in Firestore."""

    id: str = Field(..., description="The store-assigned ID of the listing")
    title: str = Field(..., description="The title of the listing")
    description: str = Field(..., description="The description of the listing")
    price: float = Field(..., description="The asking price, always positive")
    owner_id: str = Field(..., description="The uid of the user who created the listing")
    created_at: datetime = Field(..., description="When the store created the listing")

    class Config:
        allow_mutation = False

    def is_owned_by(self, uid: str | None) -> bool:
        return uid is not None and self.owner_id == uid

    def to_dict(self) -> dict[str, Any]:
        """Returns the Listing as a JSON-serializable dict for API responses."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_firestore(cls, listing_id: str, data: dict[str, Any]) -> Listing:
        """Returns the Listing from a Firestore document id and its data."""
        return cls(
            id=listing_id,
            title=data["title"],
            description=data["description"],
            price=data["price"],
            owner_id=data["ownerId"],
            created_at=data["createdAt"],
        )


class ListingDraft(BaseModel):
    """The fields a user supplies when creating a listing."""

    title: str
    description: str
    price: float

    @validator("title", pre=True)
    def _validate_title(cls, value):
        return _clean_text(value, "Title", ListingsConfig.title_max_chars)

    @validator("description", pre=True)
    def _validate_description(cls, value):
        return _clean_text(value, "Description", ListingsConfig.description_max_chars)

    @validator("price", pre=True)
    def _validate_price(cls, value):
        return _clean_price(value)

    @classmethod
    def parse(cls, data: dict[str, Any]) -> ListingDraft:
        """
        Validate user input into a draft.

        :param data: Raw input with title, description and price.
        :raises ValidationError: If a field is missing, empty, too long, or the price is not a positive number.
        """
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise ValidationError(_first_error_message(e)) from e

    def to_firestore(self, owner_id: str, created_at: Any) -> dict[str, Any]:
        """Returns the draft as a dict for Firestore."""
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "ownerId": owner_id,
            "createdAt": created_at,
        }


class ListingPatch(BaseModel):
    """A partial update of the editable fields of a listing."""

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None

    class Config:
        extra = "forbid"

    @validator("title", pre=True)
    def _validate_title(cls, value):
        return _clean_text(value, "Title", ListingsConfig.title_max_chars)

    @validator("description", pre=True)
    def _validate_description(cls, value):
        return _clean_text(value, "Description", ListingsConfig.description_max_chars)

    @validator("price", pre=True)
    def _validate_price(cls, value):
        return _clean_price(value)

    @classmethod
    def parse(cls, data: dict[str, Any]) -> ListingPatch:
        """
        Validate a partial update.

        Only title, description and price may be supplied; any other key is rejected.

        :raises ValidationError: If a supplied field is invalid or not editable.
        """
        try:
            return cls(**data)
        except PydanticValidationError as e:
            errors = e.errors()
            if errors and errors[0]["type"] == "value_error.extra":
                raise ValidationError(f"{errors[0]['loc'][0]} cannot be changed") from e
            raise ValidationError(_first_error_message(e)) from e

    def to_firestore(self) -> dict[str, Any]:
        """Returns only the supplied fields, keyed by their stored names."""
        return self.dict(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.to_firestore()
