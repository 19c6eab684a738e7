"""
adboard/models/user.py

Purpose: User document model

- Telegram chat id as identity
- Declared location (country / city) with "unspecified" sentinel
- Ad counter and the legacy subscription flag
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from utils.time_utils import utc_now
from utils.validation_utils import UNSPECIFIED


def _is_specified(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() != UNSPECIFIED


class Location(BaseModel):
    """A free-text location. Never validated against a real geography."""

    country: str = UNSPECIFIED
    city: str = UNSPECIFIED

    @property
    def has_country(self) -> bool:
        return _is_specified(self.country)

    @property
    def has_city(self) -> bool:
        return _is_specified(self.city)

    @property
    def is_set(self) -> bool:
        """A location counts as confirmed once the city is known."""
        return self.has_city

    def display(self) -> str:
        if self.has_country and self.has_city:
            return f"{self.country}, {self.city}"
        if self.has_city:
            return self.city
        if self.has_country:
            return self.country
        return UNSPECIFIED


class User(BaseModel):
    user_id: int
    ad_count: int = 0
    has_subscription: bool = False
    location: Location = Field(default_factory=Location)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> Optional["User"]:
        if not doc:
            return None
        doc = {key: value for key, value in doc.items() if key != "_id"}
        if not doc.get("location"):
            doc["location"] = Location().model_dump()
        return cls(**doc)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()
