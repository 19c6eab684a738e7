"""
adboard/models/ad.py

Purpose: Ad document model

- Category, description, optional single media item
- Owner reference by Telegram chat id
- Location snapshot taken at publish time
- Immutable once stored
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from adboard.models.user import Location
from utils.time_utils import utc_now


class Category(str, Enum):
    AUTO = "auto"
    TECH = "tech"
    REAL_ESTATE = "real_estate"
    CLOTHING = "clothing"
    OTHER = "other"
    PETS = "pets"

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["Category"]:
        try:
            return cls(key)
        except ValueError:
            return None


class MediaKind(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"


class Media(BaseModel):
    kind: MediaKind
    file_id: str


class Ad(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    user_id: int
    category: Category
    description: str
    media: Optional[Media] = None
    location: Optional[Location] = None
    created_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Ad":
        data = {key: value for key, value in doc.items() if key != "_id"}
        if doc.get("_id") is not None:
            data["id"] = str(doc["_id"])
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(exclude={"id"})
        doc["category"] = self.category.value
        if self.media is not None:
            doc["media"] = {"kind": self.media.kind.value, "file_id": self.media.file_id}
        return doc
