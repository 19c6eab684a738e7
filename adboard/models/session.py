"""
adboard/models/session.py

Purpose: Per-conversation context

- Explicit conversation state (replaces "category is set" checks)
- Location-input flag used by the gate
- Ad draft (category, description, staged media)
- Listing pagination cursor
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from adboard.flow.states import ConversationState, is_submission_state
from adboard.models.ad import Category, Media
from utils.time_utils import utc_now


class ListingCursor(BaseModel):
    """Where the last "show more" left off."""

    offset: int = 0
    category: Optional[Category] = None
    scope: Optional[str] = None


class ConversationSession(BaseModel):
    chat_id: int
    state: ConversationState = ConversationState.IDLE
    awaiting_location: bool = False

    # Ad draft
    category: Optional[Category] = None
    description: Optional[str] = None
    staged_media: Optional[Media] = None

    listing: Optional[ListingCursor] = None

    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def in_submission(self) -> bool:
        return is_submission_state(self.state)

    def clear_draft(self):
        """Drops everything a submission left behind."""
        self.state = ConversationState.IDLE
        self.category = None
        self.description = None
        self.staged_media = None

    def snapshot(self) -> Dict[str, Any]:
        """Comparable view of the fields that matter for persistence."""
        return self.model_dump(exclude={"updated_at"})

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ConversationSession":
        data = {key: value for key, value in doc.items() if key not in ("_id", "expires_at")}
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(mode="json", exclude={"updated_at"})
        doc["updated_at"] = self.updated_at
        return doc
