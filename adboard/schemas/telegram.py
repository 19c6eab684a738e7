"""
adboard/schemas/telegram.py

Purpose: Telegram webhook payload schemas and parsers

- Validates incoming Update objects (only the fields the bot uses)
- Normalizes messages and button presses into InboundEvent
- Classifies commands, menu labels, callbacks, text and media
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from adboard.models.ad import Media, MediaKind
from utils.constants import MENU_LABELS
from utils.validation_utils import parse_command


class TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TelegramUser(TelegramModel):
    id: int
    first_name: Optional[str] = None
    username: Optional[str] = None


class Chat(TelegramModel):
    id: int
    type: str = "private"


class PhotoSize(TelegramModel):
    file_id: str
    width: int = 0
    height: int = 0
    file_size: Optional[int] = None


class FileRef(TelegramModel):
    """Video or document; only the file reference is used."""
    file_id: str
    file_name: Optional[str] = None


class Message(TelegramModel):
    message_id: int
    chat: Chat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    text: Optional[str] = None
    caption: Optional[str] = None
    photo: Optional[List[PhotoSize]] = None
    video: Optional[FileRef] = None
    document: Optional[FileRef] = None


class CallbackQuery(TelegramModel):
    id: str
    from_user: TelegramUser = Field(alias="from")
    message: Optional[Message] = None
    data: Optional[str] = None


class Update(TelegramModel):
    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None


class EventKind(str, Enum):
    COMMAND = "command"
    MENU = "menu"
    CALLBACK = "callback"
    TEXT = "text"
    MEDIA = "media"
    UNSUPPORTED = "unsupported"


class InboundEvent(BaseModel):
    """
    Normalized event for internal processing.
    """
    chat_id: int
    kind: EventKind
    text: Optional[str] = None
    command: Optional[str] = None
    callback_id: Optional[str] = None
    callback_data: Optional[str] = None
    media: Optional[Media] = None
    caption: Optional[str] = None
    first_name: Optional[str] = None

    def is_command(self, name: str) -> bool:
        return self.kind == EventKind.COMMAND and self.command == name

    def describe(self) -> str:
        """Short form for logs."""
        if self.kind == EventKind.COMMAND:
            return f"command:/{self.command}"
        if self.kind == EventKind.CALLBACK:
            return f"callback:{self.callback_data}"
        if self.kind == EventKind.MEDIA and self.media:
            return f"media:{self.media.kind.value}"
        return self.kind.value


def pick_largest_photo(sizes: List[PhotoSize]) -> PhotoSize:
    """
    Highest-resolution variant of a photo.
    """
    return max(sizes, key=lambda size: (size.width * size.height, size.file_size or 0))


def extract_media(message: Message) -> Optional[Media]:
    """
    The single media item attached to a message, if any.
    """
    if message.photo:
        return Media(kind=MediaKind.PHOTO, file_id=pick_largest_photo(message.photo).file_id)
    if message.video:
        return Media(kind=MediaKind.VIDEO, file_id=message.video.file_id)
    if message.document:
        return Media(kind=MediaKind.DOCUMENT, file_id=message.document.file_id)
    return None


def parse_message(message: Message) -> InboundEvent:
    first_name = message.from_user.first_name if message.from_user else None
    base = {"chat_id": message.chat.id, "first_name": first_name}

    media = extract_media(message)
    if media is not None:
        return InboundEvent(kind=EventKind.MEDIA, media=media, caption=message.caption, **base)

    if message.text is None:
        return InboundEvent(kind=EventKind.UNSUPPORTED, **base)

    command = parse_command(message.text)
    if command:
        return InboundEvent(kind=EventKind.COMMAND, command=command, text=message.text, **base)

    if message.text.strip() in MENU_LABELS:
        return InboundEvent(kind=EventKind.MENU, text=message.text.strip(), **base)

    return InboundEvent(kind=EventKind.TEXT, text=message.text, **base)


def parse_callback(callback: CallbackQuery) -> InboundEvent:
    # Button presses from private chats: the chat id is the user's id
    chat_id = callback.message.chat.id if callback.message else callback.from_user.id

    return InboundEvent(
        chat_id=chat_id,
        kind=EventKind.CALLBACK,
        callback_id=callback.id,
        callback_data=callback.data or "",
        first_name=callback.from_user.first_name,
    )


def parse_update(update: Update) -> Optional[InboundEvent]:
    """
    Converts a Telegram Update into an InboundEvent.

    Returns:
        InboundEvent, or None for update types the bot ignores
        (edited messages, channel posts, group membership, ...)
    """
    if update.callback_query is not None:
        return parse_callback(update.callback_query)

    if update.message is not None:
        if update.message.chat.type != "private":
            return None
        return parse_message(update.message)

    return None
