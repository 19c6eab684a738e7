"""
utils/telegram_utils.py

Purpose: Telegram message builders

- Constructs text / media payloads and keyboards
- Abstracts Bot API formatting (HTML parse mode)
- Renders ads for listings and channel announcements
"""

import html
from typing import Any, Dict, List, Optional

from utils.constants import (
    MAIN_MENU_LAYOUT,
    CATEGORY_LABELS,
    UNKNOWN_CATEGORY_LABEL,
    ANNOUNCEMENT_TEMPLATE,
    ANNOUNCEMENT_LOCATION_LINE,
    LISTING_TEMPLATE,
    LISTING_LOCATION_LINE,
)
from utils.time_utils import format_timestamp

MEDIA_TYPES = ("photo", "video", "document")


def escape_html(text: Optional[str]) -> str:
    """Escapes user-supplied text for HTML parse mode."""
    return html.escape(text or "", quote=False)


def create_text_message(text: str, reply_markup: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Creates a simple text message payload.

    Args:
        text: Message text (Telegram HTML)
        reply_markup: Optional keyboard

    Returns:
        Message payload dict
    """
    payload = {
        "type": "text",
        "text": text,
    }
    if reply_markup is not None:
        payload["reply_markup"] = reply_markup
    return payload


def create_media_message(
    media_type: str,
    file_id: str,
    caption: Optional[str] = None,
    reply_markup: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Creates a photo / video / document payload referencing a Telegram file_id.

    Args:
        media_type: "photo", "video" or "document"
        file_id: Telegram file identifier
        caption: Optional caption (Telegram HTML)
        reply_markup: Optional keyboard

    Returns:
        Message payload dict
    """
    if media_type not in MEDIA_TYPES:
        raise ValueError(f"Unsupported media type: {media_type}")

    payload = {
        "type": media_type,
        "file_id": file_id,
    }
    if caption:
        payload["caption"] = caption
    if reply_markup is not None:
        payload["reply_markup"] = reply_markup
    return payload


def create_reply_keyboard(rows: List[List[str]], resize: bool = True) -> Dict[str, Any]:
    """
    Creates a persistent reply keyboard.

    Example:
        create_reply_keyboard([["Yes", "No"]])
    """
    return {
        "keyboard": [[{"text": label} for label in row] for row in rows],
        "resize_keyboard": resize,
    }


def remove_keyboard() -> Dict[str, Any]:
    """Hides the reply keyboard."""
    return {"remove_keyboard": True}


def callback_button(text: str, callback_data: str) -> Dict[str, str]:
    # Telegram limits callback_data to 64 bytes
    return {"text": text, "callback_data": callback_data[:64]}


def url_button(text: str, url: str) -> Dict[str, str]:
    return {"text": text, "url": url}


def create_inline_keyboard(rows: List[List[Dict[str, str]]]) -> Dict[str, Any]:
    """Creates an inline keyboard attached to a message."""
    return {"inline_keyboard": rows}


def main_menu_keyboard() -> Dict[str, Any]:
    """The top-level menu."""
    return create_reply_keyboard(MAIN_MENU_LAYOUT)


def category_keyboard(callback_prefix: str) -> Dict[str, Any]:
    """One inline button per category, callback data is prefix + key."""
    return create_inline_keyboard([
        [callback_button(label, f"{callback_prefix}{key}")]
        for key, label in CATEGORY_LABELS.items()
    ])


def get_category_label(category: Optional[str]) -> str:
    return CATEGORY_LABELS.get(category, UNKNOWN_CATEGORY_LABEL)


def render_announcement(
    category: str,
    description: str,
    location: Optional[str],
    created_at=None
) -> str:
    """
    Caption for the broadcast channel.

    Args:
        category: Category key
        description: Raw description text
        location: Display string, or None to omit the line
        created_at: Publish timestamp
    """
    location_line = ""
    if location:
        location_line = ANNOUNCEMENT_LOCATION_LINE.format(location=escape_html(location))

    return ANNOUNCEMENT_TEMPLATE.format(
        category=get_category_label(category),
        description=escape_html(description),
        date=format_timestamp(created_at),
        location_line=location_line,
    )


def render_listing_caption(
    category: str,
    description: str,
    location: Optional[str],
    created_at=None
) -> str:
    """Caption for an ad shown in a listing or "My ads"."""
    location_line = ""
    if location:
        location_line = LISTING_LOCATION_LINE.format(location=escape_html(location))

    return LISTING_TEMPLATE.format(
        category=get_category_label(category),
        description=escape_html(description),
        date=format_timestamp(created_at),
        location_line=location_line,
    )


def create_ad_message(
    caption: str,
    media_type: Optional[str] = None,
    file_id: Optional[str] = None
) -> Dict[str, Any]:
    """Sends the caption on the media item when the ad has one, as text otherwise."""
    if media_type and file_id:
        return create_media_message(media_type, file_id, caption=caption)
    return create_text_message(caption)
