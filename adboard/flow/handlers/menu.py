"""
adboard/flow/handlers/menu.py

Handles: Main menu buttons

- Routes reply keyboard labels to their handlers
- "Ads channel", "Help" and "My ads" are answered here
"""

from typing import Any, Dict, List, Optional

from adboard.models.session import ConversationSession
from adboard.models.user import User
from adboard.schemas.telegram import InboundEvent
from adboard.services.ad_service import list_user_ads
from adboard.flow.handlers.listing import handle_city_ads, handle_filter_menu, location_label
from adboard.flow.handlers.submission import start_submission
from adboard.core.config import settings
from adboard.core.logging import get_logger
from utils.constants import (
    BUTTON_OPEN_CHANNEL,
    CHANNEL_MESSAGE,
    HELP_MESSAGE,
    MENU_CHANNEL,
    MENU_CITY_ADS,
    MENU_FILTER_BY_CATEGORY,
    MENU_HELP,
    MENU_MY_ADS,
    MENU_SUBMIT_AD,
    NO_OWN_ADS_MESSAGE,
    USE_MENU_MESSAGE,
)
from utils.telegram_utils import (
    create_ad_message,
    create_inline_keyboard,
    create_text_message,
    escape_html,
    main_menu_keyboard,
    render_listing_caption,
    url_button,
)

logger = get_logger(__name__)


async def handle_channel(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    if not settings.CHANNEL_URL:
        return [create_text_message(CHANNEL_MESSAGE, main_menu_keyboard())]

    return [
        create_text_message(
            CHANNEL_MESSAGE,
            create_inline_keyboard([[url_button(BUTTON_OPEN_CHANNEL, settings.CHANNEL_URL)]])
        )
    ]


async def handle_help(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    return [
        create_text_message(
            HELP_MESSAGE.format(contact=escape_html(settings.SUPPORT_CONTACT)),
            main_menu_keyboard()
        )
    ]


async def handle_my_ads(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    The user's own ads, newest first, with the location stored on each ad.
    """
    ads = await list_user_ads(event.chat_id, limit=settings.MY_ADS_LIMIT)

    if not ads:
        return [create_text_message(NO_OWN_ADS_MESSAGE, main_menu_keyboard())]

    replies = []
    for ad in ads:
        caption = render_listing_caption(
            ad.category.value,
            ad.description,
            location_label(ad.location),
            ad.created_at,
        )
        if ad.media:
            replies.append(create_ad_message(caption, ad.media.kind.value, ad.media.file_id))
        else:
            replies.append(create_ad_message(caption))

    return replies


MENU_HANDLERS = {
    MENU_SUBMIT_AD: start_submission,
    MENU_CITY_ADS: handle_city_ads,
    MENU_FILTER_BY_CATEGORY: handle_filter_menu,
    MENU_CHANNEL: handle_channel,
    MENU_HELP: handle_help,
    MENU_MY_ADS: handle_my_ads,
}


async def route_menu(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Dispatches a main menu label to its handler.
    """
    handler = MENU_HANDLERS.get(event.text)

    if handler is None:
        logger.warning(f"No handler for menu label: {event.text}")
        return [create_text_message(USE_MENU_MESSAGE, main_menu_keyboard())]

    logger.info(f"Menu action: {event.text}")
    return await handler(event, session, user)
