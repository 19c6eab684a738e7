"""
adboard/flow/handlers/listing.py

Handles: "Ads in my city", "Filter by category", "Show more"

- Each fresh request restarts at offset 0
- "Show more" advances the saved cursor by one page, keeping the
  category filter and the scope the first page settled on
"""

from typing import Any, Dict, List, Optional

from adboard.models.ad import Category
from adboard.models.session import ConversationSession, ListingCursor
from adboard.models.user import User
from adboard.schemas.telegram import InboundEvent
from adboard.services.ad_query_service import AdPage, MatchScope, PAGE_SIZE, find_ads_page
from adboard.core.exceptions import LocationRequiredError
from adboard.core.logging import get_logger, LogContext
from utils.constants import (
    BROADENED_RESULTS_MESSAGE,
    BUTTON_SHOW_MORE,
    CATEGORY_SUFFIX,
    FILTER_CALLBACK_PREFIX,
    LISTING_EXPIRED_MESSAGE,
    LOCATION_MISSING_MESSAGE,
    MENU_CITY_ADS,
    MORE_ADS_CALLBACK,
    NO_ADS_IN_CITY_MESSAGE,
    NO_ADS_IN_COUNTRY_MESSAGE,
    NO_ADS_MESSAGE,
    NO_MORE_ADS_MESSAGE,
    SELECT_FILTER_MESSAGE,
    SHOW_MORE_PROMPT,
    UNKNOWN_FILTER_MESSAGE,
)
from utils.telegram_utils import (
    callback_button,
    category_keyboard,
    create_ad_message,
    create_inline_keyboard,
    create_text_message,
    escape_html,
    get_category_label,
    main_menu_keyboard,
    remove_keyboard,
    render_listing_caption,
)

logger = get_logger(__name__)


async def handle_city_ads(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """First page of ads near the user, any category."""
    session.listing = ListingCursor()
    return await show_listing_page(session, user)


async def handle_filter_menu(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """Shows the category filter buttons."""
    session.listing = ListingCursor()
    return [create_text_message(SELECT_FILTER_MESSAGE, category_keyboard(FILTER_CALLBACK_PREFIX))]


async def handle_filter_selected(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """First page of ads near the user in the pressed category."""
    key = event.callback_data[len(FILTER_CALLBACK_PREFIX):]
    category = Category.from_key(key)

    if category is None:
        logger.warning(f"Unknown filter category: {key}")
        return [create_text_message(UNKNOWN_FILTER_MESSAGE, main_menu_keyboard())]

    session.listing = ListingCursor(category=category)
    return await show_listing_page(session, user)


async def handle_show_more(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """Next page of the listing the user is browsing."""
    if session.listing is None:
        return [create_text_message(LISTING_EXPIRED_MESSAGE.format(label=MENU_CITY_ADS), main_menu_keyboard())]

    session.listing.offset += PAGE_SIZE
    return await show_listing_page(session, user)


async def show_listing_page(session: ConversationSession, user: Optional[User]) -> List[Dict[str, Any]]:
    """
    Queries the page the session cursor points at and renders it.

    Args:
        session: Conversation context holding the cursor
        user: Requesting user

    Returns:
        Reply payloads
    """
    cursor = session.listing

    with LogContext(user_id=session.chat_id, state="LISTING"):
        if user is None:
            return _location_missing(session)

        scope = MatchScope(cursor.scope) if cursor.scope else None

        try:
            page = await find_ads_page(user, offset=cursor.offset, category=cursor.category, scope=scope)
        except LocationRequiredError:
            return _location_missing(session)

        cursor.scope = page.scope.value

        logger.info(
            f"Listing page offset={page.offset} scope={page.scope.value} "
            f"items={len(page.items)} has_more={page.has_more}"
        )

        return render_listing_page(page, user, cursor.category)


def location_label(location) -> Optional[str]:
    """Display string for an ad's location, None when nothing is known."""
    if location is None or not (location.has_city or location.has_country):
        return None
    return location.display()


def _location_missing(session: ConversationSession) -> List[Dict[str, Any]]:
    session.awaiting_location = True
    session.listing = None
    return [create_text_message(LOCATION_MISSING_MESSAGE, remove_keyboard())]


def render_listing_page(page: AdPage, user: User, category: Optional[Category]) -> List[Dict[str, Any]]:
    """
    Turns a page into messages: optional header, one message per ad and
    a "Show more" button when another page exists.
    """
    location = user.location
    category_suffix = ""
    if category is not None:
        category_suffix = CATEGORY_SUFFIX.format(category=get_category_label(category.value))

    if page.is_empty:
        if page.offset > 0:
            return [create_text_message(NO_MORE_ADS_MESSAGE, main_menu_keyboard())]

        if page.scope == MatchScope.ALL:
            return [create_text_message(NO_ADS_MESSAGE.format(category_suffix=category_suffix), main_menu_keyboard())]

        replies = [
            create_text_message(
                NO_ADS_IN_CITY_MESSAGE.format(city=escape_html(location.city), category_suffix=category_suffix),
                main_menu_keyboard()
            )
        ]
        if page.broadened:
            replies.append(create_text_message(
                NO_ADS_IN_COUNTRY_MESSAGE.format(country=escape_html(location.country), category_suffix=category_suffix)
            ))
        return replies

    replies = []

    if page.broadened:
        replies.append(create_text_message(
            BROADENED_RESULTS_MESSAGE.format(
                city=escape_html(location.city),
                country=escape_html(location.country)
            )
        ))

    for item in page.items:
        ad = item.ad
        caption = render_listing_caption(
            ad.category.value,
            ad.description,
            location_label(item.location),
            ad.created_at,
        )
        if ad.media:
            replies.append(create_ad_message(caption, ad.media.kind.value, ad.media.file_id))
        else:
            replies.append(create_ad_message(caption))

    if page.has_more:
        replies.append(create_text_message(
            SHOW_MORE_PROMPT,
            create_inline_keyboard([[callback_button(BUTTON_SHOW_MORE, MORE_ADS_CALLBACK)]])
        ))

    return replies
