"""
adboard/flow/handlers/submission.py

Handles: Ad submission flow

Flow:
1. Category (inline buttons)
2. Description (text, or the caption of a media message)
3. Optional photo / video / document, or "Publish without media"

- Media sent before the description is staged and used once the
  description arrives
- A menu button before a category is chosen cancels the draft and is
  handled as a normal menu action
- Commands other than /cancel are refused while a draft is open
- Publishing stores the ad, bumps the owner's counter and announces the
  ad in the broadcast channel
"""

from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from adboard.models.ad import Ad, Category, Media
from adboard.models.session import ConversationSession
from adboard.models.user import User
from adboard.schemas.telegram import EventKind, InboundEvent
from adboard.flow.states import ConversationState, get_progress_message
from adboard.services.ad_service import create_ad
from adboard.services.session_service import end_submission, transition
from adboard.services.telegram_service import get_telegram_service
from adboard.services.user_service import increment_ad_count
from adboard.core.config import settings
from adboard.core.exceptions import AdboardError, ConfigurationError
from adboard.core.logging import get_logger, LogContext
from utils.constants import (
    AD_PUBLISHED_MESSAGE,
    AD_PUBLISH_FAILED_MESSAGE,
    ASK_MEDIA_MESSAGE,
    BUTTON_PUBLISH_WITHOUT_MEDIA,
    CATEGORY_CALLBACK_PREFIX,
    CATEGORY_CHANGED_MESSAGE,
    CATEGORY_SELECTED_MESSAGE,
    COMMANDS_DISABLED_MESSAGE,
    DESCRIPTION_COMMAND_MESSAGE,
    DESCRIPTION_EMPTY_MESSAGE,
    DESCRIPTION_TOO_LONG_MESSAGE,
    MEDIA_STAGED_MESSAGE,
    PUBLISH_WITHOUT_MEDIA_CALLBACK,
    SELECT_CATEGORY_MESSAGE,
    SELECT_CATEGORY_REPROMPT,
    SUBMISSION_INTERRUPTED_MESSAGE,
    SUBMISSION_IN_PROGRESS_MESSAGE,
    UNSUPPORTED_CONTENT_MESSAGE,
)
from utils.telegram_utils import (
    callback_button,
    category_keyboard,
    create_inline_keyboard,
    create_text_message,
    get_category_label,
    main_menu_keyboard,
    remove_keyboard,
    render_announcement,
)
from utils.validation_utils import MAX_DESCRIPTION_LENGTH, check_description, sanitize_input

logger = get_logger(__name__)

DESCRIPTION_ERRORS = {
    "empty": DESCRIPTION_EMPTY_MESSAGE,
    "command": DESCRIPTION_COMMAND_MESSAGE,
    "too_long": DESCRIPTION_TOO_LONG_MESSAGE.format(limit=MAX_DESCRIPTION_LENGTH),
}


def _with_progress(text: str, state: ConversationState) -> str:
    progress = get_progress_message(state)
    return f"{progress}\n\n{text}" if progress else text


def _publish_keyboard() -> Dict[str, Any]:
    return create_inline_keyboard([[callback_button(BUTTON_PUBLISH_WITHOUT_MEDIA, PUBLISH_WITHOUT_MEDIA_CALLBACK)]])


async def start_submission(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Opens a fresh draft and shows the category buttons.
    """
    session.clear_draft()
    transition(session, ConversationState.SELECTING_CATEGORY)

    logger.info("Submission started")

    return [
        create_text_message(
            _with_progress(SELECT_CATEGORY_MESSAGE, session.state),
            category_keyboard(CATEGORY_CALLBACK_PREFIX)
        )
    ]


async def handle_submission_event(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Routes an event while a draft is open (/cancel is handled upstream).

    Args:
        event: Inbound event
        session: Conversation context in a submission state
        user: Submitting user

    Returns:
        Reply payloads
    """
    state = session.state

    with LogContext(user_id=session.chat_id, state=state.value):
        if event.kind == EventKind.COMMAND:
            logger.info(f"Refused {event.describe()} during submission")
            return [create_text_message(COMMANDS_DISABLED_MESSAGE)]

        if event.kind == EventKind.MENU and state == ConversationState.SELECTING_CATEGORY:
            return await interrupt_submission(event, session, user)

        if event.kind == EventKind.CALLBACK:
            return await handle_submission_callback(event, session, user)

        if state == ConversationState.SELECTING_CATEGORY:
            return [create_text_message(SELECT_CATEGORY_REPROMPT)]

        # Menu labels after the category step are plain description text
        if event.kind in (EventKind.TEXT, EventKind.MENU):
            return await accept_description(event.text, session, user)

        if event.kind == EventKind.MEDIA:
            return await accept_media(event, session, user)

        return [create_text_message(UNSUPPORTED_CONTENT_MESSAGE)]


async def interrupt_submission(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Drops the draft and handles the menu button as if no draft existed.
    """
    # Local import to avoid circular dependency
    from adboard.flow.dispatcher import route_idle_event

    end_submission(session, f"interrupted by menu action {event.text}")

    replies = [create_text_message(SUBMISSION_INTERRUPTED_MESSAGE, main_menu_keyboard())]
    replies.extend(await route_idle_event(event, session, user))
    return replies


async def handle_submission_callback(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    data = event.callback_data or ""

    if data.startswith(CATEGORY_CALLBACK_PREFIX):
        return select_category(data[len(CATEGORY_CALLBACK_PREFIX):], session)

    if data == PUBLISH_WITHOUT_MEDIA_CALLBACK and session.state == ConversationState.AWAITING_MEDIA:
        return await publish_ad(session, user, media=None)

    return [create_text_message(SUBMISSION_IN_PROGRESS_MESSAGE)]


def select_category(key: str, session: ConversationSession) -> List[Dict[str, Any]]:
    """
    Records the chosen category. Pressing a category button again later in
    the flow replaces the category and keeps the current step.
    """
    category = Category.from_key(key)

    if category is None:
        logger.warning(f"Unknown category key: {key}")
        return [create_text_message(SELECT_CATEGORY_REPROMPT)]

    session.category = category
    label = get_category_label(category.value)

    if session.state == ConversationState.SELECTING_CATEGORY:
        transition(session, ConversationState.AWAITING_DESCRIPTION)
        return [
            create_text_message(
                _with_progress(CATEGORY_SELECTED_MESSAGE.format(category=label), session.state),
                remove_keyboard()
            )
        ]

    transition(session, session.state)

    if session.state == ConversationState.AWAITING_MEDIA:
        return [create_text_message(CATEGORY_CHANGED_MESSAGE.format(category=label), _publish_keyboard())]

    return [create_text_message(CATEGORY_CHANGED_MESSAGE.format(category=label))]


async def accept_description(
    text: Optional[str],
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Validates and stores the description. Publishes right away when media
    was staged earlier, otherwise moves on to the media step.
    """
    reason = check_description(text)
    if reason is not None:
        logger.info(f"Description rejected: {reason}")
        return [create_text_message(DESCRIPTION_ERRORS[reason])]

    session.description = sanitize_input(text, max_length=MAX_DESCRIPTION_LENGTH)

    if session.staged_media is not None:
        return await publish_ad(session, user, media=session.staged_media)

    transition(session, ConversationState.AWAITING_MEDIA)

    return [create_text_message(_with_progress(ASK_MEDIA_MESSAGE, session.state), _publish_keyboard())]


async def accept_media(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Media completes the ad when a description is known. A valid caption
    stands in for a missing description. Otherwise the media is staged.
    """
    if session.description:
        return await publish_ad(session, user, media=event.media)

    if event.caption and check_description(event.caption) is None:
        session.description = sanitize_input(event.caption, max_length=MAX_DESCRIPTION_LENGTH)
        return await publish_ad(session, user, media=event.media)

    session.staged_media = event.media
    transition(session, session.state)

    logger.info(f"Staged {event.media.kind.value} until a description arrives")
    return [create_text_message(MEDIA_STAGED_MESSAGE)]


async def announce_ad(ad: Ad) -> None:
    """
    Posts a published ad to the broadcast channel.

    Raises:
        ConfigurationError: If no channel is configured
        ExternalServiceError: If Telegram rejects the post
    """
    if not settings.CHANNEL_ID:
        raise ConfigurationError("CHANNEL_ID is not configured")

    location = ad.location.display() if ad.location and ad.location.is_set else None
    caption = render_announcement(ad.category.value, ad.description, location, ad.created_at)

    telegram = get_telegram_service()

    if ad.media:
        await telegram.send_media(settings.CHANNEL_ID, ad.media.kind.value, ad.media.file_id, caption=caption)
    else:
        await telegram.send_message(settings.CHANNEL_ID, caption)

    logger.info(f"Ad {ad.id} announced in channel")


async def publish_ad(
    session: ConversationSession,
    user: Optional[User],
    media: Optional[Media]
) -> List[Dict[str, Any]]:
    """
    Stores the draft as an ad and announces it. The draft is cleared
    whatever the outcome.
    """
    location = user.location if user is not None and user.location.is_set else None

    ad = Ad(
        user_id=session.chat_id,
        category=session.category,
        description=session.description,
        media=media,
        location=location,
    )

    try:
        stored = await create_ad(ad)
        await increment_ad_count(session.chat_id)
        await announce_ad(stored)

    except (PyMongoError, AdboardError) as e:
        logger.error(f"❌ Failed to publish ad: {e}", exc_info=True)
        end_submission(session, "publish failed")
        return [create_text_message(AD_PUBLISH_FAILED_MESSAGE, main_menu_keyboard())]

    end_submission(session, "published")
    return [create_text_message(AD_PUBLISHED_MESSAGE, main_menu_keyboard())]
