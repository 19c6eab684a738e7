"""
adboard/services/session_service.py

Purpose: Session and state management

- Loads / saves the per-chat conversation context
- Enforces valid state transitions
- Discards abandoned drafts after SESSION_TIMEOUT_MINUTES
- Idle session documents expire through a TTL index
"""

from typing import Tuple

from adboard.db.mongo import get_sessions_collection
from adboard.flow.states import ConversationState, is_valid_transition
from adboard.models.session import ConversationSession
from adboard.core.config import settings
from adboard.core.logging import get_logger
from utils.time_utils import utc_now, is_session_expired, expires_at

logger = get_logger(__name__)


async def load_session(chat_id: int) -> Tuple[ConversationSession, bool]:
    """
    Loads the conversation context for a chat.

    A draft older than SESSION_TIMEOUT_MINUTES is discarded here, so an
    abandoned submission never resumes silently.

    Args:
        chat_id: Telegram chat id

    Returns:
        (session, draft_expired)
    """
    sessions = get_sessions_collection()
    doc = await sessions.find_one({"chat_id": chat_id})

    if not doc:
        return ConversationSession(chat_id=chat_id), False

    session = ConversationSession.from_document(doc)

    if session.in_submission and is_session_expired(
        session.updated_at, settings.SESSION_TIMEOUT_MINUTES
    ):
        logger.info(
            f"Draft expired in state {session.state.value}",
            extra={"last_interaction": session.updated_at.isoformat()}
        )
        session.clear_draft()
        return session, True

    return session, False


async def save_session(session: ConversationSession) -> None:
    """
    Upserts the conversation context and pushes its eviction time forward.

    Args:
        session: Session to persist
    """
    sessions = get_sessions_collection()

    session.updated_at = utc_now()
    doc = session.to_document()
    doc["expires_at"] = expires_at(settings.SESSION_TTL_HOURS)

    await sessions.replace_one({"chat_id": session.chat_id}, doc, upsert=True)

    logger.debug(
        "Session saved",
        extra={"state": session.state.value}
    )


def transition(session: ConversationSession, new_state: ConversationState) -> None:
    """
    Moves the session to a new state.

    Args:
        session: Session to update
        new_state: Target state

    Raises:
        ValueError: If the transition is not allowed
    """
    current_state = session.state

    if not is_valid_transition(current_state, new_state):
        logger.warning(f"Invalid state transition attempted: {current_state.value} -> {new_state.value}")
        raise ValueError(f"Invalid state transition: {current_state.value} -> {new_state.value}")

    session.state = new_state

    if current_state != new_state:
        logger.info(f"State updated: {current_state.value} -> {new_state.value}")


def end_submission(session: ConversationSession, reason: str) -> None:
    """
    Terminal transition of the submission flow (published, failed,
    cancelled, interrupted). Always leaves an empty draft behind.
    """
    if session.in_submission:
        logger.info(
            f"Submission ended: {reason}",
            extra={"state": session.state.value}
        )
    session.clear_draft()
