"""
adboard/flow/states.py

Purpose: Defines all conversation states

- Enum for each stored step of the conversation
- Single source of truth for flow stages
- State transition validation
- Metadata for each state (step, description)
"""

from enum import Enum
from typing import Dict, List
from dataclasses import dataclass


class ConversationState(str, Enum):
    """
    Stored conversation states.

    Publishing, Done and Cancelled are transient: they happen inside a
    single event and always end in IDLE, so they are never persisted.
    """

    # Top-level menu
    IDLE = "IDLE"

    # Ad submission flow
    SELECTING_CATEGORY = "SELECTING_CATEGORY"
    AWAITING_DESCRIPTION = "AWAITING_DESCRIPTION"
    AWAITING_MEDIA = "AWAITING_MEDIA"


@dataclass
class StateMetadata:
    """
    Metadata associated with each conversation state.
    """
    name: ConversationState
    display_name: str
    step_number: int = 0
    total_steps: int = 3
    in_submission: bool = False
    description: str = ""


STATE_METADATA: Dict[ConversationState, StateMetadata] = {
    ConversationState.IDLE: StateMetadata(
        name=ConversationState.IDLE,
        display_name="Main menu",
        description="Top-level menu, no draft in progress"
    ),
    ConversationState.SELECTING_CATEGORY: StateMetadata(
        name=ConversationState.SELECTING_CATEGORY,
        display_name="Choose category",
        step_number=1,
        in_submission=True,
        description="Waiting for a category button press"
    ),
    ConversationState.AWAITING_DESCRIPTION: StateMetadata(
        name=ConversationState.AWAITING_DESCRIPTION,
        display_name="Enter description",
        step_number=2,
        in_submission=True,
        description="Category chosen, waiting for description text (or captioned media)"
    ),
    ConversationState.AWAITING_MEDIA: StateMetadata(
        name=ConversationState.AWAITING_MEDIA,
        display_name="Attach media",
        step_number=3,
        in_submission=True,
        description="Description captured, waiting for a photo/video/document or publish"
    ),
}


# Valid state transitions - prevents users from skipping steps
STATE_TRANSITIONS: Dict[ConversationState, List[ConversationState]] = {
    ConversationState.IDLE: [
        ConversationState.IDLE,
        ConversationState.SELECTING_CATEGORY,
    ],
    ConversationState.SELECTING_CATEGORY: [
        ConversationState.AWAITING_DESCRIPTION,
        ConversationState.SELECTING_CATEGORY,  # Re-entry
        ConversationState.IDLE,  # Cancel / menu interrupt
    ],
    ConversationState.AWAITING_DESCRIPTION: [
        ConversationState.AWAITING_MEDIA,
        ConversationState.AWAITING_DESCRIPTION,  # Category re-pick, staged media
        ConversationState.IDLE,  # Published from caption, cancel
    ],
    ConversationState.AWAITING_MEDIA: [
        ConversationState.AWAITING_MEDIA,  # Description replaced, category re-pick
        ConversationState.IDLE,  # Published, cancel
    ],
}


def is_valid_transition(from_state: ConversationState, to_state: ConversationState) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    allowed_transitions = STATE_TRANSITIONS.get(from_state, [])
    return to_state in allowed_transitions


def get_state_metadata(state: ConversationState) -> StateMetadata:
    """
    Retrieves metadata for a given state.
    """
    return STATE_METADATA.get(state, StateMetadata(
        name=state,
        display_name=state.value,
        description="Unknown state"
    ))


def is_submission_state(state: ConversationState) -> bool:
    """True while an ad draft is in progress."""
    return get_state_metadata(state).in_submission


def get_progress_message(state: ConversationState) -> str:
    """
    Generates a progress message for the current state (e.g., "Step 2 of 3").
    """
    metadata = get_state_metadata(state)
    if metadata.step_number and metadata.step_number > 0:
        return f"📍 Step {metadata.step_number} of {metadata.total_steps}"
    return ""
