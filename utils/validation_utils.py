"""
utils/validation_utils.py

Purpose: Input validation

- Free-text location parsing
- Ad description checks
- Command detection
- Input sanitization
"""

import re
from typing import Optional, Tuple

COMMAND_PREFIX = "/"

# Rendered captions must fit Telegram's 1024 character caption limit
MAX_DESCRIPTION_LENGTH = 900
MAX_LOCATION_LENGTH = 100

UNSPECIFIED = "unspecified"

_LOCATION_SEPARATORS = re.compile(r"[\s,]+")


def is_command(text: Optional[str]) -> bool:
    """
    Checks whether a message is a bot command.

    Args:
        text: Raw message text

    Returns:
        True if the text starts with the command prefix
    """
    if not text:
        return False
    return text.strip().startswith(COMMAND_PREFIX)


def parse_command(text: str) -> Optional[str]:
    """
    Extracts the command name from a message.

    "/start", "/Start@AdboardBot payload" -> "start"

    Args:
        text: Raw message text

    Returns:
        Lower-cased command name, or None if the text is not a command
    """
    if not is_command(text):
        return None

    head = text.strip().split(maxsplit=1)[0][len(COMMAND_PREFIX):]
    name = head.split("@", 1)[0].lower()
    return name or None


def parse_location(text: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Parses a free-text location into (country, city).

    Splits on runs of whitespace and commas:
    - one token: city only, country stays unspecified ("Berlin")
    - two or more: first token is the country, the rest is the city
      ("Russia Moscow", "USA, New York")

    Input naming the "unspecified" placeholder is rejected.

    No validation against a real geography is attempted.

    Args:
        text: Raw message text

    Returns:
        Tuple of (country, city) or None if nothing usable was given
    """
    if not text:
        return None

    text = text.strip()
    if not text or len(text) > MAX_LOCATION_LENGTH:
        return None

    parts = [part for part in _LOCATION_SEPARATORS.split(text) if part]
    if not parts or any(part.lower() == UNSPECIFIED for part in parts):
        return None

    if len(parts) == 1:
        return (UNSPECIFIED, parts[0])

    return (parts[0], " ".join(parts[1:]))


def check_description(text: Optional[str]) -> Optional[str]:
    """
    Validates ad description text.

    Args:
        text: Raw message text

    Returns:
        None if the description is acceptable, otherwise the reason:
        "empty", "command" or "too_long"
    """
    if not text or not text.strip():
        return "empty"

    text = text.strip()

    if text.startswith(COMMAND_PREFIX):
        return "command"

    if len(text) > MAX_DESCRIPTION_LENGTH:
        return "too_long"

    return None


def sanitize_input(text: Optional[str], max_length: int = 1000) -> str:
    """
    Trims user input and collapses runs of blank lines.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text.strip()[:max_length]

    # Keep line breaks, but at most one empty line in a row
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()
