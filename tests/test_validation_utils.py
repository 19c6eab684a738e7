import pytest
from datetime import timedelta

from utils.validation_utils import (
    UNSPECIFIED,
    MAX_DESCRIPTION_LENGTH,
    check_description,
    parse_command,
    parse_location,
    sanitize_input,
)
from utils.time_utils import utc_now, is_session_expired


def test_parse_location_country_and_city():
    assert parse_location("Russia Moscow") == ("Russia", "Moscow")


def test_parse_location_city_only():
    assert parse_location("Berlin") == (UNSPECIFIED, "Berlin")


def test_parse_location_multi_word_city_and_commas():
    assert parse_location("USA, New York") == ("USA", "New York")
    assert parse_location("  Russia   Saint Petersburg ") == ("Russia", "Saint Petersburg")


@pytest.mark.parametrize("text", ["", "   ", None, ",,,", "x" * 101, "unspecified", "USA Unspecified", "UNSPECIFIED, Berlin"])
def test_parse_location_rejects_unusable_input(text):
    assert parse_location(text) is None


def test_parse_command():
    assert parse_command("/start") == "start"
    assert parse_command("/SetLocation@AdboardBot now") == "setlocation"
    assert parse_command("hello") is None
    assert parse_command("/") is None


def test_check_description():
    assert check_description("Laptop for sale") is None
    assert check_description("   ") == "empty"
    assert check_description("/start") == "command"
    assert check_description("x" * (MAX_DESCRIPTION_LENGTH + 1)) == "too_long"
    assert check_description("x" * MAX_DESCRIPTION_LENGTH) is None


def test_sanitize_input_collapses_blank_lines():
    assert sanitize_input("  one\n\n\n\ntwo  ") == "one\n\ntwo"
    assert sanitize_input("abcdef", max_length=3) == "abc"


def test_session_expiry():
    assert is_session_expired(None)
    assert not is_session_expired(utc_now(), timeout_minutes=30)
    assert is_session_expired(utc_now() - timedelta(minutes=31), timeout_minutes=30)
