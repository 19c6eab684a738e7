from adboard.services.user_service import get_user
from utils.constants import (
    ASK_LOCATION_MESSAGE,
    LOCATION_INVALID_MESSAGE,
    LOCATION_REQUIRED_WARNING,
    MENU_CITY_ADS,
    MENU_SUBMIT_AD,
    WELCOME_MESSAGE,
)


async def test_start_creates_user_and_asks_for_location(bot, db):
    replies = await bot.text("/start")

    assert replies == [ASK_LOCATION_MESSAGE]
    user = await get_user(bot.chat_id)
    assert user is not None
    assert not user.location.is_set

    session = await db["sessions"].find_one({"chat_id": bot.chat_id})
    assert session["awaiting_location"] is True


async def test_location_is_parsed_and_saved(bot):
    await bot.text("/start")
    replies = await bot.text("Russia Moscow")

    assert "Russia, Moscow" in replies[0]
    user = await get_user(bot.chat_id)
    assert user.location.country == "Russia"
    assert user.location.city == "Moscow"


async def test_city_only_location(bot):
    await bot.onboard("Berlin")

    user = await get_user(bot.chat_id)
    assert user.location.city == "Berlin"
    assert not user.location.has_country
    assert user.location.is_set


async def test_unparseable_location_reprompts(bot):
    await bot.text("/start")
    replies = await bot.text("  ,  ")

    assert replies == [LOCATION_INVALID_MESSAGE]
    user = await get_user(bot.chat_id)
    assert not user.location.is_set


async def test_placeholder_location_keeps_gate_closed(bot, db):
    await bot.text("/start")

    assert await bot.text("Unspecified") == [LOCATION_INVALID_MESSAGE]
    assert await bot.text(MENU_CITY_ADS) == [LOCATION_REQUIRED_WARNING]

    session = await db["sessions"].find_one({"chat_id": bot.chat_id})
    assert session["awaiting_location"] is True


async def test_gate_blocks_everything_but_allowed_commands(bot, db):
    await bot.text("/start")
    sessions_before = await db["sessions"].find_one({"chat_id": bot.chat_id})
    ads_before = await db["ads"].count_documents({})

    assert await bot.text(MENU_SUBMIT_AD) == [LOCATION_REQUIRED_WARNING]
    assert await bot.text(MENU_CITY_ADS) == [LOCATION_REQUIRED_WARNING]
    assert await bot.text("/help") == [LOCATION_REQUIRED_WARNING]
    assert await bot.press("category_tech") == [LOCATION_REQUIRED_WARNING]
    assert await bot.photo() == [LOCATION_REQUIRED_WARNING]

    sessions_after = await db["sessions"].find_one({"chat_id": bot.chat_id})
    assert sessions_after == sessions_before
    assert await db["ads"].count_documents({}) == ads_before


async def test_unknown_user_is_gated_without_being_stored(bot, db):
    replies = await bot.text(MENU_SUBMIT_AD)

    assert replies == [LOCATION_REQUIRED_WARNING]
    assert await db["users"].count_documents({}) == 0
    assert await db["sessions"].count_documents({}) == 0


async def test_plain_text_from_unknown_user_becomes_location(bot):
    await bot.text("Spain Madrid")

    user = await get_user(bot.chat_id)
    assert user.location.city == "Madrid"


async def test_setlocation_replaces_location(bot):
    await bot.onboard("France Paris")

    assert await bot.text("/setlocation") == [ASK_LOCATION_MESSAGE]
    assert await bot.text(MENU_CITY_ADS) == [LOCATION_REQUIRED_WARNING]

    await bot.text("France Lyon")

    user = await get_user(bot.chat_id)
    assert user.location.city == "Lyon"


async def test_cancel_leaves_location_input(bot):
    await bot.onboard("France Paris")
    await bot.text("/setlocation")

    await bot.text("/cancel")
    replies = await bot.text("/start")

    assert replies == [WELCOME_MESSAGE]
    user = await get_user(bot.chat_id)
    assert user.location.city == "Paris"
