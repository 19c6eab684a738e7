import pytest
from datetime import timedelta

from adboard.core.exceptions import LocationRequiredError
from adboard.models.ad import Ad, Category
from adboard.models.user import Location, User
from adboard.services.ad_query_service import MatchScope, find_ads_page, location_matches
from adboard.services.ad_service import create_ad, list_user_ads
from adboard.services.user_service import update_user_location
from utils.constants import (
    BROADENED_RESULTS_MESSAGE,
    MENU_CITY_ADS,
    MENU_FILTER_BY_CATEGORY,
    MENU_MY_ADS,
    NO_ADS_IN_CITY_MESSAGE,
    NO_MORE_ADS_MESSAGE,
    SHOW_MORE_PROMPT,
)
from utils.time_utils import utc_now


async def seed_ads(user_id, count, category=Category.TECH, location=None, start=None):
    start = start or utc_now() - timedelta(days=1)
    for i in range(count):
        await create_ad(Ad(
            user_id=user_id,
            category=category,
            description=f"{category.value} ad {i}",
            location=location,
            created_at=start + timedelta(minutes=i),
        ))


def requester(country, city, user_id=1):
    return User(user_id=user_id, location=Location(country=country, city=city))


async def test_twelve_ads_paginate_five_five_two(db):
    await update_user_location(10, Location(country="France", city="Paris"))
    await seed_ads(10, 12)
    me = requester("France", "Paris")

    first = await find_ads_page(me, offset=0)
    second = await find_ads_page(me, offset=5, scope=first.scope)
    third = await find_ads_page(me, offset=10, scope=second.scope)

    assert [len(page.items) for page in (first, second, third)] == [5, 5, 2]
    assert [page.has_more for page in (first, second, third)] == [True, True, False]
    assert first.items[0].ad.description == "tech ad 11"
    assert third.items[-1].ad.description == "tech ad 0"

    seen = [item.ad.id for page in (first, second, third) for item in page.items]
    assert len(set(seen)) == 12


async def test_city_falls_back_to_country(db):
    await update_user_location(10, Location(country="France", city="Paris"))
    await seed_ads(10, 3)

    page = await find_ads_page(requester("France", "Lyon"))

    assert page.broadened
    assert page.scope == MatchScope.COUNTRY
    assert len(page.items) == 3


async def test_no_fallback_without_country(db):
    await update_user_location(10, Location(country="France", city="Paris"))
    await seed_ads(10, 3)

    page = await find_ads_page(requester("unspecified", "Berlin"))

    assert page.is_empty
    assert not page.broadened
    assert page.scope == MatchScope.CITY


async def test_city_match_is_case_insensitive_substring(db):
    await update_user_location(10, Location(country="Russia", city="Saint Petersburg"))
    await seed_ads(10, 2)

    page = await find_ads_page(requester("russia", "petersburg"))

    assert len(page.items) == 2
    assert not page.broadened


async def test_category_filter(db):
    await update_user_location(10, Location(country="France", city="Paris"))
    await seed_ads(10, 4, Category.TECH)
    await seed_ads(10, 2, Category.PETS)

    page = await find_ads_page(requester("France", "Paris"), category=Category.PETS)

    assert len(page.items) == 2
    assert all(item.ad.category == Category.PETS for item in page.items)


async def test_ads_follow_owner_location(db):
    await update_user_location(10, Location(country="France", city="Paris"))
    await seed_ads(10, 2, location=Location(country="France", city="Paris"))
    await update_user_location(10, Location(country="Germany", city="Berlin"))

    paris = await find_ads_page(requester("Italy", "Paris"))
    berlin = await find_ads_page(requester("Germany", "Berlin"))

    assert paris.is_empty
    assert len(berlin.items) == 2


async def test_missing_owner_uses_ad_snapshot(db):
    await seed_ads(99, 1, location=Location(country="Spain", city="Madrid"))

    page = await find_ads_page(requester("Spain", "Madrid"))

    assert len(page.items) == 1
    assert page.items[0].location.city == "Madrid"


async def test_location_required():
    with pytest.raises(LocationRequiredError):
        await find_ads_page(User(user_id=1))


def test_location_matches_scopes():
    me = Location(country="France", city="Paris")
    ad = Location(country="France", city="Paris 15e")

    assert location_matches(ad, me, MatchScope.CITY)
    assert location_matches(ad, me, MatchScope.COUNTRY)
    assert location_matches(None, me, MatchScope.ALL)
    assert not location_matches(None, me, MatchScope.CITY)
    assert not location_matches(Location(country="Spain", city="Madrid"), me, MatchScope.COUNTRY)


async def test_list_user_ads_newest_first(db):
    await seed_ads(10, 3)
    await seed_ads(11, 1)

    ads = await list_user_ads(10)

    assert [ad.description for ad in ads] == ["tech ad 2", "tech ad 1", "tech ad 0"]


async def test_show_more_through_the_bot(bot, db, telegram):
    await bot.onboard("France Paris")
    await seed_ads(bot.chat_id, 12)

    first = await bot.text(MENU_CITY_ADS)
    second = await bot.press("more_ads")
    third = await bot.press("more_ads")
    fourth = await bot.press("more_ads")

    assert len(first) == 6 and first[-1] == SHOW_MORE_PROMPT
    assert len(second) == 6 and second[-1] == SHOW_MORE_PROMPT
    assert len(third) == 2 and SHOW_MORE_PROMPT not in third
    assert fourth == [NO_MORE_ADS_MESSAGE]


async def test_broadened_listing_through_the_bot(bot, other_bot, db):
    await other_bot.onboard("France Paris")
    await seed_ads(other_bot.chat_id, 2, Category.AUTO)
    await bot.onboard("France Lyon")

    replies = await bot.text(MENU_CITY_ADS)

    assert replies[0] == BROADENED_RESULTS_MESSAGE.format(city="Lyon", country="France")
    assert len(replies) == 3


async def test_empty_listing_through_the_bot(bot, db):
    await bot.onboard("Berlin")

    replies = await bot.text(MENU_CITY_ADS)

    assert replies == [NO_ADS_IN_CITY_MESSAGE.format(city="Berlin", category_suffix="")]


async def test_filter_and_my_ads_through_the_bot(bot, db):
    await bot.onboard("France Paris")
    await seed_ads(bot.chat_id, 2, Category.PETS, location=Location(country="France", city="Paris"))
    await seed_ads(bot.chat_id, 1, Category.TECH)

    await bot.text(MENU_FILTER_BY_CATEGORY)
    filtered = await bot.press("filter_pets")
    mine = await bot.text(MENU_MY_ADS)

    assert len(filtered) == 2
    assert all("Pet supplies" in text for text in filtered)
    assert len(mine) == 3
