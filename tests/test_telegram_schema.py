from adboard.models.ad import MediaKind
from adboard.schemas.telegram import EventKind, Update, parse_update
from utils.constants import MENU_CITY_ADS


def make_update(**message_fields):
    message = {
        "message_id": 10,
        "chat": {"id": 42, "type": "private"},
        "from": {"id": 42, "first_name": "Ann"},
    }
    message.update(message_fields)
    return Update.model_validate({"update_id": 1, "message": message})


def test_command_is_parsed_with_bot_suffix():
    event = parse_update(make_update(text="/start@AdboardBot"))
    assert event.kind == EventKind.COMMAND
    assert event.command == "start"
    assert event.is_command("start")


def test_menu_label_is_recognized():
    event = parse_update(make_update(text=MENU_CITY_ADS))
    assert event.kind == EventKind.MENU
    assert event.text == MENU_CITY_ADS


def test_plain_text():
    event = parse_update(make_update(text="France Paris"))
    assert event.kind == EventKind.TEXT
    assert event.chat_id == 42
    assert event.first_name == "Ann"


def test_photo_uses_largest_size():
    event = parse_update(make_update(
        photo=[
            {"file_id": "small", "width": 90, "height": 90, "file_size": 1000},
            {"file_id": "large", "width": 1280, "height": 720, "file_size": 90000},
            {"file_id": "medium", "width": 320, "height": 240},
        ],
        caption="Bike"
    ))
    assert event.kind == EventKind.MEDIA
    assert event.media.kind == MediaKind.PHOTO
    assert event.media.file_id == "large"
    assert event.caption == "Bike"


def test_video_and_document():
    video = parse_update(make_update(video={"file_id": "vid"}))
    document = parse_update(make_update(document={"file_id": "doc", "file_name": "a.pdf"}))
    assert video.media.kind == MediaKind.VIDEO
    assert document.media.kind == MediaKind.DOCUMENT
    assert document.media.file_id == "doc"


def test_sticker_is_unsupported():
    event = parse_update(make_update(sticker={"file_id": "s"}))
    assert event.kind == EventKind.UNSUPPORTED


def test_callback_query():
    update = Update.model_validate({
        "update_id": 2,
        "callback_query": {
            "id": "cb1",
            "from": {"id": 42},
            "message": {"message_id": 5, "chat": {"id": 42, "type": "private"}},
            "data": "category_tech",
        },
    })
    event = parse_update(update)
    assert event.kind == EventKind.CALLBACK
    assert event.callback_id == "cb1"
    assert event.callback_data == "category_tech"
    assert event.chat_id == 42


def test_group_messages_and_other_updates_are_ignored():
    assert parse_update(make_update(text="hi", chat={"id": -5, "type": "group"})) is None
    assert parse_update(Update.model_validate({"update_id": 3, "edited_message": {}})) is None
