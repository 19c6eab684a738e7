import pytest
from fastapi.testclient import TestClient

from adboard.core.config import settings
from adboard.main import app
from utils.constants import AD_PUBLISHED_MESSAGE, ASK_LOCATION_MESSAGE, MENU_SUBMIT_AD

client = TestClient(app)

CHAT_ID = 555


def message(update_id, **fields):
    body = {
        "message_id": update_id,
        "chat": {"id": CHAT_ID, "type": "private"},
        "from": {"id": CHAT_ID, "first_name": "Marie"},
    }
    body.update(fields)
    return {"update_id": update_id, "message": body}


def button(update_id, data):
    return {
        "update_id": update_id,
        "callback_query": {
            "id": f"cb-{update_id}",
            "from": {"id": CHAT_ID},
            "message": {"message_id": 1, "chat": {"id": CHAT_ID, "type": "private"}},
            "data": data,
        },
    }


def post(update, headers=None):
    return client.post(settings.WEBHOOK_PATH, json=update, headers=headers or {})


def test_webhook_verification():
    response = client.get(settings.WEBHOOK_PATH)
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_liveness_and_root():
    assert client.get("/live").json() == {"status": "alive"}
    assert client.get("/").json()["name"] == "Adboard API"


def test_start_over_http(db, telegram):
    response = post(message(1, text="/start"))

    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "processed"}
    assert telegram.texts_to(CHAT_ID) == [ASK_LOCATION_MESSAGE]


def test_end_to_end_submission_over_http(db, telegram):
    updates = [
        message(1, text="/start"),
        message(2, text="France Paris"),
        message(3, text=MENU_SUBMIT_AD),
        button(4, "category_tech"),
        message(5, text="Laptop for sale"),
        message(6, photo=[{"file_id": "laptop", "width": 800, "height": 600}]),
    ]

    for update in updates:
        assert post(update).status_code == 200

    assert telegram.texts_to(CHAT_ID)[-1] == AD_PUBLISHED_MESSAGE

    announcements = telegram.sent_to(settings.CHANNEL_ID)
    assert len(announcements) == 1
    method, payload = announcements[0]
    assert method == "sendPhoto"
    assert payload["photo"] == "laptop"
    assert "Laptop for sale" in payload["caption"]

    assert "answerCallbackQuery" in telegram.methods()


def test_unsupported_updates_are_ignored(db, telegram):
    response = post({"update_id": 9, "edited_message": {"message_id": 1}})

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"
    assert telegram.calls == []


def test_invalid_body_is_rejected(db, telegram):
    response = post({"message": "not an update"})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("header", [None, "wrong"])
def test_secret_token_is_checked(db, telegram, monkeypatch, header):
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", "s3cret")
    headers = {"X-Telegram-Bot-Api-Secret-Token": header} if header else None

    response = post(message(1, text="/start"), headers=headers)

    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_FAILED"
    assert telegram.calls == []


def test_secret_token_accepted(db, telegram, monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", "s3cret")

    response = post(message(1, text="/start"), headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"})

    assert response.status_code == 200


def test_dispatch_failure_still_acknowledges(db, telegram, monkeypatch):
    from adboard.flow import dispatcher

    async def broken_load(chat_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(dispatcher, "load_session", broken_load)

    response = post(message(1, text="/start"))

    assert response.status_code == 200
    assert response.json()["status"] == "failed"
    assert "Something went wrong" in telegram.texts_to(CHAT_ID)[0]
