import itertools
import json

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from adboard.core.config import settings
from adboard.core.logging import setup_logging
from adboard.db import mongo
from adboard.flow.dispatcher import dispatch_event
from adboard.schemas.telegram import Update, parse_update
from adboard.services import telegram_service as telegram_module
from adboard.services.telegram_service import TelegramService

CHANNEL_ID = "@adboard_test"


class TelegramRecorder:
    """Fake Bot API: records every call and answers ok unless told to fail."""

    def __init__(self):
        self.calls = []
        self.fail_methods = set()
        self.fail_chats = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        payload = json.loads(request.content) if request.content else {}
        self.calls.append((method, payload))

        if method in self.fail_methods or payload.get("chat_id") in self.fail_chats:
            return httpx.Response(400, json={"ok": False, "error_code": 400, "description": "Bad Request: chat not found"})

        return httpx.Response(200, json={"ok": True, "result": {"message_id": len(self.calls)}})

    def sent_to(self, chat_id, since=0):
        return [(method, payload) for method, payload in self.calls[since:] if payload.get("chat_id") == chat_id]

    def texts_to(self, chat_id, since=0):
        return [payload.get("text") or payload.get("caption", "") for _, payload in self.sent_to(chat_id, since)]

    def methods(self, since=0):
        return [method for method, _ in self.calls[since:]]


class BotDriver:
    """Sends updates from one private chat through the dispatcher."""

    _ids = itertools.count(1)

    def __init__(self, telegram: TelegramRecorder, chat_id: int = 1001):
        self.telegram = telegram
        self.chat_id = chat_id

    def _message(self, **fields):
        message = {
            "message_id": next(self._ids),
            "chat": {"id": self.chat_id, "type": "private"},
            "from": {"id": self.chat_id, "first_name": "Test"},
        }
        message.update(fields)
        return {"update_id": next(self._ids), "message": message}

    async def _dispatch(self, update):
        since = len(self.telegram.calls)
        event = parse_update(Update.model_validate(update))
        await dispatch_event(event)
        return self.telegram.texts_to(self.chat_id, since)

    async def text(self, text):
        return await self._dispatch(self._message(text=text))

    async def photo(self, file_id="photo-file", caption=None):
        fields = {"photo": [
            {"file_id": f"{file_id}-small", "width": 90, "height": 90},
            {"file_id": file_id, "width": 1280, "height": 960},
        ]}
        if caption is not None:
            fields["caption"] = caption
        return await self._dispatch(self._message(**fields))

    async def document(self, file_id="doc-file", caption=None):
        fields = {"document": {"file_id": file_id, "file_name": "floor-plan.pdf"}}
        if caption is not None:
            fields["caption"] = caption
        return await self._dispatch(self._message(**fields))

    async def sticker(self):
        return await self._dispatch(self._message(sticker={"file_id": "sticker"}))

    async def press(self, data):
        update = {
            "update_id": next(self._ids),
            "callback_query": {
                "id": f"cb-{next(self._ids)}",
                "from": {"id": self.chat_id, "first_name": "Test"},
                "message": {"message_id": 1, "chat": {"id": self.chat_id, "type": "private"}},
                "data": data,
            },
        }
        return await self._dispatch(update)

    async def onboard(self, location="France Paris"):
        await self.text("/start")
        return await self.text(location)


@pytest.fixture(autouse=True)
def app_logging(monkeypatch):
    """Every test runs with the same handler setup the service installs at startup."""
    monkeypatch.setattr(settings, "LOG_LEVEL", "DEBUG")
    setup_logging()


@pytest.fixture
def db(monkeypatch):
    client = AsyncMongoMockClient()
    database = client["adboard_test"]
    monkeypatch.setattr(mongo, "_client", client)
    monkeypatch.setattr(mongo, "_database", database)
    return database


@pytest.fixture
def telegram(monkeypatch):
    recorder = TelegramRecorder()
    service = TelegramService(
        token="test-token",
        base_url="https://api.telegram.test",
        transport=httpx.MockTransport(recorder.handler)
    )
    monkeypatch.setattr(telegram_module, "_telegram_service", service)
    monkeypatch.setattr(settings, "CHANNEL_ID", CHANNEL_ID)
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", None)
    return recorder


@pytest.fixture
def bot(db, telegram):
    return BotDriver(telegram)


@pytest.fixture
def other_bot(db, telegram):
    return BotDriver(telegram, chat_id=2002)
