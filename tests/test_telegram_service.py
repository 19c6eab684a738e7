import httpx
import pytest

from adboard.core.exceptions import ExternalServiceError
from adboard.services.telegram_service import TelegramService, get_telegram_service
from utils.telegram_utils import create_media_message, create_text_message, main_menu_keyboard


def make_service(handler):
    return TelegramService(
        token="abc",
        base_url="https://api.telegram.test/",
        transport=httpx.MockTransport(handler)
    )


async def test_send_payload_text(telegram):
    result = await get_telegram_service().send_payload(7, create_text_message("Hi", main_menu_keyboard()))

    assert result == {"message_id": 1}
    method, payload = telegram.calls[0]
    assert method == "sendMessage"
    assert payload["chat_id"] == 7
    assert payload["text"] == "Hi"
    assert payload["parse_mode"] == "HTML"
    assert "keyboard" in payload["reply_markup"]


async def test_send_payload_media(telegram):
    await get_telegram_service().send_payload(7, create_media_message("video", "vid-1", caption="Caption"))

    method, payload = telegram.calls[0]
    assert method == "sendVideo"
    assert payload["video"] == "vid-1"
    assert payload["caption"] == "Caption"


async def test_url_contains_token_and_method():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"ok": True, "result": True})

    await make_service(handler).answer_callback_query("cb")

    assert seen == ["https://api.telegram.test/botabc/answerCallbackQuery"]


async def test_api_error_raises():
    def handler(request):
        return httpx.Response(403, json={"ok": False, "error_code": 403, "description": "Forbidden: bot was blocked"})

    with pytest.raises(ExternalServiceError) as exc_info:
        await make_service(handler).send_message(1, "hi")

    assert "blocked" in exc_info.value.message
    assert exc_info.value.details["status_code"] == 403


async def test_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceError):
        await make_service(handler).send_message(1, "hi")


async def test_missing_token_raises():
    service = TelegramService(token=None, transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    service.token = None

    with pytest.raises(ExternalServiceError):
        await service.send_message(1, "hi")


async def test_set_webhook_payload(telegram):
    await get_telegram_service().set_webhook("https://bot.example.com/telegram/webhook", secret_token="s3cret")

    method, payload = telegram.calls[0]
    assert method == "setWebhook"
    assert payload["secret_token"] == "s3cret"
    assert payload["allowed_updates"] == ["message", "callback_query"]
