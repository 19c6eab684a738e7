"""
adboard/services/telegram_service.py

Purpose: Telegram Bot API client

- Sends text, photo, video and document messages
- Answers callback queries
- Registers the webhook
- Raises ExternalServiceError on any API or network failure
"""

import httpx
from typing import Any, Dict, Optional

from adboard.core.config import settings
from adboard.core.exceptions import ExternalServiceError
from adboard.core.logging import get_logger

logger = get_logger(__name__)

MEDIA_METHODS = {
    "photo": "sendPhoto",
    "video": "sendVideo",
    "document": "sendDocument",
}


class TelegramService:
    """Service for calling the Telegram Bot API"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.token = token or settings.BOT_TOKEN
        self.base_url = (base_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.timeout = timeout or settings.TELEGRAM_TIMEOUT
        self._transport = transport

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    async def call(self, method: str, payload: Dict[str, Any]) -> Any:
        """
        Calls a Bot API method.

        Args:
            method: Bot API method name (e.g. "sendMessage")
            payload: JSON parameters

        Returns:
            The "result" field of the API response

        Raises:
            ExternalServiceError: On network errors or a non-ok response
        """
        if not self.token:
            raise ExternalServiceError("Telegram bot token is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self._method_url(method), json=payload)

        except httpx.TimeoutException:
            logger.error(f"Telegram API timeout calling {method}")
            raise ExternalServiceError(
                "Telegram API timeout",
                details={"method": method}
            )
        except httpx.RequestError as e:
            logger.error(f"Network error calling Telegram {method}: {e}")
            raise ExternalServiceError(
                "Unable to reach Telegram API",
                details={"method": method}
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code != 200 or not data.get("ok"):
            description = data.get("description") or response.text[:200]
            logger.error(
                f"❌ Telegram API error on {method}: {response.status_code} - {description}"
            )
            raise ExternalServiceError(
                f"Telegram API error: {description}",
                details={
                    "method": method,
                    "status_code": response.status_code,
                    "error_code": data.get("error_code"),
                }
            )

        return data.get("result")

    async def send_message(
        self,
        chat_id,
        text: str,
        reply_markup: Optional[Dict[str, Any]] = None,
        parse_mode: str = "HTML"
    ) -> Any:
        """Sends a text message."""
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": True,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup

        return await self.call("sendMessage", payload)

    async def send_media(
        self,
        chat_id,
        media_type: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
        parse_mode: str = "HTML"
    ) -> Any:
        """
        Sends a photo, video or document by file_id.

        Args:
            chat_id: Recipient chat or channel
            media_type: "photo", "video" or "document"
            file_id: Telegram file identifier
            caption: Optional caption
            reply_markup: Optional keyboard
        """
        method = MEDIA_METHODS.get(media_type)
        if method is None:
            raise ValueError(f"Unsupported media type: {media_type}")

        payload = {
            "chat_id": chat_id,
            media_type: file_id,
        }
        if caption:
            payload["caption"] = caption
            payload["parse_mode"] = parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup

        return await self.call(method, payload)

    async def send_payload(self, chat_id, payload: Dict[str, Any]) -> Any:
        """
        Sends a message built by utils.telegram_utils.

        Args:
            chat_id: Recipient
            payload: Message payload dict
        """
        message_type = payload.get("type", "text")

        if message_type == "text":
            return await self.send_message(
                chat_id,
                payload["text"],
                reply_markup=payload.get("reply_markup")
            )

        return await self.send_media(
            chat_id,
            message_type,
            payload["file_id"],
            caption=payload.get("caption"),
            reply_markup=payload.get("reply_markup")
        )

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> Any:
        """Stops the loading indicator on an inline button."""
        payload = {"callback_query_id": callback_query_id}
        if text:
            payload["text"] = text

        return await self.call("answerCallbackQuery", payload)

    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> Any:
        """Registers the webhook URL with Telegram."""
        payload = {
            "url": url,
            "allowed_updates": ["message", "callback_query"],
        }
        if secret_token:
            payload["secret_token"] = secret_token

        logger.info(f"Registering Telegram webhook: {url}")
        return await self.call("setWebhook", payload)

    def is_configured(self) -> bool:
        """Check if the bot token is set"""
        return bool(self.token)


_telegram_service: Optional[TelegramService] = None


def get_telegram_service() -> TelegramService:
    """Get or create the global Telegram service instance."""
    global _telegram_service
    if _telegram_service is None:
        _telegram_service = TelegramService()
    return _telegram_service
