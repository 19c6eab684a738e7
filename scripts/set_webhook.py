"""
Registers the Telegram webhook without starting the server

Usage:
    python scripts/set_webhook.py
    python scripts/set_webhook.py https://example.com
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from adboard.core.config import settings
from adboard.core.exceptions import ExternalServiceError
from adboard.services.telegram_service import TelegramService


async def main(base_url=None):
    url = settings.webhook_endpoint
    if base_url:
        url = base_url.rstrip("/") + settings.WEBHOOK_PATH

    if not url:
        print("❌ WEBHOOK_URL is not set (pass a base URL or set it in .env)")
        return 1

    service = TelegramService()
    if not service.is_configured():
        print("❌ BOT_TOKEN is not set")
        return 1

    print(f"🔗 Registering webhook: {url}")

    try:
        await service.set_webhook(url, secret_token=settings.WEBHOOK_SECRET)
    except ExternalServiceError as e:
        print(f"❌ Failed: {e.message}")
        return 1

    print("✅ Webhook registered")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
