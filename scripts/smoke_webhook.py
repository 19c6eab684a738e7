"""
Posts a fake Telegram update to a running server

Usage:
    python scripts/smoke_webhook.py [text] [chat_id]

Replies are sent to the real Bot API, so use a chat id that has talked
to the bot.
"""

import asyncio
import sys
import time
from pathlib import Path

import httpx
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from adboard.core.config import settings


async def send_update(text: str, chat_id: int):
    """Simulate what Telegram pushes to the webhook"""

    url = f"http://localhost:8000{settings.WEBHOOK_PATH}"
    update_id = int(time.time())

    update = {
        "update_id": update_id,
        "message": {
            "message_id": update_id,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": chat_id, "first_name": "Smoke test"},
            "text": text,
        },
    }

    headers = {}
    if settings.WEBHOOK_SECRET:
        headers["X-Telegram-Bot-Api-Secret-Token"] = settings.WEBHOOK_SECRET

    print(f"🧪 Testing webhook: {url}")
    print(f"📤 Sending text: {text!r} from chat {chat_id}\n")

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(url, json=update, headers=headers)

        print(f"✅ Status: {response.status_code}")
        print(f"📥 Response: {response.text[:200]}")

        if response.status_code == 200:
            print("\n✅ Webhook is working!")
        else:
            print(f"\n❌ Webhook returned {response.status_code}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    text = sys.argv[1] if len(sys.argv) > 1 else "/start"
    chat_id = int(sys.argv[2]) if len(sys.argv) > 2 else 1
    asyncio.run(send_update(text, chat_id))
