"""Telegram notifier for ledger activity."""
from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from ..config import TelegramConfig

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


class TelegramNotifier:
    """Posts ledger messages through two bots: a muted log bot and an alert bot."""

    def __init__(self, config: TelegramConfig, timeout: float = 15.0) -> None:
        self._alert_bot_token = config.alert_bot_token
        self._log_bot_token = config.log_bot_token
        self._chat_id = config.chat_id
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def configured(self) -> bool:
        return bool(self._chat_id and (self._alert_bot_token or self._log_bot_token))

    async def _post(self, bot_token: str, text: str, silent: bool) -> bool:
        if not bot_token or not self._chat_id:
            logger.warning("Telegram bot token or chat id missing; message dropped")
            return False

        payload = {
            "chat_id": self._chat_id,
            "text": text,
            "disable_notification": silent,
        }
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(
            connector=connector, timeout=self._timeout
        ) as session:
            url = f"{TELEGRAM_API}/bot{bot_token}/sendMessage"
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    logger.error("Telegram sendMessage returned HTTP %s", response.status)
                    return False
        return True

    async def send_alert(self, message: str, subject: str = "") -> bool:
        text = f"{subject}\n\n{message}" if subject else message
        sent = await self._post(self._alert_bot_token, text, silent=False)
        if sent:
            logger.info("Telegram alert sent")
        return sent

    async def send_log(self, message: str, silent: bool = True) -> bool:
        sent = await self._post(self._log_bot_token, message, silent=silent)
        if sent:
            logger.debug("Telegram log sent")
        return sent
