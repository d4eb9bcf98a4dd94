"""
Telegram Bot API sender over httpx (sendMessage only).
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from scoreboard.core.errors import MessageSendError

logger = logging.getLogger(__name__)


class TelegramSender:
    def __init__(
        self,
        token: str,
        base_url: str = "https://api.telegram.org",
        timeout: float = 30.0,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._http = http or httpx.AsyncClient(base_url=f"{base_url}/bot{token}", timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send_message(self, destination: str, text: str) -> None:
        try:
            response = await self._http.post(
                "/sendMessage", json={"chat_id": destination, "text": text}
            )
        except httpx.HTTPError as exc:
            raise MessageSendError(destination, str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if response.is_error or not body.get("ok", False):
            raise MessageSendError(destination, body.get("description") or f"HTTP {response.status_code}")
        logger.debug("Message delivered to %s", destination)
