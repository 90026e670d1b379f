from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx


class TelegramError(RuntimeError):
	"""The Bot API rejected a request or answered with something unusable."""


@dataclass(frozen=True)
class TelegramConfig:
	bot_token: Optional[str] = None
	chat_id: Optional[str] = None
	api_base: str = "https://api.telegram.org"
	parse_mode: Optional[str] = "Markdown"
	timeout: float = 15.0

	@property
	def configured(self) -> bool:
		return bool(self.bot_token) and bool(self.chat_id)

	@classmethod
	def from_settings(cls, settings: Any) -> "TelegramConfig":
		return cls(
			bot_token=(settings.telegram_bot_token or "").strip() or None,
			chat_id=(settings.telegram_chat_id or "").strip() or None,
			api_base=settings.telegram_api_base.strip().rstrip("/"),
			parse_mode=settings.telegram_parse_mode or None,
			timeout=settings.telegram_timeout,
		)


class TelegramClient:
	def __init__(self, config: TelegramConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		if not config.configured:
			raise ValueError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must both be configured")
		self.config = config
		self.base_url = f"{config.api_base}/bot{config.bot_token}/sendMessage"
		self._client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

	async def send_message(self, text: str) -> Dict[str, Any]:
		payload: Dict[str, Any] = {"chat_id": self.config.chat_id, "text": text}
		if self.config.parse_mode:
			payload["parse_mode"] = self.config.parse_mode
		r = await self._client.post(self.base_url, json=payload)
		# The Bot API reports rejections (bad markup, unknown chat) in a JSON body with 4xx status
		try:
			data = r.json()
		except ValueError:
			raise TelegramError(f"Telegram error: unexpected response (HTTP {r.status_code})")
		if not isinstance(data, dict) or not data.get("ok"):
			description = data.get("description") if isinstance(data, dict) else None
			raise TelegramError(f"Telegram error: {description or f'HTTP {r.status_code}'}")
		return data

	async def aclose(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> "TelegramClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()
