from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import httpx

from .telegram_client import TelegramClient, TelegramConfig, TelegramError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_LIMIT = 4000
CONTINUED_SUFFIX = "\n\n...(continued)"
CONTINUED_PREFIX = "...(continued)\n\n"


@dataclass(frozen=True)
class DeliveryResult:
	sent: bool
	error: Optional[str] = None


def split_message(text: str, limit: int = DEFAULT_CHUNK_LIMIT) -> List[str]:
	"""Split ``text`` into pieces of at most ``limit`` characters plus markers.

	Text within the limit comes back as a single unchanged chunk. Otherwise every
	chunk but the last ends with CONTINUED_SUFFIX and every chunk but the first
	starts with CONTINUED_PREFIX.
	"""
	if limit <= 0:
		raise ValueError("limit must be positive")
	if len(text) <= limit:
		return [text]
	# Offsets are fixed; a Markdown entity that straddles a boundary is not kept whole
	pieces = [text[i:i + limit] for i in range(0, len(text), limit)]
	chunks: List[str] = []
	for i, piece in enumerate(pieces):
		if i > 0:
			piece = CONTINUED_PREFIX + piece
		if i < len(pieces) - 1:
			piece = piece + CONTINUED_SUFFIX
		chunks.append(piece)
	return chunks


class ChunkedSender:
	def __init__(
		self,
		config: TelegramConfig,
		*,
		max_length: int = DEFAULT_CHUNK_LIMIT,
		delay_seconds: float = 1.0,
		client_factory: Callable[[TelegramConfig], TelegramClient] = TelegramClient,
		sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
	) -> None:
		self.config = config
		self.max_length = max_length
		self.delay_seconds = delay_seconds
		self._client_factory = client_factory
		self._sleep = sleep

	async def deliver(self, text: str) -> DeliveryResult:
		if not self.config.configured:
			logger.info("Telegram not configured, skipping delivery")
			return DeliveryResult(sent=False)
		chunks = split_message(text, self.max_length)
		logger.info("Sending report to Telegram: %d characters in %d part(s)", len(text), len(chunks))
		client: Optional[TelegramClient] = None
		try:
			client = self._client_factory(self.config)
			for i, chunk in enumerate(chunks):
				await client.send_message(chunk)
				logger.info("Telegram part %d/%d sent", i + 1, len(chunks))
				if i < len(chunks) - 1:
					await self._sleep(self.delay_seconds)
		except (TelegramError, httpx.HTTPError, httpx.InvalidURL) as e:
			message = str(e) or e.__class__.__name__
			logger.warning("Telegram delivery failed: %s", message)
			return DeliveryResult(sent=False, error=message)
		except Exception as e:
			# Delivery is best effort; the submission itself has already been scored
			logger.exception("Unexpected error while sending to Telegram")
			return DeliveryResult(sent=False, error=str(e) or e.__class__.__name__)
		finally:
			if client is not None:
				await client.aclose()
		return DeliveryResult(sent=True)
