import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from quizrelay.delivery import ChunkedSender
from quizrelay.telegram_client import TelegramClient, TelegramConfig, TelegramError

CONFIG = TelegramConfig(bot_token="123:abc", chat_id="-100200", api_base="https://tg.test")


def _send(handler, text="hello", config=CONFIG):
	async def run():
		async with TelegramClient(config, transport=httpx.MockTransport(handler)) as client:
			return await client.send_message(text)

	return asyncio.run(run())


def test_posts_send_message_payload():
	seen = {}

	def handler(request: httpx.Request) -> httpx.Response:
		seen["url"] = str(request.url)
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json={"ok": True, "result": {"message_id": 7}})

	data = _send(handler)
	assert data["result"]["message_id"] == 7
	assert seen["url"] == "https://tg.test/bot123:abc/sendMessage"
	assert seen["body"] == {"chat_id": "-100200", "text": "hello", "parse_mode": "Markdown"}


def test_plain_text_omits_parse_mode():
	seen = {}

	def handler(request):
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json={"ok": True})

	_send(handler, config=TelegramConfig(bot_token="t", chat_id="c", parse_mode=None))
	assert "parse_mode" not in seen["body"]


def test_rejection_raises_with_description():
	def handler(request):
		return httpx.Response(400, json={"ok": False, "error_code": 400, "description": "Bad Request: chat not found"})

	with pytest.raises(TelegramError, match="Telegram error: Bad Request: chat not found"):
		_send(handler)


def test_non_json_response_raises():
	def handler(request):
		return httpx.Response(502, text="<html>Bad Gateway</html>")

	with pytest.raises(TelegramError, match="HTTP 502"):
		_send(handler)


def test_requires_credentials():
	with pytest.raises(ValueError):
		TelegramClient(TelegramConfig(chat_id="c"))


def test_config_from_settings():
	settings = SimpleNamespace(
		telegram_bot_token="t",
		telegram_chat_id="",
		telegram_api_base="https://api.telegram.org/",
		telegram_parse_mode="",
		telegram_timeout=5.0,
	)
	config = TelegramConfig.from_settings(settings)
	assert config.configured is False
	assert config.chat_id is None
	assert config.parse_mode is None
	assert config.api_base == "https://api.telegram.org"


def test_config_from_settings_strips_secret_file_newlines():
	settings = SimpleNamespace(
		telegram_bot_token="1:abc\n",
		telegram_chat_id=" -100200\n",
		telegram_api_base=" https://api.telegram.org/\n",
		telegram_parse_mode="Markdown",
		telegram_timeout=5.0,
	)
	config = TelegramConfig.from_settings(settings)
	assert config.bot_token == "1:abc"
	assert config.chat_id == "-100200"
	assert config.api_base == "https://api.telegram.org"


def test_sender_over_http_stops_after_rejected_chunk():
	calls = []

	def handler(request):
		calls.append(json.loads(request.content)["text"])
		return httpx.Response(400, json={"ok": False, "description": "Bad Request: can't parse entities"})

	async def no_sleep(seconds):
		return None

	sender = ChunkedSender(
		CONFIG,
		max_length=5,
		client_factory=lambda config: TelegramClient(config, transport=httpx.MockTransport(handler)),
		sleep=no_sleep,
	)
	result = asyncio.run(sender.deliver("abcdefghij"))
	assert result.sent is False
	assert result.error == "Telegram error: Bad Request: can't parse entities"
	assert len(calls) == 1
