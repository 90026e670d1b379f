from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

class Settings(BaseSettings):
	# Telegram destination; both must be set for reports to be relayed
	telegram_bot_token: str | None = Field(default=None, validation_alias="TELEGRAM_BOT_TOKEN")
	telegram_chat_id: str | None = Field(default=None, validation_alias="TELEGRAM_CHAT_ID")
	telegram_api_base: str = Field(default="https://api.telegram.org", validation_alias="TELEGRAM_API_BASE")
	# Empty string sends plain text
	telegram_parse_mode: str = Field(default="Markdown", validation_alias="TELEGRAM_PARSE_MODE")
	telegram_timeout: float = Field(default=15.0, validation_alias="TELEGRAM_TIMEOUT")

	# Chunking; Telegram's hard limit is 4096, keep headroom for the continuation markers
	message_chunk_limit: int = Field(default=4000, gt=0, validation_alias="MESSAGE_CHUNK_LIMIT")
	message_chunk_delay: float = Field(default=1.0, ge=0, validation_alias="MESSAGE_CHUNK_DELAY")

	# Report layout: "detailed" or "compact"
	report_template: str = Field(default="detailed", validation_alias="REPORT_TEMPLATE")
	report_title: str = Field(default="English Test Submission", validation_alias="REPORT_TITLE")
	report_timezone: str = Field(default="UTC", validation_alias="REPORT_TIMEZONE")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# Bind address for the quiz-relay console script
	host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
	port: int = Field(default=8000, validation_alias="PORT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@field_validator("report_template")
	@classmethod
	def _known_template(cls, value: str) -> str:
		value = value.strip().lower()
		if value not in ("detailed", "compact"):
			raise ValueError("REPORT_TEMPLATE must be 'detailed' or 'compact'")
		return value

	@field_validator("telegram_parse_mode")
	@classmethod
	def _supported_parse_mode(cls, value: str) -> str:
		# The report only knows how to escape for legacy Markdown
		value = value.strip()
		if value.lower() == "markdown":
			return "Markdown"
		if value:
			raise ValueError("TELEGRAM_PARSE_MODE must be 'Markdown' or empty")
		return value

	@field_validator("report_timezone")
	@classmethod
	def _known_timezone(cls, value: str) -> str:
		if value.upper() == "UTC":
			return value
		try:
			ZoneInfo(value)
		except (ZoneInfoNotFoundError, ValueError):
			raise ValueError(f"unknown REPORT_TIMEZONE: {value}")
		return value

settings = Settings()
