import logging

import uvicorn
from fastapi import FastAPI

from .settings import settings
from .routers import submit

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Quiz Relay API")
app.include_router(submit.router)

@app.get("/info")
def root():
	return {
		"status": "ok",
		"telegram_configured": bool(settings.telegram_bot_token and settings.telegram_chat_id),
	}


def run() -> None:
	uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
