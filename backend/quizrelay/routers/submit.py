from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from ..delivery import ChunkedSender
from ..report import render_report
from ..schemas import ErrorResponse, Submission, SubmitData, SubmitResponse
from ..scoring import score_submission
from ..settings import settings
from ..telegram_client import TelegramConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["submit"])

CORS_HEADERS = {
	"Access-Control-Allow-Origin": "*",
	"Access-Control-Allow-Methods": "POST, OPTIONS",
	"Access-Control-Allow-Headers": "Content-Type",
}

# Registered for every verb so that rejected methods still carry the CORS headers
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_sender() -> ChunkedSender:
	return ChunkedSender(
		TelegramConfig.from_settings(settings),
		max_length=settings.message_chunk_limit,
		delay_seconds=settings.message_chunk_delay,
	)


def _json(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
	return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
	body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
	return _json(body, status_code)


def _describe_validation_error(err: ValidationError) -> str:
	parts = []
	for e in err.errors():
		loc = ".".join(str(p) for p in e.get("loc", ()))
		parts.append(f"{loc}: {e.get('msg')}" if loc else str(e.get("msg")))
	return "; ".join(parts)


@router.api_route("/submit", methods=_ALL_METHODS)
async def submit(request: Request, sender: ChunkedSender = Depends(get_sender)):
	if request.method == "OPTIONS":
		return Response(status_code=200, headers=CORS_HEADERS)
	if request.method != "POST":
		return _json({"error": "Method not allowed"}, 405)

	received_at = datetime.now(timezone.utc)
	try:
		raw = await request.body()
		try:
			data = json.loads(raw)
		except ValueError:
			return _error(400, "Invalid JSON data")
		if not isinstance(data, dict):
			return _error(400, "Invalid JSON data")

		name = data.get("studentName")
		if not isinstance(name, str) or not name.strip():
			return _error(400, "Student name is required")

		try:
			submission = Submission.model_validate(data)
		except ValidationError as e:
			return _error(400, "Invalid submission data", _describe_validation_error(e))

		logger.info("Submission received from %s", submission.studentName)
		summary = score_submission(submission, received_at=received_at)
		text = render_report(
			summary,
			template=settings.report_template,
			title=settings.report_title,
			parse_mode=settings.telegram_parse_mode or None,
			timezone=settings.report_timezone,
		)
		logger.info("Report rendered, length %d", len(text))
		delivery = await sender.deliver(text)
		logger.info(
			"Test result: student=%s score=%s percentage=%d telegram_sent=%s telegram_error=%s",
			summary.student_name,
			summary.score,
			summary.percentage,
			delivery.sent,
			delivery.error,
		)
		body = SubmitResponse(
			data=SubmitData(
				studentName=summary.student_name,
				score=summary.score,
				percentage=summary.percentage,
				telegramSent=delivery.sent,
				telegramError=delivery.error,
			)
		)
		return _json(body.model_dump())
	except Exception as e:
		logger.exception("Failed to process submission")
		return _error(500, "Internal server error", str(e))
