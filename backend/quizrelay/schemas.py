from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Question(BaseModel):
	model_config = ConfigDict(frozen=True, extra="ignore")

	question: str = ""
	options: List[str] = Field(default_factory=list)
	correct: int
	# Older clients record the choice on the question itself
	selected: Optional[int] = None

	@field_validator("options", mode="before")
	@classmethod
	def _options_as_text(cls, value: Any) -> Any:
		# Numeric options ("1990", 42) arrive unquoted from some quiz builders
		if isinstance(value, list):
			return ["" if v is None else str(v) for v in value]
		return value


class Submission(BaseModel):
	model_config = ConfigDict(frozen=True, extra="ignore")

	studentName: str
	questions: List[Question]
	# Either a list indexed by question position or an object keyed by it
	answers: Optional[Union[List[Optional[int]], Dict[int, Optional[int]]]] = None
	timeSpent: int = Field(default=0, ge=0)
	timeLeft: int = Field(default=0, ge=0)
	leaveCount: int = Field(default=0, ge=0)
	endTime: Optional[datetime] = None

	@field_validator("studentName")
	@classmethod
	def _name_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("studentName must not be blank")
		return value

	@property
	def total_questions(self) -> int:
		return len(self.questions)

	def answer_lookup(self) -> Dict[int, int]:
		"""Collapse both answer shapes into ``{question index: selected option}``.

		A ``selected`` value on the question wins over the top-level ``answers``
		entry for the same index. Unanswered questions are simply absent.
		"""
		lookup: Dict[int, int] = {}
		if isinstance(self.answers, list):
			for idx, choice in enumerate(self.answers):
				if choice is not None:
					lookup[idx] = choice
		elif isinstance(self.answers, dict):
			for idx, choice in self.answers.items():
				if choice is not None:
					lookup[idx] = choice
		for idx, q in enumerate(self.questions):
			if q.selected is not None:
				lookup[idx] = q.selected
		return lookup


class SubmitData(BaseModel):
	studentName: str
	score: str
	percentage: int
	telegramSent: bool
	telegramError: Optional[str] = None


class SubmitResponse(BaseModel):
	success: bool = True
	message: str = "Test submitted successfully"
	data: SubmitData


class ErrorResponse(BaseModel):
	success: bool = False
	error: str
	details: Optional[str] = None
