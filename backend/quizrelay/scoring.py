from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from .schemas import Submission

NOT_ANSWERED = "Not answered"
INVALID_OPTION = "Invalid option"
UNKNOWN_OPTION = "Unknown"

# (lower bound inclusive, label), highest first
PERFORMANCE_TIERS = [
	(90, "Excellent"),
	(80, "Very Good"),
	(70, "Good"),
	(60, "Satisfactory"),
	(0, "Needs Improvement"),
]


class Status(str, Enum):
	CORRECT = "Correct"
	WRONG = "Wrong"
	UNANSWERED = "Unanswered"


@dataclass(frozen=True)
class QuestionResult:
	index: int
	question_text: str
	student_answer_text: str
	correct_answer_text: str
	status: Status


@dataclass(frozen=True)
class ResultSummary:
	student_name: str
	total_questions: int
	correct_count: int
	wrong_count: int
	unanswered_count: int
	percentage: int
	time_spent: str
	time_left: str
	leave_count: int
	submitted_at: datetime
	per_question: Tuple[QuestionResult, ...] = ()

	@property
	def score(self) -> str:
		return f"{self.correct_count}/{self.total_questions}"

	@property
	def tier(self) -> str:
		return performance_tier(self.percentage)


def format_duration(seconds: int) -> str:
	seconds = max(0, int(seconds))
	return f"{seconds // 60}m {seconds % 60}s"


def percentage_of(correct: int, total: int) -> int:
	"""Whole percent of ``correct`` out of ``total``, halves rounded up; 0 when total is 0."""
	if total <= 0:
		return 0
	# floor(correct * 100 / total + 1/2) without going through floats
	return (correct * 200 + total) // (2 * total)


def performance_tier(percentage: int) -> str:
	for lower, label in PERFORMANCE_TIERS:
		if percentage >= lower:
			return label
	return PERFORMANCE_TIERS[-1][1]


def _in_range(options: List[str], index: Optional[int]) -> bool:
	# Negative indexes are invalid choices, not offsets from the end
	return index is not None and 0 <= index < len(options)


def _option_text(options: List[str], index: Optional[int], fallback: str) -> str:
	if not _in_range(options, index):
		return fallback
	return options[index]


def score_submission(submission: Submission, *, received_at: Optional[datetime] = None) -> ResultSummary:
	lookup = submission.answer_lookup()
	results: List[QuestionResult] = []
	correct = wrong = unanswered = 0
	for idx, q in enumerate(submission.questions):
		selected = lookup.get(idx)
		if selected is None:
			status = Status.UNANSWERED
			answer_text = NOT_ANSWERED
			unanswered += 1
		else:
			# A choice only scores when it names a real option
			is_correct = selected == q.correct and _in_range(q.options, selected)
			status = Status.CORRECT if is_correct else Status.WRONG
			answer_text = _option_text(q.options, selected, INVALID_OPTION)
			if status is Status.CORRECT:
				correct += 1
			else:
				wrong += 1
		results.append(QuestionResult(
			index=idx,
			question_text=q.question,
			student_answer_text=answer_text,
			correct_answer_text=_option_text(q.options, q.correct, UNKNOWN_OPTION),
			status=status,
		))

	submitted_at = submission.endTime or received_at or datetime.now(timezone.utc)
	if submitted_at.tzinfo is None:
		submitted_at = submitted_at.replace(tzinfo=timezone.utc)

	total = submission.total_questions
	return ResultSummary(
		student_name=submission.studentName,
		total_questions=total,
		correct_count=correct,
		wrong_count=wrong,
		unanswered_count=unanswered,
		percentage=percentage_of(correct, total),
		time_spent=format_duration(submission.timeSpent),
		time_left=format_duration(submission.timeLeft),
		leave_count=submission.leaveCount,
		submitted_at=submitted_at,
		per_question=tuple(results),
	)
