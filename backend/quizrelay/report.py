from __future__ import annotations
from datetime import timezone as dt_timezone, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from .scoring import QuestionResult, ResultSummary, Status

TEMPLATES = ("detailed", "compact")
SEPARATOR = "═══════════════════"

_STATUS_EMOJI = {
	Status.CORRECT: "✅",
	Status.WRONG: "❌",
	Status.UNANSWERED: "⚪",
}

# Characters with meaning in Telegram's legacy Markdown mode
_MARKDOWN_SPECIAL = ("\\", "_", "*", "`", "[")


def resolve_zone(name: str) -> tzinfo:
	# UTC must work even where the system tz database is missing
	if name.upper() == "UTC":
		return dt_timezone.utc
	return ZoneInfo(name)


def escape_markdown(text: str) -> str:
	for ch in _MARKDOWN_SPECIAL:
		text = text.replace(ch, "\\" + ch)
	return text


class _Markup:
	def __init__(self, parse_mode: Optional[str]) -> None:
		self.markdown = (parse_mode or "").lower() == "markdown"

	def bold(self, text: str) -> str:
		return f"*{text}*" if self.markdown else text

	def text(self, value: str) -> str:
		return escape_markdown(value) if self.markdown else value


def _header(summary: ResultSummary, m: _Markup, title: str, timestamp: str) -> List[str]:
	return [
		f"🎓 {m.bold(m.text(title))}",
		"",
		f"👤 {m.bold('Student:')} {m.text(summary.student_name)}",
		f"⏱️ {m.bold('Time Spent:')} {summary.time_spent}",
		f"⏳ {m.bold('Time Left:')} {summary.time_left}",
		f"📊 {m.bold('Score:')} {summary.score} ({summary.percentage}%)",
		f"✅ Correct: {summary.correct_count} | ❌ Wrong: {summary.wrong_count} | ⚪ Unanswered: {summary.unanswered_count}",
		f"🚪 {m.bold('Page Leaves:')} {summary.leave_count}",
		f"📅 {m.bold('Submitted:')} {timestamp}",
		"",
	]


def _entry(result: QuestionResult, m: _Markup, template: str) -> List[str]:
	lines = [
		f"{_STATUS_EMOJI[result.status]} {m.bold(f'Q{result.index + 1}:')} {m.text(result.question_text)}",
		f"   {m.bold('Student:')} {m.text(result.student_answer_text)}",
	]
	if template == "detailed" or result.status is not Status.CORRECT:
		lines.append(f"   {m.bold('Correct:')} {m.text(result.correct_answer_text)}")
	if template == "detailed":
		lines.append(f"   {m.bold('Status:')} {result.status.value}")
	lines.append("")
	return lines


def render_report(
	summary: ResultSummary,
	*,
	template: str = "detailed",
	title: str = "English Test Submission",
	parse_mode: Optional[str] = "Markdown",
	timezone: str = "UTC",
) -> str:
	"""Render a ResultSummary as the chat message text.

	The output depends only on the arguments; the timestamp is the summary's
	``submitted_at`` shown in ``timezone``.
	"""
	if template not in TEMPLATES:
		raise ValueError(f"unknown report template: {template!r}")
	m = _Markup(parse_mode)
	timestamp = summary.submitted_at.astimezone(resolve_zone(timezone)).strftime("%Y-%m-%d %H:%M:%S %Z")

	lines = _header(summary, m, title, timestamp)
	lines.append(m.bold("Detailed Results:"))
	lines.append(SEPARATOR)
	lines.append("")
	if not summary.per_question:
		lines.append("No questions in this test.")
		lines.append("")
	for result in summary.per_question:
		lines.extend(_entry(result, m, template))
	lines.append(SEPARATOR)
	lines.append(f"🏆 {m.bold(f'Final Score: {summary.percentage}%')}")
	lines.append(f"📈 {m.bold('Performance:')} {summary.tier}")
	return "\n".join(lines)
