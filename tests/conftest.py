from typing import Any, Dict, List, Optional

import pytest


def make_question(text: str, options: List[str], correct: int, selected: Optional[int] = None) -> Dict[str, Any]:
	q: Dict[str, Any] = {"question": text, "options": options, "correct": correct}
	if selected is not None:
		q["selected"] = selected
	return q


@pytest.fixture
def payload() -> Dict[str, Any]:
	return {
		"studentName": "Ana Silva",
		"questions": [
			make_question("She ___ to school every day.", ["go", "goes", "going"], 1, selected=1),
			make_question("I have lived here ___ 2010.", ["for", "since", "from"], 1, selected=0),
			make_question("They ___ dinner when I called.", ["had", "were having", "have"], 1),
		],
		"timeSpent": 125,
		"timeLeft": 475,
		"leaveCount": 2,
		"endTime": "2024-03-01T10:15:30Z",
	}
