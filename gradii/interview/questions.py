"""
Parsing and presentation of stored question sets.

Interviews store their questions as JSON text: either a list of question
documents or an object with a ``questions`` key. Documents may use camelCase
(as produced by the question generators) or snake_case.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from gradii.core.errors import ValidationError
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import BehavioralQuestion, CodingQuestion, InterviewType, MCQQuestion, Question

logger = get_logger(__name__)

_question_list = TypeAdapter(List[Question])


def _load(raw: Union[str, bytes, list, dict, None]) -> List[Any]:
    if raw is None or raw == "":
        raise ValidationError("Interview has no questions")
    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError("Interview questions are not valid JSON") from e
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list) or not data:
        raise ValidationError("Interview has no questions")
    return data


def _normalize(document: Any, index: int, interview_type: InterviewType) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise ValidationError(f"Question {index + 1} is not an object")
    doc = dict(document)

    if not doc.get("type"):
        if interview_type == InterviewType.combo:
            raise ValidationError(f"Question {index + 1} must declare its type in a combo interview")
        doc["type"] = interview_type.value
    doc["type"] = str(doc["type"]).lower()

    if not doc.get("id"):
        doc["id"] = f"q{index + 1}"
    doc["id"] = str(doc["id"])

    if doc["type"] == "mcq":
        _resolve_correct_answer(doc)
    return doc


def _resolve_correct_answer(doc: Dict[str, Any]) -> None:
    options = [o for o in doc.get("options") or [] if isinstance(o, dict)]
    answer = doc.pop("correctAnswer", None) or doc.get("correct_answer")
    if not answer:
        for option in options:
            if option.get("isCorrect") or option.get("is_correct"):
                doc["correct_answer"] = str(option.get("id"))
                return
        return

    answer = str(answer)
    if answer not in {str(o.get("id")) for o in options}:
        # generators sometimes give the option text instead of its id
        wanted = answer.strip().casefold()
        for option in options:
            if str(option.get("text", "")).strip().casefold() == wanted:
                answer = str(option.get("id"))
                break
    doc["correct_answer"] = answer


def parse_questions(
    raw: Union[str, bytes, list, dict, None], interview_type: Union[InterviewType, str]
) -> List[Question]:
    """Parse a stored question set into typed questions.

    Args:
        raw: JSON text, or an already decoded list/object
        interview_type: Type of the interview owning the questions; fills in a missing ``type``

    Returns:
        The typed questions, in order

    Raises:
        ValidationError: When the set is empty or a question is malformed
    """
    interview_type = InterviewType(interview_type)
    documents = [_normalize(doc, i, interview_type) for i, doc in enumerate(_load(raw))]

    try:
        questions = _question_list.validate_python(documents)
    except PydanticValidationError as e:
        logger.debug(f"Rejected question set: {e}")
        raise ValidationError(
            "Interview questions are invalid", details=e.errors(include_url=False, include_context=False)
        ) from e

    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        raise ValidationError("Question ids must be unique")
    for question in questions:
        if isinstance(question, MCQQuestion) and question.correct_answer not in {o.id for o in question.options}:
            raise ValidationError(f"Question {question.id} has no valid correct answer")
    return questions


def dump_questions(questions: List[Question]) -> str:
    """Serialize typed questions back to the stored JSON form."""
    return json.dumps([q.model_dump(mode="json", by_alias=True) for q in questions])


def candidate_view(question: Question) -> Dict[str, Any]:
    """Render a question for the candidate, without anything that reveals the answer.

    Strips correct options, explanations, reference solutions, expected test
    outputs and scoring keywords.
    """
    base: Dict[str, Any] = {"id": question.id, "type": question.type, "question": question.question}

    if isinstance(question, MCQQuestion):
        base["options"] = [{"id": o.id, "text": o.text} for o in question.options]
        base["time_limit"] = question.time_limit
    elif isinstance(question, CodingQuestion):
        base.update(
            description=question.description,
            examples=[e.model_dump() for e in question.examples],
            test_cases=[{"input": t.input} for t in question.test_cases],
            difficulty=question.difficulty,
            language=question.language,
        )
    elif isinstance(question, BehavioralQuestion):
        base.update(category=question.category, key_points=list(question.key_points))
    return base
