"""Question models for stored interview question sets.

Questions are authored as JSON (by generators or admins) and stored on the
``interviews`` table. The three shapes are discriminated by ``type``.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, field_validator

from ..base import CamelSchema


class MCQOption(CamelSchema):
    id: str
    text: str
    is_correct: bool = False


class MCQQuestion(CamelSchema):
    """A multiple-choice question with a single correct option."""

    type: Literal["mcq"] = "mcq"
    id: str
    question: str
    options: List[MCQOption] = Field(min_length=2)
    correct_answer: str = ""
    explanation: str = ""
    time_limit: Optional[int] = Field(default=None, description="Seconds allowed for the question")


class CodingExample(CamelSchema):
    input: str = ""
    output: str = ""
    explanation: str = ""


class CodingTestCase(CamelSchema):
    input: str = ""
    expected_output: str = ""


class CodingQuestion(CamelSchema):
    """A programming problem with reference solutions keyed by language."""

    type: Literal["coding"] = "coding"
    id: str
    question: str
    description: str = ""
    examples: List[CodingExample] = Field(default_factory=list)
    solution: Dict[str, str] = Field(default_factory=dict)
    test_cases: List[CodingTestCase] = Field(default_factory=list)
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    language: Optional[str] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class BehavioralQuestion(CamelSchema):
    """An open-ended question answered in prose, ideally with the STAR method."""

    type: Literal["behavioral"] = "behavioral"
    id: str
    question: str
    key_points: List[str] = Field(default_factory=list)
    category: str = "Communication"
    expected_keywords: List[str] = Field(default_factory=list)


Question = Annotated[Union[MCQQuestion, CodingQuestion, BehavioralQuestion], Field(discriminator="type")]
