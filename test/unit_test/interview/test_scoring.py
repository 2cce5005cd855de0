"""
Unit tests for per-answer scoring.

Covers the MCQ time bonus, the coding heuristics, the behavioral STAR rubric
and the dispatch rules of ``score_answer``.
"""

import pytest

from gradii.core.models.domain import BehavioralQuestion, CodingQuestion, MCQQuestion
from gradii.interview.scoring import (
    BEHAVIORAL_MAX_SCORE,
    CODING_MAX_SCORE,
    MCQ_MAX_SCORE,
    NO_ANSWER_FEEDBACK,
    max_score_for,
    score_answer,
    score_behavioral_answer,
    score_coding_answer,
    score_mcq_answer,
    unanswered_score,
)


@pytest.fixture
def mcq(mcq_docs) -> MCQQuestion:
    return MCQQuestion.model_validate(mcq_docs[0])


@pytest.fixture
def coding(coding_docs) -> CodingQuestion:
    return CodingQuestion.model_validate(coding_docs[0])


@pytest.fixture
def behavioral(behavioral_docs) -> BehavioralQuestion:
    return BehavioralQuestion.model_validate(behavioral_docs[0])


class TestMCQScoring:
    """Test suite for multiple-choice scoring."""

    def test_quick_correct_answer_gets_full_bonus(self, mcq):
        result = score_mcq_answer(mcq, "b", time_spent=30)

        assert result.is_correct is True
        assert result.score == pytest.approx(1.2)
        assert result.max_score == MCQ_MAX_SCORE
        assert result.breakdown == {"base": 1.0, "time_bonus": 0.2}
        assert result.feedback.startswith("Correct!")
        assert "+20% bonus" in result.feedback

    def test_correct_answer_within_three_quarters_of_limit_gets_small_bonus(self, mcq):
        # Default limit is 120 seconds
        result = score_mcq_answer(mcq, "b", time_spent=80)

        assert result.score == pytest.approx(1.1)

    def test_slow_correct_answer_gets_no_bonus(self, mcq):
        result = score_mcq_answer(mcq, "b", time_spent=100)

        assert result.score == pytest.approx(1.0)
        assert result.breakdown["time_bonus"] == 0

    def test_incorrect_answer_names_both_options(self, mcq):
        result = score_mcq_answer(mcq, "a", time_spent=10)

        assert result.is_correct is False
        assert result.score == 0
        assert 'You selected "Stack" but the correct answer is "Queue"' in result.feedback
        assert result.analysis["selected_option"] == "Stack"
        assert result.analysis["correct_option"] == "Queue"


class TestCodingScoring:
    """Test suite for heuristic coding scoring."""

    def test_complete_solution_scores_high(self, coding, python_solution):
        result = score_coding_answer(coding, python_solution, "python", time_spent=100)

        assert result.max_score == CODING_MAX_SCORE
        assert set(result.breakdown) == {"syntax", "logic", "efficiency", "completeness", "time_management"}
        assert result.breakdown["syntax"] == 2.0
        assert result.breakdown["logic"] == 4.0
        assert result.breakdown["efficiency"] == 2.0
        assert result.breakdown["time_management"] == 0.5
        assert result.score == pytest.approx(9.9)
        assert result.analysis["has_main_logic"] is True
        assert result.feedback.startswith("Code Analysis Result: 99%")

    def test_tiny_snippet_is_penalised(self, coding):
        result = score_coding_answer(coding, "print(1)", "python", time_spent=10)

        assert result.breakdown["syntax"] == pytest.approx(0.5)
        assert "No function definition found" in result.analysis["syntax_errors"]
        assert result.score < 8

    def test_overtime_reduces_time_score(self, coding, python_solution):
        # Easy limit is 900 seconds; 1350 seconds is 50% over
        result = score_coding_answer(coding, python_solution, "python", time_spent=1350)

        assert result.breakdown["time_management"] == pytest.approx(0.25)


class TestBehavioralScoring:
    """Test suite for the STAR behavioral rubric."""

    def test_star_answer_scores_high(self, behavioral, star_answer):
        result = score_behavioral_answer(behavioral, star_answer, time_spent=120)

        assert result.max_score == BEHAVIORAL_MAX_SCORE
        assert result.breakdown["structure"] == pytest.approx(1.0)
        assert result.breakdown["impact"] == pytest.approx(1.0)
        assert result.breakdown["communication"] == pytest.approx(1.0)
        assert result.score >= 4
        assert set(result.analysis["keyword_matches"]) == {"conflict", "team", "resolved"}

    def test_short_informal_answer_scores_low(self, behavioral):
        result = score_behavioral_answer(behavioral, "um yeah I did it", time_spent=5)

        assert result.breakdown["communication"] == pytest.approx(0.5)
        assert result.score < 2
        assert "Use more professional language" in result.analysis["suggestions"]


class TestScoreAnswerDispatch:
    """Test suite for ``score_answer``."""

    @pytest.mark.parametrize("answer", [None, ""])
    def test_blank_mcq_answer_is_unanswered(self, mcq, answer):
        result = score_answer(mcq, answer, 10)

        assert result.score == 0
        assert result.is_correct is False
        assert result.feedback == NO_ANSWER_FEEDBACK

    def test_blank_code_is_unanswered(self, coding):
        result = score_answer(coding, {"code": "   ", "language": "python"}, 10)

        assert result.feedback == NO_ANSWER_FEEDBACK
        assert result.max_score == CODING_MAX_SCORE

    def test_code_payload_dict_carries_language(self, coding, python_solution):
        result = score_answer(coding, {"code": python_solution, "language": "Python"}, 60)

        assert result.analysis["language"] == "python"

    def test_plain_code_uses_default_language(self, coding, python_solution):
        result = score_answer(coding, python_solution, 60, default_language="php")

        assert result.analysis["language"] == "php"

    def test_negative_time_is_clamped(self, mcq):
        result = score_answer(mcq, "b", -50)

        assert result.score == pytest.approx(1.2)

    def test_blank_behavioral_answer_is_unanswered(self, behavioral):
        result = score_answer(behavioral, "   ", 10)

        assert result.feedback == NO_ANSWER_FEEDBACK
        assert result.is_correct is None

    def test_max_score_per_type(self, mcq, coding, behavioral):
        assert max_score_for(mcq) == MCQ_MAX_SCORE
        assert max_score_for(coding) == CODING_MAX_SCORE
        assert max_score_for(behavioral) == BEHAVIORAL_MAX_SCORE
        assert unanswered_score(behavioral).max_score == BEHAVIORAL_MAX_SCORE
