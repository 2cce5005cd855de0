"""
Per-answer scoring for interview questions.

Pure functions, no I/O. Each question type has its own rubric:

- MCQ: correct option plus a small bonus for quick correct answers (max 1.2)
- Coding: heuristic syntax, logic, efficiency, completeness and time checks (max 10)
- Behavioral: STAR structure, specificity, relevance, impact and communication (max 5)

``score_answer`` dispatches on the question type and always returns an
``AnswerScore``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from gradii.core.models.domain import AnswerScore, BehavioralQuestion, CodingQuestion, MCQQuestion, Question

MCQ_MAX_SCORE = 1.2
CODING_MAX_SCORE = 10.0
BEHAVIORAL_MAX_SCORE = 5.0

DEFAULT_MCQ_TIME_LIMIT = 120
CODING_TIME_LIMITS = {"Easy": 900, "Medium": 1800, "Hard": 2700}

NO_ANSWER_FEEDBACK = "No answer provided"

_SITUATION_WORDS = ("situation", "when", "time", "project", "company", "team", "role")
_TASK_WORDS = ("task", "responsibility", "needed", "required", "goal", "objective")
_ACTION_WORDS = ("did", "implemented", "created", "developed", "managed", "led", "organized")
_RESULT_WORDS = ("result", "outcome", "achieved", "improved", "increased", "decreased", "successful")
_SPECIFIC_WORDS = ("example", "instance", "specifically", "particular", "exactly")
_IMPACT_WORDS = (
    "improved",
    "increased",
    "decreased",
    "reduced",
    "saved",
    "earned",
    "achieved",
    "successful",
    "exceeded",
    "delivered",
    "completed",
    "resolved",
    "solved",
)
_STRUCTURE_WORDS = ("first", "second", "then", "finally", "initially", "subsequently")
_INFORMAL_WORDS = ("like", "um", "uh", "kinda", "sorta", "yeah")
_RELEVANCE_STOP_WORDS = {"when", "time", "tell", "about", "describe", "what", "how"}


def _fmt(value: float) -> str:
    return f"{round(value, 2):g}"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# =================== MCQ ===================


def score_mcq_answer(question: MCQQuestion, submitted_option_id: Optional[str], time_spent: float) -> AnswerScore:
    """Score a multiple-choice answer.

    Args:
        question: The MCQ being answered
        submitted_option_id: Id of the selected option, or None when skipped
        time_spent: Seconds spent on the question

    Returns:
        AnswerScore with ``time_bonus`` in its breakdown
    """
    is_correct = submitted_option_id is not None and submitted_option_id == question.correct_answer
    base = 1.0 if is_correct else 0.0

    time_limit = question.time_limit or DEFAULT_MCQ_TIME_LIMIT
    time_bonus = 0.0
    if is_correct and time_spent <= 60:
        time_bonus = 0.2
    elif is_correct and time_spent <= time_limit * 0.75:
        time_bonus = 0.1

    selected = next((o for o in question.options if o.id == submitted_option_id), None)
    correct = next((o for o in question.options if o.is_correct), None)
    if correct is None:
        correct = next((o for o in question.options if o.id == question.correct_answer), None)

    if is_correct:
        feedback = f"Correct! {question.explanation}".rstrip()
        if time_bonus > 0:
            feedback += f" Great time management (+{round(time_bonus * 100)}% bonus)!"
    else:
        selected_text = selected.text if selected else "Unknown"
        correct_text = correct.text if correct else "Unknown"
        feedback = (
            f'Incorrect. You selected "{selected_text}" but the correct answer is "{correct_text}". '
            f"{question.explanation}"
        ).rstrip()

    return AnswerScore(
        score=base + time_bonus,
        max_score=MCQ_MAX_SCORE,
        is_correct=is_correct,
        feedback=feedback,
        breakdown={"base": base, "time_bonus": time_bonus},
        analysis={
            "selected_option": selected.text if selected else "No answer selected",
            "correct_option": correct.text if correct else "Unknown",
            "explanation": question.explanation,
        },
    )


# =================== CODING ===================


def _analyze_syntax(code: str, language: str) -> Tuple[float, List[str], List[str]]:
    errors: List[str] = []
    score = 2.0

    if language == "python":
        if "def " not in code and "lambda " not in code:
            errors.append("No function definition found")
            score -= 0.5
        if "\t" in code and "    " in code:
            errors.append("Mixed tabs and spaces (use consistent indentation)")
            score -= 0.3
    elif language in ("typescript", "javascript"):
        if not any(token in code for token in ("function ", "=>", "const ", "let ")):
            errors.append("No clear function or variable definition found")
            score -= 0.5
        if code.count("{") != code.count("}"):
            errors.append("Mismatched braces")
            score -= 0.4

    if len(code.strip()) < 20:
        errors.append("Solution appears incomplete or too short")
        score -= 1

    suggestions = [f"Review syntax basics for {language}", "Use consistent formatting"] if score < 2 else []
    return max(0.0, score), errors, suggestions


def _reference_solution(question: CodingQuestion) -> str:
    for language in ("python", "typescript", "php"):
        if question.solution.get(language):
            return question.solution[language]
    return next(iter(question.solution.values()), "")


def _analyze_logic(code: str, question: CodingQuestion) -> Tuple[float, bool, str, List[str]]:
    score = 4.0
    has_main_logic = False
    approach = "Unknown"
    suggestions: List[str] = []
    lower = code.lower()

    if "for " in lower or "while " in lower or "foreach" in lower:
        has_main_logic = True
        approach = "Iterative approach detected"
    if "return " in lower or "echo " in lower or "print" in lower:
        has_main_logic = True

    expected = _reference_solution(question).lower()
    if "sort" in expected and "sort" in lower:
        score += 0.5
    if "binary" in expected and ("binary" in lower or ("left" in lower and "right" in lower)):
        score += 0.5

    if not has_main_logic:
        score -= 2
        suggestions.append("Include main algorithmic logic")
        suggestions.append("Ensure your solution returns or outputs a result")
    if len(code) < 50:
        score -= 1
        suggestions.append("Solution may be incomplete - add more implementation details")

    return _clamp(score, 0, 4), has_main_logic, approach, suggestions


def _analyze_efficiency(code: str, difficulty: str) -> Tuple[float, List[str]]:
    score = 2.0
    suggestions: List[str] = []
    lower = code.lower()
    total_loops = lower.count("for ") + lower.count("while ")

    if total_loops > 2 and difficulty == "Easy":
        score -= 0.5
        suggestions.append("Consider a more efficient approach with fewer nested loops")
    if total_loops > 3:
        score -= 1
        suggestions.append("Algorithm may be inefficient - review time complexity")
    if "sort" in lower or "binary" in lower:
        score += 0.2

    return _clamp(score, 0, 2), suggestions


def _analyze_completeness(code: str) -> float:
    score = 1.5
    has_return = re.search(r"return ", code, re.IGNORECASE) is not None
    has_variables = re.search(r"\b(var|let|const|=)\b", code, re.IGNORECASE) is not None

    if not has_return and "print" not in code and "echo" not in code:
        score -= 0.5
    if len(code) <= 30:
        score -= 0.5
    if not has_variables:
        score -= 0.3
    if "if " in code or "else" in code:
        score += 0.2

    return _clamp(score, 0, 1.5)


def _coding_time_score(time_spent: float, difficulty: str) -> float:
    limit = CODING_TIME_LIMITS.get(difficulty, CODING_TIME_LIMITS["Hard"])
    if time_spent <= limit:
        return 0.5
    return max(0.0, 0.5 - (time_spent - limit) / limit * 0.5)


def _coding_feedback(
    breakdown: Dict[str, float], syntax_errors: List[str], logic_suggestions: List[str]
) -> str:
    percentage = round(sum(breakdown.values()) / CODING_MAX_SCORE * 100)
    lines = [
        f"Code Analysis Result: {percentage}%",
        "",
        "Breakdown:",
        f"• Syntax & Structure: {_fmt(breakdown['syntax'])}/2 points",
        f"• Logic & Algorithm: {_fmt(breakdown['logic'])}/4 points",
        f"• Efficiency: {_fmt(breakdown['efficiency'])}/2 points",
        f"• Completeness: {_fmt(breakdown['completeness'])}/1.5 points",
        f"• Time Management: {_fmt(breakdown['time_management'])}/0.5 points",
        "",
    ]
    if syntax_errors:
        lines += ["Syntax Issues:", *(f"• {e}" for e in syntax_errors), ""]
    if logic_suggestions:
        lines += ["Suggestions:", *(f"• {s}" for s in logic_suggestions), ""]

    if percentage >= 80:
        lines.append("Excellent work! Your solution demonstrates strong programming skills.")
    elif percentage >= 60:
        lines.append("Good effort! Review the suggestions to improve your solution.")
    else:
        lines.append("Keep practicing! Focus on the areas highlighted for improvement.")
    return "\n".join(lines)


def score_coding_answer(question: CodingQuestion, code: str, language: str, time_spent: float) -> AnswerScore:
    """Score a coding answer with static heuristics.

    The code is not executed here; candidates run it separately through the
    code execution endpoint.

    Args:
        question: The coding question being answered
        code: Submitted source code
        language: Language the code is written in
        time_spent: Seconds spent on the question

    Returns:
        AnswerScore whose breakdown holds syntax, logic, efficiency,
        completeness and time_management
    """
    language = (language or "").lower()
    syntax, syntax_errors, syntax_suggestions = _analyze_syntax(code, language)
    logic, has_main_logic, approach, logic_suggestions = _analyze_logic(code, question)
    efficiency, efficiency_suggestions = _analyze_efficiency(code, question.difficulty)

    breakdown = {
        "syntax": syntax,
        "logic": logic,
        "efficiency": efficiency,
        "completeness": _analyze_completeness(code),
        "time_management": _coding_time_score(time_spent, question.difficulty),
    }
    total = round(sum(breakdown.values()), 2)

    return AnswerScore(
        score=total,
        max_score=CODING_MAX_SCORE,
        is_correct=None,
        feedback=_coding_feedback(breakdown, syntax_errors, logic_suggestions),
        breakdown=breakdown,
        analysis={
            "language": language,
            "lines_of_code": len([line for line in code.split("\n") if line.strip()]),
            "has_main_logic": has_main_logic,
            "syntax_errors": syntax_errors,
            "algorithmic_approach": approach,
            "suggestions": syntax_suggestions + logic_suggestions + efficiency_suggestions,
        },
    )


# =================== BEHAVIORAL ===================


def _analyze_star(lower: str) -> Tuple[float, List[str]]:
    score = 0.0
    suggestions: List[str] = []
    checks = (
        (_SITUATION_WORDS, 0.25, "Include more context about the situation or setting"),
        (_TASK_WORDS, 0.25, "Clearly describe your specific task or challenge"),
        (_ACTION_WORDS, 0.3, "Detail the specific actions you took"),
        (_RESULT_WORDS, 0.2, "Explain the results or outcomes of your actions"),
    )
    for words, weight, suggestion in checks:
        if any(word in lower for word in words):
            score += weight
        else:
            suggestions.append(suggestion)
    return score, suggestions


def _keyword_matches(lower: str, keywords: List[str]) -> List[str]:
    return [keyword for keyword in keywords if keyword.lower() in lower]


def _analyze_specificity(answer: str, lower: str, question: BehavioralQuestion) -> Tuple[float, List[str]]:
    score = 0.0
    if any(word in lower for word in _SPECIFIC_WORDS):
        score += 0.3
    if re.search(r"\d+", answer) or re.search(r"%|percent", lower):
        score += 0.3
    if re.search(r"week|month|day|year|hour", lower):
        score += 0.2
    score += min(0.2, len(_keyword_matches(lower, question.expected_keywords)) * 0.05)

    suggestions: List[str] = []
    if score < 0.5:
        suggestions = ["Provide more specific examples and details", "Include quantifiable results where possible"]
    return min(1.0, score), suggestions


def _analyze_relevance(lower: str, question: BehavioralQuestion) -> float:
    question_words = [
        word for word in question.question.lower().split() if len(word) > 3 and word not in _RELEVANCE_STOP_WORDS
    ]
    if not question_words:
        return 0.7
    # A word counts when its stem (all but the last letter) appears in the answer
    matches = sum(1 for word in question_words if word[:-1] in lower)
    return min(1.0, matches / len(question_words) + 0.2)


def _analyze_impact(answer: str, lower: str) -> Tuple[float, bool, List[str]]:
    has_impact = any(word in lower for word in _IMPACT_WORDS)
    has_quantified = re.search(r"\d+%|\$\d+|\d+\s*(hours?|days?|weeks?|months?)", answer) is not None
    score = (0.5 if has_impact else 0.0) + (0.5 if has_quantified else 0.0)
    suggestions = [] if has_impact else ["Describe the impact or results of your actions"]
    return score, has_impact, suggestions


def _analyze_communication(lower: str, word_count: int) -> Tuple[float, List[str]]:
    score = 1.0
    suggestions: List[str] = []
    if word_count < 50:
        score -= 0.3
        suggestions.append("Provide more detailed responses (aim for 100-200 words)")
    elif word_count > 300:
        score -= 0.2
        suggestions.append("Try to be more concise while maintaining detail")
    if any(word in lower for word in _STRUCTURE_WORDS):
        score += 0.1
    if any(word in lower for word in _INFORMAL_WORDS):
        score -= 0.2
        suggestions.append("Use more professional language")
    return _clamp(score, 0, 1), suggestions


def _behavioral_feedback(breakdown: Dict[str, float], suggestions: List[str], category: str) -> str:
    percentage = round(sum(breakdown.values()) / BEHAVIORAL_MAX_SCORE * 100)
    lines = [
        f"Behavioral Response Analysis: {percentage}%",
        "",
        "Assessment Areas:",
        f"• Structure (STAR method): {_fmt(breakdown['structure'])}/1 point",
        f"• Specificity & Examples: {_fmt(breakdown['specificity'])}/1 point",
        f"• Relevance to Question: {_fmt(breakdown['relevance'])}/1 point",
        f"• Impact & Results: {_fmt(breakdown['impact'])}/1 point",
        f"• Communication Quality: {_fmt(breakdown['communication'])}/1 point",
        "",
    ]
    if suggestions:
        lines += ["Improvement Suggestions:", *(f"• {s}" for s in suggestions), ""]

    category = category.lower()
    if percentage >= 80:
        lines.append(
            f"Outstanding response! You effectively demonstrated {category} competency "
            "with specific examples and clear results."
        )
    elif percentage >= 60:
        lines.append(
            f"Good response showing {category} awareness. "
            "Consider adding more specific details and quantifiable outcomes."
        )
    else:
        lines.append(
            "Your response shows potential. Focus on providing specific examples "
            "using the STAR method and highlighting measurable results."
        )
    return "\n".join(lines)


def score_behavioral_answer(question: BehavioralQuestion, text: str, time_spent: float) -> AnswerScore:
    """Score a behavioral (prose) answer.

    Args:
        question: The behavioral question being answered
        text: The candidate's answer
        time_spent: Seconds spent on the question (reported, not scored)

    Returns:
        AnswerScore whose breakdown holds structure, specificity, relevance,
        impact and communication
    """
    lower = text.lower()
    word_count = len(text.split())

    structure, star_suggestions = _analyze_star(lower)
    specificity, specificity_suggestions = _analyze_specificity(text, lower, question)
    impact, has_impact, impact_suggestions = _analyze_impact(text, lower)
    communication, communication_suggestions = _analyze_communication(lower, word_count)

    breakdown = {
        "structure": structure,
        "specificity": specificity,
        "relevance": _analyze_relevance(lower, question),
        "impact": impact,
        "communication": communication,
    }
    feedback_suggestions = star_suggestions + specificity_suggestions + impact_suggestions

    return AnswerScore(
        score=round(sum(breakdown.values()), 2),
        max_score=BEHAVIORAL_MAX_SCORE,
        is_correct=None,
        feedback=_behavioral_feedback(breakdown, feedback_suggestions, question.category),
        breakdown=breakdown,
        analysis={
            "word_count": word_count,
            "keyword_matches": _keyword_matches(lower, question.expected_keywords),
            "star_method_score": structure,
            "specificity_score": specificity,
            "impact_mentioned": has_impact,
            "time_spent": time_spent,
            "suggestions": feedback_suggestions + communication_suggestions,
        },
    )


# =================== DISPATCH ===================


def max_score_for(question: Question) -> float:
    """Maximum score a question can award."""
    if isinstance(question, MCQQuestion):
        return MCQ_MAX_SCORE
    if isinstance(question, CodingQuestion):
        return CODING_MAX_SCORE
    return BEHAVIORAL_MAX_SCORE


def unanswered_score(question: Question) -> AnswerScore:
    """Score given to a question the candidate never answered."""
    return AnswerScore(
        score=0,
        max_score=max_score_for(question),
        is_correct=False if isinstance(question, MCQQuestion) else None,
        feedback=NO_ANSWER_FEEDBACK,
    )


def _coding_payload(answer: Any) -> Tuple[str, Optional[str]]:
    if isinstance(answer, dict):
        return str(answer.get("code") or ""), answer.get("language")
    return ("" if answer is None else str(answer)), None


def score_answer(
    question: Question, answer: Any, time_spent: float, default_language: Optional[str] = None
) -> AnswerScore:
    """Score any answer by dispatching on the question type.

    Args:
        question: The question being answered
        answer: Option id (MCQ), code or ``{"code", "language"}`` (coding), or prose (behavioral)
        time_spent: Seconds spent on the question
        default_language: Language assumed for coding answers that do not name one

    Returns:
        AnswerScore for the answer. Blank answers score as unanswered.
    """
    time_spent = max(0.0, float(time_spent or 0))

    if isinstance(question, MCQQuestion):
        option_id = None if answer in (None, "") else str(answer)
        if option_id is None:
            return unanswered_score(question)
        return score_mcq_answer(question, option_id, time_spent)

    if isinstance(question, CodingQuestion):
        code, language = _coding_payload(answer)
        if not code.strip():
            return unanswered_score(question)
        language = language or question.language or default_language or "python"
        return score_coding_answer(question, code, language, time_spent)

    text = "" if answer is None else str(answer)
    if not text.strip():
        return unanswered_score(question)
    return score_behavioral_answer(question, text, time_spent)
