"""Question generation for interviews created without a question set.

The generator supports two modes:

- ``model=None``: deterministic selection from a built-in question bank,
  split across types for combo interviews. This is what tests and
  deployments without an LLM use.
- ``model!=None``: uses Pydantic AI to write questions for the job. Any
  failure falls back to the question bank, and a short answer from the
  model is topped up from it.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic_ai import Agent

from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewType, Question, QuestionType
from gradii.core.monitoring import log_llm_call
from gradii.interview.questions import parse_questions

logger = get_logger(__name__)

_SYSTEM_PROMPT = (
    "You are an expert technical interviewer. Write interview questions that fit the job "
    "you are given. Multiple-choice questions have four options with exactly one correct "
    "option, and correctAnswer must be that option's id. Coding questions include examples, "
    "test cases and a reference solution keyed by language. Behavioral questions list the "
    "key points and keywords a strong answer would cover."
)

_LANGUAGE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "python": ("python", "django", "flask", "pandas", "numpy", "fastapi"),
    "javascript": ("javascript", "node", "react", "vue", "angular", "express", "next"),
    "typescript": ("typescript",),
    "java": ("java ", "spring", "hibernate", "maven", "gradle", "jvm"),
    "cpp": ("c++", "cpp"),
    "go": ("golang", " go "),
}

_MCQ_BANK: List[Dict[str, Any]] = [
    {
        "difficulty": "Easy",
        "question": "What is the time complexity of binary search on a sorted array?",
        "options": ["O(1)", "O(log n)", "O(n)", "O(n log n)"],
        "answer": 1,
        "explanation": "Each step halves the remaining search range.",
    },
    {
        "difficulty": "Easy",
        "question": "Which HTTP method is idempotent and normally used to replace a resource?",
        "options": ["POST", "PATCH", "PUT", "CONNECT"],
        "answer": 2,
        "explanation": "Repeating a PUT with the same body leaves the resource in the same state.",
    },
    {
        "difficulty": "Easy",
        "question": "Which data structure serves items in first-in, first-out order?",
        "options": ["Stack", "Queue", "Heap", "Tree"],
        "answer": 1,
        "explanation": "A queue removes items in the order they were added.",
    },
    {
        "difficulty": "Medium",
        "question": "What does a database index mainly trade for faster reads?",
        "options": ["Extra storage and slower writes", "Lower consistency", "Fewer columns", "Shorter transactions"],
        "answer": 0,
        "explanation": "Indexes must be stored and maintained on every write.",
    },
    {
        "difficulty": "Medium",
        "question": "Which git command combines another branch's history into the current branch?",
        "options": ["git fetch", "git merge", "git stash", "git clone"],
        "answer": 1,
        "explanation": "git merge joins the histories; fetch only downloads them.",
    },
    {
        "difficulty": "Medium",
        "question": "What is the average lookup time of a well-distributed hash table?",
        "options": ["O(1)", "O(log n)", "O(n)", "O(n^2)"],
        "answer": 0,
        "explanation": "A good hash spreads keys so each bucket holds a constant number of entries.",
    },
    {
        "difficulty": "Medium",
        "question": "Which practice best protects a SQL query against injection?",
        "options": ["Escaping quotes by hand", "Parameterized queries", "Using stored passwords", "Shorter queries"],
        "answer": 1,
        "explanation": "Parameters are sent separately from the SQL text and never parsed as code.",
    },
    {
        "difficulty": "Hard",
        "question": "In the CAP theorem, what must a distributed store give up during a network partition?",
        "options": [
            "Either consistency or availability",
            "Durability",
            "Partition tolerance and durability",
            "Nothing, all three hold",
        ],
        "answer": 0,
        "explanation": "While partitioned, a node either rejects requests or may serve stale data.",
    },
    {
        "difficulty": "Hard",
        "question": "Which isolation level prevents non-repeatable reads but still allows phantom reads?",
        "options": ["Read uncommitted", "Read committed", "Repeatable read", "Serializable"],
        "answer": 2,
        "explanation": "Repeatable read locks the rows read, not the ranges that new rows could fall into.",
    },
    {
        "difficulty": "Hard",
        "question": "What is the amortized cost of appending to a dynamic array that doubles when full?",
        "options": ["O(1)", "O(log n)", "O(n)", "O(n log n)"],
        "answer": 0,
        "explanation": "Copies during growth add up to at most 2n over n appends.",
    },
]

_CODING_BANK: List[Dict[str, Any]] = [
    {
        "difficulty": "Easy",
        "question": "Reverse a String",
        "description": "Read a line from standard input and print it reversed.",
        "examples": [{"input": "hello", "output": "olleh", "explanation": "Characters in reverse order."}],
        "testCases": [{"input": "hello", "expectedOutput": "olleh"}, {"input": "abc", "expectedOutput": "cba"}],
        "solution": {
            "python": "print(input()[::-1])",
            "javascript": "const s = require('fs').readFileSync(0, 'utf8').trim();\nconsole.log([...s].reverse().join(''));",
        },
    },
    {
        "difficulty": "Easy",
        "question": "Sum of a List",
        "description": "Read space-separated integers from standard input and print their sum.",
        "examples": [{"input": "1 2 3", "output": "6", "explanation": "1 + 2 + 3 = 6"}],
        "testCases": [{"input": "1 2 3", "expectedOutput": "6"}, {"input": "-4 4 10", "expectedOutput": "10"}],
        "solution": {
            "python": "print(sum(int(x) for x in input().split()))",
            "javascript": "const s = require('fs').readFileSync(0, 'utf8').trim();\n"
            "console.log(s.split(/\\s+/).map(Number).reduce((a, b) => a + b, 0));",
        },
    },
    {
        "difficulty": "Medium",
        "question": "Valid Parentheses",
        "description": "Read a string of brackets ()[]{} and print true if every bracket is closed in order, else false.",
        "examples": [{"input": "([]{})", "output": "true", "explanation": "Each opener is closed by its pair."}],
        "testCases": [{"input": "([]{})", "expectedOutput": "true"}, {"input": "(]", "expectedOutput": "false"}],
        "solution": {
            "python": "s = input().strip()\npairs = {')': '(', ']': '[', '}': '{'}\nstack = []\nok = True\n"
            "for ch in s:\n    if ch in pairs:\n        if not stack or stack.pop() != pairs[ch]:\n"
            "            ok = False\n            break\n    else:\n        stack.append(ch)\n"
            "print('true' if ok and not stack else 'false')",
        },
    },
    {
        "difficulty": "Medium",
        "question": "Two Sum",
        "description": (
            "The first line holds space-separated integers, the second a target. "
            "Print the indices of the two numbers that add up to the target, separated by a space."
        ),
        "examples": [{"input": "2 7 11 15\n9", "output": "0 1", "explanation": "2 + 7 = 9"}],
        "testCases": [{"input": "2 7 11 15\n9", "expectedOutput": "0 1"}, {"input": "3 2 4\n6", "expectedOutput": "1 2"}],
        "solution": {
            "python": "nums = [int(x) for x in input().split()]\ntarget = int(input())\nseen = {}\n"
            "for i, n in enumerate(nums):\n    if target - n in seen:\n"
            "        print(seen[target - n], i)\n        break\n    seen[n] = i",
        },
    },
    {
        "difficulty": "Medium",
        "question": "Word Frequency",
        "description": "Read a line of words and print the most frequent word. Break ties by first appearance.",
        "examples": [{"input": "a b a c b a", "output": "a", "explanation": "'a' appears three times."}],
        "testCases": [{"input": "a b a c b a", "expectedOutput": "a"}, {"input": "x y y x", "expectedOutput": "x"}],
        "solution": {
            "python": "words = input().split()\ncounts = {}\nfor w in words:\n    counts[w] = counts.get(w, 0) + 1\n"
            "print(max(counts, key=lambda w: (counts[w], -words.index(w))))",
        },
    },
    {
        "difficulty": "Hard",
        "question": "Longest Substring Without Repeating Characters",
        "description": "Read a string and print the length of its longest substring without repeated characters.",
        "examples": [{"input": "abcabcbb", "output": "3", "explanation": "'abc' is the longest."}],
        "testCases": [{"input": "abcabcbb", "expectedOutput": "3"}, {"input": "pwwkew", "expectedOutput": "3"}],
        "solution": {
            "python": "s = input()\nlast = {}\nstart = best = 0\nfor i, ch in enumerate(s):\n"
            "    if last.get(ch, -1) >= start:\n        start = last[ch] + 1\n    last[ch] = i\n"
            "    best = max(best, i - start + 1)\nprint(best)",
        },
    },
    {
        "difficulty": "Hard",
        "question": "Merge Intervals",
        "description": (
            "Read intervals as 'start-end' pairs separated by spaces, merge the overlapping ones "
            "and print the result in the same format, sorted by start."
        ),
        "examples": [{"input": "1-3 2-6 8-10", "output": "1-6 8-10", "explanation": "1-3 and 2-6 overlap."}],
        "testCases": [{"input": "1-3 2-6 8-10", "expectedOutput": "1-6 8-10"}, {"input": "1-4 4-5", "expectedOutput": "1-5"}],
        "solution": {
            "python": "pairs = sorted(tuple(map(int, p.split('-'))) for p in input().split())\nmerged = []\n"
            "for a, b in pairs:\n    if merged and a <= merged[-1][1]:\n"
            "        merged[-1][1] = max(merged[-1][1], b)\n    else:\n        merged.append([a, b])\n"
            "print(' '.join(f'{a}-{b}' for a, b in merged))",
        },
    },
]

_BEHAVIORAL_BANK: List[Dict[str, Any]] = [
    {
        "category": "Teamwork",
        "question": "Tell me about a time you disagreed with a teammate. How did you resolve it?",
        "keyPoints": ["Situation and stakes", "How you listened", "The compromise reached", "What you learned"],
        "expectedKeywords": ["listened", "compromise", "team", "resolved", "communication"],
    },
    {
        "category": "Problem Solving",
        "question": "Describe the hardest technical problem you solved recently.",
        "keyPoints": ["Why it was hard", "How you broke it down", "The result", "What you would do differently"],
        "expectedKeywords": ["analyzed", "debugged", "root cause", "result", "learned"],
    },
    {
        "category": "Leadership",
        "question": "Give an example of a time you took ownership of something outside your role.",
        "keyPoints": ["Why you stepped in", "Actions you took", "Impact on the team"],
        "expectedKeywords": ["ownership", "initiative", "led", "impact", "responsibility"],
    },
    {
        "category": "Adaptability",
        "question": "Tell me about a time priorities changed suddenly. How did you adapt?",
        "keyPoints": ["The change", "How you re-planned", "Communication with stakeholders", "Outcome"],
        "expectedKeywords": ["adapted", "prioritized", "plan", "stakeholders", "deadline"],
    },
    {
        "category": "Communication",
        "question": "Describe how you explained a complex technical topic to a non-technical audience.",
        "keyPoints": ["The audience", "How you simplified it", "How you checked understanding"],
        "expectedKeywords": ["explained", "audience", "simplified", "example", "feedback"],
    },
    {
        "category": "Growth",
        "question": "Tell me about a mistake you made at work and what you did about it.",
        "keyPoints": ["The mistake", "How you owned it", "The fix", "What changed afterwards"],
        "expectedKeywords": ["mistake", "owned", "fixed", "learned", "improved"],
    },
    {
        "category": "Time Management",
        "question": "How did you handle a time when you had more work than you could finish?",
        "keyPoints": ["How you prioritized", "What you delegated or dropped", "How you communicated it"],
        "expectedKeywords": ["prioritized", "deadline", "delegated", "communicated", "focus"],
    },
]

_DIFFICULTIES = ("Easy", "Medium", "Hard")


def combo_split(count: int) -> Dict[QuestionType, int]:
    """Split a combo interview's question count: 40% behavioral, 30% coding, the rest MCQ."""
    behavioral = min(count, math.ceil(count * 4 / 10))
    coding = min(count - behavioral, math.ceil(count * 3 / 10))
    return {
        QuestionType.behavioral: behavioral,
        QuestionType.coding: coding,
        QuestionType.mcq: count - behavioral - coding,
    }


def detect_language(job_position: str, job_description: str = "") -> Optional[str]:
    """Best guess of the job's main programming language from its title and description."""
    text = f" {job_position} {job_description} ".lower()
    for language, keywords in _LANGUAGE_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return language
    return None


def _normalize_difficulty(difficulty: Optional[str]) -> str:
    value = (difficulty or "Medium").strip().capitalize()
    return value if value in _DIFFICULTIES else "Medium"


def _pick(bank: List[Dict[str, Any]], count: int, difficulty: Optional[str] = None) -> List[Dict[str, Any]]:
    """Take ``count`` entries, those at ``difficulty`` first, cycling when the bank runs out."""
    if difficulty is not None:
        ordered = [e for e in bank if e.get("difficulty") == difficulty]
        ordered += [e for e in bank if e.get("difficulty") != difficulty]
    else:
        ordered = list(bank)
    return [ordered[i % len(ordered)] for i in range(count)]


def _mcq_document(entry: Dict[str, Any]) -> Dict[str, Any]:
    options = [{"id": f"option{i + 1}", "text": text} for i, text in enumerate(entry["options"])]
    return {
        "type": "mcq",
        "question": entry["question"],
        "options": options,
        "correctAnswer": options[entry["answer"]]["id"],
        "explanation": entry["explanation"],
    }


def _coding_document(entry: Dict[str, Any], language: Optional[str]) -> Dict[str, Any]:
    return {
        "type": "coding",
        "question": entry["question"],
        "description": entry["description"],
        "examples": entry["examples"],
        "testCases": entry["testCases"],
        "solution": entry["solution"],
        "difficulty": entry["difficulty"],
        "language": language or "python",
    }


def _behavioral_document(entry: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "behavioral",
        "question": entry["question"],
        "keyPoints": entry["keyPoints"],
        "category": entry["category"],
        "expectedKeywords": entry["expectedKeywords"],
    }


def bank_questions(
    interview_type: InterviewType,
    count: int,
    difficulty: Optional[str] = None,
    programming_language: Optional[str] = None,
) -> List[Question]:
    """Build ``count`` questions for ``interview_type`` from the built-in bank."""
    interview_type = InterviewType(interview_type)
    level = _normalize_difficulty(difficulty)
    if interview_type == InterviewType.combo:
        counts = combo_split(count)
    else:
        counts = {QuestionType(interview_type.value): count}

    documents: List[Dict[str, Any]] = []
    documents += [_behavioral_document(e) for e in _pick(_BEHAVIORAL_BANK, counts.get(QuestionType.behavioral, 0))]
    documents += [
        _coding_document(e, programming_language)
        for e in _pick(_CODING_BANK, counts.get(QuestionType.coding, 0), level)
    ]
    documents += [_mcq_document(e) for e in _pick(_MCQ_BANK, counts.get(QuestionType.mcq, 0), level)]
    for i, document in enumerate(documents, start=1):
        document["id"] = f"{document['type']}_{i}"
    return parse_questions(documents, interview_type)


def _prompt(
    interview_type: InterviewType,
    count: int,
    difficulty: str,
    job_position: str,
    job_description: str,
    programming_language: Optional[str],
) -> str:
    lines = [
        f"Job title: {job_position}",
        f"Job description: {job_description or 'not provided'}",
        f"Difficulty: {difficulty}",
    ]
    if interview_type == InterviewType.combo:
        split = combo_split(count)
        lines.append(
            f"Write {count} questions: {split[QuestionType.behavioral]} behavioral, "
            f"{split[QuestionType.coding]} coding and {split[QuestionType.mcq]} mcq."
        )
    else:
        lines.append(f"Write {count} {interview_type.value} questions.")
    if programming_language:
        lines.append(f"Coding questions use {programming_language}.")
    return "\n".join(lines)


class QuestionGenerator:
    """Writes the question set of an interview created without one."""

    def __init__(self, *, model: Any | None = None) -> None:
        """
        Args:
            model: A pydantic-ai model or model string (e.g. ``"openai:gpt-4o"``).
                   If None, questions come from the built-in bank.
        """
        self._model = model

    async def generate(
        self,
        interview_type: InterviewType,
        count: int,
        *,
        difficulty: Optional[str] = None,
        job_position: str = "",
        job_description: str = "",
        programming_language: Optional[str] = None,
    ) -> List[Question]:
        """Generate ``count`` questions for an interview.

        Args:
            interview_type: Type of the interview; combo mixes all three question types
            count: Number of questions wanted
            difficulty: Easy, Medium or Hard (defaults to Medium)
            job_position: Job title the questions are written for
            job_description: Optional job description
            programming_language: Language for coding questions; detected from the job when omitted

        Returns:
            Validated questions with unique ids
        """
        interview_type = InterviewType(interview_type)
        level = _normalize_difficulty(difficulty)
        language = programming_language or detect_language(job_position, job_description)
        fallback = bank_questions(interview_type, count, level, language)
        if self._model is None:
            return fallback

        try:
            agent: Agent = Agent(self._model, output_type=List[Question], system_prompt=_SYSTEM_PROMPT)
            result = await agent.run(
                _prompt(interview_type, count, level, job_position, job_description, language)
            )
            generated = [
                q.model_dump(mode="json", by_alias=True)
                for q in result.output
                if interview_type == InterviewType.combo or q.type == interview_type.value
            ][:count]
            for i, document in enumerate(generated, start=1):
                document["id"] = f"ai_generated_{i}"
            # the bank tops up a short answer; its ids never collide with ai_generated_*
            generated += [q.model_dump(mode="json", by_alias=True) for q in fallback[len(generated):]]
            questions = parse_questions(generated, interview_type)
            log_llm_call(str(self._model), "question_generation", True)
        except Exception as e:
            logger.warning(f"LLM question generation failed, using the question bank: {e}")
            log_llm_call(str(self._model), "question_generation", False)
            return fallback

        return questions
