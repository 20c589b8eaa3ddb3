"""
Pattern based parsing of generated text into quiz and psychology records.

The model is prompted to answer in the form
``Question: ...? A) ... B) ... C) ... Answer: X``. Whatever part of that
shape is missing gets a fallback value instead of an error.
"""
import random
import re
from typing import List, Optional

from ..core.catalog import difficulty_modifiers
from ..models.records import PsychologicalQuestion, QuizQuestion

QUESTION_PATTERN = re.compile(r"Question:\s*([^?]+\?)")
ANY_QUESTION_PATTERN = re.compile(r"([^.!?]*\?)")
# Option text runs until the next option marker, an Answer: marker or end of line
OPTION_PATTERN = re.compile(
    r"(?<![A-Za-z])([ABC])\)[ \t]*(.+?)(?=\s*(?:(?<![A-Za-z])[ABC]\)|Answer:|\n|$))"
)
CORRECT_ANSWER_PATTERN = re.compile(r"Answer:\s*([ABC])")
WHITESPACE_PATTERN = re.compile(r"\s+")

DEFAULT_ANSWERS = ("Option 1", "Option 2", "Option 3")
DEFAULT_PSYCHOLOGY_OPTIONS = ("Strongly agree", "Neutral", "Strongly disagree")
DEFAULT_QUIZ_QUESTION = "What is a fundamental concept in {category}?"
DEFAULT_PSYCHOLOGY_QUESTION = "How would you describe yourself in most situations?"

# Weights used when the text names no correct answer
FALLBACK_ANSWER_WEIGHTS = (50, 30, 20)

_LETTER_INDEX = {"A": 0, "B": 1, "C": 2}


def normalize(text: str) -> str:
    """Collapse whitespace runs and trim."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def extract_question(text: str) -> str:
    match = QUESTION_PATTERN.search(text)
    if match:
        return normalize(match.group(1))

    for match in ANY_QUESTION_PATTERN.finditer(text):
        question = normalize(match.group(1))
        # A bare "?" is not a question
        if len(question) > 1:
            return question
    return ""


def _extract_options(text: str, defaults) -> List[str]:
    options = []
    for match in OPTION_PATTERN.finditer(text):
        option = match.group(2).strip().rstrip(",;").strip()
        if option:
            options.append(option)
        if len(options) == 3:
            break

    while len(options) < 3:
        options.append(defaults[len(options)])
    return options


def extract_answers(text: str) -> List[str]:
    """The three quiz answers in A/B/C order, padded with "Option N"."""
    return _extract_options(text, DEFAULT_ANSWERS)


def extract_psychology_options(text: str) -> List[str]:
    return _extract_options(text, DEFAULT_PSYCHOLOGY_OPTIONS)


def extract_correct_answer(text: str, rng: Optional[random.Random] = None) -> int:
    """
    Index of the correct answer named by ``Answer: X``.

    Without a marker a weighted random index is returned (A 50%, B 30%,
    C 20%).
    """
    match = CORRECT_ANSWER_PATTERN.search(text)
    if match:
        return _LETTER_INDEX[match.group(1)]

    rng = rng or random
    return rng.choices((0, 1, 2), weights=FALLBACK_ANSWER_WEIGHTS, k=1)[0]


def parse_quiz_response(
    response: str,
    category: str,
    difficulty: str,
    rng: Optional[random.Random] = None,
) -> QuizQuestion:
    """Build a quiz question from raw text with the difficulty's price modifiers applied."""
    modifiers = difficulty_modifiers(difficulty)

    question = extract_question(response) or DEFAULT_QUIZ_QUESTION.format(category=category)

    return QuizQuestion(
        question=question,
        answers=extract_answers(response),
        correct_answer_index=extract_correct_answer(response, rng),
        category=category,
        difficulty=difficulty,
        correct_answer_price_multiplier=modifiers["correct"],
        wrong_answer_price_multiplier=modifiers["wrong"],
        steal_chance=modifiers["steal"],
        steal_percentage=modifiers["amount"],
    )


def parse_psychology_response(
    response: str,
    question_id: int,
    trait: str,
    category: str,
) -> PsychologicalQuestion:
    return PsychologicalQuestion(
        id=question_id,
        question=extract_question(response) or DEFAULT_PSYCHOLOGY_QUESTION,
        options=extract_psychology_options(response),
        trait=trait,
        category=category,
    )
