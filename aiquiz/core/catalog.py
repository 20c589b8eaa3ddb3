"""
Static lookup tables: difficulty modifiers, prompt templates and MBTI data.

Everything here is built once at import time and exposed through read-only
mappings, so the tables can be shared across request threads without locking.
"""
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

DEFAULT_CATEGORY = "Science"
DEFAULT_DIFFICULTY = "Medium"

CATEGORIES: Tuple[str, ...] = ("Science", "Technology", "Mathematics", "Engineering")
DIFFICULTIES: Tuple[str, ...] = ("Easy", "Medium", "Hard")

CATEGORY_SUBJECTS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Science": ("Physics", "Chemistry", "Biology", "Earth Science"),
    "Technology": ("Programming", "Computer Science", "AI", "Networking"),
    "Mathematics": ("Algebra", "Geometry", "Calculus", "Statistics"),
    "Engineering": ("Civil", "Mechanical", "Electrical", "Software"),
})

# correct/wrong are price multipliers, steal/amount are percentages
DIFFICULTY_MODIFIERS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "Easy": MappingProxyType({"correct": 0.9, "wrong": 1.1, "steal": 5.0, "amount": 2.0}),
    "Medium": MappingProxyType({"correct": 0.8, "wrong": 1.3, "steal": 15.0, "amount": 5.0}),
    "Hard": MappingProxyType({"correct": 0.6, "wrong": 1.5, "steal": 25.0, "amount": 10.0}),
})

QUIZ_ANSWER_FORMAT = "Question: [question]? A) [option1] B) [option2] C) [option3] Answer: [A/B/C]\n"

# Subject wording used inside quiz prompts
_QUIZ_SUBJECTS = {
    "Science": "science",
    "Technology": "tech",
    "Mathematics": "math",
    "Engineering": "engineering",
}


def _quiz_prompt(difficulty: str, subject: str) -> str:
    if difficulty == "Easy":
        lead = f"Create a basic {subject} question with 3 options. "
    elif difficulty == "Hard":
        lead = f"Create an advanced {subject} question with 3 options. "
    else:
        article = "an" if subject[0] in "aeiou" else "a"
        lead = f"Create {article} {subject} question with 3 options. "
    return lead + QUIZ_ANSWER_FORMAT + "Question:"


PROMPT_TEMPLATES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    category: MappingProxyType({
        difficulty: _quiz_prompt(difficulty, subject) for difficulty in DIFFICULTIES
    })
    for category, subject in _QUIZ_SUBJECTS.items()
})

# Ordered cycle of psychology categories; two per MBTI axis
PSYCHOLOGY_CATEGORIES: Tuple[str, ...] = (
    "E/I_Social", "E/I_Energy",
    "S/N_Information", "S/N_Future",
    "T/F_Decisions", "T/F_Conflict",
    "J/P_Structure", "J/P_Deadlines",
)

_AXIS_POLES = {
    "E/I": ("extroverted", "introverted"),
    "S/N": ("sensing", "intuition"),
    "T/F": ("thinking", "feeling"),
    "J/P": ("judging", "perceiving"),
}

_PSYCHOLOGY_TOPICS = {
    "E/I_Social": "social preferences",
    "E/I_Energy": "energy and social recharging",
    "S/N_Information": "information processing",
    "S/N_Future": "future planning",
    "T/F_Decisions": "decision making",
    "T/F_Conflict": "handling conflict",
    "J/P_Structure": "structure and organization",
    "J/P_Deadlines": "deadlines and time management",
}


def _psychology_prompt(category: str) -> str:
    first, second = _AXIS_POLES[category[:3]]
    return (
        f"Create a personality question about {_PSYCHOLOGY_TOPICS[category]}. "
        f"Question: [question]? A) [{first}] B) [neutral] C) [{second}]\n"
        "Question:"
    )


PSYCHOLOGY_PROMPT_TEMPLATES: Mapping[str, str] = MappingProxyType({
    category: _psychology_prompt(category) for category in PSYCHOLOGY_CATEGORIES
})

DEFAULT_PSYCHOLOGY_PROMPT = (
    "Create a personality question with 3 options. "
    "Question: [question]? A) [option1] B) [option2] C) [option3]\n"
    "Question:"
)

# Axis code -> (dominant letter, paired letter)
TRAIT_AXES: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "E/I": ("E", "I"),
    "S/N": ("S", "N"),
    "T/F": ("T", "F"),
    "J/P": ("J", "P"),
})

PERSONALITY_TRAITS: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "E/I": ("Extroversion", "Introversion"),
    "S/N": ("Sensing", "Intuition"),
    "T/F": ("Thinking", "Feeling"),
    "J/P": ("Judging", "Perceiving"),
})

PERSONALITY_DESCRIPTIONS: Mapping[str, str] = MappingProxyType({
    "INTJ": "The Architect - Strategic, independent, and driven by their vision.",
    "INTP": "The Thinker - Analytical, innovative, and fascinated by concepts.",
    "ENTJ": "The Commander - Bold, strategic leaders who organize resources.",
    "ENTP": "The Debater - Curious, innovative, and excellent at generating ideas.",
    "INFJ": "The Advocate - Idealistic, principled, and driven to help others.",
    "INFP": "The Mediator - Creative, caring, and guided by values.",
    "ENFJ": "The Protagonist - Charismatic, inspiring leaders who care about others.",
    "ENFP": "The Campaigner - Enthusiastic, creative, and socially free-spirited.",
    "ISTJ": "The Logistician - Practical, reliable, and committed to duties.",
    "ISFJ": "The Protector - Caring, loyal, and ready to defend loved ones.",
    "ESTJ": "The Executive - Organized, practical leaders who get things done.",
    "ESFJ": "The Consul - Caring, social, and eager to help others succeed.",
    "ISTP": "The Virtuoso - Practical, observant, skilled at understanding things.",
    "ISFP": "The Adventurer - Gentle, caring, eager to explore possibilities.",
    "ESTP": "The Entrepreneur - Energetic, perceptive, skilled at adapting.",
    "ESFP": "The Entertainer - Enthusiastic, spontaneous, eager to help others have fun.",
})

STRENGTHS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "INTJ": ("Strategic thinking", "Independent problem-solving", "Long-term vision"),
    "INTP": ("Logical analysis", "Creative problem-solving", "Intellectual curiosity"),
    "ENTJ": ("Leadership", "Strategic planning", "Decision-making"),
    "ENTP": ("Innovation", "Enthusiasm", "Communication"),
    "INFJ": ("Empathy", "Insight", "Idealism"),
    "INFP": ("Authenticity", "Creativity", "Compassion"),
    "ENFJ": ("Inspiring others", "Communication", "Empathy"),
    "ENFP": ("Enthusiasm", "Creativity", "People skills"),
    "ISTJ": ("Reliability", "Organization", "Attention to detail"),
    "ISFJ": ("Caring nature", "Loyalty", "Supportiveness"),
    "ESTJ": ("Leadership", "Organization", "Efficiency"),
    "ESFJ": ("People skills", "Organization", "Loyalty"),
    "ISTP": ("Problem-solving", "Practical skills", "Adaptability"),
    "ISFP": ("Creativity", "Empathy", "Authenticity"),
    "ESTP": ("Adaptability", "People skills", "Problem-solving"),
    "ESFP": ("Enthusiasm", "People skills", "Creativity"),
})

GROWTH_AREAS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "INTJ": ("Interpersonal communication", "Flexibility", "Patience"),
    "INTP": ("Follow-through", "Practical application", "Time management"),
    "ENTJ": ("Patience", "Active listening", "Work-life balance"),
    "ENTP": ("Focus and follow-through", "Attention to detail", "Routine tasks"),
    "INFJ": ("Assertiveness", "Practical decisions", "Self-care"),
    "INFP": ("Structure", "Deadlines", "Conflict handling"),
    "ENFJ": ("Personal boundaries", "Self-focus", "Saying no"),
    "ENFP": ("Organization", "Follow-through", "Detail attention"),
    "ISTJ": ("Flexibility", "Innovation", "Emotional expression"),
    "ISFJ": ("Assertiveness", "Personal needs", "Change adaptation"),
    "ESTJ": ("Emotional awareness", "Flexibility", "Patience"),
    "ESFJ": ("Personal boundaries", "Criticism handling", "Self-advocacy"),
    "ISTP": ("Long-term planning", "Emotional expression", "Teamwork"),
    "ISFP": ("Assertiveness", "Structure", "Conflict engagement"),
    "ESTP": ("Long-term planning", "Detail attention", "Reflection"),
    "ESFP": ("Organization", "Long-term focus", "Criticism handling"),
})

GENERIC_STRENGTHS: Tuple[str, ...] = ("Unique perspective", "Personal authenticity", "Individual strengths")
GENERIC_GROWTH_AREAS: Tuple[str, ...] = ("Continued learning", "Skill development", "Personal growth")


def build_prompt(category: str, difficulty: str) -> str:
    """Quiz prompt for a category/difficulty, falling back to Science and Medium."""
    by_difficulty = PROMPT_TEMPLATES.get(category) or PROMPT_TEMPLATES[DEFAULT_CATEGORY]
    return by_difficulty.get(difficulty) or by_difficulty[DEFAULT_DIFFICULTY]


def build_psychology_prompt(category: str) -> str:
    return PSYCHOLOGY_PROMPT_TEMPLATES.get(category, DEFAULT_PSYCHOLOGY_PROMPT)


def difficulty_modifiers(difficulty: str) -> Mapping[str, float]:
    """Economic multipliers for a difficulty; unknown difficulties use Medium."""
    return DIFFICULTY_MODIFIERS.get(difficulty) or DIFFICULTY_MODIFIERS[DEFAULT_DIFFICULTY]


def categories_map() -> Dict[str, List[str]]:
    return {category: list(subjects) for category, subjects in CATEGORY_SUBJECTS.items()}
