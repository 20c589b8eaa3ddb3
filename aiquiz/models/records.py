"""
Structured records produced by the question generator.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class QuizQuestion:
    """Multiple choice quiz question with three answers."""
    question: str
    answers: List[str]
    correct_answer_index: int
    category: str
    difficulty: str
    correct_answer_price_multiplier: float = 1.0
    wrong_answer_price_multiplier: float = 1.0
    steal_chance: float = 0.0  # Percent
    steal_percentage: float = 0.0  # Percent of the pot
    generated: bool = False
    ai_model: str = ""
    generation_time_ms: int = 0


@dataclass
class PsychologicalQuestion:
    """Personality questionnaire item; the id decides which axis it scores."""
    id: int
    question: str
    options: List[str]
    trait: str  # E/I, S/N, T/F, J/P
    category: str  # e.g. "E/I_Social"
    generated: bool = False
    ai_model: str = ""
    generation_time_ms: int = 0


@dataclass
class PersonalityAnswer:
    question_id: int
    selected_option: int  # 0-based
    trait: str = "E/I"
    value: Optional[str] = None


@dataclass
class PersonalityResult:
    personality_type: str
    title: str
    description: str
    scores: Dict[str, float]
    strengths: List[str] = field(default_factory=list)
    growth_areas: List[str] = field(default_factory=list)
    confidence: float = 0.0
    ai_generated: bool = False
    analysis_model: str = ""
    analysis_time_ms: int = 0
