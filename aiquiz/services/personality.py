"""
Deterministic MBTI scoring from questionnaire answers.
"""
import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

from ..core.catalog import (
    GENERIC_GROWTH_AREAS,
    GENERIC_STRENGTHS,
    GROWTH_AREAS,
    PERSONALITY_DESCRIPTIONS,
    STRENGTHS,
    TRAIT_AXES,
)
from ..models.records import PersonalityAnswer, PersonalityResult

logger = logging.getLogger(__name__)

TRAIT_LETTERS = ("E", "I", "S", "N", "T", "F", "J", "P")
NEUTRAL_SCORE = 0.5
OPTION_SCORES = {0: 0.8, 2: 0.2}

DEFAULT_TITLE = "Unique Personality"
DEFAULT_DESCRIPTION = "A distinctive personality pattern with unique traits."
GENERATED_DESCRIPTION_MIN_CHARS = 50
GENERATED_DESCRIPTION_MAX_CHARS = 200

# Returns generated text for a personality type, "" when nothing was generated
DescriptionGenerator = Callable[[str], str]


def axis_for_question(question_id: int) -> str:
    """Questions 1-2 score E/I, 3-4 S/N, 5-6 T/F, everything later J/P."""
    if question_id <= 2:
        return "E/I"
    if question_id <= 4:
        return "S/N"
    if question_id <= 6:
        return "T/F"
    return "J/P"


class PersonalityEngine:
    """Scores answers, derives the type and looks up its descriptive data."""

    def __init__(self, model_name: str = "Analysis-Model"):
        self.model_name = model_name

    @staticmethod
    def score(answers: Iterable[PersonalityAnswer]) -> Dict[str, float]:
        """
        Fold the answers into the eight trait scores.

        The axis comes from the question id, not from the answer's own trait
        label. Option 0 leans to the first letter of the axis, option 2 to
        the second, anything else is neutral.
        """
        scores = {letter: NEUTRAL_SCORE for letter in TRAIT_LETTERS}

        for answer in answers:
            dominant, paired = TRAIT_AXES[axis_for_question(answer.question_id)]
            raw = OPTION_SCORES.get(answer.selected_option, NEUTRAL_SCORE)
            scores[dominant] = (scores[dominant] + raw) / 2.0
            scores[paired] = 1.0 - scores[dominant]

        return scores

    @staticmethod
    def derive_type(scores: Dict[str, float]) -> str:
        # Ties resolve to the first letter of each axis
        return "".join(
            dominant if scores[dominant] >= scores[paired] else paired
            for dominant, paired in TRAIT_AXES.values()
        )

    @staticmethod
    def confidence(scores: Dict[str, float]) -> float:
        deviations = [abs(scores[letter] - NEUTRAL_SCORE) for letter in TRAIT_LETTERS]
        value = (sum(deviations) / len(deviations)) * 2.0
        return max(0.0, min(1.0, value))

    @staticmethod
    def strengths(personality_type: str) -> List[str]:
        return list(STRENGTHS.get(personality_type, GENERIC_STRENGTHS))

    @staticmethod
    def growth_areas(personality_type: str) -> List[str]:
        return list(GROWTH_AREAS.get(personality_type, GENERIC_GROWTH_AREAS))

    @staticmethod
    def description(personality_type: str) -> str:
        return PERSONALITY_DESCRIPTIONS.get(personality_type, DEFAULT_DESCRIPTION)

    @staticmethod
    def title(personality_type: str) -> str:
        description = PERSONALITY_DESCRIPTIONS.get(personality_type)
        if description and " - " in description:
            return description.split(" - ", 1)[0]
        return DEFAULT_TITLE

    def analyze(
        self,
        answers: List[PersonalityAnswer],
        describe: Optional[DescriptionGenerator] = None,
    ) -> PersonalityResult:
        """
        Full analysis of a questionnaire.

        ``describe`` may supply a generated description for the derived type.
        Generated text is kept only when it is long enough, and is cut to a
        fixed length; otherwise the static description is used.
        """
        start = time.perf_counter()

        scores = self.score(answers)
        personality_type = self.derive_type(scores)

        description = self.description(personality_type)
        ai_generated = False
        if describe is not None:
            generated = describe(personality_type).strip()
            if len(generated) > GENERATED_DESCRIPTION_MIN_CHARS:
                if len(generated) > GENERATED_DESCRIPTION_MAX_CHARS:
                    generated = generated[:GENERATED_DESCRIPTION_MAX_CHARS] + "..."
                description = generated
                ai_generated = True

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"Personality analysis: {personality_type} from {len(answers)} answers ({elapsed_ms}ms)")

        return PersonalityResult(
            personality_type=personality_type,
            title=self.title(personality_type),
            description=description,
            scores=scores,
            strengths=self.strengths(personality_type),
            growth_areas=self.growth_areas(personality_type),
            confidence=self.confidence(scores),
            ai_generated=ai_generated,
            analysis_model=self.model_name,
            analysis_time_ms=elapsed_ms,
        )
