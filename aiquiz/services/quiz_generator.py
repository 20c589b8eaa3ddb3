"""
AI question generator.

Drives three dedicated model slots (quiz, psychology and personality
analysis) and turns their output into structured records. Every public
method degrades to fallback content instead of raising when a model is
missing or misbehaves.
"""
import logging
import random
import time
from typing import Dict, List, Optional

from ..backends.base import ModelBackend
from ..core import catalog
from ..core.config import Settings
from ..models.records import (
    PersonalityAnswer,
    PersonalityResult,
    PsychologicalQuestion,
    QuizQuestion,
)
from .extraction import (
    DEFAULT_PSYCHOLOGY_OPTIONS,
    DEFAULT_PSYCHOLOGY_QUESTION,
    parse_psychology_response,
    parse_quiz_response,
)
from .generation import GenerationEngine
from .model_slots import ANALYSIS_SLOT, PSYCHOLOGY_SLOT, QUIZ_SLOT, ModelSlotManager
from .personality import PersonalityEngine
from .sampling import SamplingConfig
from .telemetry import Telemetry

logger = logging.getLogger(__name__)

FALLBACK_MODEL_NAME = "Fallback"
FALLBACK_ANSWERS = ("Concept A", "Concept B", "Concept C")


class AIQuestionGenerator:
    """Quiz questions, psychology questionnaires and personality analysis."""

    def __init__(
        self,
        backend: ModelBackend,
        model_paths: Dict[str, str],
        sampling: Optional[SamplingConfig] = None,
        telemetry: Optional[Telemetry] = None,
        rng: Optional[random.Random] = None,
        load: bool = True,
    ):
        self.sampling = sampling or SamplingConfig()
        self.telemetry = telemetry or Telemetry()
        self.rng = rng
        self.slots = ModelSlotManager(backend, model_paths, self.sampling)
        self.engine = GenerationEngine(self.sampling, self.telemetry)
        self.personality = PersonalityEngine(model_name=self.slots[ANALYSIS_SLOT].model_name)

        logger.info("Initializing multi-model AI question generator")
        for name, path in model_paths.items():
            logger.info(f"  {name} model: {path}")

        if load:
            self.slots.load_all()
            if self.are_models_loaded():
                logger.info("All models loaded")
            else:
                logger.warning("Some models failed to load; affected endpoints will serve fallback content")

    @classmethod
    def from_settings(cls, settings: Settings, backend: Optional[ModelBackend] = None, **kwargs) -> "AIQuestionGenerator":
        """Build a generator from application settings, defaulting to the transformers backend."""
        if backend is None:
            from ..backends.transformers_backend import TransformersBackend
            backend = TransformersBackend(device=settings.device())

        sampling = SamplingConfig()
        sampling.set_temperature(settings.MODEL_TEMPERATURE)
        sampling.set_max_tokens(settings.MODEL_MAX_TOKENS)
        sampling.set_context_size(settings.MODEL_CONTEXT_SIZE)

        return cls(backend, settings.model_paths(), sampling=sampling, **kwargs)

    # ----- quiz -----

    def generate_question(
        self,
        category: str = catalog.DEFAULT_CATEGORY,
        difficulty: str = catalog.DEFAULT_DIFFICULTY,
        player_name: str = "Unknown",
    ) -> QuizQuestion:
        start = time.perf_counter()
        logger.info(f"Generating quiz question for {player_name} ({category}/{difficulty})")

        slot = self.slots[QUIZ_SLOT]
        if not slot.is_ready():
            logger.error("Quiz model not loaded, serving fallback question")
            return self._fallback_question(category, difficulty)

        response = self.engine.generate(slot, catalog.build_prompt(category, difficulty))
        logger.debug(f"Quiz model response: {response[:100]!r}")

        question = parse_quiz_response(response, category, difficulty, self.rng)
        question.generated = bool(response)
        question.ai_model = slot.model_name

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        question.generation_time_ms = elapsed_ms
        self.telemetry.record_question(category, difficulty, elapsed_ms, question.generated)

        logger.info(f"Quiz question generated in {elapsed_ms}ms: {question.question[:50]}")
        return question

    @staticmethod
    def _fallback_question(category: str, difficulty: str) -> QuizQuestion:
        modifiers = catalog.difficulty_modifiers(difficulty)
        return QuizQuestion(
            question=f"What is an important concept in {category}?",
            answers=list(FALLBACK_ANSWERS),
            correct_answer_index=0,
            category=category,
            difficulty=difficulty,
            correct_answer_price_multiplier=modifiers["correct"],
            wrong_answer_price_multiplier=modifiers["wrong"],
            steal_chance=modifiers["steal"],
            steal_percentage=modifiers["amount"],
            generated=False,
            ai_model=FALLBACK_MODEL_NAME,
        )

    # ----- psychology -----

    def generate_psychology_questions(self, count: int = 8) -> List[PsychologicalQuestion]:
        """
        Up to ``count`` questions, at most one per psychology category.

        Questions follow the fixed category cycle, two per MBTI axis, and are
        numbered from 1 so that scoring can map them back to their axis.
        """
        slot = self.slots[PSYCHOLOGY_SLOT]
        categories = catalog.PSYCHOLOGY_CATEGORIES[:max(0, count)]
        ready = slot.is_ready()

        if not ready:
            logger.error("Psychology model not loaded, serving fallback questions")
        logger.info(f"Generating {len(categories)} psychology questions")

        questions = []
        for index, category in enumerate(categories, start=1):
            start = time.perf_counter()
            trait = category[:3]

            if ready:
                response = self.engine.generate(slot, catalog.build_psychology_prompt(category))
                question = parse_psychology_response(response, index, trait, category)
                question.generated = bool(response)
                question.ai_model = slot.model_name
                self.telemetry.record_psychology_question(trait, question.generated)
            else:
                question = PsychologicalQuestion(
                    id=index,
                    question=DEFAULT_PSYCHOLOGY_QUESTION,
                    options=list(DEFAULT_PSYCHOLOGY_OPTIONS),
                    trait=trait,
                    category=category,
                    generated=False,
                    ai_model=FALLBACK_MODEL_NAME,
                )

            question.generation_time_ms = int((time.perf_counter() - start) * 1000)
            questions.append(question)
            logger.debug(f"Psychology question {index}/{len(categories)} ({category}) in {question.generation_time_ms}ms")

        return questions

    def analyze_personality(self, answers: List[PersonalityAnswer]) -> PersonalityResult:
        slot = self.slots[ANALYSIS_SLOT]
        logger.info(f"Analyzing personality from {len(answers)} responses")

        describe = None
        if slot.is_ready():
            def describe(personality_type: str) -> str:
                prompt = f"Describe {personality_type} personality type. Key traits and characteristics:"
                return self.engine.generate(slot, prompt)

        result = self.personality.analyze(answers, describe=describe)
        self.telemetry.record_analysis(result.personality_type)
        return result

    # ----- catalog -----

    @staticmethod
    def get_categories() -> List[str]:
        return list(catalog.CATEGORIES)

    @staticmethod
    def get_difficulties() -> List[str]:
        return list(catalog.DIFFICULTIES)

    @staticmethod
    def get_categories_map() -> Dict[str, List[str]]:
        return catalog.categories_map()

    @staticmethod
    def get_personality_traits() -> List[str]:
        return [f"{first}/{second}" for first, second in catalog.PERSONALITY_TRAITS.values()]

    @staticmethod
    def get_personality_types() -> List[str]:
        return list(catalog.PERSONALITY_DESCRIPTIONS.keys())

    # ----- stats and model management -----

    def get_stats(self) -> Dict[str, float]:
        return self.telemetry.stats()

    def get_psychology_stats(self) -> Dict[str, int]:
        return self.telemetry.psychology_stats()

    def are_models_loaded(self) -> bool:
        return self.slots.are_all_ready()

    def reload_models(self) -> bool:
        success = self.slots.reload_all()
        if success:
            logger.info("All models reloaded")
        else:
            logger.error("One or more models failed to reload")
        return success

    def get_loaded_models(self) -> List[str]:
        return self.slots.loaded_models()

    def get_model_info(self) -> str:
        lines = ["Multi-Model Architecture:"]
        for slot in self.slots.slots.values():
            if slot.is_ready():
                lines.append(slot.describe())

        params = self.sampling.snapshot()
        lines.append(f"Context size: {params.context_size}")
        lines.append(f"Max tokens: {params.max_tokens}")
        lines.append(f"Temperature: {params.temperature}")
        return "\n".join(lines)

    def get_model_memory_usage(self) -> int:
        return self.slots.memory_usage()

    def set_temperature(self, temperature: float) -> float:
        return self.sampling.set_temperature(temperature)

    def set_max_tokens(self, tokens: int) -> int:
        return self.sampling.set_max_tokens(tokens)

    def set_context_size(self, size: int) -> int:
        return self.sampling.set_context_size(size)

    def shutdown(self) -> None:
        logger.info("Shutting down AI question generator")
        self.slots.shutdown()
