"""
Quiz question endpoints.
"""
import logging
import time
from dataclasses import asdict
from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import Field

from ..core import catalog
from ..services.quiz_generator import AIQuestionGenerator
from ..services.telemetry import RequestCounters
from .deps import CamelModel, get_counters, get_generator, utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


class QuizRequest(CamelModel):
    category: str = Field(default=catalog.DEFAULT_CATEGORY, max_length=64)
    difficulty: str = Field(default=catalog.DEFAULT_DIFFICULTY, max_length=32)
    player_name: str = Field(default="Unknown", max_length=128)


class QuizQuestionOut(CamelModel):
    question: str
    answers: List[str]
    correct_answer_index: int
    category: str
    difficulty: str
    correct_answer_price_multiplier: float
    wrong_answer_price_multiplier: float
    steal_chance: float
    steal_percentage: float
    generated: bool
    ai_model: str
    generation_time_ms: int


class QuizResponse(CamelModel):
    success: bool = True
    question: QuizQuestionOut
    ai_generated: bool
    ai_model: str
    generation_time: int
    generation_time_unit: str = "milliseconds"
    server_processing_time: int
    timestamp: str


class CategoriesResponse(CamelModel):
    success: bool = True
    categories: Dict[str, List[str]]
    difficulties: List[str]
    model_loaded: bool
    timestamp: str


@router.post("/generate", response_model=QuizResponse)
def generate_quiz(
    payload: QuizRequest = QuizRequest(),
    generator: AIQuestionGenerator = Depends(get_generator),
    counters: RequestCounters = Depends(get_counters),
):
    """Generate one multiple choice question; falls back to a canned question when no model is available."""
    start = time.perf_counter()
    question = generator.generate_question(payload.category, payload.difficulty, payload.player_name)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if question.generated:
        counters.successful_generations.add()
    else:
        counters.failed_generations.add()
        logger.warning(f"Served fallback question for {payload.category}/{payload.difficulty}")

    return QuizResponse(
        question=QuizQuestionOut(**asdict(question)),
        ai_generated=question.generated,
        ai_model=question.ai_model,
        generation_time=duration_ms,
        server_processing_time=max(0, duration_ms - question.generation_time_ms),
        timestamp=utc_timestamp(),
    )


@router.get("/categories", response_model=CategoriesResponse)
def get_categories(generator: AIQuestionGenerator = Depends(get_generator)):
    return CategoriesResponse(
        categories=generator.get_categories_map(),
        difficulties=generator.get_difficulties(),
        model_loaded=generator.are_models_loaded(),
        timestamp=utc_timestamp(),
    )
