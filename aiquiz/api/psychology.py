"""
Psychology questionnaire and personality analysis endpoints.
"""
import logging
import time
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from ..models.records import PersonalityAnswer
from ..services.quiz_generator import AIQuestionGenerator
from .deps import CamelModel, get_generator, utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


class PsychologyRequest(CamelModel):
    count: int = Field(default=8, ge=1, le=16)


class PsychologyQuestionOut(CamelModel):
    id: int
    question: str
    options: List[str]
    trait: str
    category: str
    generated: bool
    ai_model: str
    generation_time_ms: int


class PsychologyResponse(CamelModel):
    success: bool = True
    count: int
    questions: List[PsychologyQuestionOut]
    generation_time: int
    timestamp: str


class AnswerIn(CamelModel):
    question_id: int = Field(default=1, ge=1)
    selected_option: int = Field(default=0, ge=0, le=2)
    trait: str = "E/I"
    value: Optional[str] = None


class AnalyzeRequest(CamelModel):
    answers: List[AnswerIn] = Field(min_length=1)


class AnalyzeResponse(CamelModel):
    success: bool = True
    personality_type: str
    title: str
    description: str
    scores: Dict[str, float]
    strengths: List[str]
    growth_areas: List[str]
    confidence: float
    ai_generated: bool
    analysis_model: str
    analysis_time: int
    timestamp: str


class TraitsResponse(CamelModel):
    success: bool = True
    traits: List[str]
    types: List[str]
    model_loaded: bool
    timestamp: str


@router.post("/generate", response_model=PsychologyResponse)
@router.post("/questions", response_model=PsychologyResponse)
def generate_psychology_questions(
    payload: PsychologyRequest = PsychologyRequest(),
    generator: AIQuestionGenerator = Depends(get_generator),
):
    start = time.perf_counter()
    questions = generator.generate_psychology_questions(payload.count)
    duration_ms = int((time.perf_counter() - start) * 1000)

    return PsychologyResponse(
        count=len(questions),
        questions=[PsychologyQuestionOut(**asdict(q)) for q in questions],
        generation_time=duration_ms,
        timestamp=utc_timestamp(),
    )


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_personality(
    payload: AnalyzeRequest,
    generator: AIQuestionGenerator = Depends(get_generator),
):
    answers = [
        PersonalityAnswer(
            question_id=a.question_id,
            selected_option=a.selected_option,
            trait=a.trait,
            value=a.value,
        )
        for a in payload.answers
    ]

    start = time.perf_counter()
    result = generator.analyze_personality(answers)
    duration_ms = int((time.perf_counter() - start) * 1000)

    return AnalyzeResponse(
        personality_type=result.personality_type,
        title=result.title,
        description=result.description,
        scores=result.scores,
        strengths=result.strengths,
        growth_areas=result.growth_areas,
        confidence=result.confidence,
        ai_generated=result.ai_generated,
        analysis_model=result.analysis_model,
        analysis_time=duration_ms,
        timestamp=utc_timestamp(),
    )


@router.get("/traits", response_model=TraitsResponse)
def get_traits(generator: AIQuestionGenerator = Depends(get_generator)):
    return TraitsResponse(
        traits=generator.get_personality_traits(),
        types=generator.get_personality_types(),
        model_loaded=generator.are_models_loaded(),
        timestamp=utc_timestamp(),
    )
