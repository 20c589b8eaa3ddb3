"""
Health, statistics and model management endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from ..services.quiz_generator import AIQuestionGenerator
from ..services.telemetry import RequestCounters
from .deps import CamelModel, get_counters, get_generator, utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()
api_router = APIRouter()


class ModelConfigUpdate(CamelModel):
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    context_size: Optional[int] = None


class ModelConfigResponse(CamelModel):
    success: bool = True
    temperature: float
    max_tokens: int
    context_size: int


def _ai_stats(generator: AIQuestionGenerator) -> dict:
    stats = generator.get_stats()
    return {
        "totalGenerated": stats["total_generated"],
        "avgGenerationTimeMs": stats["avg_generation_time_ms"],
        "totalGenerationTimeMs": stats["total_generation_time_ms"],
        "questionsPerMinute": stats["questions_per_minute"],
    }


def _psychology_stats(generator: AIQuestionGenerator) -> dict:
    stats = generator.get_psychology_stats()
    return {
        "totalPsychQuestions": stats["total_psych_questions"],
        "totalAnalyses": stats["total_analyses"],
    }


@router.get("/", tags=["Health"])
@router.get("/health", tags=["Health"])
def health_check(
    request: Request,
    generator: AIQuestionGenerator = Depends(get_generator),
    counters: RequestCounters = Depends(get_counters),
):
    """Service status with request counters and generation statistics."""
    settings = request.app.state.settings
    server = counters.snapshot()
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "modelLoaded": generator.are_models_loaded(),
        "uptime": server["uptime"],
        "totalRequests": server["total_requests"],
        "successfulGenerations": server["successful_generations"],
        "failedGenerations": server["failed_generations"],
        "aiStats": _ai_stats(generator),
        "psychologyStats": _psychology_stats(generator),
        "timestamp": utc_timestamp(),
    }


@api_router.get("/stats")
def get_stats(
    generator: AIQuestionGenerator = Depends(get_generator),
    counters: RequestCounters = Depends(get_counters),
):
    server = counters.snapshot()
    ai = _ai_stats(generator)
    ai["modelMemoryUsage"] = generator.get_model_memory_usage()
    ai["loadedModels"] = generator.get_loaded_models()

    return {
        "success": True,
        "server": {
            "uptime": server["uptime"],
            "totalRequests": server["total_requests"],
            "successfulGenerations": server["successful_generations"],
            "failedGenerations": server["failed_generations"],
        },
        "ai": ai,
        "psychology": _psychology_stats(generator),
        "timestamp": utc_timestamp(),
    }


@api_router.get("/model/info")
def get_model_info(generator: AIQuestionGenerator = Depends(get_generator)):
    return {
        "success": True,
        "modelLoaded": generator.are_models_loaded(),
        "modelInfo": generator.get_model_info(),
        "memoryUsage": generator.get_model_memory_usage(),
        "loadedModels": generator.get_loaded_models(),
        "timestamp": utc_timestamp(),
    }


@api_router.post("/model/reload")
def reload_models(generator: AIQuestionGenerator = Depends(get_generator)):
    """Unload and reload every model slot; success is False if any slot failed."""
    success = generator.reload_models()
    return {
        "success": success,
        "modelLoaded": generator.are_models_loaded(),
        "loadedModels": generator.get_loaded_models(),
        "timestamp": utc_timestamp(),
    }


@api_router.put("/model/config", response_model=ModelConfigResponse)
def update_model_config(
    payload: ModelConfigUpdate,
    generator: AIQuestionGenerator = Depends(get_generator),
):
    # Out of range values are clamped, the response carries what is in effect
    if payload.temperature is not None:
        generator.set_temperature(payload.temperature)
    if payload.max_tokens is not None:
        generator.set_max_tokens(payload.max_tokens)
    if payload.context_size is not None:
        generator.set_context_size(payload.context_size)

    params = generator.sampling.snapshot()
    logger.info(
        f"Sampling config: temperature={params.temperature}, "
        f"max_tokens={params.max_tokens}, context_size={params.context_size}"
    )
    return ModelConfigResponse(
        temperature=params.temperature,
        max_tokens=params.max_tokens,
        context_size=params.context_size,
    )
