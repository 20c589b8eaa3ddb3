"""
Shared API dependencies and the camelCase base schema.
"""
from datetime import datetime, timezone

from fastapi import Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..services.quiz_generator import AIQuestionGenerator
from ..services.telemetry import RequestCounters


class CamelModel(BaseModel):
    """Accepts and renders camelCase keys while keeping snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def get_generator(request: Request) -> AIQuestionGenerator:
    return request.app.state.generator


def get_counters(request: Request) -> RequestCounters:
    return request.app.state.counters


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
