"""
Process-wide counters and timers for generation and analysis.

Each counter is individually atomic. Several counters read together in one
stats call form an eventually consistent snapshot; no cross-counter
consistency is attempted.
"""
import threading
import time
from typing import Dict

from prometheus_client import Counter, Histogram

QUESTIONS_GENERATED = Counter(
    "aiquiz_quiz_questions_total",
    "Quiz questions produced",
    ["category", "difficulty", "source"],
)
PSYCHOLOGY_QUESTIONS_GENERATED = Counter(
    "aiquiz_psychology_questions_total",
    "Psychology questions produced",
    ["trait", "source"],
)
PERSONALITY_ANALYSES = Counter(
    "aiquiz_personality_analyses_total",
    "Personality analyses completed",
    ["personality_type"],
)
GENERATION_SECONDS = Histogram(
    "aiquiz_generation_seconds",
    "Wall time of one text generation per model slot",
    ["slot"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


class AtomicCounter:
    """Integer counter safe to bump from many request threads."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def add(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        return self._value


class Telemetry:
    """Generation statistics reported by the stats endpoints."""

    def __init__(self):
        self.start_time = time.monotonic()
        self.total_questions = AtomicCounter()
        self.total_generation_time_ms = AtomicCounter()
        self.total_psych_questions = AtomicCounter()
        self.total_analyses = AtomicCounter()

    def record_question(self, category: str, difficulty: str, elapsed_ms: int, generated: bool) -> None:
        self.total_questions.add()
        self.total_generation_time_ms.add(elapsed_ms)
        QUESTIONS_GENERATED.labels(
            category=category,
            difficulty=difficulty,
            source="model" if generated else "fallback",
        ).inc()

    def record_psychology_question(self, trait: str, generated: bool) -> None:
        self.total_psych_questions.add()
        PSYCHOLOGY_QUESTIONS_GENERATED.labels(
            trait=trait, source="model" if generated else "fallback"
        ).inc()

    def record_analysis(self, personality_type: str) -> None:
        self.total_analyses.add()
        PERSONALITY_ANALYSES.labels(personality_type=personality_type).inc()

    @staticmethod
    def observe_generation(slot: str, seconds: float) -> None:
        GENERATION_SECONDS.labels(slot=slot).observe(seconds)

    def uptime_ms(self) -> float:
        return (time.monotonic() - self.start_time) * 1000.0

    def stats(self) -> Dict[str, float]:
        """Quiz generation stats: totals, average time and throughput."""
        total = self.total_questions.value
        total_time = self.total_generation_time_ms.value
        uptime = self.uptime_ms()

        return {
            "total_generated": total,
            "avg_generation_time_ms": total_time / total if total > 0 else 0.0,
            "total_generation_time_ms": total_time,
            "questions_per_minute": (total * 60000.0) / uptime if uptime > 0 else 0.0,
        }

    def psychology_stats(self) -> Dict[str, int]:
        return {
            "total_psych_questions": self.total_psych_questions.value,
            "total_analyses": self.total_analyses.value,
        }


class RequestCounters:
    """HTTP level counters: requests and quiz generation outcomes."""

    def __init__(self):
        self.start_time = time.monotonic()
        self.total_requests = AtomicCounter()
        self.successful_generations = AtomicCounter()
        self.failed_generations = AtomicCounter()

    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.start_time)

    def snapshot(self) -> Dict[str, int]:
        return {
            "uptime": self.uptime_seconds(),
            "total_requests": self.total_requests.value,
            "successful_generations": self.successful_generations.value,
            "failed_generations": self.failed_generations.value,
        }
