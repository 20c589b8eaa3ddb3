"""
Process-wide sampling configuration with clamping setters.
"""
import threading
from dataclasses import dataclass

TEMPERATURE_RANGE = (0.1, 1.5)
MAX_TOKENS_RANGE = (32, 256)
CONTEXT_SIZE_RANGE = (512, 2048)


def _clamp(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class SamplingParams:
    """Immutable snapshot taken when a generation loop starts."""
    temperature: float
    max_tokens: int
    context_size: int


class SamplingConfig:
    """
    Temperature, max tokens and context size shared by all model slots.

    Values outside the supported ranges are clamped, never rejected. A
    generation already running keeps the snapshot it started with.
    """

    def __init__(self, temperature: float = 0.7, max_tokens: int = 128, context_size: int = 1024):
        self._lock = threading.Lock()
        self._temperature = _clamp(float(temperature), TEMPERATURE_RANGE)
        self._max_tokens = _clamp(int(max_tokens), MAX_TOKENS_RANGE)
        self._context_size = _clamp(int(context_size), CONTEXT_SIZE_RANGE)

    def set_temperature(self, temperature: float) -> float:
        with self._lock:
            self._temperature = _clamp(float(temperature), TEMPERATURE_RANGE)
            return self._temperature

    def set_max_tokens(self, tokens: int) -> int:
        with self._lock:
            self._max_tokens = _clamp(int(tokens), MAX_TOKENS_RANGE)
            return self._max_tokens

    def set_context_size(self, size: int) -> int:
        """Applies to models loaded after the change."""
        with self._lock:
            self._context_size = _clamp(int(size), CONTEXT_SIZE_RANGE)
            return self._context_size

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @property
    def context_size(self) -> int:
        return self._context_size

    def snapshot(self) -> SamplingParams:
        with self._lock:
            return SamplingParams(
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                context_size=self._context_size,
            )
