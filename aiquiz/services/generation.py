"""
Bounded token generation loop over a model slot.
"""
import logging
import time
from typing import Optional

import numpy as np

from ..backends.base import BackendError
from .model_slots import ModelSlot
from .sampling import SamplingConfig
from .telemetry import Telemetry

logger = logging.getLogger(__name__)

EARLY_STOP_MARKER = "Answer:"
EARLY_STOP_MIN_CHARS = 50


def select_token(scores: np.ndarray, temperature: float) -> int:
    """
    Pick the next token id from raw scores.

    A non-positive temperature takes the argmax of the raw scores. Otherwise the
    scores are turned into a temperature-scaled softmax and its mode is taken,
    so the choice stays deterministic.
    """
    scores = np.asarray(scores, dtype=np.float64)
    if scores.size == 0:
        raise BackendError("Empty score distribution")
    if temperature <= 0:
        return int(np.argmax(scores))

    scaled = scores / temperature
    scaled -= np.max(scaled)
    probs = np.exp(scaled)
    probs /= probs.sum()
    return int(np.argmax(probs))


class GenerationEngine:
    """Runs the generation loop for any slot using the shared sampling config."""

    def __init__(self, sampling: SamplingConfig, telemetry: Optional[Telemetry] = None):
        self.sampling = sampling
        self.telemetry = telemetry

    def generate(self, slot: ModelSlot, prompt: str) -> str:
        """
        Generate a continuation of ``prompt`` on ``slot``.

        Returns "" when the slot is not ready or the prompt cannot be fed to
        the model. Any error during the loop, from the backend or from token
        selection, truncates the output; nothing is raised to the caller.
        """
        if not slot.is_ready():
            return ""

        start = time.perf_counter()
        with slot.session() as session:
            if session is None:
                return ""

            params = self.sampling.snapshot()

            try:
                tokens = session.tokenize(prompt)
            except Exception as e:
                logger.warning(f"{slot.model_name}: failed to tokenize prompt: {e}")
                return ""

            try:
                session.reset_state()
                session.decode_sequence(tokens)
            except Exception as e:
                logger.warning(f"{slot.model_name}: failed to evaluate prompt: {e}")
                return ""

            pieces = []
            length = 0
            for _ in range(params.max_tokens):
                try:
                    token = select_token(session.next_scores(), params.temperature)
                    if session.is_end_of_sequence(token):
                        break

                    piece = session.token_to_text(token)
                    pieces.append(piece)
                    length += len(piece)

                    session.decode_single(token)
                except Exception as e:
                    logger.warning(f"{slot.model_name}: generation stopped early: {e}")
                    break

                if length > EARLY_STOP_MIN_CHARS and EARLY_STOP_MARKER in "".join(pieces):
                    break

        text = "".join(pieces)
        elapsed = time.perf_counter() - start
        if self.telemetry is not None:
            self.telemetry.observe_generation(slot.name, elapsed)
        logger.debug(f"{slot.model_name} generated {len(text)} chars in {elapsed * 1000:.0f}ms")
        return text
