"""
Backend adapter interface for pretrained text-generation models.

A backend owns no per-slot state itself: every call receives the opaque
handle returned by ``load`` and the slot that owns the handle serializes
access to it.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

import numpy as np


class BackendError(Exception):
    """Raised when the model backend cannot load, tokenize or decode."""


class ModelBackend(ABC):
    """Primitives the generation loop needs from a language model runtime."""

    name: str = "backend"

    @abstractmethod
    def load(self, path: str, context_size: int) -> Any:
        """Load a model and return an opaque handle; raise BackendError on failure."""

    @abstractmethod
    def free(self, handle: Any) -> None:
        """Release all resources held by a handle."""

    @abstractmethod
    def tokenize(self, handle: Any, text: str) -> List[int]:
        ...

    @abstractmethod
    def reset_state(self, handle: Any) -> None:
        """Forget all decoded tokens (clear the KV cache)."""

    @abstractmethod
    def decode_sequence(self, handle: Any, tokens: Sequence[int]) -> None:
        """Feed a token sequence in one step; raise BackendError on failure."""

    @abstractmethod
    def decode_single(self, handle: Any, token: int) -> None:
        ...

    @abstractmethod
    def next_scores(self, handle: Any) -> np.ndarray:
        """Vocabulary-sized score array for the next token."""

    @abstractmethod
    def token_to_text(self, handle: Any, token: int) -> str:
        ...

    @abstractmethod
    def is_end_of_sequence(self, handle: Any, token: int) -> bool:
        ...

    @abstractmethod
    def model_size_bytes(self, handle: Any) -> int:
        ...

    def describe(self, handle: Any) -> str:
        """Short human readable model description."""
        return self.name
