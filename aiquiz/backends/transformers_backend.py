"""
Hugging Face causal language model backend.

Loads a model with ``transformers`` from a hub id or a local directory and
steps it one token at a time, keeping the KV cache inside the handle.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np
import torch
from transformers import AutoModelForCausalLM, AutoTokenizer

from .base import BackendError, ModelBackend

logger = logging.getLogger(__name__)


@dataclass
class _LoadedModel:
    model: Any
    tokenizer: Any
    device: torch.device
    context_size: int
    past_key_values: Any = None
    last_logits: Optional[np.ndarray] = None
    n_past: int = 0


class TransformersBackend(ModelBackend):
    """Runs causal LMs (distilgpt2 by default) through transformers and torch."""

    name = "transformers"

    def __init__(self, device: str = "cpu"):
        if device.startswith("cuda") and not torch.cuda.is_available():
            logger.warning(f"CUDA requested ({device}) but not available, using CPU")
            device = "cpu"
        self.device = torch.device(device)

    def load(self, path: str, context_size: int) -> _LoadedModel:
        try:
            tokenizer = AutoTokenizer.from_pretrained(path)
            model = AutoModelForCausalLM.from_pretrained(path)
            model.to(self.device)
            model.eval()
        except Exception as e:
            raise BackendError(f"Failed to load model from {path}: {e}") from e

        max_positions = getattr(model.config, "max_position_embeddings", None) or context_size
        return _LoadedModel(
            model=model,
            tokenizer=tokenizer,
            device=self.device,
            context_size=min(context_size, max_positions),
        )

    def free(self, handle: _LoadedModel) -> None:
        handle.past_key_values = None
        handle.last_logits = None
        handle.model = None
        handle.tokenizer = None
        if self.device.type == "cuda":
            torch.cuda.empty_cache()

    def tokenize(self, handle: _LoadedModel, text: str) -> List[int]:
        try:
            tokens = handle.tokenizer.encode(text, add_special_tokens=False)
        except Exception as e:
            raise BackendError(f"Tokenization failed: {e}") from e
        if not tokens:
            raise BackendError("Prompt produced no tokens")
        return list(tokens)

    def reset_state(self, handle: _LoadedModel) -> None:
        handle.past_key_values = None
        handle.last_logits = None
        handle.n_past = 0

    def decode_sequence(self, handle: _LoadedModel, tokens: Sequence[int]) -> None:
        if handle.n_past + len(tokens) > handle.context_size:
            raise BackendError(
                f"Context overflow: {handle.n_past + len(tokens)} > {handle.context_size} tokens"
            )

        input_ids = torch.tensor([list(tokens)], dtype=torch.long, device=handle.device)
        try:
            with torch.no_grad():
                output = handle.model(
                    input_ids=input_ids,
                    past_key_values=handle.past_key_values,
                    use_cache=True,
                )
        except Exception as e:
            raise BackendError(f"Decode failed: {e}") from e

        handle.past_key_values = output.past_key_values
        handle.last_logits = output.logits[0, -1].float().cpu().numpy()
        handle.n_past += len(tokens)

    def decode_single(self, handle: _LoadedModel, token: int) -> None:
        self.decode_sequence(handle, [token])

    def next_scores(self, handle: _LoadedModel) -> np.ndarray:
        if handle.last_logits is None:
            raise BackendError("No logits available; decode a prompt first")
        return handle.last_logits

    def token_to_text(self, handle: _LoadedModel, token: int) -> str:
        try:
            return handle.tokenizer.decode(
                [token],
                skip_special_tokens=False,
                clean_up_tokenization_spaces=False,
            )
        except Exception as e:
            raise BackendError(f"Cannot convert token {token} to text: {e}") from e

    def is_end_of_sequence(self, handle: _LoadedModel, token: int) -> bool:
        if handle.tokenizer is None:
            raise BackendError("Tokenizer released")
        return token == handle.tokenizer.eos_token_id

    def model_size_bytes(self, handle: _LoadedModel) -> int:
        if handle.model is None:
            return 0
        return sum(p.numel() * p.element_size() for p in handle.model.parameters())

    def describe(self, handle: _LoadedModel) -> str:
        if handle.model is None:
            return "unloaded"
        n_params = sum(p.numel() for p in handle.model.parameters())
        model_type = getattr(handle.model.config, "model_type", "causal-lm")
        return f"{model_type} {n_params / 1e6:.0f}M params ({handle.device.type})"
