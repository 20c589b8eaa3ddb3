"""
Named model slots and their lifecycle.

Each slot wraps one loaded backend model. A slot-exclusive lock serializes
load, unload and generation on that slot, while different slots run fully
in parallel. The backend handle never leaves the slot: callers only get a
bound ``SlotSession`` while they hold the slot lock.
"""
import enum
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np

from ..backends.base import ModelBackend
from .sampling import SamplingConfig

logger = logging.getLogger(__name__)

QUIZ_SLOT = "quiz"
PSYCHOLOGY_SLOT = "psychology"
ANALYSIS_SLOT = "analysis"

SLOT_DISPLAY_NAMES = {
    QUIZ_SLOT: "Quiz-Model",
    PSYCHOLOGY_SLOT: "Psychology-Model",
    ANALYSIS_SLOT: "Analysis-Model",
}


class SlotState(str, enum.Enum):
    """Load state of a model slot."""
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SlotSession:
    """Backend primitives bound to one slot's handle; valid only inside ``ModelSlot.session``."""

    def __init__(self, backend: ModelBackend, handle: Any):
        self._backend = backend
        self._handle = handle

    def tokenize(self, text: str) -> List[int]:
        return self._backend.tokenize(self._handle, text)

    def reset_state(self) -> None:
        self._backend.reset_state(self._handle)

    def decode_sequence(self, tokens: Sequence[int]) -> None:
        self._backend.decode_sequence(self._handle, tokens)

    def decode_single(self, token: int) -> None:
        self._backend.decode_single(self._handle, token)

    def next_scores(self) -> np.ndarray:
        return self._backend.next_scores(self._handle)

    def token_to_text(self, token: int) -> str:
        return self._backend.token_to_text(self._handle, token)

    def is_end_of_sequence(self, token: int) -> bool:
        return self._backend.is_end_of_sequence(self._handle, token)


class ModelSlot:
    """One independently loadable model instance dedicated to a task."""

    def __init__(self, name: str, backend: ModelBackend, path: str = "", model_name: Optional[str] = None):
        self.name = name
        self.backend = backend
        self.path = path
        self.model_name = model_name or SLOT_DISPLAY_NAMES.get(name, name)
        self.last_used: Optional[float] = None

        self._handle: Any = None
        self._state = SlotState.UNLOADED
        self._usage_count = 0
        # Held for whole operations (load, unload, generate)
        self._lock = threading.Lock()
        # Held only for reads/writes of state, so is_ready never waits on a generation
        self._state_lock = threading.Lock()

    # ----- state -----

    @property
    def state(self) -> SlotState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: SlotState) -> None:
        with self._state_lock:
            self._state = state

    def is_ready(self) -> bool:
        with self._state_lock:
            return self._state == SlotState.READY and self._handle is not None

    @property
    def usage_count(self) -> int:
        return self._usage_count

    # ----- lifecycle -----

    def load(self, path: Optional[str] = None, model_name: Optional[str] = None, context_size: int = 1024) -> bool:
        """
        Load (or replace) the slot's model.

        Args:
            path: Model location; defaults to the slot's configured path
            model_name: Display name recorded on success
            context_size: Context window passed to the backend

        Returns:
            True when the slot is ready. On failure the slot is FAILED and
            holds no handle.
        """
        path = path or self.path
        with self._lock:
            self._release()
            self._set_state(SlotState.LOADING)
            logger.info(f"Loading {self.model_name} from {path}...")

            try:
                handle = self.backend.load(path, context_size)
            except Exception as e:
                logger.error(f"Failed to load {self.model_name} from {path}: {e}")
                with self._state_lock:
                    self._handle = None
                    self._state = SlotState.FAILED
                self.path = path
                return False

            with self._state_lock:
                self._handle = handle
                self._state = SlotState.READY
            self.path = path
            if model_name:
                self.model_name = model_name
            self.last_used = time.time()

            logger.info(
                f"{self.model_name} loaded: {self.backend.describe(handle)} "
                f"(context size {context_size} tokens)"
            )
            return True

    def unload(self) -> None:
        """Release backend resources; a no-op on an unloaded slot."""
        with self._lock:
            self._release()

    def _release(self) -> None:
        # Caller holds self._lock
        with self._state_lock:
            handle, self._handle = self._handle, None
            self._state = SlotState.UNLOADED
        if handle is not None:
            try:
                self.backend.free(handle)
            except Exception as e:
                logger.warning(f"Error releasing {self.model_name}: {e}")
            logger.info(f"{self.model_name} unloaded")

    # ----- use -----

    @contextmanager
    def session(self) -> Iterator[Optional[SlotSession]]:
        """
        Exclusive access to the loaded model.

        Yields None when the slot is not ready. Usage count and last-used time
        are bumped for every ready session.
        """
        with self._lock:
            with self._state_lock:
                handle = self._handle if self._state == SlotState.READY else None
            if handle is None:
                yield None
                return

            self._usage_count += 1
            self.last_used = time.time()
            yield SlotSession(self.backend, handle)

    def memory_usage(self) -> int:
        with self._state_lock:
            handle = self._handle
        if handle is None:
            return 0
        return int(self.backend.model_size_bytes(handle))

    def describe(self) -> str:
        with self._state_lock:
            handle = self._handle
        if handle is None:
            return f"{self.model_name}: {self.state.value}"
        return f"{self.model_name}: {self.backend.describe(handle)} (Uses: {self._usage_count})"

    def info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "model_name": self.model_name,
            "path": self.path,
            "state": self.state.value,
            "usage_count": self._usage_count,
            "last_used": self.last_used,
        }


class ModelSlotManager:
    """Owns the quiz, psychology and analysis slots."""

    def __init__(self, backend: ModelBackend, model_paths: Dict[str, str], sampling: SamplingConfig):
        self.backend = backend
        self.sampling = sampling
        self.slots: Dict[str, ModelSlot] = {
            name: ModelSlot(name, backend, path=path)
            for name, path in model_paths.items()
        }
        # Serializes whole-manager operations such as reload_all
        self._lock = threading.Lock()

    def __getitem__(self, name: str) -> ModelSlot:
        return self.slots[name]

    def load_all(self) -> Dict[str, bool]:
        """Load every slot in parallel, one worker per slot."""
        context_size = self.sampling.context_size
        results: Dict[str, bool] = {}

        with ThreadPoolExecutor(max_workers=max(1, len(self.slots))) as executor:
            futures = {
                name: executor.submit(slot.load, None, None, context_size)
                for name, slot in self.slots.items()
            }
            for name, future in futures.items():
                results[name] = future.result()

        for name, ok in results.items():
            if ok:
                logger.info(f"{self.slots[name].model_name} loaded successfully")
            else:
                logger.error(f"Failed to load {self.slots[name].model_name}")
        return results

    def reload_all(self) -> bool:
        """Unload and reload each slot in turn; True only if all of them come back."""
        with self._lock:
            logger.info("Reloading all models...")
            for slot in self.slots.values():
                slot.unload()

            context_size = self.sampling.context_size
            success = True
            for slot in self.slots.values():
                success = slot.load(context_size=context_size) and success
            return success

    def are_all_ready(self) -> bool:
        return all(slot.is_ready() for slot in self.slots.values())

    def loaded_models(self) -> List[str]:
        return [
            f"{slot.model_name} ({slot.usage_count} uses)"
            for slot in self.slots.values()
            if slot.is_ready()
        ]

    def memory_usage(self) -> int:
        return sum(slot.memory_usage() for slot in self.slots.values())

    def shutdown(self) -> None:
        for slot in self.slots.values():
            slot.unload()
