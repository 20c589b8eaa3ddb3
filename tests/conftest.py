import random

import numpy as np
import pytest
from fastapi.testclient import TestClient

from aiquiz.backends.base import BackendError, ModelBackend
from aiquiz.core.config import Settings
from aiquiz.main import create_app
from aiquiz.services.quiz_generator import AIQuestionGenerator

QUIZ_PATH = "models/quiz"
PSYCHOLOGY_PATH = "models/psychology"
ANALYSIS_PATH = "models/analysis"
MISSING_PATH = "missing"

MODEL_PATHS = {"quiz": QUIZ_PATH, "psychology": PSYCHOLOGY_PATH, "analysis": ANALYSIS_PATH}

QUIZ_SCRIPT = ["What is H2O?", " A) Water", " B) Oil", " C) Gas", " Answer: A"]
PSYCHOLOGY_SCRIPT = ["Do you enjoy large gatherings?", " A) Very much", " B) Sometimes", " C) Not at all"]
ANALYSIS_SCRIPT = [
    "Strategic planners who value competence, ",
    "prefer working independently and enjoy solving complex problems.",
]


class FakeHandle:
    def __init__(self, path, pieces, context_size):
        self.path = path
        self.pieces = pieces
        self.context_size = context_size
        self.step = 0
        self.freed = False


class FakeBackend(ModelBackend):
    """
    Scripted backend: each model path maps to a list of text pieces that are
    emitted one token per piece, followed by end-of-sequence (token 0).
    """

    name = "fake"

    def __init__(self, scripts=None, fail_paths=(), fail_decode_at=None, fail_prompt_decode=False, model_size=1000):
        self.scripts = scripts if scripts is not None else {
            QUIZ_PATH: QUIZ_SCRIPT,
            PSYCHOLOGY_PATH: PSYCHOLOGY_SCRIPT,
            ANALYSIS_PATH: ANALYSIS_SCRIPT,
        }
        self.fail_paths = set(fail_paths)
        self.fail_decode_at = fail_decode_at
        self.fail_prompt_decode = fail_prompt_decode
        self.model_size = model_size
        self.loads = []
        self.context_sizes = []
        self.freed = []

    def load(self, path, context_size):
        if path == MISSING_PATH or path in self.fail_paths:
            raise BackendError(f"no model at {path}")
        self.loads.append(path)
        self.context_sizes.append(context_size)
        return FakeHandle(path, list(self.scripts.get(path, [])), context_size)

    def free(self, handle):
        handle.freed = True
        self.freed.append(handle.path)

    def tokenize(self, handle, text):
        if not text:
            raise BackendError("empty prompt")
        return list(range(1, len(text.split()) + 1))

    def reset_state(self, handle):
        handle.step = 0

    def decode_sequence(self, handle, tokens):
        if self.fail_prompt_decode:
            raise BackendError("context overflow")

    def decode_single(self, handle, token):
        handle.step += 1
        if self.fail_decode_at is not None and handle.step >= self.fail_decode_at:
            raise BackendError("decode failed")

    def next_scores(self, handle):
        scores = np.zeros(len(handle.pieces) + 1)
        scores[handle.step + 1 if handle.step < len(handle.pieces) else 0] = 5.0
        return scores

    def token_to_text(self, handle, token):
        return handle.pieces[token - 1]

    def is_end_of_sequence(self, handle, token):
        return token == 0

    def model_size_bytes(self, handle):
        return self.model_size

    def describe(self, handle):
        return f"fake model {handle.path}"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def generator(backend):
    gen = AIQuestionGenerator(backend, dict(MODEL_PATHS), rng=random.Random(7))
    yield gen
    gen.shutdown()


@pytest.fixture
def fallback_generator():
    paths = {name: MISSING_PATH for name in MODEL_PATHS}
    gen = AIQuestionGenerator(FakeBackend(), paths, rng=random.Random(7))
    yield gen
    gen.shutdown()


def _client(gen):
    app = create_app(generator=gen, settings=Settings(PROMETHEUS_ENABLED=False))
    return TestClient(app)


@pytest.fixture
def client(generator):
    with _client(generator) as c:
        yield c


@pytest.fixture
def fallback_client(fallback_generator):
    with _client(fallback_generator) as c:
        yield c
