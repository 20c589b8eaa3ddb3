import threading

from aiquiz.core.config import Settings
from aiquiz.services.model_slots import ModelSlotManager
from aiquiz.services.sampling import SamplingConfig
from aiquiz.services.telemetry import AtomicCounter, RequestCounters, Telemetry

from conftest import MODEL_PATHS, FakeBackend


def test_atomic_counter_under_threads():
    counter = AtomicCounter()

    def bump():
        for _ in range(1000):
            counter.add()

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.value == 8000


def test_stats_report_totals_and_average():
    telemetry = Telemetry()
    telemetry.record_question("Science", "Easy", 100, generated=True)
    telemetry.record_question("Technology", "Hard", 300, generated=True)

    stats = telemetry.stats()
    assert set(stats) == {
        "total_generated", "avg_generation_time_ms", "total_generation_time_ms", "questions_per_minute",
    }
    assert stats["total_generated"] == 2
    assert stats["avg_generation_time_ms"] == 200.0
    assert stats["total_generation_time_ms"] == 400


def test_psychology_stats():
    telemetry = Telemetry()
    telemetry.record_psychology_question("E/I", generated=False)
    telemetry.record_analysis("INTJ")

    assert telemetry.psychology_stats() == {"total_psych_questions": 1, "total_analyses": 1}


def test_request_counters_snapshot():
    counters = RequestCounters()
    counters.total_requests.add()
    counters.failed_generations.add()

    snapshot = counters.snapshot()
    assert snapshot["total_requests"] == 1
    assert snapshot["failed_generations"] == 1
    assert snapshot["successful_generations"] == 0


def test_public_surface_has_no_unused_helpers():
    assert not hasattr(Telemetry, "category_counts")
    assert not hasattr(AtomicCounter, "reset")
    assert not hasattr(ModelSlotManager, "get")
    assert not hasattr(Settings, "is_testing")


def test_slots_are_reached_by_name():
    manager = ModelSlotManager(FakeBackend(), dict(MODEL_PATHS), SamplingConfig())
    assert manager["quiz"].model_name == "Quiz-Model"
