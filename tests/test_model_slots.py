import threading

from aiquiz.services.model_slots import ModelSlot, ModelSlotManager, SlotState
from aiquiz.services.sampling import SamplingConfig

from conftest import MODEL_PATHS, PSYCHOLOGY_PATH, QUIZ_PATH, FakeBackend


def test_load_success_marks_ready():
    backend = FakeBackend()
    slot = ModelSlot("quiz", backend, path=QUIZ_PATH)

    assert slot.state == SlotState.UNLOADED
    assert slot.load(context_size=2048) is True
    assert slot.state == SlotState.READY
    assert slot.is_ready()
    assert slot.model_name == "Quiz-Model"
    assert slot.last_used is not None
    assert backend.loads == [QUIZ_PATH]


def test_load_failure_marks_failed_without_raising():
    slot = ModelSlot("quiz", FakeBackend(), path="missing")

    assert slot.load() is False
    assert slot.state == SlotState.FAILED
    assert not slot.is_ready()
    assert slot.memory_usage() == 0
    with slot.session() as session:
        assert session is None


def test_failed_reload_releases_previous_model():
    backend = FakeBackend()
    slot = ModelSlot("quiz", backend, path=QUIZ_PATH)
    slot.load()

    assert slot.load(path="missing") is False
    assert backend.freed == [QUIZ_PATH]
    assert not slot.is_ready()


def test_unload_is_idempotent():
    backend = FakeBackend()
    slot = ModelSlot("quiz", backend, path=QUIZ_PATH)
    slot.unload()
    slot.load()
    slot.unload()
    slot.unload()

    assert slot.state == SlotState.UNLOADED
    assert backend.freed == [QUIZ_PATH]


def test_is_ready_does_not_wait_for_running_session():
    slot = ModelSlot("quiz", FakeBackend(), path=QUIZ_PATH)
    slot.load()
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with slot.session():
            entered.set()
            release.wait(5)

    worker = threading.Thread(target=hold)
    worker.start()
    try:
        assert entered.wait(5)
        assert slot.is_ready()
        assert slot.usage_count == 1
    finally:
        release.set()
        worker.join(5)


def test_manager_loads_all_slots_in_parallel():
    manager = ModelSlotManager(FakeBackend(), dict(MODEL_PATHS), SamplingConfig())

    results = manager.load_all()

    assert results == {"quiz": True, "psychology": True, "analysis": True}
    assert manager.are_all_ready()
    assert manager.memory_usage() == 3000
    assert manager.loaded_models() == [
        "Quiz-Model (0 uses)", "Psychology-Model (0 uses)", "Analysis-Model (0 uses)",
    ]


def test_one_failed_slot_does_not_affect_others():
    paths = dict(MODEL_PATHS, quiz="missing")
    manager = ModelSlotManager(FakeBackend(), paths, SamplingConfig())

    results = manager.load_all()

    assert results["quiz"] is False
    assert results["psychology"] and results["analysis"]
    assert not manager.are_all_ready()
    assert manager.memory_usage() == 2000


def test_reload_all_reports_failure_but_reloads_the_rest():
    backend = FakeBackend()
    manager = ModelSlotManager(backend, dict(MODEL_PATHS), SamplingConfig())
    manager.load_all()
    backend.fail_paths.add(PSYCHOLOGY_PATH)

    assert manager.reload_all() is False
    assert manager["quiz"].is_ready()
    assert manager["analysis"].is_ready()
    assert manager["psychology"].state == SlotState.FAILED
    assert backend.loads.count(QUIZ_PATH) == 2

    backend.fail_paths.clear()
    assert manager.reload_all() is True
    assert manager.are_all_ready()


def test_reload_uses_current_context_size():
    backend = FakeBackend()
    sampling = SamplingConfig()
    manager = ModelSlotManager(backend, dict(MODEL_PATHS), sampling)
    manager.load_all()
    sampling.set_context_size(4096)

    assert manager.reload_all() is True
    assert backend.context_sizes[:3] == [1024, 1024, 1024]
    assert backend.context_sizes[3:] == [2048, 2048, 2048]
    assert manager["quiz"].info()["state"] == "ready"


def test_shutdown_unloads_everything():
    backend = FakeBackend()
    manager = ModelSlotManager(backend, dict(MODEL_PATHS), SamplingConfig())
    manager.load_all()

    manager.shutdown()

    assert not any(slot.is_ready() for slot in manager.slots.values())
    assert sorted(backend.freed) == sorted(MODEL_PATHS.values())
