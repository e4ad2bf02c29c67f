import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from modrt import ModuleNotFound, ModuleRuntime, ReadinessScheduler  # noqa: E402


@pytest.fixture
def runtime():
    return ModuleRuntime()


def _recorder(log, name):
    def body(require, exports, module, filename, dirname):
        log.append(name)

    return body


def test_run_waits_for_all_pending_jobs(runtime):
    log = []
    runtime.define("/app/main", _recorder(log, "main"))
    runtime.define("/app/later", _recorder(log, "later"))

    first = runtime.pending()
    second = runtime.pending()

    assert runtime.run("/app/main") is False
    assert log == []

    first.done()
    assert runtime.is_ready is False
    assert log == []

    second.done()
    assert runtime.is_ready is True
    assert log == ["main"]
    assert runtime.scheduler.run_queue == []

    assert runtime.run("/app/later", {"wait": False}) is True
    assert log == ["main", "later"]


def test_run_executes_immediately_once_ready(runtime):
    log = []
    runtime.define("/app/main", _recorder(log, "main"))
    runtime.ready()

    assert runtime.run("/app/main") is True
    assert log == ["main"]


def test_wait_false_bypasses_the_queue(runtime):
    log = []
    runtime.define("/app/now", _recorder(log, "now"))

    runtime.run("/app/now", {"wait": False})

    assert log == ["now"]
    assert runtime.scheduler.run_queue == []


def test_queue_drains_in_fifo_order_and_entries_run_once(runtime):
    log = []
    for name in ("a", "b", "c"):
        runtime.define(f"/app/{name}", _recorder(log, name))
        runtime.run(f"/app/{name}")

    runtime.ready()
    runtime.ready()

    assert log == ["a", "b", "c"]


def test_new_pending_job_mid_drain_stops_the_pass(runtime):
    log = []
    jobs = []

    def starts_job(require, exports, module, filename, dirname):
        log.append("loader")
        jobs.append(require.runtime.pending())
        require.runtime.run("/app/queued-during-drain")

    runtime.define("/app/loader", starts_job)
    runtime.define("/app/after", _recorder(log, "after"))
    runtime.define("/app/queued-during-drain", _recorder(log, "queued-during-drain"))

    runtime.run("/app/loader")
    runtime.run("/app/after")
    runtime.ready()

    assert log == ["loader"]
    assert runtime.is_ready is False
    assert [path for path, _ in runtime.scheduler.run_queue] == [
        "/app/after",
        "/app/queued-during-drain",
    ]

    jobs[0].done()

    assert log == ["loader", "after", "queued-during-drain"]
    assert runtime.scheduler.run_queue == []


def test_entries_queued_during_a_pass_run_in_the_next_pass(runtime):
    log = []

    def enqueue_more(require, exports, module, filename, dirname):
        log.append("first")
        # ready, so this executes immediately rather than queueing
        require.runtime.run("/app/second")

    runtime.define("/app/first", enqueue_more)
    runtime.define("/app/second", _recorder(log, "second"))
    runtime.run("/app/first")
    runtime.ready()

    assert log == ["first", "second"]


def test_job_completed_inside_an_entry_drains_before_the_rest_of_the_pass(runtime):
    log = []

    def loads_synchronously(require, exports, module, filename, dirname):
        log.append("loader")
        job = require.runtime.pending()
        require.runtime.run("/app/nested")
        assert log == ["loader"]
        # completing the job re-enters the drain from inside this body
        job.done()
        log.append("loader-end")

    runtime.define("/app/loader", loads_synchronously)
    runtime.define("/app/nested", _recorder(log, "nested"))
    runtime.define("/app/after", _recorder(log, "after"))

    runtime.run("/app/loader")
    runtime.run("/app/after")
    runtime.ready()

    assert log == ["loader", "nested", "loader-end", "after"]
    assert runtime.is_ready is True
    assert runtime.scheduler.pending_count == 0
    assert runtime.scheduler.run_queue == []


def test_entry_errors_propagate_and_keep_remaining_entries(runtime):
    log = []

    def fails(require, exports, module, filename, dirname):
        raise ValueError("entry failed")

    runtime.define("/app/fails", fails)
    runtime.define("/app/ok", _recorder(log, "ok"))
    runtime.define("/app/later", _recorder(log, "later"))
    runtime.run("/app/fails")
    runtime.run("/app/ok")

    with pytest.raises(ValueError, match="entry failed"):
        runtime.ready()

    assert [path for path, _ in runtime.scheduler.run_queue] == ["/app/ok"]
    assert runtime.is_ready is True

    # a later run still waits behind the entry left over from the failed drain
    assert runtime.run("/app/later") is True
    assert log == ["ok", "later"]
    assert runtime.scheduler.run_queue == []


def test_missing_entry_point_raises_not_found(runtime):
    runtime.ready()

    with pytest.raises(ModuleNotFound):
        runtime.run("/app/missing")


def test_pending_job_cannot_complete_twice(runtime):
    job = runtime.pending()
    job.done()

    assert job.is_done
    with pytest.raises(RuntimeError):
        job.done()
    assert runtime.scheduler.pending_count == 0


def test_pending_forces_not_ready_after_ready(runtime):
    runtime.ready()
    job = runtime.pending()

    assert runtime.is_ready is False
    assert runtime.scheduler.pending_count == 1
    job.done()
    assert runtime.is_ready is True


def test_scheduler_uses_supplied_loader():
    calls = []
    scheduler = ReadinessScheduler(lambda path, from_path: calls.append((path, from_path)))

    scheduler.request_run("/entry", {"wait": True})
    scheduler.mark_ready()

    assert calls == [("/entry", "/")]
