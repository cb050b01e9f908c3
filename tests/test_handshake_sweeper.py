import asyncio

from domain import HandshakePurpose
from services.handshake_sweeper import HandshakeSweepWorker


def test_run_once_reports_removed_tokens(store, clock):
    worker = HandshakeSweepWorker(store, interval_seconds=1)
    store.issue(HandshakePurpose.FORM_SUBMIT)
    store.issue(HandshakePurpose.FORM_SUBMIT)
    clock.advance(11 * 60 * 1000)
    assert worker.run_once() == 2
    status = worker.get_status()
    assert status["last_removed"] == 2
    assert status["pending_tokens"] == 0
    assert status["running"] is False


def test_start_and_stop(store):
    worker = HandshakeSweepWorker(store, interval_seconds=60)

    async def scenario():
        await worker.start()
        await asyncio.sleep(0)
        running = worker.is_running
        await worker.stop()
        return running

    assert asyncio.run(scenario()) is True
    assert worker.is_running is False
    assert worker.get_status()["last_run_at"] is not None
