import threading
import time

from chesschat.services.locking import KeyedLocks


def test_same_key_is_serialized():
    locks = KeyedLocks()
    active = []
    overlaps = []

    def worker():
        with locks.hold('game:1'):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlaps == []
    assert len(locks) == 0


def test_different_keys_do_not_block_each_other():
    locks = KeyedLocks()
    entered = threading.Event()

    def other():
        with locks.hold(2):
            entered.set()

    with locks.hold(1):
        t = threading.Thread(target=other)
        t.start()
        assert entered.wait(timeout=1.0)
        t.join()


def test_lock_released_on_error():
    locks = KeyedLocks()
    try:
        with locks.hold(5):
            raise RuntimeError('boom')
    except RuntimeError:
        pass
    with locks.hold(5):
        pass
    assert len(locks) == 0
