"""Unit tests for ReadWriteLock."""

import threading
import time

from infrastructure.locking import ReadWriteLock


class TestReadWriteLock:
    """Tests for shared and exclusive locking."""

    def test_readers_share_the_lock(self):
        """Two readers can hold the lock at the same time."""
        lock = ReadWriteLock()
        both_inside = threading.Barrier(2, timeout=2)

        def reader():
            with lock.read():
                both_inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert not both_inside.broken

    def test_writer_excludes_readers(self):
        """A reader waits until the writer releases."""
        lock = ReadWriteLock()
        events = []

        lock.acquire_write()

        def reader():
            with lock.read():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)

        assert events == ["write-done", "read"]

    def test_writers_are_serialized(self):
        """Concurrent increments under the write side never interleave."""
        lock = ReadWriteLock()
        counter = {"value": 0}

        def increment():
            for _ in range(200):
                with lock.write():
                    current = counter["value"]
                    time.sleep(0)
                    counter["value"] = current + 1

        threads = [threading.Thread(target=increment) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert counter["value"] == 800

    def test_waiting_writer_blocks_new_readers(self):
        """Once a writer is waiting, new readers queue behind it."""
        lock = ReadWriteLock()
        order = []

        lock.acquire_read()

        def writer():
            with lock.write():
                order.append("writer")

        def late_reader():
            with lock.read():
                order.append("reader")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)

        assert order == ["writer", "reader"]

    def test_lock_released_on_error(self):
        """An exception inside the block still releases the lock."""
        lock = ReadWriteLock()

        try:
            with lock.write():
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        with lock.write():
            pass
