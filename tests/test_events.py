import threading

import pytest

from skyrelay.events import MAX_MSG, EventQueue


def test_new_queue_is_empty():
    queue = EventQueue()
    assert queue.is_empty() is True
    assert queue.is_full() is False
    assert len(queue) == 0


def test_default_capacity_is_max_msg():
    queue = EventQueue()
    assert queue.capacity == MAX_MSG
    assert MAX_MSG == 24


def test_fifo_order():
    queue = EventQueue()
    for item in (b"a", b"b", b"c"):
        assert queue.push_back(item) is True
    assert queue.front() == b"a"
    assert [queue.pop_front() for _ in range(3)] == [b"a", b"b", b"c"]
    assert queue.is_empty() is True


def test_full_queue_drops_new_items():
    queue = EventQueue(3)
    for item in (b"1", b"2", b"3"):
        queue.push_back(item)
    assert queue.is_full() is True
    assert queue.push_back(b"4") is False
    assert len(queue) == 3
    assert [queue.pop_front() for _ in range(3)] == [b"1", b"2", b"3"]


def test_default_queue_fills_at_max_msg():
    queue = EventQueue()
    for index in range(MAX_MSG):
        assert queue.push_back(bytes([index])) is True
    assert queue.is_full() is True
    assert queue.push_back(b"extra") is False


def test_pop_frees_room():
    queue = EventQueue(1)
    queue.push_back(b"x")
    assert queue.pop_front() == b"x"
    assert queue.is_full() is False
    assert queue.push_back(b"y") is True


def test_empty_pop_raises():
    with pytest.raises(IndexError):
        EventQueue().pop_front()


def test_empty_front_raises():
    with pytest.raises(IndexError):
        EventQueue().front()


def test_front_does_not_remove():
    queue = EventQueue()
    queue.push_back(b"keep")
    assert queue.front() == b"keep"
    assert len(queue) == 1


def test_push_copies_buffer():
    queue = EventQueue()
    buffer = bytearray(b"abc")
    queue.push_back(buffer)
    buffer[0] = ord("z")
    assert queue.front() == b"abc"


def test_clear():
    queue = EventQueue()
    queue.push_back(b"a")
    queue.push_back(b"b")
    queue.clear()
    assert queue.is_empty() is True
    assert len(queue) == 0


@pytest.mark.parametrize("capacity", [0, -1])
def test_invalid_capacity(capacity):
    with pytest.raises(ValueError):
        EventQueue(capacity)


def test_concurrent_pushes_respect_capacity():
    queue = EventQueue(10)
    results = []
    lock = threading.Lock()

    def worker(tag):
        for index in range(5):
            accepted = queue.push_back(bytes([tag, index]))
            with lock:
                results.append(accepted)

    threads = [threading.Thread(target=worker, args=(tag,)) for tag in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(queue) == queue.capacity
    assert results.count(True) == queue.capacity
    assert len(results) == 20