import threading

import pytest

from pixelflow.buffers import MemoryPool, align_size, default_pool


@pytest.mark.parametrize(
    "size,expected", [(0, 0), (1, 256), (256, 256), (257, 512)]
)
def test_align_size(size, expected):
    assert align_size(size) == expected


def test_allocate_returns_aligned_buffer_and_counts_it():
    pool = MemoryPool()
    buf = pool.allocate(100)
    assert len(buf) == align_size(100)
    stats = pool.stats()
    assert stats.total_allocated == len(buf)
    assert stats.peak_usage == len(buf)
    assert stats.pool_size == 0


def test_deallocate_moves_buffer_into_pool():
    pool = MemoryPool()
    buf = pool.allocate(1000)
    pool.deallocate(buf)
    stats = pool.stats()
    assert stats.total_allocated == 0
    assert stats.pool_size == len(buf)


def test_pooled_buffer_is_reused():
    pool = MemoryPool()
    first = pool.allocate(1000)
    pool.deallocate(first)
    second = pool.allocate(1000)
    assert second is first
    assert pool.stats().pool_size == 0


def test_different_bucket_is_not_reused():
    pool = MemoryPool()
    first = pool.allocate(100)
    pool.deallocate(first)
    second = pool.allocate(1000)
    assert second is not first
    assert pool.stats().pool_size == len(first)


def test_disabled_pool_keeps_nothing():
    pool = MemoryPool(enabled=False)
    first = pool.allocate(100)
    pool.deallocate(first)
    assert pool.stats().pool_size == 0
    assert pool.allocate(100) is not first


def test_pool_respects_max_size():
    pool = MemoryPool(max_pool_size=256)
    buf = pool.allocate(300)
    pool.deallocate(buf)
    assert pool.stats().pool_size == 0


def test_unaligned_foreign_buffer_is_not_pooled():
    pool = MemoryPool()
    pool.deallocate(bytearray(100))
    stats = pool.stats()
    assert stats.pool_size == 0
    assert stats.total_allocated == 0


def test_clear_empties_pool():
    pool = MemoryPool()
    pool.deallocate(pool.allocate(256))
    pool.clear()
    assert pool.stats().pool_size == 0


def test_peak_usage_tracks_maximum():
    pool = MemoryPool()
    a = pool.allocate(256)
    b = pool.allocate(512)
    pool.deallocate(a)
    pool.deallocate(b)
    stats = pool.stats()
    assert stats.peak_usage == len(a) + len(b)
    assert stats.total_allocated == 0


@pytest.mark.parametrize("size", [0, -5])
def test_allocate_rejects_non_positive(size):
    with pytest.raises(ValueError):
        MemoryPool().allocate(size)


def test_default_pool_is_shared():
    observer = default_pool()
    before = observer.stats().total_allocated
    buf = default_pool().allocate(256)
    try:
        assert observer.stats().total_allocated == before + len(buf)
    finally:
        default_pool().deallocate(buf)
    assert observer.stats().total_allocated == before


def test_concurrent_use_balances():
    pool = MemoryPool()

    def work():
        for _ in range(200):
            pool.deallocate(pool.allocate(300))

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    stats = pool.stats()
    assert stats.total_allocated == 0
    assert stats.pool_size % align_size(300) == 0