import random
import threading

import pytest

from wsdb.buffer_pool import BufferPoolManager
from wsdb.disk import DiskManager
from wsdb.types import BUFFER_POOL_SIZE, INVALID_FILE_ID, DBError, ErrorKind

MAX_FILES = 11
MAX_PAGES = 64


@pytest.fixture
def disk():
    manager = DiskManager()
    yield manager
    manager.__exit__(None, None, None)


@pytest.fixture
def table_file(tmp_path):
    path = str(tmp_path / "test.tbl")
    DiskManager.create_file(path)
    return path


def _fill(page, text):
    data = text.encode()
    page.data[: len(data)] = data
    return data


def test_basic_fetch_unpin_and_dirty(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    page = pool.fetch_page(fd, 0)
    assert page.file_id == fd
    assert page.page_id == 0
    assert len(page.data) == 4096
    assert pool.unpin_page(fd, 0, True) is True
    assert pool.unpin_page(fd, 0, False) is False
    assert pool.frame(fd, 0).is_dirty is True
    assert pool.delete_page(fd, 0) is True

    for i in range(MAX_PAGES):
        page = pool.fetch_page(fd, i)
        assert page.file_id == fd
        assert page.page_id == i
        pool.unpin_page(fd, i, False)
    assert pool.delete_all_pages(fd) is True
    assert pool.frame(fd, 0) is None


def test_write_then_read_back(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    page_data = [str(i).encode() for i in range(MAX_PAGES)]
    for i in range(MAX_PAGES):
        page = pool.fetch_page(fd, i)
        assert page.page_id == i
        page.data[: len(page_data[i])] = page_data[i]
        pool.unpin_page(fd, i, True)
    for i in range(MAX_PAGES):
        page = pool.fetch_page(fd, i)
        assert page.file_id == fd
        assert page.page_id == i
        assert bytes(page.data[: len(page_data[i])]) == page_data[i]
        pool.unpin_page(fd, i, False)
    assert pool.delete_all_pages(fd) is True
    disk.close_file(fd)
    DiskManager.destroy_file(table_file)
    assert DiskManager.file_exists(table_file) is False


def test_multiple_files(disk, tmp_path):
    pool = BufferPoolManager(disk)
    names = [str(tmp_path / f"test{i}.tbl") for i in range(MAX_FILES)]
    for name in names:
        DiskManager.create_file(name)
        fd = disk.open_file(name)
        for j in range(MAX_PAGES):
            page = pool.fetch_page(fd, j)
            assert page.file_id == fd
            assert page.page_id == j
            pool.unpin_page(fd, j, False)
        pool.delete_all_pages(fd)
        disk.close_file(fd)

    rng = random.Random(7)
    file_page_data = [[str(rng.randrange(1 << 31)).encode() for _ in range(MAX_PAGES)] for _ in range(MAX_FILES)]
    for i, name in enumerate(names):
        fd = disk.open_file(name)
        for j in range(MAX_PAGES):
            page = pool.fetch_page(fd, j)
            assert page.file_id == fd
            assert page.page_id == j
            page.data[: len(file_page_data[i][j])] = file_page_data[i][j]
            pool.unpin_page(fd, j, True)
    for i, name in enumerate(names):
        fd = disk.file_id(name)
        assert fd != INVALID_FILE_ID
        for j in range(MAX_PAGES):
            page = pool.fetch_page(fd, j)
            assert page.file_id == fd
            assert page.page_id == j
            assert bytes(page.data[: len(file_page_data[i][j])]) == file_page_data[i][j]
            pool.unpin_page(fd, j, False)
    for name in names:
        fd = disk.file_id(name)
        assert pool.delete_all_pages(fd) is True
        disk.close_file(fd)
        DiskManager.destroy_file(name)
    assert not any(DiskManager.file_exists(name) for name in names)


def test_no_free_frame_when_all_pinned(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    for i in range(BUFFER_POOL_SIZE):
        pool.fetch_page(fd, i)
    with pytest.raises(DBError) as info:
        pool.fetch_page(fd, BUFFER_POOL_SIZE)
    assert info.value.kind == ErrorKind.NO_FREE_FRAME
    assert pool.unpin_page(fd, 0, False) is True
    page = pool.fetch_page(fd, BUFFER_POOL_SIZE)
    assert page.page_id == BUFFER_POOL_SIZE


def test_fetch_same_page_twice_counts_pins(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    first = pool.fetch_page(fd, 3)
    second = pool.fetch_page(fd, 3)
    assert first is second
    assert pool.frame(fd, 3).pin_count == 2
    assert pool.delete_page(fd, 3) is False
    assert pool.unpin_page(fd, 3, False) is True
    assert pool.unpin_page(fd, 3, False) is True
    assert pool.frame(fd, 3).pin_count == 0
    assert pool.delete_page(fd, 3) is True


def test_unpin_and_delete_of_absent_page(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    assert pool.unpin_page(fd, 5, True) is False
    assert pool.delete_page(fd, 5) is True
    assert pool.flush_page(fd, 5) is False
    assert pool.frame(fd, 5) is None


def test_flush_page_writes_to_disk(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    page = pool.fetch_page(fd, 2)
    data = _fill(page, "hello page")
    pool.unpin_page(fd, 2, True)
    assert pool.flush_page(fd, 2) is True
    assert pool.frame(fd, 2).is_dirty is False
    assert disk.read_page(fd, 2).startswith(data)


def test_flush_all_pages_writes_every_page(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    written = {}
    for pid in range(4):
        page = pool.fetch_page(fd, pid)
        written[pid] = _fill(page, f"page-{pid}")
        pool.unpin_page(fd, pid, True)
    assert pool.flush_all_pages(fd) is True
    for pid, data in written.items():
        assert pool.frame(fd, pid).is_dirty is False
        assert disk.read_page(fd, pid).startswith(data)


def test_delete_page_writes_dirty_data(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    page = pool.fetch_page(fd, 1)
    data = _fill(page, "persisted")
    pool.unpin_page(fd, 1, True)
    assert pool.delete_page(fd, 1) is True
    assert pool.frame(fd, 1) is None
    assert disk.read_page(fd, 1).startswith(data)


def test_eviction_writes_back_dirty_pages(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    total = BUFFER_POOL_SIZE * 3
    for pid in range(total):
        page = pool.fetch_page(fd, pid)
        _fill(page, f"evict-{pid}")
        pool.unpin_page(fd, pid, True)
    pool.delete_all_pages(fd)
    for pid in range(total):
        assert disk.read_page(fd, pid).startswith(f"evict-{pid}".encode())


def test_lru_k_replacer_pool(disk, table_file):
    pool = BufferPoolManager(disk, replacer_lru_k=3, replacer="LRUKReplacer")
    fd = disk.open_file(table_file)
    for pid in range(MAX_PAGES):
        page = pool.fetch_page(fd, pid)
        _fill(page, f"k-{pid}")
        pool.unpin_page(fd, pid, True)
    for pid in range(MAX_PAGES):
        page = pool.fetch_page(fd, pid)
        assert bytes(page.data).startswith(f"k-{pid}".encode())
        pool.unpin_page(fd, pid, False)


def test_unknown_replacer_is_rejected(disk):
    with pytest.raises(DBError) as info:
        BufferPoolManager(disk, replacer="Clock")
    assert info.value.kind == ErrorKind.INTERNAL


def _fetch_retrying(pool, fd, pid):
    while True:
        try:
            return pool.fetch_page(fd, pid)
        except DBError as exc:
            if exc.kind != ErrorKind.NO_FREE_FRAME:
                raise


def test_multi_thread_write_and_read(disk, table_file):
    pool = BufferPoolManager(disk)
    fd = disk.open_file(table_file)
    threads_num = 4
    pages_per_thread = MAX_PAGES // threads_num
    errors = []

    def writer(t):
        try:
            for pid in range(t * pages_per_thread, (t + 1) * pages_per_thread):
                page = _fetch_retrying(pool, fd, pid)
                if page.page_id != pid or page.file_id != fd:
                    errors.append(("write", pid, page.page_id))
                _fill(page, f"thread-{t}-page-{pid}")
                pool.unpin_page(fd, pid, True)
        except Exception as exc:  # collected and asserted in the main thread
            errors.append(exc)

    def reader(t):
        try:
            for pid in range(t * pages_per_thread, (t + 1) * pages_per_thread):
                page = _fetch_retrying(pool, fd, pid)
                if not bytes(page.data).startswith(f"thread-{t}-page-{pid}".encode()):
                    errors.append(("read", pid))
                pool.unpin_page(fd, pid, False)
        except Exception as exc:
            errors.append(exc)

    for target in (writer, reader):
        workers = [threading.Thread(target=target, args=(t,)) for t in range(threads_num)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
    assert errors == []
    assert pool.delete_all_pages(fd) is True
    for pid in range(threads_num * pages_per_thread):
        t = pid // pages_per_thread
        assert disk.read_page(fd, pid).startswith(f"thread-{t}-page-{pid}".encode())