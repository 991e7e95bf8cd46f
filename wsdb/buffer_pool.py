"""A fixed-size pool of page frames cached in memory in front of the disk."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from wsdb.disk import DiskManager
from wsdb.page import Frame, Page
from wsdb.replacer import LRUKReplacer, LRUReplacer, Replacer
from wsdb.types import BUFFER_POOL_SIZE, REPLACER, DBError, ErrorKind

_PageKey = Tuple[int, int]


def _make_replacer(name: str, lru_k: int) -> Replacer:
    if name == "LRUReplacer":
        return LRUReplacer()
    if name == "LRUKReplacer":
        return LRUKReplacer(lru_k)
    raise DBError(ErrorKind.INTERNAL, f"Unknown replacer: {name}")


class BufferPoolManager:
    """Caches pages of open files in a fixed number of frames."""

    def __init__(
        self,
        disk_manager: DiskManager,
        log_manager: object = None,
        replacer_lru_k: int = 0,
        replacer: str = REPLACER,
    ) -> None:
        self._lock = threading.Lock()
        self._disk = disk_manager
        self._log_manager = log_manager
        self._replacer = _make_replacer(replacer, replacer_lru_k)
        self._frames: List[Frame] = [Frame() for _ in range(BUFFER_POOL_SIZE)]
        self._free_list: Deque[int] = deque(range(BUFFER_POOL_SIZE))
        self._lookup: Dict[_PageKey, int] = {}

    def fetch_page(self, fid: int, pid: int) -> Page:
        """Return the page, loading it from disk if needed, and pin it.

        Raises DBError(NO_FREE_FRAME) when every frame is in use.
        """
        with self._lock:
            frame_id = self._lookup.get((fid, pid))
            if frame_id is not None:
                frame = self._frames[frame_id]
                frame.pin()
                self._replacer.pin(frame_id)
                self._discard_free(frame_id)
                return frame.page
            frame_id = self._available_frame()
            self._update_frame(frame_id, fid, pid)
            self._lookup[(fid, pid)] = frame_id
            return self._frames[frame_id].page

    def unpin_page(self, fid: int, pid: int, is_dirty: bool) -> bool:
        """Drop one pin on the page and set its dirty flag.

        Returns False if the page is not buffered or not pinned.
        """
        with self._lock:
            frame_id = self._lookup.get((fid, pid))
            if frame_id is None:
                return False
            frame = self._frames[frame_id]
            if not frame.in_use:
                return False
            frame.unpin()
            if not frame.in_use:
                self._free_list.append(frame_id)
            self._replacer.unpin(frame_id)
            frame.is_dirty = is_dirty
            return True

    def delete_page(self, fid: int, pid: int) -> bool:
        """Write back and drop the page from the pool.

        Returns True if the page is gone, False if it is still pinned.
        """
        with self._lock:
            key = (fid, pid)
            frame_id = self._lookup.get(key)
            if frame_id is None:
                return True
            frame = self._frames[frame_id]
            if frame.in_use:
                return False
            if frame.is_dirty:
                self._disk.write_page(fid, pid, frame.page.data)
            frame.reset()
            self._replacer.unpin(frame_id)
            del self._lookup[key]
            return True

    def delete_all_pages(self, fid: int) -> bool:
        """Drop every buffered page of a file; False if any of them is pinned."""
        with self._lock:
            pids = [key_pid for key_fid, key_pid in self._lookup if key_fid == fid]
        result = True
        for pid in pids:
            result &= self.delete_page(fid, pid)
        return result

    def flush_page(self, fid: int, pid: int) -> bool:
        """Write the page to disk if dirty; False if it is not buffered."""
        with self._lock:
            frame_id = self._lookup.get((fid, pid))
            if frame_id is None:
                return False
            frame = self._frames[frame_id]
            if frame.is_dirty:
                self._disk.write_page(fid, pid, frame.page.data)
                frame.is_dirty = False
            return True

    def flush_all_pages(self, fid: int) -> bool:
        """Write every dirty buffered page of a file to disk."""
        with self._lock:
            pids = [key_pid for key_fid, key_pid in self._lookup if key_fid == fid]
        result = True
        for pid in pids:
            result &= self.flush_page(fid, pid)
        return result

    def frame(self, fid: int, pid: int) -> Optional[Frame]:
        """The frame holding the page, or None if it is not buffered."""
        frame_id = self._lookup.get((fid, pid))
        return None if frame_id is None else self._frames[frame_id]

    def _discard_free(self, frame_id: int) -> None:
        try:
            self._free_list.remove(frame_id)
        except ValueError:
            pass

    def _available_frame(self) -> int:
        if self._free_list:
            return self._free_list.popleft()
        frame_id = self._replacer.victim()
        if frame_id is None:
            raise DBError(ErrorKind.NO_FREE_FRAME)
        return frame_id

    def _update_frame(self, frame_id: int, fid: int, pid: int) -> None:
        frame = self._frames[frame_id]
        page = frame.page
        previous = (page.file_id, page.page_id)
        if frame.is_dirty:
            self._disk.write_page(page.file_id, page.page_id, page.data)
        page.clear()
        page.set_file_page_id(fid, pid)
        page.data[:] = self._disk.read_page(fid, pid)
        frame.pin()
        self._replacer.pin(frame_id)
        self._discard_free(frame_id)
        self._lookup.pop(previous, None)
        self._lookup[(fid, pid)] = frame_id