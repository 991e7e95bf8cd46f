"""Frame replacement policies for the buffer pool: LRU and LRU-K."""

from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from typing import Deque, Dict, Optional

from wsdb.types import BUFFER_POOL_SIZE


class Replacer(ABC):
    """Tracks frame usage and picks frames to evict."""

    @abstractmethod
    def victim(self) -> Optional[int]:
        """Remove and return the frame chosen for eviction, or None if there is none."""

    @abstractmethod
    def pin(self, frame_id: int) -> None:
        """Mark a frame as in use; it is not evicted until unpinned."""

    @abstractmethod
    def unpin(self, frame_id: int) -> None:
        """Mark a frame as evictable."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of frames that can currently be evicted."""


class LRUReplacer(Replacer):
    """Evicts the least recently pinned evictable frame."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # frame id -> evictable; ordered from least to most recently pinned
        self._frames: "OrderedDict[int, bool]" = OrderedDict()
        self._evictable = 0
        self._max_size = BUFFER_POOL_SIZE

    def victim(self) -> Optional[int]:
        with self._lock:
            for frame_id, evictable in self._frames.items():
                if evictable:
                    del self._frames[frame_id]
                    self._evictable -= 1
                    return frame_id
            return None

    def pin(self, frame_id: int) -> None:
        with self._lock:
            if frame_id in self._frames:
                if self._frames.pop(frame_id):
                    self._evictable -= 1
            elif len(self._frames) == self._max_size:
                self._drop_evictable()
            self._frames[frame_id] = False

    def _drop_evictable(self) -> None:
        # Walks from the least recently used end; after each removal the
        # frame that follows it is passed over.
        order = list(self._frames)
        idx = 0
        while idx < len(order):
            frame_id = order[idx]
            if self._frames[frame_id]:
                del self._frames[frame_id]
                self._evictable -= 1
                idx += 2
            else:
                idx += 1

    def unpin(self, frame_id: int) -> None:
        with self._lock:
            if self._frames.get(frame_id) is False:
                self._frames[frame_id] = True
                self._evictable += 1

    def __len__(self) -> int:
        with self._lock:
            return self._evictable


class _LRUKNode:
    """Access history of one frame, keeping the last k timestamps."""

    __slots__ = ("frame_id", "k", "history", "evictable")

    def __init__(self, frame_id: int, k: int) -> None:
        self.frame_id = frame_id
        self.k = k
        self.history: Deque[int] = deque(maxlen=k)
        self.evictable = False

    def add_history(self, ts: int) -> None:
        self.history.append(ts)

    def backward_k_distance(self, cur_ts: int) -> float:
        """Time since the k-th most recent access; infinite with fewer than k accesses."""
        if len(self.history) < self.k or not self.history:
            return math.inf
        return cur_ts - self.history[0]

    def first_time(self) -> float:
        """Oldest remembered access time, or infinity if there is none."""
        return self.history[0] if self.history else math.inf


class LRUKReplacer(Replacer):
    """Evicts the frame with the largest backward k-distance.

    Frames accessed fewer than k times have an infinite distance; among them
    the one whose oldest remembered access is earliest goes first.
    """

    def __init__(self, k: int) -> None:
        self._lock = threading.Lock()
        self._nodes: Dict[int, _LRUKNode] = {}
        self._cur_ts = 0
        self._evictable = 0
        self._max_size = BUFFER_POOL_SIZE
        self._k = k

    def victim(self) -> Optional[int]:
        with self._lock:
            return self._victim()

    def _victim(self) -> Optional[int]:
        if self._evictable == 0:
            return None
        infinite = []
        chosen: Optional[int] = None
        max_distance = 0
        for frame_id, node in self._nodes.items():
            if not node.evictable:
                continue
            distance = node.backward_k_distance(self._cur_ts)
            if distance == math.inf:
                infinite.append(frame_id)
            elif distance > max_distance:
                max_distance = distance
                chosen = frame_id
        if infinite:
            chosen = min(infinite, key=lambda fid: self._nodes[fid].first_time())
        if chosen is None:
            return None
        del self._nodes[chosen]
        self._evictable -= 1
        return chosen

    def pin(self, frame_id: int) -> None:
        with self._lock:
            self._cur_ts += 1
            node = self._nodes.get(frame_id)
            if node is not None:
                if node.evictable:
                    node.evictable = False
                    self._evictable -= 1
            else:
                if len(self._nodes) == self._max_size:
                    self._victim()
                node = _LRUKNode(frame_id, self._k)
                self._nodes[frame_id] = node
            node.add_history(self._cur_ts)

    def unpin(self, frame_id: int) -> None:
        with self._lock:
            self._cur_ts += 1
            node = self._nodes.get(frame_id)
            if node is not None and not node.evictable:
                node.evictable = True
                self._evictable += 1

    def __len__(self) -> int:
        with self._lock:
            return self._evictable