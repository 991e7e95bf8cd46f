"""Fixed-size pages and the buffer frames that hold them."""

from __future__ import annotations

import struct

from wsdb.types import INVALID_FILE_ID, INVALID_PAGE_ID, PAGE_SIZE, DBError, ErrorKind

FILE_HEADER_PAGE_ID = 0

_LSN = struct.Struct("<i")
_PAGE_ID = struct.Struct("<i")
_RECORD_NUM = struct.Struct("<Q")

PAGE_LSN_OFFSET = 0
PAGE_NEXT_FREE_PAGE_ID_OFFSET = PAGE_LSN_OFFSET + _LSN.size
PAGE_RECORD_NUM_OFFSET = PAGE_NEXT_FREE_PAGE_ID_OFFSET + _PAGE_ID.size
PAGE_HEADER_SIZE = PAGE_RECORD_NUM_OFFSET + _RECORD_NUM.size


class Page:
    """A page of a file, with a small header unless it is the file header page."""

    def __init__(self) -> None:
        self._fid = INVALID_FILE_ID
        self._pid = INVALID_PAGE_ID
        self.data = bytearray(PAGE_SIZE)

    @property
    def file_id(self) -> int:
        return self._fid

    @property
    def page_id(self) -> int:
        return self._pid

    def set_file_page_id(self, fid: int, pid: int) -> None:
        """Record which file and page this buffer holds."""
        self._fid = fid
        self._pid = pid

    def _check_not_header(self, verb: str) -> None:
        if self._pid == FILE_HEADER_PAGE_ID:
            raise DBError(ErrorKind.INTERNAL, f"Can't {verb} data from file header page")

    @property
    def lsn(self) -> int:
        self._check_not_header("load")
        return _LSN.unpack_from(self.data, PAGE_LSN_OFFSET)[0]

    @lsn.setter
    def lsn(self, lsn: int) -> None:
        self._check_not_header("set")
        _LSN.pack_into(self.data, PAGE_LSN_OFFSET, lsn)

    @property
    def next_free_page_id(self) -> int:
        self._check_not_header("load")
        return _PAGE_ID.unpack_from(self.data, PAGE_NEXT_FREE_PAGE_ID_OFFSET)[0]

    @next_free_page_id.setter
    def next_free_page_id(self, page_id: int) -> None:
        self._check_not_header("set")
        _PAGE_ID.pack_into(self.data, PAGE_NEXT_FREE_PAGE_ID_OFFSET, page_id)

    @property
    def record_num(self) -> int:
        self._check_not_header("load")
        return _RECORD_NUM.unpack_from(self.data, PAGE_RECORD_NUM_OFFSET)[0]

    @record_num.setter
    def record_num(self, record_num: int) -> None:
        self._check_not_header("set")
        _RECORD_NUM.pack_into(self.data, PAGE_RECORD_NUM_OFFSET, record_num)

    def clear(self) -> None:
        """Forget the file and page ids and zero the data."""
        self._fid = INVALID_FILE_ID
        self._pid = INVALID_PAGE_ID
        self.data[:] = bytes(PAGE_SIZE)


class Frame:
    """A buffer pool slot: a page plus its pin count and dirty flag."""

    def __init__(self) -> None:
        self.page = Page()
        self.is_dirty = False
        self._pin_count = 0

    @property
    def pin_count(self) -> int:
        return self._pin_count

    @property
    def in_use(self) -> bool:
        return self._pin_count > 0

    def pin(self) -> None:
        self._pin_count += 1

    def unpin(self) -> None:
        if self._pin_count <= 0:
            raise DBError(ErrorKind.INTERNAL, "Unpin a frame with pin_count = 0")
        self._pin_count -= 1

    def reset(self) -> None:
        """Clear the page and drop all pins and the dirty flag."""
        self.page.clear()
        self.is_dirty = False
        self._pin_count = 0