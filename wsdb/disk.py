"""Opening files and reading and writing pages of them."""

from __future__ import annotations

import os
from typing import Dict, Union

from wsdb.types import INVALID_FILE_ID, PAGE_SIZE, DBError, ErrorKind

PathLike = Union[str, "os.PathLike[str]"]

_OPEN_FLAGS = os.O_RDWR | getattr(os, "O_BINARY", 0)


class DiskManager:
    """Keeps track of open files and does page-sized I/O on them."""

    def __init__(self) -> None:
        self._name_fid: Dict[str, int] = {}
        self._fid_name: Dict[int, str] = {}

    def __enter__(self) -> "DiskManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        for fid in list(self._fid_name):
            self.close_file(fid)

    @staticmethod
    def create_file(fname: PathLike) -> None:
        """Create an empty file; it must not exist yet."""
        name = os.fspath(fname)
        if DiskManager.file_exists(name):
            raise DBError(ErrorKind.FILE_EXISTS, name)
        try:
            with open(name, "wb"):
                pass
        except OSError as exc:
            raise DBError(ErrorKind.INTERNAL, "Create file failed") from exc

    @staticmethod
    def destroy_file(fname: PathLike) -> None:
        """Remove a file; it must exist."""
        name = os.fspath(fname)
        if not DiskManager.file_exists(name):
            raise DBError(ErrorKind.FILE_NOT_EXISTS, name)
        try:
            os.unlink(name)
        except OSError as exc:
            raise DBError(ErrorKind.FILE_DELETE_ERROR, name) from exc

    @staticmethod
    def file_exists(fname: PathLike) -> bool:
        return os.path.exists(os.fspath(fname))

    def open_file(self, fname: PathLike) -> int:
        """Open an existing file for reading and writing and return its id."""
        name = os.fspath(fname)
        if not self.file_exists(name):
            raise DBError(ErrorKind.FILE_NOT_EXISTS, name)
        if name in self._name_fid:
            raise DBError(ErrorKind.FILE_REOPEN, name)
        try:
            fid = os.open(name, _OPEN_FLAGS)
        except OSError as exc:
            raise DBError(ErrorKind.FILE_NOT_OPEN, name) from exc
        self._name_fid[name] = fid
        self._fid_name[fid] = name
        return fid

    def close_file(self, fid: int) -> None:
        """Close an open file and forget it."""
        if fid not in self._fid_name:
            raise DBError(ErrorKind.FILE_NOT_OPEN, f"fid: {fid}")
        del self._name_fid[self._fid_name.pop(fid)]
        os.close(fid)

    def _check_open(self, fid: int, detail: str) -> None:
        if fid not in self._fid_name:
            raise DBError(ErrorKind.FILE_NOT_OPEN, detail)

    def write_page(self, fid: int, page_id: int, data: bytes) -> None:
        """Write one page of exactly PAGE_SIZE bytes at its place in the file."""
        detail = f"fid: {fid}, page_id: {page_id}"
        self._check_open(fid, f"fid: {fid}")
        try:
            os.lseek(fid, page_id * PAGE_SIZE, os.SEEK_SET)
            written = os.write(fid, bytes(data[:PAGE_SIZE]))
        except OSError as exc:
            raise DBError(ErrorKind.FILE_WRITE_ERROR, detail) from exc
        if written != PAGE_SIZE:
            raise DBError(ErrorKind.FILE_WRITE_ERROR, detail)

    def read_page(self, fid: int, page_id: int) -> bytes:
        """Read one page; bytes past the end of the file read as zeros."""
        self._check_open(fid, f"fid: {fid}")
        try:
            os.lseek(fid, page_id * PAGE_SIZE, os.SEEK_SET)
            data = os.read(fid, PAGE_SIZE)
        except OSError as exc:
            raise DBError(ErrorKind.FILE_READ_ERROR, f"fid: {fid}, page_id: {page_id}") from exc
        return data.ljust(PAGE_SIZE, b"\0")

    def read_file(self, fid: int, size: int, offset: int, whence: int = os.SEEK_SET) -> bytes:
        """Read up to ``size`` bytes at ``offset`` relative to ``whence``."""
        self._check_open(fid, "File not Opened")
        try:
            os.lseek(fid, offset, whence)
            return os.read(fid, size)
        except OSError as exc:
            raise DBError(ErrorKind.FILE_READ_ERROR, f"fid: {fid}") from exc

    def write_file(self, fid: int, data: bytes, whence: int) -> None:
        """Write ``data`` at the start, the current position or the end of the file."""
        self._check_open(fid, "File not Opened")
        if whence not in (os.SEEK_SET, os.SEEK_CUR, os.SEEK_END):
            raise DBError(ErrorKind.INTERNAL, "Invalid Type")
        try:
            os.lseek(fid, 0, whence)
            os.write(fid, bytes(data))
        except OSError as exc:
            raise DBError(ErrorKind.FILE_WRITE_ERROR, f"fid: {fid}") from exc

    def file_id(self, fname: PathLike) -> int:
        """Id of an open file, or INVALID_FILE_ID."""
        return self._name_fid.get(os.fspath(fname), INVALID_FILE_ID)

    def file_name(self, fid: int) -> str:
        """Name of an open file."""
        try:
            return self._fid_name[fid]
        except KeyError:
            raise DBError(ErrorKind.FILE_NOT_OPEN, f"fid: {fid}") from None