# wsdb

The storage core of a small relational database engine. It is written in plain
Python and has no third-party dependencies.

## Modules

- `wsdb.types` holds the engine's enumerations: `FieldType`, `AggType`,
  `CompOp`, `JoinType`, `JoinStrategy`, `OrderByDir` and `StorageModel`. It
  also holds the storage constants, such as `PAGE_SIZE` (4096),
  `BUFFER_POOL_SIZE` (8) and the `INVALID_*_ID` sentinels. The two helpers
  `agg_type_name` and `comp_op_symbol` live here too.
  - There is a single exception type, `DBError`. It carries an `ErrorKind` in
    its `kind` attribute and a message in `detail`.
- `wsdb.bitmap` provides bit maps over `bytearray`s, least significant bit
  first. Its functions are `bitmap_size`, `set_bit`, `get_bit`, `clear`, `fill`
  and `find_first`.
- `wsdb.rid` provides `RID`, a frozen record identifier made of a page id and
  a slot id. `INVALID_RID` is the identifier that points nowhere.
- `wsdb.meta` provides three classes:
  - `FieldSchema` describes a stored column.
  - `RTField` is a field as used in a query, with an optional alias and aggregate.
  - `TableHeader` holds a table's header fields.
- `wsdb.value` provides typed values: `IntValue` (32-bit, wraps around),
  `FloatValue` (single precision), `BoolValue`, `StringValue` (cut at the first
  NUL) and `ArrayValue`.
  - Comparisons follow SQL null rules: any comparison with a null is false,
    except that null equals null. Values of different types raise
    `DBError(TYPE_MISMATCH)`.
  - `+=` and `/=` support aggregation on int, float and array values; `+=` also
    works on strings.
  - The helpers are `value_max`, `value_min`, `create_value` (decodes
    little-endian stored bytes), `create_null_value`, `align_types` and
    `cast_to`.
- `wsdb.condition` provides `Condition`, a comparison whose right-hand side is
  a value, a column or a subquery id. You build one with `with_value`,
  `with_column` or `with_subquery`. Its `CondRvalType` records which of the
  three it holds.
- `wsdb.page` provides two classes:
  - `Page` is a `PAGE_SIZE` byte buffer. Its header fields `lsn`,
    `next_free_page_id` and `record_num` are exposed as properties. Reading
    them on page 0, the file header page, raises `DBError`.
  - `Frame` is a buffer slot with a pin count and a dirty flag.
- `wsdb.disk` provides `DiskManager`. It creates, removes, opens and closes
  files, and reads and writes whole pages by file id. Reading past the end of a
  file gives zeros. Used as a context manager, it closes every file it still
  has open on exit.
- `wsdb.replacer` provides the eviction policies behind the abstract
  `Replacer`:
  - `LRUReplacer` evicts the least recently pinned evictable frame.
  - `LRUKReplacer(k)` evicts the frame with the largest backward k-distance.
    Frames with fewer than k accesses count as infinitely distant, and among
    those the earliest accessed goes first.
  - `victim()` returns a frame id, or `None` when nothing is evictable.
    `len(replacer)` is the number of evictable frames.
- `wsdb.buffer_pool` provides `BufferPoolManager`, which caches pages of open
  files in `BUFFER_POOL_SIZE` frames.
  - Its methods are `fetch_page`, `unpin_page`, `delete_page`,
    `delete_all_pages`, `flush_page`, `flush_all_pages` and `frame`.
  - The policy is chosen with `replacer="LRUReplacer"` (the default) or
    `replacer="LRUKReplacer"` together with `replacer_lru_k`.
  - When every frame is pinned, `fetch_page` raises `DBError` with kind
    `ErrorKind.NO_FREE_FRAME`.

## Installing

```
pip install .
```

## Example

```python
from wsdb.disk import DiskManager
from wsdb.buffer_pool import BufferPoolManager

DiskManager.create_file("example.tbl")
disk = DiskManager()
pool = BufferPoolManager(disk)

fid = disk.open_file("example.tbl")
page = pool.fetch_page(fid, 0)
page.data[:5] = b"hello"
pool.unpin_page(fid, 0, True)
pool.flush_page(fid, 0)

pool.delete_all_pages(fid)
disk.close_file(fid)
DiskManager.destroy_file("example.tbl")
```

A failed operation raises `wsdb.types.DBError`. For example, opening a missing
file raises it with kind `ErrorKind.FILE_NOT_EXISTS`, and opening the same file
twice raises `ErrorKind.FILE_REOPEN`.

## What it does not do

This package stops at values, pages, files and the buffer pool. It has none of
the following:

- tables or records laid out in pages;
- indexes;
- an SQL parser, planner or query executor;
- transactions or logging;
- a server or a command-line shell.

The `log_manager` argument of `BufferPoolManager` is accepted but not used.

## Running the tests

```
pip install ".[test]"
pytest
```