"""Basic identifiers, enumerations, configuration constants and the error type."""

from __future__ import annotations

from enum import Enum, IntEnum, auto

# Identifier sentinels
INVALID_PAGE_ID = -1
INVALID_SLOT_ID = -1
INVALID_TABLE_ID = -1
INVALID_FRAME_ID = -1
INVALID_TXN_ID = -1
INVALID_FILE_ID = -1

# Storage
PAGE_SIZE = 4096
BUFFER_POOL_SIZE = 8
REPLACER = "LRUReplacer"
REPLACER_LRU_K = 10

# System
MAX_REC_SIZE = 1024

# Executor: sort buffer of 64MB and at most 10 temporary files in a merge
SORT_BUFFER_SIZE = 64 * 1024 * 1024
SORT_WAY_NUM = 10

DB_SUFFIX = ".db"
TAB_SUFFIX = ".tab"
IDX_SUFFIX = ".idx"
TMP_SUFFIX = ".tmp"

DB_DIR = "db"
TAB_DIR = "tab"
IDX_DIR = "idx"
TMP_DIR = ".tmp"

DATA_DIR = "./data"


class _NamedEnum(IntEnum):
    """Integer enumeration whose string form is the member name."""

    def __str__(self) -> str:
        return self.name


class StorageModel(_NamedEnum):
    NARY_MODEL = 0
    PAX_MODEL = 1


class FieldType(_NamedEnum):
    TYPE_NULL = 0
    TYPE_BOOL = 1
    TYPE_INT = 2
    TYPE_FLOAT = 3
    TYPE_STRING = 4
    TYPE_ARRAY = 5


class AggType(_NamedEnum):
    AGG_NONE = 0
    AGG_COUNT = 1
    AGG_COUNT_STAR = 2
    AGG_SUM = 3
    AGG_AVG = 4
    AGG_MAX = 5
    AGG_MIN = 6


class JoinType(_NamedEnum):
    INNER_JOIN = 0
    OUTER_JOIN = 1


class JoinStrategy(_NamedEnum):
    NESTED_LOOP = 0
    SORT_MERGE = 1


class OrderByDir(_NamedEnum):
    ASC = 0
    DESC = 1


class CompOp(_NamedEnum):
    OP_EQ = 0
    OP_NE = 1
    OP_LT = 2
    OP_GT = 3
    OP_LE = 4
    OP_GE = 5
    OP_IN = 6
    OP_RNG = 7


_AGG_NAMES = {
    AggType.AGG_MIN: "MIN",
    AggType.AGG_MAX: "MAX",
    AggType.AGG_SUM: "SUM",
    AggType.AGG_AVG: "AVG",
    AggType.AGG_COUNT: "COUNT",
    AggType.AGG_COUNT_STAR: "COUNT(*)",
}

_COMP_OP_SYMBOLS = {
    CompOp.OP_EQ: "=",
    CompOp.OP_NE: "<>",
    CompOp.OP_LT: "<",
    CompOp.OP_GT: ">",
    CompOp.OP_LE: "<=",
    CompOp.OP_GE: ">=",
    CompOp.OP_IN: "IN",
    CompOp.OP_RNG: "RANGE",
}


def agg_type_name(agg_type: AggType) -> str:
    """Return the SQL name of an aggregate, or "UNKNOWN" for none."""
    return _AGG_NAMES.get(agg_type, "UNKNOWN")


def comp_op_symbol(op: CompOp) -> str:
    """Return the SQL symbol of a comparison operator."""
    return _COMP_OP_SYMBOLS.get(op, "UNKNOWN")


class ErrorKind(Enum):
    """Kinds of failures reported by the database."""

    NOT_IMPLEMENTED = auto()
    INTERNAL = auto()
    NO_FREE_FRAME = auto()
    FILE_EXISTS = auto()
    FILE_NOT_EXISTS = auto()
    FILE_DELETE_ERROR = auto()
    FILE_REOPEN = auto()
    FILE_NOT_OPEN = auto()
    FILE_READ_ERROR = auto()
    FILE_WRITE_ERROR = auto()
    TYPE_MISMATCH = auto()
    UNSUPPORTED_OP = auto()
    UNEXPECTED_NULL = auto()
    DB_NOT_OPEN = auto()
    GRAMMAR_ERROR = auto()
    TABLE_MISS = auto()
    FIELD_MISS = auto()
    RECORD_MISS = auto()


class DBError(Exception):
    """An error raised by the database, tagged with its kind."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.name}: {detail}" if detail else kind.name)