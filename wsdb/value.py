"""Typed scalar and array values with SQL-style null handling."""

from __future__ import annotations

import math
import struct
from typing import Iterable, Optional, Union

from wsdb.types import DBError, ErrorKind, FieldType

_INT_SIZE = 4
_FLOAT_SIZE = 4
_BOOL_SIZE = 1


def _to_int32(number: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    return ((int(number) + 2**31) % 2**32) - 2**31


def _to_float32(number: float) -> float:
    """Round a number to single precision."""
    number = float(number)
    if math.isnan(number) or math.isinf(number):
        return number
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _trunc_div(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def _check_same_type(lval: "Value", rval: "Value") -> None:
    if lval.type != rval.type:
        raise DBError(ErrorKind.TYPE_MISMATCH, f"Type mismatch: {lval.type.name} != {rval.type.name}")


class Value:
    """A typed value that may be null."""

    def __init__(self, field_type: FieldType, size: int, is_null: bool) -> None:
        self.type = field_type
        self._size = size
        self.is_null = is_null

    @property
    def size(self) -> int:
        return self._size

    # Comparisons: any comparison with a null is false, except null == null.

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        if self.is_null and other.is_null:
            return True
        return not self.is_null and not other.is_null and self.value == other.value

    def __lt__(self, other: "Value") -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        return not self.is_null and not other.is_null and self.value < other.value

    def __gt__(self, other: "Value") -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        return not self.is_null and not other.is_null and self.value > other.value

    def __le__(self, other: "Value") -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return not self.is_null and not other.is_null and not self > other

    def __ge__(self, other: "Value") -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return not self.is_null and not other.is_null and not self < other

    __hash__ = None  # values are mutable

    def __iadd__(self, other: "Value") -> "Value":
        self._accumulate(other)
        return self

    def __itruediv__(self, k: int) -> "Value":
        self._divide(k)
        return self

    def _accumulate(self, other: "Value") -> None:
        raise DBError(ErrorKind.UNSUPPORTED_OP, self.type.name)

    def _divide(self, k: int) -> None:
        raise DBError(ErrorKind.UNSUPPORTED_OP, self.type.name)

    def _copy_from(self, other: "Value") -> None:
        self.is_null = other.is_null
        self._size = other._size

    def __str__(self) -> str:
        raise DBError(ErrorKind.INTERNAL, "never reach here")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class IntValue(Value):
    """A signed 32-bit integer."""

    def __init__(self, value: int = 0, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_INT, _INT_SIZE, is_null)
        self.value = value

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        self._value = _to_int32(value)

    def _accumulate(self, other: Value) -> None:
        _check_same_type(self, other)
        if self.is_null:
            self._copy_from(other)
            self.value = other.value
        else:
            self.value = self._value + other.value

    def _divide(self, k: int) -> None:
        if self.is_null:
            return
        if k == 0:
            raise DBError(ErrorKind.UNEXPECTED_NULL, "Divide by zero")
        self.value = _trunc_div(self._value, k)

    def __str__(self) -> str:
        return "(null)" if self.is_null else str(self._value)


class FloatValue(Value):
    """A single-precision floating point number."""

    def __init__(self, value: float = 0.0, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_FLOAT, _FLOAT_SIZE, is_null)
        self.value = value

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, value: float) -> None:
        self._value = _to_float32(value)

    def _accumulate(self, other: Value) -> None:
        _check_same_type(self, other)
        if self.is_null:
            self._copy_from(other)
            self.value = other.value
        else:
            self.value = self._value + other.value

    def _divide(self, k: int) -> None:
        if self.is_null:
            return
        if k == 0:
            raise DBError(ErrorKind.UNEXPECTED_NULL, "Divide by zero")
        self.value = self._value / float(k)

    def __str__(self) -> str:
        return "(null)" if self.is_null else f"{self._value:.6f}"


class BoolValue(Value):
    """A boolean."""

    def __init__(self, value: bool = False, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_BOOL, _BOOL_SIZE, is_null)
        self.value = bool(value)

    def __str__(self) -> str:
        return "(null)" if self.is_null else ("1" if self.value else "0")


def _clean_text(raw: bytes, size: Optional[int]) -> str:
    raw = raw.split(b"\0", 1)[0]
    if size is not None:
        raw = raw[:size]
    return raw.decode("utf-8", errors="surrogateescape")


class StringValue(Value):
    """A character string, cut at the first NUL character."""

    def __init__(
        self,
        value: Union[str, bytes] = "",
        size: Optional[int] = None,
        is_null: bool = False,
    ) -> None:
        super().__init__(FieldType.TYPE_STRING, 0, is_null)
        raw = value.encode("utf-8", errors="surrogateescape") if isinstance(value, str) else bytes(value)
        self._value = _clean_text(raw, size)

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: Union[str, bytes]) -> None:
        raw = value.encode("utf-8", errors="surrogateescape") if isinstance(value, str) else bytes(value)
        self._value = _clean_text(raw, None)

    @property
    def size(self) -> int:
        return len(self._value.encode("utf-8", errors="surrogateescape"))

    def _accumulate(self, other: Value) -> None:
        _check_same_type(self, other)
        if self.is_null:
            self.is_null = other.is_null
            self._value = other.value
        else:
            self.value = self._value + other.value

    def __str__(self) -> str:
        return "(null)" if self.is_null else self._value


class ArrayValue(Value):
    """An ordered collection of values."""

    def __init__(self, values: Iterable[Value] = (), is_null: bool = False) -> None:
        values = list(values)
        super().__init__(FieldType.TYPE_ARRAY, sum(v.size for v in values), is_null)
        self.values = values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        if self.is_null and other.is_null:
            return True
        if self.is_null or other.is_null:
            return False
        if len(self.values) != len(other.values):
            return False
        return all(mine == theirs for mine, theirs in zip(self.values, other.values))

    def __lt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        if self.is_null or other.is_null:
            return False
        if len(self.values) != len(other.values):
            return len(self.values) < len(other.values)
        return any(mine < theirs for mine, theirs in zip(self.values, other.values))

    def __gt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        _check_same_type(self, other)
        if self.is_null or other.is_null:
            return False
        if len(self.values) != len(other.values):
            return len(self.values) > len(other.values)
        return any(mine > theirs for mine, theirs in zip(self.values, other.values))

    __hash__ = None

    def _accumulate(self, other: Value) -> None:
        _check_same_type(self, other)
        if self.is_null:
            self._copy_from(other)
            self.values = list(other.values)
            return
        if len(self.values) != len(other.values):
            raise DBError(ErrorKind.TYPE_MISMATCH, f"sizes: {len(self.values)}, {len(other.values)}")
        for mine, theirs in zip(self.values, other.values):
            mine._accumulate(theirs)

    def _divide(self, k: int) -> None:
        for item in self.values:
            item._divide(k)

    def contains(self, value: Value) -> bool:
        """Whether any element equals ``value``."""
        return any(item == value for item in self.values)

    def append(self, value: Value) -> None:
        """Add an element at the end."""
        self.values.append(value)
        self._size += value.size

    def __len__(self) -> int:
        return len(self.values)

    def __str__(self) -> str:
        if self.is_null:
            return "(null)"
        return "[" + ", ".join(str(item) for item in self.values) + "]"


def value_max(lval: Value, rval: Value) -> Value:
    """The larger of two values; a null loses to anything."""
    if lval.is_null:
        return rval
    if rval.is_null:
        return lval
    return lval if lval > rval else rval


def value_min(lval: Value, rval: Value) -> Value:
    """The smaller of two values; a null loses to anything."""
    if lval.is_null:
        return rval
    if rval.is_null:
        return lval
    return lval if lval < rval else rval


def create_value(field_type: FieldType, data: bytes, size: Optional[int] = None) -> Value:
    """Decode a value of the given type from its stored bytes."""
    if field_type == FieldType.TYPE_BOOL:
        return BoolValue(data[0] != 0)
    if field_type == FieldType.TYPE_INT:
        return IntValue(struct.unpack_from("<i", data)[0])
    if field_type == FieldType.TYPE_FLOAT:
        return FloatValue(struct.unpack_from("<f", data)[0])
    if field_type == FieldType.TYPE_STRING:
        return StringValue(bytes(data), size)
    raise DBError(ErrorKind.INTERNAL, "Unsupported field type")


def create_null_value(field_type: FieldType) -> Value:
    """A null value of the given type."""
    if field_type == FieldType.TYPE_INT:
        return IntValue(0, True)
    if field_type == FieldType.TYPE_FLOAT:
        return FloatValue(0.0, True)
    if field_type == FieldType.TYPE_BOOL:
        return BoolValue(False, True)
    if field_type == FieldType.TYPE_STRING:
        return StringValue("", 0, True)
    if field_type == FieldType.TYPE_ARRAY:
        return ArrayValue([], True)
    raise DBError(ErrorKind.INTERNAL, "Unknown FieldType")


def align_types(lval: Value, rval: Value) -> tuple[Value, Value]:
    """Bring two values to a common type, widening int to float."""
    if lval.type == rval.type:
        return lval, rval
    if lval.type == FieldType.TYPE_INT and rval.type == FieldType.TYPE_FLOAT:
        return FloatValue(float(lval.value)), rval
    if lval.type == FieldType.TYPE_FLOAT and rval.type == FieldType.TYPE_INT:
        return lval, FloatValue(float(rval.value))
    raise DBError(ErrorKind.TYPE_MISMATCH, f"Type mismatch: {lval.type.name} != {rval.type.name}")


def cast_to(value: Value, field_type: FieldType) -> Value:
    """Convert between int and float; other conversions are errors."""
    if value.type == field_type:
        return value
    mismatch = DBError(ErrorKind.TYPE_MISMATCH, f"Type mismatch {value.type.name} != {field_type.name}")
    if value.type == FieldType.TYPE_INT:
        if field_type != FieldType.TYPE_FLOAT:
            raise mismatch
        if value.is_null:
            return create_null_value(field_type)
        return FloatValue(float(value.value))
    if value.type == FieldType.TYPE_FLOAT:
        if field_type != FieldType.TYPE_INT:
            raise mismatch
        if value.is_null:
            return create_null_value(field_type)
        return IntValue(int(value.value))
    raise mismatch