"""Comparison conditions used in filters, joins and index scans."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

from wsdb.meta import RTField
from wsdb.types import CompOp, DBError, ErrorKind, comp_op_symbol
from wsdb.value import Value


class CondRvalType(IntEnum):
    """What stands on the right-hand side of a condition."""

    NONE = 0
    VALUE = 1
    COLUMN = 2
    SUBQUERY = 3

    def __str__(self) -> str:
        return self.name.capitalize()


class Condition:
    """A comparison of a column with a value, another column or a subquery."""

    def __init__(
        self,
        op: CompOp = CompOp.OP_EQ,
        l_col: Optional[RTField] = None,
        rhs_type: CondRvalType = CondRvalType.NONE,
        r_col: Optional[RTField] = None,
        r_val: Optional[Value] = None,
        subquery_id: int = -1,
    ) -> None:
        self._op = op
        self._l_col = l_col if l_col is not None else RTField()
        self._rhs_type = rhs_type
        self._r_col = r_col if r_col is not None else RTField()
        self._r_val = r_val
        self._subquery_id = subquery_id

    @classmethod
    def with_value(cls, op: CompOp, l_col: RTField, value: Value) -> "Condition":
        """Compare a column with a constant value."""
        return cls(op, l_col, CondRvalType.VALUE, r_val=value)

    @classmethod
    def with_column(cls, op: CompOp, l_col: RTField, r_col: RTField) -> "Condition":
        """Compare a column with another column."""
        return cls(op, l_col, CondRvalType.COLUMN, r_col=r_col)

    @classmethod
    def with_subquery(cls, op: CompOp, l_col: RTField, subquery_id: int) -> "Condition":
        """Compare a column with the result of a subquery."""
        return cls(op, l_col, CondRvalType.SUBQUERY, subquery_id=subquery_id)

    @property
    def op(self) -> CompOp:
        return self._op

    @property
    def l_col(self) -> RTField:
        return self._l_col

    @property
    def rhs_type(self) -> CondRvalType:
        return self._rhs_type

    @property
    def r_col(self) -> RTField:
        if self._rhs_type != CondRvalType.COLUMN:
            raise DBError(ErrorKind.INTERNAL, f"should be: {self._rhs_type}")
        return self._r_col

    @property
    def r_val(self) -> Value:
        if self._rhs_type != CondRvalType.VALUE:
            raise DBError(ErrorKind.INTERNAL, f"should be: {self._rhs_type}")
        return self._r_val

    @property
    def subquery_id(self) -> int:
        if self._rhs_type != CondRvalType.SUBQUERY:
            raise DBError(ErrorKind.INTERNAL, "should be subquery")
        return self._subquery_id

    def __str__(self) -> str:
        text = f"{self._l_col} {comp_op_symbol(self._op)} "
        if self._rhs_type == CondRvalType.VALUE:
            text += str(self._r_val)
        elif self._rhs_type == CondRvalType.COLUMN:
            text += str(self._r_col)
        elif self._rhs_type == CondRvalType.SUBQUERY:
            text += f"subquery {self._subquery_id}"
        return text

    def __repr__(self) -> str:
        return f"Condition({self})"