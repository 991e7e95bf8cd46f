import copy

import pytest

from wsdb.condition import CondRvalType, Condition
from wsdb.meta import FieldSchema, RTField
from wsdb.types import CompOp, DBError, FieldType
from wsdb.value import IntValue


def _field(name, table_id=1):
    return RTField(FieldSchema(table_id=table_id, field_name=name, field_size=4, field_type=FieldType.TYPE_INT))


def test_rval_type_names_of_built_conditions():
    left = _field("a")
    conds = [
        Condition(),
        Condition.with_value(CompOp.OP_EQ, left, IntValue(1)),
        Condition.with_column(CompOp.OP_EQ, left, _field("b", 2)),
        Condition.with_subquery(CompOp.OP_IN, left, 1),
    ]
    assert [str(c.rhs_type) for c in conds] == ["None", "Value", "Column", "Subquery"]


def test_default_condition_has_no_rhs():
    cond = Condition()
    assert cond.rhs_type == CondRvalType.NONE
    assert cond.op == CompOp.OP_EQ
    with pytest.raises(DBError):
        _ = cond.subquery_id


def test_with_value_exposes_value():
    left = _field("a")
    value = IntValue(5)
    cond = Condition.with_value(CompOp.OP_LT, left, value)
    assert cond.rhs_type == CondRvalType.VALUE
    assert cond.op == CompOp.OP_LT
    assert cond.l_col == left
    assert cond.r_val is value


def test_with_value_rejects_other_accessors():
    cond = Condition.with_value(CompOp.OP_EQ, _field("a"), IntValue(1))
    with pytest.raises(DBError):
        _ = cond.r_col
    with pytest.raises(DBError):
        _ = cond.subquery_id
    assert str(cond.r_val) == "1"


def test_with_column_exposes_column():
    left, right = _field("a", 1), _field("b", 2)
    cond = Condition.with_column(CompOp.OP_EQ, left, right)
    assert cond.rhs_type == CondRvalType.COLUMN
    assert cond.r_col == right
    with pytest.raises(DBError):
        _ = cond.r_val


def test_with_subquery_exposes_id():
    cond = Condition.with_subquery(CompOp.OP_IN, _field("a"), 3)
    assert cond.rhs_type == CondRvalType.SUBQUERY
    assert cond.subquery_id == 3
    with pytest.raises(DBError):
        _ = cond.r_col


def test_str_with_value():
    left = _field("a")
    cond = Condition.with_value(CompOp.OP_LT, left, IntValue(5))
    assert str(cond) == f"{left} < 5"


def test_str_with_column():
    left, right = _field("a", 1), _field("b", 2)
    cond = Condition.with_column(CompOp.OP_NE, left, right)
    assert str(cond) == f"{left} <> {right}"


def test_str_with_subquery():
    left = _field("a")
    cond = Condition.with_subquery(CompOp.OP_IN, left, 3)
    assert str(cond) == f"{left} IN subquery 3"


def test_str_without_rhs_ends_after_operator():
    left = _field("a")
    cond = Condition(CompOp.OP_GE, left)
    assert str(cond) == f"{left} >= "


def test_copy_keeps_fields():
    left = _field("a")
    cond = Condition.with_subquery(CompOp.OP_EQ, left, 7)
    other = copy.copy(cond)
    assert other.subquery_id == 7
    assert other.l_col == left
    assert other.rhs_type == CondRvalType.SUBQUERY