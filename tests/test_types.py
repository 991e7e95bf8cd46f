import pytest

from wsdb.types import (
    AggType,
    CompOp,
    DBError,
    ErrorKind,
    agg_type_name,
    comp_op_symbol,
)


@pytest.mark.parametrize(
    "agg, name",
    [
        (AggType.AGG_MIN, "MIN"),
        (AggType.AGG_MAX, "MAX"),
        (AggType.AGG_SUM, "SUM"),
        (AggType.AGG_AVG, "AVG"),
        (AggType.AGG_COUNT, "COUNT"),
        (AggType.AGG_COUNT_STAR, "COUNT(*)"),
        (AggType.AGG_NONE, "UNKNOWN"),
    ],
)
def test_agg_type_name(agg, name):
    assert agg_type_name(agg) == name


@pytest.mark.parametrize(
    "op, symbol",
    [
        (CompOp.OP_EQ, "="),
        (CompOp.OP_NE, "<>"),
        (CompOp.OP_LT, "<"),
        (CompOp.OP_GT, ">"),
        (CompOp.OP_LE, "<="),
        (CompOp.OP_GE, ">="),
        (CompOp.OP_IN, "IN"),
        (CompOp.OP_RNG, "RANGE"),
    ],
)
def test_comp_op_symbol(op, symbol):
    assert comp_op_symbol(op) == symbol


def test_db_error_carries_kind_and_detail():
    err = DBError(ErrorKind.FILE_EXISTS, "t.tab")
    assert isinstance(err, Exception)
    assert err.kind is ErrorKind.FILE_EXISTS
    assert err.detail == "t.tab"
    assert "t.tab" in str(err)
    assert "FILE_EXISTS" in str(err)


def test_db_error_without_detail():
    err = DBError(ErrorKind.NO_FREE_FRAME)
    assert err.detail == ""
    assert str(err) == ErrorKind.NO_FREE_FRAME.name