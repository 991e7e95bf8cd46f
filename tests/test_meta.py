from wsdb.meta import FieldSchema, RTField, TableHeader
from wsdb.types import INVALID_PAGE_ID, INVALID_TABLE_ID, AggType, FieldType, agg_type_name


def _schema(**kwargs):
    base = dict(table_id=3, field_name="a", field_size=4, field_type=FieldType.TYPE_INT)
    base.update(kwargs)
    return FieldSchema(**base)


def test_field_schema_defaults():
    fs = FieldSchema()
    assert fs.table_id == INVALID_TABLE_ID
    assert fs.nullable is True
    assert fs.field_type is FieldType.TYPE_NULL


def test_field_schema_str_full():
    assert str(_schema(nullable=False)) == "#3.a:TYPE_INT(4)<NOT NULL>"


def test_field_schema_str_without_table_and_nullable():
    text = str(_schema(table_id=INVALID_TABLE_ID))
    assert text.startswith("#.a:")
    assert "<NOT NULL>" not in text


def test_field_schema_equality_covers_all_fields():
    assert _schema() == _schema()
    assert _schema() != _schema(nullable=False)
    assert _schema() != _schema(field_size=8)
    assert _schema() != _schema(table_id=4)


def test_rt_field_str_plain_equals_field_str():
    fs = _schema()
    assert str(RTField(field=fs)) == str(fs)


def test_rt_field_str_alias_and_agg():
    rt = RTField(field=_schema(), alias="total", is_agg=True, agg_type=AggType.AGG_SUM)
    text = str(rt)
    assert text.startswith(str(rt.field))
    assert '"total"' in text
    assert text.endswith(f"[{agg_type_name(AggType.AGG_SUM)}]")


def test_rt_field_agg_suffix_only_when_aggregated():
    rt = RTField(field=_schema(), agg_type=AggType.AGG_MAX)
    assert "[" not in str(rt)


def test_rt_field_equality_and_independent_defaults():
    a = RTField()
    b = RTField()
    assert a == b
    a.field.field_name = "x"
    assert b.field.field_name == ""
    assert a != b


def test_table_header_defaults():
    header = TableHeader()
    assert header.first_free_page == INVALID_PAGE_ID
    assert header.page_num == 0
    assert header.rec_num == 0