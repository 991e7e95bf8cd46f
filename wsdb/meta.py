"""Schema descriptions of fields and the table header record."""

from __future__ import annotations

from dataclasses import dataclass, field

from wsdb.types import INVALID_PAGE_ID, INVALID_TABLE_ID, AggType, FieldType, agg_type_name


@dataclass
class FieldSchema:
    """Stored description of one table column."""

    table_id: int = INVALID_TABLE_ID
    field_name: str = ""
    field_size: int = 0
    field_type: FieldType = FieldType.TYPE_NULL
    nullable: bool = True

    def __str__(self) -> str:
        table = "" if self.table_id == INVALID_TABLE_ID else str(self.table_id)
        not_null = "" if self.nullable else "<NOT NULL>"
        return f"#{table}.{self.field_name}:{self.field_type.name}({self.field_size}){not_null}"


@dataclass
class RTField:
    """A field as used while planning and executing a query."""

    field: FieldSchema = field(default_factory=FieldSchema)
    alias: str = ""
    is_agg: bool = False
    agg_type: AggType = AggType.AGG_NONE

    def __str__(self) -> str:
        alias = f'"{self.alias}"' if self.alias else ""
        agg = f"[{agg_type_name(self.agg_type)}]" if self.is_agg else ""
        return f"{self.field}{alias}{agg}"


@dataclass
class TableHeader:
    """Meta information kept in the first page of a table file."""

    page_num: int = 0
    first_free_page: int = INVALID_PAGE_ID
    rec_num: int = 0
    rec_size: int = 0
    rec_per_page: int = 0
    field_num: int = 0
    bitmap_size: int = 0
    nullmap_size: int = 0