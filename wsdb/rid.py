"""Record identifiers: a page and a slot within it."""

from __future__ import annotations

from dataclasses import dataclass

from wsdb.types import INVALID_PAGE_ID, INVALID_SLOT_ID

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class RID:
    """Location of a record: page id and slot id."""

    page_id: int = INVALID_PAGE_ID
    slot_id: int = INVALID_SLOT_ID

    def hash_code(self) -> int:
        """Page id shifted into the high half, or-ed with the slot id, as an unsigned 64-bit value."""
        word = ((self.page_id << 16) | self.slot_id) & _MASK32
        if word & 0x80000000:
            word -= 1 << 32
        return word & _MASK64

    def __hash__(self) -> int:
        return self.hash_code()


INVALID_RID = RID(INVALID_PAGE_ID, INVALID_SLOT_ID)