"""
Named memo item filters

The supported predicates are a closed set; anything else is rejected
before reaching the data service.
"""

from dataclasses import dataclass
from typing import List, Union

from charmemo.core.errors import ValidationError
from charmemo.core.port import FieldFilter


@dataclass(frozen=True)
class VisibleOnly:
    """Only items shown in the UI"""

    def to_field_filters(self) -> List[FieldFilter]:
        return [FieldFilter("visible", "eq", True)]


@dataclass(frozen=True)
class OrderBetween:
    """Items whose order lies in [min_order, max_order]"""
    min_order: int
    max_order: int

    def to_field_filters(self) -> List[FieldFilter]:
        if self.min_order > self.max_order:
            raise ValidationError(
                f"order range is empty: {self.min_order} > {self.max_order}", field="order", entity="MemoItem"
            )
        return [FieldFilter("order", "between", self.min_order, self.max_order)]


@dataclass(frozen=True)
class NameContains:
    """Items whose name contains the substring"""
    substring: str

    def to_field_filters(self) -> List[FieldFilter]:
        if not self.substring:
            raise ValidationError("search term is empty", field="name", entity="MemoItem")
        return [FieldFilter("name", "contains", self.substring)]


MemoItemFilter = Union[VisibleOnly, OrderBetween, NameContains]

VISIBLE_ONLY = VisibleOnly()


def compile_filter(memo_filter) -> List[FieldFilter]:
    """Translate a named filter into data service predicates"""
    if memo_filter is None:
        return []
    if not isinstance(memo_filter, (VisibleOnly, OrderBetween, NameContains)):
        raise ValidationError(f"unsupported memo item filter: {memo_filter!r}", entity="MemoItem")
    return memo_filter.to_field_filters()
